"""Element model: widget variants, defaults and collection checks"""
from .models import (
    ChartElement,
    ContainerElement,
    Dashboard,
    DividerElement,
    Element,
    ImageElement,
    TableElement,
    TableInfo,
    TextElement,
)

__all__ = [
    "ChartElement",
    "ContainerElement",
    "Dashboard",
    "DividerElement",
    "Element",
    "ImageElement",
    "TableElement",
    "TableInfo",
    "TextElement",
]
