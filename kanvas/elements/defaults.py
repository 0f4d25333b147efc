"""Defaults for newly added elements"""
import uuid
from typing import Any, Dict, Sequence

from .models import TableInfo

DEFAULT_SIZES = {
    "divider": (300, 2),
    "container": (400, 300),
}
FALLBACK_SIZE = (200, 150)

_BASE_STYLES = {
    "borderRadius": "4px",
    "padding": "0px",
}


def new_element_id() -> str:
    """Fresh opaque element id"""
    return f"element-{uuid.uuid4().hex}"


def default_size(element_type: str):
    return DEFAULT_SIZES.get(element_type, FALLBACK_SIZE)


def default_styles(element_type: str) -> Dict[str, Any]:
    if element_type == "text":
        return {
            **_BASE_STYLES,
            "backgroundColor": "var(--slight-white-color)",
            "border": "1px dashed var(--green-color)",
        }
    if element_type == "container":
        return {
            **_BASE_STYLES,
            "backgroundColor": "rgba(210, 210, 210, 0.2)",
            "border": "1px dashed var(--green-color)",
            "padding": "10px",
        }
    if element_type == "divider":
        return {
            **_BASE_STYLES,
            "backgroundColor": "var(--green-color)",
            "border": "none",
        }
    return {
        **_BASE_STYLES,
        "backgroundColor": "transparent",
        "border": "1px dashed var(--green-color)",
    }


def default_query(table_name: str) -> str:
    """Query bound to a table/chart when only its table is known"""
    if not table_name:
        return ""
    return f"SELECT * FROM {table_name} LIMIT 10"


def type_specific_fields(element_type: str, tables: Sequence[TableInfo]) -> Dict[str, Any]:
    """Variant fields of a new element; charts always start as bar charts"""
    if element_type == "text":
        return {"content": "New Text", "textType": "paragraph", "textFormat": []}
    if element_type == "image":
        return {"content": ""}
    if element_type in ("table", "chart"):
        table_name = tables[0].name if tables else ""
        fields = {"tableName": table_name, "query": default_query(table_name), "data": []}
        if element_type == "chart":
            fields["chartType"] = "bar"
        return fields
    if element_type == "container":
        return {"children": []}
    return {}
