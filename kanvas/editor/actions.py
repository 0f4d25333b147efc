"""Actions understood by the editor reducer"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from ..elements.models import TableInfo


@dataclass(frozen=True)
class AddElement:
    type: str
    parent_id: Optional[str] = None


@dataclass(frozen=True)
class UpdateElement:
    id: str
    updates: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DeleteElement:
    id: str


@dataclass(frozen=True)
class MoveElement:
    id: str
    x: float
    y: float


@dataclass(frozen=True)
class ResizeElement:
    id: str
    direction: str
    dx: float
    dy: float


@dataclass(frozen=True)
class ReparentElement:
    """Move an element into ``parent_id`` (a container) or to the top level"""
    id: str
    parent_id: Optional[str] = None


@dataclass(frozen=True)
class SelectElement:
    id: Optional[str] = None


@dataclass(frozen=True)
class SetTables:
    tables: Tuple[TableInfo, ...] = ()


@dataclass(frozen=True)
class SetDashboardName:
    name: str


@dataclass(frozen=True)
class LoadElements:
    """Replace the whole collection, e.g. after loading a saved dashboard"""
    elements: Tuple[Any, ...] = ()
    dashboard_name: Optional[str] = None


@dataclass(frozen=True)
class ReceiveData:
    """Completion of a data fetch issued as ``request_id``"""
    element_id: str
    request_id: int
    rows: List[Dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class ShowMessage:
    message: Any


@dataclass(frozen=True)
class DismissMessage:
    pass


Action = Union[
    AddElement,
    UpdateElement,
    DeleteElement,
    MoveElement,
    ResizeElement,
    ReparentElement,
    SelectElement,
    SetTables,
    SetDashboardName,
    LoadElements,
    ReceiveData,
    ShowMessage,
    DismissMessage,
]
