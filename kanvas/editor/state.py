"""Immutable editor session state"""
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Tuple

from ..elements.models import TableInfo

SUCCESS_PREFIX = "✅"
ERROR_PREFIX = "❌"


@dataclass(frozen=True)
class StatusMessage:
    """Dismissible status line shown after a collaborator call"""

    text: str
    success: bool = True

    @classmethod
    def ok(cls, text: str) -> "StatusMessage":
        return cls(text=text, success=True)

    @classmethod
    def error(cls, text: str) -> "StatusMessage":
        return cls(text=text, success=False)

    def __str__(self) -> str:
        prefix = SUCCESS_PREFIX if self.success else ERROR_PREFIX
        return f"{prefix} {self.text}"

    def to_dict(self) -> Dict[str, Any]:
        return {"text": str(self), "success": self.success}


@dataclass(frozen=True)
class FetchRequest:
    """Data fetch the store must run for ``element_id``"""

    element_id: str
    query: str
    request_id: int


@dataclass(frozen=True)
class EditorState:
    elements: Tuple[Any, ...] = ()
    selected_id: Optional[str] = None
    tables: Tuple[TableInfo, ...] = ()
    dashboard_name: str = ""
    message: Optional[StatusMessage] = None
    # highest request id issued, and the newest one applied per element
    last_request_id: int = 0
    applied_requests: Mapping[str, int] = field(default_factory=dict)

    def get(self, element_id: Optional[str]):
        if element_id is None:
            return None
        for el in self.elements:
            if el.id == element_id:
                return el
        return None

    def __contains__(self, element_id: str) -> bool:
        return self.get(element_id) is not None

    def children_of(self, parent_id: Optional[str]) -> Tuple[Any, ...]:
        """Elements whose ``parentId`` is ``parent_id`` (top level for None)"""
        return tuple(el for el in self.elements if el.parent_id == parent_id)

    def evolve(self, **changes) -> "EditorState":
        return replace(self, **changes)
