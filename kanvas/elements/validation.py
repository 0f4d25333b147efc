"""Structural checks over an element collection"""
import logging
from typing import Dict, Iterable, List, Optional, Set

from ..exceptions import ElementCollectionError

logger = logging.getLogger(__name__)


def index_elements(elements: Iterable) -> Dict[str, object]:
    """id -> element index; the last element wins on duplicate ids"""
    return {el.id: el for el in elements}


def descendant_ids(index: Dict[str, object], root_id: str) -> List[str]:
    """
    Ids reachable from ``root_id`` through nested ``children`` lists,
    ``root_id`` included. Elements pointing at a node through ``parentId``
    count as its children even if the node does not list them.

    Walks with an explicit stack and a visited set, so depth is bounded and
    a malformed cycle cannot loop forever. Ids that are listed as children
    but missing from the index are skipped.
    """
    if root_id not in index:
        return []

    by_parent: Dict[str, List[str]] = {}
    for el in index.values():
        if el.parent_id is not None:
            by_parent.setdefault(el.parent_id, []).append(el.id)

    found: List[str] = []
    visited: Set[str] = set()
    stack = [root_id]
    while stack:
        element_id = stack.pop()
        if element_id in visited or element_id not in index:
            continue
        visited.add(element_id)
        found.append(element_id)
        children = list(getattr(index[element_id], "children", None) or [])
        children.extend(c for c in by_parent.get(element_id, []) if c not in children)
        stack.extend(reversed(children))
    return found


def is_descendant(index: Dict[str, object], ancestor_id: str, element_id: str) -> bool:
    """True when ``element_id`` is ``ancestor_id`` or sits somewhere below it"""
    return element_id in descendant_ids(index, ancestor_id)


def find_problems(elements: List) -> List[str]:
    """Every violation of the parent/children contract, in a stable order"""
    problems: List[str] = []
    index: Dict[str, object] = {}
    for el in elements:
        if el.id in index:
            problems.append(f"duplicate element id '{el.id}'")
        index[el.id] = el

    listed_by: Dict[str, str] = {}
    for el in elements:
        if el.type != "container":
            continue
        for child_id in el.children:
            child = index.get(child_id)
            if child is None:
                problems.append(f"container '{el.id}' lists missing child '{child_id}'")
                continue
            if child_id in listed_by and listed_by[child_id] != el.id:
                problems.append(
                    f"element '{child_id}' is listed by containers '{listed_by[child_id]}' and '{el.id}'"
                )
            listed_by[child_id] = el.id
            if child.parent_id != el.id:
                problems.append(
                    f"element '{child_id}' is listed by '{el.id}' but has parentId '{child.parent_id}'"
                )

    for el in elements:
        if el.parent_id is None:
            continue
        parent = index.get(el.parent_id)
        if parent is None:
            problems.append(f"element '{el.id}' references missing parent '{el.parent_id}'")
        elif parent.type != "container":
            problems.append(f"element '{el.id}' has non-container parent '{el.parent_id}'")
        elif el.id not in parent.children:
            problems.append(f"element '{el.id}' is not listed in its parent '{el.parent_id}'")

    problems.extend(_cycle_problems(index))
    return problems


def _cycle_problems(index: Dict[str, object]) -> List[str]:
    problems = []
    for element_id in index:
        seen: Set[str] = set()
        current: Optional[str] = element_id
        while current is not None and current in index:
            if current in seen:
                problems.append(f"element '{element_id}' is its own ancestor")
                break
            seen.add(current)
            current = index[current].parent_id
    return problems


def validate_collection(elements: List) -> None:
    """Raise ElementCollectionError if the collection breaks the contract"""
    problems = find_problems(elements)
    if problems:
        logger.warning(f"Element collection rejected: {len(problems)} problem(s)")
        raise ElementCollectionError(problems)
