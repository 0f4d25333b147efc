"""
Pure state transitions for the editor.

``reduce(state, action)`` returns the next state together with the data
fetches the caller must run. The input state is never modified; an action
that changes nothing returns the very same state object.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from ..elements.defaults import (
    default_query,
    default_size,
    default_styles,
    new_element_id,
    type_specific_fields,
)
from ..elements.models import (
    ELEMENT_TYPES,
    ElementBase,
    apply_updates,
    normalize_updates,
    parse_element,
    parse_elements,
    replace_fields,
)
from ..elements.validation import descendant_ids, index_elements, validate_collection
from ..exceptions import ElementValidationError
from ..layout import engine
from .actions import (
    Action,
    AddElement,
    DeleteElement,
    DismissMessage,
    LoadElements,
    MoveElement,
    ReceiveData,
    ReparentElement,
    ResizeElement,
    SelectElement,
    SetDashboardName,
    SetTables,
    ShowMessage,
    UpdateElement,
)
from .state import EditorState, FetchRequest

logger = logging.getLogger(__name__)

Result = Tuple[EditorState, List[FetchRequest]]


@dataclass(frozen=True)
class ReducerContext:
    """Inputs the reducer needs besides state and action"""
    id_factory: Callable[[], str] = new_element_id
    canvas: engine.Canvas = field(default_factory=engine.Canvas)
    grid: int = engine.GRID_SIZE


def _issue_fetches(state: EditorState, targets: List[Tuple[str, str]]) -> Result:
    """Stamp a fresh request id on each (element id, query) pair"""
    requests = []
    request_id = state.last_request_id
    for element_id, query in targets:
        request_id += 1
        requests.append(FetchRequest(element_id=element_id, query=query, request_id=request_id))
    if requests:
        state = state.evolve(last_request_id=request_id)
    return state, requests


def _replace_element(state: EditorState, updated) -> EditorState:
    return state.evolve(
        elements=tuple(updated if el.id == updated.id else el for el in state.elements)
    )


def _add(state: EditorState, action: AddElement, ctx: ReducerContext) -> Result:
    if action.type not in ELEMENT_TYPES:
        raise ElementValidationError("type", f"Unknown element type '{action.type}'")

    parent = None
    if action.parent_id is not None:
        parent = state.get(action.parent_id)
        if parent is None or not parent.is_container:
            logger.debug(f"Ignoring add under missing or non-container parent {action.parent_id}")
            return state, []

    x, y = engine.default_position(state.children_of(action.parent_id), nested=parent is not None)
    width, height = default_size(action.type)
    element = parse_element({
        "id": ctx.id_factory(),
        "type": action.type,
        "x": x,
        "y": y,
        "width": width,
        "height": height,
        "styles": default_styles(action.type),
        "positionType": "absolute",
        "parentId": action.parent_id,
        **type_specific_fields(action.type, state.tables),
    })
    if state.get(element.id) is not None:
        raise ElementValidationError("id", f"Element id '{element.id}' already exists")

    elements = []
    for el in state.elements:
        if parent is not None and el.id == parent.id:
            el = replace_fields(el, children=[*el.children, element.id])
        elements.append(el)
    elements.append(element)

    state = state.evolve(elements=tuple(elements), selected_id=element.id)
    logger.debug(f"Added {element.type} element {element.id} at ({x}, {y})")

    if element.is_data_bound and element.table_name and element.query:
        return _issue_fetches(state, [(element.id, element.query)])
    return state, []


def _update(state: EditorState, action: UpdateElement, ctx: ReducerContext) -> Result:
    element = state.get(action.id)
    if element is None:
        logger.debug(f"Ignoring update of missing element {action.id}")
        return state, []

    changes = normalize_updates(element, action.updates)
    if not changes:
        return state, []

    if (element.is_data_bound and "table_name" in changes and "query" not in changes
            and changes["table_name"] != element.table_name):
        changes["query"] = default_query(changes["table_name"])

    updated = apply_updates(element, changes)
    if updated == element:
        return state, []
    state = _replace_element(state, updated)

    # refetch only when the binding actually changed
    refetch = element.is_data_bound and (
        updated.query != element.query or updated.table_name != element.table_name
    )
    if refetch and updated.query:
        return _issue_fetches(state, [(updated.id, updated.query)])
    return state, []


def _delete(state: EditorState, action: DeleteElement, ctx: ReducerContext) -> Result:
    if state.get(action.id) is None:
        return state, []

    removed = set(descendant_ids(index_elements(state.elements), action.id))
    elements = []
    for el in state.elements:
        if el.id in removed:
            continue
        if el.is_container and any(child_id in removed for child_id in el.children):
            el = replace_fields(el, children=[c for c in el.children if c not in removed])
        elements.append(el)

    logger.debug(f"Deleted element {action.id} and {len(removed) - 1} descendant(s)")
    return state.evolve(
        elements=tuple(elements),
        selected_id=None if state.selected_id in removed else state.selected_id,
        applied_requests={k: v for k, v in state.applied_requests.items() if k not in removed},
    ), []


def _move(state: EditorState, action: MoveElement, ctx: ReducerContext) -> Result:
    element = state.get(action.id)
    if element is None:
        return state, []
    position = engine.move(
        element, action.x, action.y,
        parent=state.get(element.parent_id),
        canvas=ctx.canvas,
        grid=ctx.grid,
    )
    if position is None:
        return state, []
    updated = apply_updates(element, position)
    if updated == element:
        return state, []
    return _replace_element(state, updated), []


def _resize(state: EditorState, action: ResizeElement, ctx: ReducerContext) -> Result:
    element = state.get(action.id)
    if element is None:
        return state, []
    if action.direction not in engine.RESIZE_DIRECTIONS:
        raise ElementValidationError("direction", f"Unknown resize direction '{action.direction}'")
    changes = engine.resize(element, action.direction, action.dx, action.dy, grid=ctx.grid)
    if not changes:
        return state, []
    updated = apply_updates(element, changes)
    if updated == element:
        return state, []
    return _replace_element(state, updated), []


def _reparent(state: EditorState, action: ReparentElement, ctx: ReducerContext) -> Result:
    element = state.get(action.id)
    if element is None or element.parent_id == action.parent_id:
        return state, []

    if action.parent_id is not None:
        parent = state.get(action.parent_id)
        if parent is None or not parent.is_container:
            logger.debug(f"Ignoring reparent of {action.id} into non-container {action.parent_id}")
            return state, []
        if action.parent_id in descendant_ids(index_elements(state.elements), element.id):
            logger.debug(f"Ignoring reparent of {action.id}: {action.parent_id} is its descendant")
            return state, []

    siblings = [el for el in state.children_of(action.parent_id) if el.id != element.id]
    x, y = engine.default_position(siblings, nested=action.parent_id is not None)

    elements = []
    for el in state.elements:
        if el.id == element.id:
            el = replace_fields(el, parent_id=action.parent_id, x=x, y=y)
        elif el.id == element.parent_id:
            el = replace_fields(el, children=[c for c in el.children if c != element.id])
        elif el.id == action.parent_id:
            el = replace_fields(el, children=[*el.children, element.id])
        elements.append(el)
    return state.evolve(elements=tuple(elements)), []


def _select(state: EditorState, action: SelectElement, ctx: ReducerContext) -> Result:
    if action.id is not None and state.get(action.id) is None:
        return state, []
    if action.id == state.selected_id:
        return state, []
    return state.evolve(selected_id=action.id), []


def _set_tables(state: EditorState, action: SetTables, ctx: ReducerContext) -> Result:
    return state.evolve(tables=tuple(action.tables)), []


def _set_name(state: EditorState, action: SetDashboardName, ctx: ReducerContext) -> Result:
    return state.evolve(dashboard_name=action.name), []


def _load(state: EditorState, action: LoadElements, ctx: ReducerContext) -> Result:
    raw = []
    for el in action.elements:
        if isinstance(el, ElementBase):
            el = el.model_dump(by_alias=True)
        elif not isinstance(el, dict):
            raise ElementValidationError("elements", f"Expected an element object, got {type(el).__name__}")
        raw.append(el)
    elements = parse_elements(raw)
    validate_collection(elements)

    # fetched rows are never the source of truth; they are re-derived below
    elements = [replace_fields(el, data=[]) if el.is_data_bound else el for el in elements]

    state = state.evolve(
        elements=tuple(elements),
        selected_id=None,
        applied_requests={},
        dashboard_name=action.dashboard_name if action.dashboard_name is not None else state.dashboard_name,
    )
    targets = [(el.id, el.query) for el in elements if el.is_data_bound and el.query]
    logger.info(f"Loaded {len(elements)} elements, scheduling {len(targets)} data fetch(es)")
    return _issue_fetches(state, targets)


def _receive(state: EditorState, action: ReceiveData, ctx: ReducerContext) -> Result:
    element = state.get(action.element_id)
    if element is None or not element.is_data_bound:
        logger.debug(f"Discarding fetch {action.request_id} for missing element {action.element_id}")
        return state, []
    if action.request_id <= state.applied_requests.get(action.element_id, 0):
        logger.debug(f"Discarding stale fetch {action.request_id} for element {action.element_id}")
        return state, []

    updated = replace_fields(element, data=list(action.rows))
    state = _replace_element(state, updated)
    applied = dict(state.applied_requests)
    applied[action.element_id] = action.request_id
    return state.evolve(applied_requests=applied), []


def _show_message(state: EditorState, action: ShowMessage, ctx: ReducerContext) -> Result:
    return state.evolve(message=action.message), []


def _dismiss_message(state: EditorState, action: DismissMessage, ctx: ReducerContext) -> Result:
    if state.message is None:
        return state, []
    return state.evolve(message=None), []


_HANDLERS: Dict[type, Callable[[EditorState, object, ReducerContext], Result]] = {
    AddElement: _add,
    UpdateElement: _update,
    DeleteElement: _delete,
    MoveElement: _move,
    ResizeElement: _resize,
    ReparentElement: _reparent,
    SelectElement: _select,
    SetTables: _set_tables,
    SetDashboardName: _set_name,
    LoadElements: _load,
    ReceiveData: _receive,
    ShowMessage: _show_message,
    DismissMessage: _dismiss_message,
}


def reduce(state: EditorState, action: Action, ctx: Optional[ReducerContext] = None) -> Result:
    """Apply ``action`` to ``state``; returns (next state, fetches to run)"""
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unsupported editor action: {type(action).__name__}")
    return handler(state, action, ctx or ReducerContext())
