"""Editor session API routes"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from ..editor.actions import (
    AddElement,
    DeleteElement,
    DismissMessage,
    MoveElement,
    ReparentElement,
    ResizeElement,
    SelectElement,
    SetDashboardName,
    UpdateElement,
)
from ..editor.store import EditorStore
from ..elements.models import dump_elements
from ..models import (
    AddElementRequest,
    DashboardNameRequest,
    EditorStateResponse,
    MoveElementRequest,
    ReparentElementRequest,
    ResizeElementRequest,
    SelectElementRequest,
    StatusMessageResponse,
)
from ..services import editor_service
from ..services.kanvas_client import get_kanvas_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/editor", tags=["Editor"])

# Single editor session per process
_store: Optional[EditorStore] = None


def get_editor_store() -> EditorStore:
    """Get global editor store instance"""
    global _store
    if _store is None:
        _store = EditorStore(client=get_kanvas_client())
    return _store


def state_response(store: EditorStore) -> EditorStateResponse:
    state = store.state
    message = None
    if state.message is not None:
        message = StatusMessageResponse(**state.message.to_dict())
    return EditorStateResponse(
        dashboard_name=state.dashboard_name,
        selected_id=state.selected_id,
        elements=dump_elements(state.elements),
        tables=list(state.tables),
        message=message,
        pending_fetches=store.pending,
    )


@router.get("/state", response_model=EditorStateResponse)
async def get_state(store: EditorStore = Depends(get_editor_store)):
    """Current element collection, selection and status message"""
    return state_response(store)


@router.post("/elements", response_model=EditorStateResponse, status_code=status.HTTP_201_CREATED)
async def add_element(request: AddElementRequest, store: EditorStore = Depends(get_editor_store)):
    """Add a widget; table/chart widgets start fetching their data"""
    store.dispatch(AddElement(type=request.type, parent_id=request.parent_id))
    return state_response(store)


@router.patch("/elements/{element_id}", response_model=EditorStateResponse)
async def update_element(
    element_id: str,
    updates: Dict[str, Any] = Body(...),
    store: EditorStore = Depends(get_editor_store)
):
    """Merge a partial update into an element"""
    store.dispatch(UpdateElement(id=element_id, updates=updates))
    return state_response(store)


@router.delete("/elements/{element_id}", response_model=EditorStateResponse)
async def delete_element(element_id: str, store: EditorStore = Depends(get_editor_store)):
    """Delete an element together with everything nested in it"""
    store.dispatch(DeleteElement(id=element_id))
    return state_response(store)


@router.post("/elements/{element_id}/move", response_model=EditorStateResponse)
async def move_element(
    element_id: str,
    request: MoveElementRequest,
    store: EditorStore = Depends(get_editor_store)
):
    store.dispatch(MoveElement(id=element_id, x=request.x, y=request.y))
    return state_response(store)


@router.post("/elements/{element_id}/resize", response_model=EditorStateResponse)
async def resize_element(
    element_id: str,
    request: ResizeElementRequest,
    store: EditorStore = Depends(get_editor_store)
):
    store.dispatch(ResizeElement(id=element_id, direction=request.direction, dx=request.dx, dy=request.dy))
    return state_response(store)


@router.post("/elements/{element_id}/parent", response_model=EditorStateResponse)
async def reparent_element(
    element_id: str,
    request: ReparentElementRequest,
    store: EditorStore = Depends(get_editor_store)
):
    """Move an element into a container, or to the top level with parentId null"""
    store.dispatch(ReparentElement(id=element_id, parent_id=request.parent_id))
    return state_response(store)


@router.post("/selection", response_model=EditorStateResponse)
async def select_element(request: SelectElementRequest, store: EditorStore = Depends(get_editor_store)):
    store.dispatch(SelectElement(id=request.id))
    return state_response(store)


@router.put("/name", response_model=EditorStateResponse)
async def set_dashboard_name(request: DashboardNameRequest, store: EditorStore = Depends(get_editor_store)):
    store.dispatch(SetDashboardName(name=request.dashboard_name))
    return state_response(store)


@router.post("/save", response_model=EditorStateResponse)
async def save_dashboard(
    request: Optional[DashboardNameRequest] = None,
    store: EditorStore = Depends(get_editor_store)
):
    """Save the session under the given (or current) dashboard name"""
    name = request.dashboard_name if request and request.dashboard_name else None
    await editor_service.save_dashboard(store, store.client, name)
    return state_response(store)


@router.post("/load", response_model=EditorStateResponse)
async def load_dashboard(
    request: Optional[DashboardNameRequest] = None,
    store: EditorStore = Depends(get_editor_store)
):
    """Replace the session with a saved dashboard and re-fetch its data"""
    name = request.dashboard_name if request and request.dashboard_name else None
    await editor_service.load_dashboard(store, store.client, name)
    return state_response(store)


@router.get("/export")
async def export_dashboard(store: EditorStore = Depends(get_editor_store)):
    """Download the session as ``<name>.json``"""
    state = store.state
    filename = editor_service.export_filename(state.dashboard_name)
    return JSONResponse(
        content=editor_service.build_export(state.dashboard_name, state.elements),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/export", response_model=EditorStateResponse)
async def export_dashboard_file(store: EditorStore = Depends(get_editor_store)):
    """Write the export file into the configured export directory"""
    editor_service.export_dashboard(store)
    return state_response(store)


@router.post("/tables/refresh", response_model=EditorStateResponse)
async def refresh_tables(store: EditorStore = Depends(get_editor_store)):
    await editor_service.refresh_tables(store, store.client)
    return state_response(store)


@router.delete("/message", response_model=EditorStateResponse)
async def dismiss_message(store: EditorStore = Depends(get_editor_store)):
    store.dispatch(DismissMessage())
    return state_response(store)
