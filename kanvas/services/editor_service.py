"""Editor session operations that talk to collaborators: save, load, export, tables"""
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config import settings
from ..editor.actions import LoadElements, SetDashboardName, SetTables, ShowMessage
from ..editor.state import StatusMessage
from ..editor.store import EditorStore
from ..elements.models import Dashboard, dump_elements
from ..exceptions import CollaboratorError, ElementCollectionError, ElementValidationError, ValidationError

logger = logging.getLogger(__name__)


def strip_element_data(elements) -> List[Dict[str, Any]]:
    """
    Serialize elements for storage without their fetched rows.

    Stored dashboards keep only the query; rows are re-fetched on load.
    """
    return dump_elements(elements, include_data=False)


def require_dashboard_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("dashboardName", "Dashboard name is required")
    return name


def _resolve_name(store: EditorStore, dashboard_name: Optional[str]) -> str:
    return require_dashboard_name(dashboard_name if dashboard_name is not None else store.state.dashboard_name)


async def save_dashboard(store: EditorStore, client, dashboard_name: Optional[str] = None) -> StatusMessage:
    """
    Persist the whole element collection under ``dashboard_name``.

    Raises ValidationError when no name is given; collaborator failures
    become an error status message and leave the session untouched.
    """
    name = _resolve_name(store, dashboard_name)
    store.dispatch(SetDashboardName(name))

    try:
        await client.save_dashboard(name, strip_element_data(store.state.elements))
        message = StatusMessage.ok(f'Dashboard "{name}" saved successfully')
        logger.info(f"Saved dashboard '{name}' with {len(store.state.elements)} elements")
    except CollaboratorError as e:
        logger.warning(f"Failed to save dashboard '{name}': {e.message}")
        message = StatusMessage.error(f"Error saving dashboard: {e.message}")

    store.dispatch(ShowMessage(message))
    return message


async def load_dashboard(store: EditorStore, client, dashboard_name: Optional[str] = None) -> StatusMessage:
    """
    Replace the session's elements with a saved dashboard.

    Every table/chart element with a query gets exactly one fresh fetch.
    A failed load keeps the current collection.
    """
    name = _resolve_name(store, dashboard_name)

    try:
        elements = await client.load_dashboard(name)
        store.dispatch(LoadElements(elements=tuple(elements), dashboard_name=name))
        message = StatusMessage.ok(f'Dashboard "{name}" loaded successfully')
    except CollaboratorError as e:
        logger.warning(f"Failed to load dashboard '{name}': {e.message}")
        message = StatusMessage.error(f"Error loading dashboard: {e.message}")
    except (ElementCollectionError, ElementValidationError) as e:
        logger.warning(f"Saved dashboard '{name}' is malformed: {e}")
        message = StatusMessage.error(f"Error loading dashboard: {e}")

    store.dispatch(ShowMessage(message))
    return message


async def refresh_tables(store: EditorStore, client) -> StatusMessage:
    """Reload the table list used by new table/chart elements"""
    try:
        tables = await client.list_tables()
    except CollaboratorError as e:
        logger.warning(f"Failed to fetch tables: {e.message}")
        message = StatusMessage.error(f"Error fetching tables: {e.message}")
        store.dispatch(ShowMessage(message))
        return message

    store.dispatch(SetTables(tables=tuple(tables)))
    return StatusMessage.ok(f"Found {len(tables)} tables")


def build_export(dashboard_name: str, elements) -> Dict[str, Any]:
    dashboard = Dashboard(name=dashboard_name, elements=list(elements))
    return dashboard.model_dump(mode="json", by_alias=True)


def export_filename(dashboard_name: str) -> str:
    stem = re.sub(r"[^\w\-. ]", "_", dashboard_name.strip()) or "dashboard"
    return f"{stem}.json"


def export_dashboard(store: EditorStore, directory: Optional[str] = None) -> Path:
    """Write ``{dashboardName, elements}`` as pretty JSON; no network call"""
    state = store.state
    target_dir = Path(directory or settings.EXPORT_DIR)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / export_filename(state.dashboard_name)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(build_export(state.dashboard_name, state.elements), f, indent=2)

    logger.info(f"Exported dashboard to {path}")
    store.dispatch(ShowMessage(StatusMessage.ok("Dashboard exported successfully")))
    return path
