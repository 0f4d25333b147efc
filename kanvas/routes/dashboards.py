"""Dashboard storage routes (save/load contract used by the editor)"""
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..db.session import get_db
from ..exceptions import ElementCollectionError, ElementValidationError
from ..models import DashboardActionRequest, DashboardActionResponse
from ..services import dashboard_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["Dashboards"])


@router.post("/dashboard", response_model=DashboardActionResponse, response_model_exclude_none=True)
async def dashboard_action(
    request: DashboardActionRequest,
    db: Session = Depends(get_db)
):
    """Save or load a dashboard: ``{action, dashboardName, elements?}``"""
    name = request.dashboard_name.strip()
    if not name:
        return DashboardActionResponse(success=False, error="Dashboard name is required")

    try:
        if request.action == "save":
            dashboard_store.save_dashboard(db, name, request.elements or [])
            return DashboardActionResponse(success=True)

        dashboard = dashboard_store.load_dashboard(db, name)
        if dashboard is None:
            return DashboardActionResponse(success=False, error=f'Dashboard "{name}" not found')
        return DashboardActionResponse(
            success=True,
            dashboard={"name": dashboard.name, "elements": dashboard.elements},
        )
    except (ElementValidationError, ElementCollectionError) as e:
        logger.warning(f"Rejected dashboard '{name}': {e}")
        return DashboardActionResponse(success=False, error=str(e))
    except Exception as e:
        logger.exception(f"Dashboard {request.action} failed")
        return DashboardActionResponse(success=False, error=f"Failed to {request.action} dashboard: {str(e)}")


@router.get("/dashboards", response_model=List[Dict[str, Any]])
async def list_dashboards(db: Session = Depends(get_db)):
    """List saved dashboards"""
    try:
        return dashboard_store.list_dashboards(db)
    except Exception as e:
        logger.exception("Failed to list dashboards")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to list dashboards: {str(e)}"
        )


@router.delete("/dashboards/{name}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_dashboard(name: str, db: Session = Depends(get_db)):
    """Delete dashboard"""
    try:
        deleted = dashboard_store.delete_dashboard(db, name)
        if not deleted:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Dashboard not found"
            )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to delete dashboard")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete dashboard: {str(e)}"
        )
