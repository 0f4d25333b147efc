"""Storage side of the dashboard save/load contract"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..db.models import SavedDashboard
from ..elements.models import dump_elements, parse_elements
from ..elements.validation import validate_collection

logger = logging.getLogger(__name__)


def save_dashboard(db: Session, name: str, elements: List[Dict[str, Any]]) -> SavedDashboard:
    """
    Create or overwrite the dashboard called ``name``.

    Args:
        db: Database session
        name: Dashboard name
        elements: Full element collection (wire format)

    Returns:
        Stored dashboard

    Raises:
        ElementValidationError / ElementCollectionError for malformed collections
    """
    parsed = parse_elements(elements)
    validate_collection(parsed)
    stored = dump_elements(parsed, include_data=False)

    dashboard = db.query(SavedDashboard).filter(SavedDashboard.name == name).first()
    if dashboard is None:
        dashboard = SavedDashboard(name=name, elements=stored)
        db.add(dashboard)
        logger.info(f"Created dashboard '{name}' with {len(stored)} elements")
    else:
        dashboard.elements = stored
        dashboard.updated_at = datetime.utcnow()
        logger.info(f"Overwrote dashboard '{name}' with {len(stored)} elements")

    db.commit()
    db.refresh(dashboard)
    return dashboard


def load_dashboard(db: Session, name: str) -> Optional[SavedDashboard]:
    dashboard = db.query(SavedDashboard).filter(SavedDashboard.name == name).first()
    if dashboard is None:
        logger.warning(f"Dashboard '{name}' not found")
    return dashboard


def list_dashboards(db: Session) -> List[Dict[str, Any]]:
    """Name, element count and last update of every saved dashboard"""
    dashboards = db.query(SavedDashboard).order_by(SavedDashboard.updated_at.desc()).all()
    return [
        {
            "name": d.name,
            "elementCount": len(d.elements or []),
            "updatedAt": d.updated_at.isoformat(),
        }
        for d in dashboards
    ]


def delete_dashboard(db: Session, name: str) -> bool:
    """
    Delete dashboard.

    Returns:
        True if deleted, False if not found
    """
    dashboard = load_dashboard(db, name)
    if dashboard is None:
        return False

    db.delete(dashboard)
    db.commit()

    logger.info(f"Deleted dashboard '{name}'")
    return True
