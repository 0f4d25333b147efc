"""Onboarding routes: thin pass-through to the database collaborator scripts"""
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status

from ..exceptions import CollaboratorError
from ..models import ConnectionConfig, CreateTableRequest, DatabaseCreateRequest
from ..services.kanvas_client import KanvasApiClient, get_kanvas_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/onboarding", tags=["Onboarding"])


def _bad_gateway(e: CollaboratorError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail={"success": False, "error": e.message, "endpoint": e.endpoint},
    )


@router.post("/test-connection")
async def test_connection(
    config: ConnectionConfig,
    client: KanvasApiClient = Depends(get_kanvas_client)
) -> Dict[str, Any]:
    """Check that the database server accepts the credentials"""
    try:
        return await client.test_connection(config)
    except CollaboratorError as e:
        raise _bad_gateway(e)


@router.post("/create-database")
async def create_database(
    request: DatabaseCreateRequest,
    client: KanvasApiClient = Depends(get_kanvas_client)
) -> Dict[str, Any]:
    try:
        return await client.create_database(request)
    except CollaboratorError as e:
        raise _bad_gateway(e)


@router.post("/create-table")
async def create_table(
    request: CreateTableRequest,
    client: KanvasApiClient = Depends(get_kanvas_client)
) -> Dict[str, Any]:
    try:
        return await client.create_table(request)
    except CollaboratorError as e:
        raise _bad_gateway(e)


@router.get("/connection-info")
async def connection_info(client: KanvasApiClient = Depends(get_kanvas_client)) -> Dict[str, Any]:
    try:
        return {"success": True, "connection": await client.connection_info()}
    except CollaboratorError as e:
        raise _bad_gateway(e)
