"""Client for the database collaborator endpoints"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from ..config import settings
from ..elements.models import TableInfo
from ..exceptions import CollaboratorError
from ..models import ConnectionConfig, CreateTableRequest, DatabaseCreateRequest

logger = logging.getLogger(__name__)


class KanvasApiClient:
    """
    Async client for the list-tables / execute-query / dashboard / onboarding
    scripts. Every call answers ``{success, error?, ...}``; a non-success
    answer or a transport failure raises CollaboratorError.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        dashboard_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.KANVAS_API_URL).rstrip("/")
        self.dashboard_url = dashboard_url or (
            f"{self.base_url}/dashboard.php" if base_url else settings.dashboard_endpoint
        )
        self.timeout = httpx.Timeout(timeout or settings.REQUEST_TIMEOUT)
        self._transport = transport

    def _url(self, script: str) -> str:
        return f"{self.base_url}/{script}"

    async def _call(self, method: str, url: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        endpoint = url.rsplit("/", 1)[-1]
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.request(method, url, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Request to {endpoint} failed: {e}")
            raise CollaboratorError(endpoint, f"Network error: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if response.status_code >= 400:
            message = body.get("error") or f"Server error: {response.status_code}"
            logger.warning(f"{endpoint} answered {response.status_code}: {message}")
            raise CollaboratorError(endpoint, message, response.status_code)
        if not body.get("success"):
            message = body.get("error") or f"{endpoint} reported failure"
            logger.warning(f"{endpoint} reported failure: {message}")
            raise CollaboratorError(endpoint, message, response.status_code)
        return body

    async def list_tables(self) -> List[TableInfo]:
        """Tables of the configured database with their column structure"""
        logger.info("Calling list-tables endpoint")
        body = await self._call("GET", self._url("list-tables.php"))
        tables = [TableInfo.model_validate(t) for t in body.get("tables") or []]
        logger.info(f"Found {len(tables)} tables")
        return tables

    async def execute_query(self, query: str) -> List[Dict[str, Any]]:
        """
        Run ``query`` against the configured database.

        Args:
            query: SQL query

        Returns:
            Result rows, one mapping per row
        """
        logger.info("Calling execute-query endpoint")
        logger.debug(f"SQL to execute: {query[:200]}...")
        body = await self._call("POST", self._url("execute-query.php"), {"query": query})
        rows = body.get("results") or []
        logger.info(f"Query returned {len(rows)} rows")
        return rows

    async def save_dashboard(self, dashboard_name: str, elements: List[Dict[str, Any]]) -> None:
        logger.info(f"Saving dashboard '{dashboard_name}' ({len(elements)} elements)")
        await self._call(
            "POST",
            self.dashboard_url,
            {"action": "save", "dashboardName": dashboard_name, "elements": elements},
        )

    async def load_dashboard(self, dashboard_name: str) -> List[Dict[str, Any]]:
        """Saved element collection of ``dashboard_name``"""
        logger.info(f"Loading dashboard '{dashboard_name}'")
        body = await self._call("POST", self.dashboard_url, {"action": "load", "dashboardName": dashboard_name})
        dashboard = body.get("dashboard") or {}
        if not isinstance(dashboard, dict):
            raise CollaboratorError(self.dashboard_url.rsplit("/", 1)[-1], "Malformed dashboard in load response")
        elements = dashboard.get("elements") or []
        if not isinstance(elements, list):
            raise CollaboratorError(self.dashboard_url.rsplit("/", 1)[-1], "Malformed element list in load response")
        return elements

    async def test_connection(self, config: ConnectionConfig) -> Dict[str, Any]:
        logger.info(f"Testing connection to {config.host}:{config.port}")
        return await self._call("POST", self._url("ping-server.php"), config.model_dump(by_alias=True))

    async def create_database(self, request: DatabaseCreateRequest) -> Dict[str, Any]:
        logger.info(f"Creating database '{request.database_name}' on {request.host}")
        return await self._call("POST", self._url("create-database.php"), request.model_dump(by_alias=True))

    async def create_table(self, request: CreateTableRequest) -> Dict[str, Any]:
        logger.info(f"Creating table '{request.table_name}' with {len(request.fields)} fields")
        return await self._call("POST", self._url("create-table.php"), request.to_payload())

    async def connection_info(self) -> Dict[str, Any]:
        """Host, port, database and user of the active connection"""
        body = await self._call("GET", self._url("connection-info.php"))
        return body.get("connection") or {}


# Singleton instance
_client = None


def get_kanvas_client() -> KanvasApiClient:
    """Get global collaborator client instance"""
    global _client
    if _client is None:
        _client = KanvasApiClient()
    return _client
