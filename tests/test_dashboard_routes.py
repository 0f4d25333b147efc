"""
API tests for dashboard storage
"""

import httpx
import pytest

from kanvas.db.session import get_db
from kanvas.main import app
from kanvas.services import dashboard_store


@pytest.fixture
def api(db_session):
    app.dependency_overrides[get_db] = lambda: db_session
    client = httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")
    yield client
    app.dependency_overrides.clear()


ELEMENTS = [
    {"id": "c", "type": "container", "children": ["t"]},
    {"id": "t", "type": "table", "parentId": "c", "tableName": "sales",
     "query": "SELECT * FROM sales", "data": [{"id": 1}]},
]


class TestDashboardStore:
    """Test cases for the storage service"""

    def test_save_then_overwrite(self, db_session):
        """Test saving twice under one name keeps a single row"""
        dashboard_store.save_dashboard(db_session, "Ops", ELEMENTS)
        dashboard_store.save_dashboard(db_session, "Ops", [{"id": "x", "type": "text"}])

        dashboards = dashboard_store.list_dashboards(db_session)

        assert [d["name"] for d in dashboards] == ["Ops"]
        assert dashboards[0]["elementCount"] == 1

    def test_saved_elements_have_no_data(self, db_session):
        dashboard_store.save_dashboard(db_session, "Ops", ELEMENTS)

        stored = dashboard_store.load_dashboard(db_session, "Ops").elements

        assert stored[1]["query"] == "SELECT * FROM sales"
        assert "data" not in stored[1]

    def test_delete(self, db_session):
        dashboard_store.save_dashboard(db_session, "Ops", [])

        assert dashboard_store.delete_dashboard(db_session, "Ops") is True
        assert dashboard_store.delete_dashboard(db_session, "Ops") is False


class TestDashboardRoutes:
    """Test cases for the save/load endpoint"""

    @pytest.mark.asyncio
    async def test_save_and_load(self, api):
        """Test a saved dashboard loads back with the same tree"""
        async with api:
            saved = await api.post("/api/v1/dashboard", json={
                "action": "save", "dashboardName": "Ops", "elements": ELEMENTS,
            })
            loaded = await api.post("/api/v1/dashboard", json={"action": "load", "dashboardName": "Ops"})

        assert saved.status_code == 200
        assert saved.json() == {"success": True}
        body = loaded.json()
        assert body["success"] is True
        assert body["dashboard"]["name"] == "Ops"
        assert [el["id"] for el in body["dashboard"]["elements"]] == ["c", "t"]
        assert body["dashboard"]["elements"][0]["children"] == ["t"]

    @pytest.mark.asyncio
    async def test_name_required(self, api):
        async with api:
            response = await api.post("/api/v1/dashboard", json={"action": "save", "dashboardName": "  "})

        assert response.json() == {"success": False, "error": "Dashboard name is required"}

    @pytest.mark.asyncio
    async def test_load_missing(self, api):
        async with api:
            response = await api.post("/api/v1/dashboard", json={"action": "load", "dashboardName": "Nope"})

        assert response.json() == {"success": False, "error": 'Dashboard "Nope" not found'}

    @pytest.mark.asyncio
    async def test_broken_tree_rejected(self, api):
        """Test inconsistent parent links are not stored"""
        async with api:
            response = await api.post("/api/v1/dashboard", json={
                "action": "save",
                "dashboardName": "Broken",
                "elements": [{"id": "t", "type": "text", "parentId": "ghost"}],
            })
            listing = await api.get("/api/v1/dashboards")

        assert response.json()["success"] is False
        assert "missing parent 'ghost'" in response.json()["error"]
        assert listing.json() == []

    @pytest.mark.asyncio
    async def test_unknown_action(self, api):
        async with api:
            response = await api.post("/api/v1/dashboard", json={"action": "drop", "dashboardName": "Ops"})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_delete_route(self, api, db_session):
        dashboard_store.save_dashboard(db_session, "Ops", [])

        async with api:
            deleted = await api.delete("/api/v1/dashboards/Ops")
            missing = await api.delete("/api/v1/dashboards/Ops")

        assert deleted.status_code == 204
        assert missing.status_code == 404
