"""
Unit tests for save, load, export and table refresh
"""

import json

import pytest
from unittest.mock import AsyncMock, patch

from kanvas.config import settings
from kanvas.editor.actions import AddElement, ReceiveData, SetDashboardName, SetTables, UpdateElement
from kanvas.editor.store import EditorStore
from kanvas.exceptions import CollaboratorError, ValidationError
from kanvas.services import editor_service


class TestSaveDashboard:
    """Test cases for saving the session"""

    @pytest.fixture
    def mock_client(self):
        return AsyncMock()

    @pytest.fixture
    def store(self, mock_client, id_factory):
        store = EditorStore(client=mock_client, id_factory=id_factory)
        store.dispatch(AddElement(type="container"))
        store.dispatch(AddElement(type="table", parent_id="el-1"))
        store.dispatch(ReceiveData(element_id="el-2", request_id=1, rows=[{"id": 1}]))
        return store

    @pytest.mark.asyncio
    async def test_save_strips_fetched_rows(self, store, mock_client):
        """Test stored elements carry the query but no data"""
        message = await editor_service.save_dashboard(store, mock_client, "Quarterly")

        name, elements = mock_client.save_dashboard.await_args.args
        assert name == "Quarterly"
        assert [el["id"] for el in elements] == ["el-1", "el-2"]
        assert all("data" not in el for el in elements)
        assert elements[1]["parentId"] == "el-1"
        assert message.success is True
        assert str(store.state.message) == '✅ Dashboard "Quarterly" saved successfully'
        assert store.state.dashboard_name == "Quarterly"
        assert store.state.get("el-2").data == [{"id": 1}]

    @pytest.mark.asyncio
    async def test_save_uses_session_name(self, store, mock_client):
        store.dispatch(SetDashboardName("Ops"))

        await editor_service.save_dashboard(store, mock_client)

        assert mock_client.save_dashboard.await_args.args[0] == "Ops"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", "   "])
    async def test_save_requires_name(self, store, mock_client, name):
        """Test an empty name is rejected before any network call"""
        with pytest.raises(ValidationError) as exc_info:
            await editor_service.save_dashboard(store, mock_client, name)

        assert exc_info.value.field == "dashboardName"
        assert exc_info.value.message == "Dashboard name is required"
        mock_client.save_dashboard.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_save_failure_message(self, store, mock_client):
        mock_client.save_dashboard.side_effect = CollaboratorError("dashboard.php", "Disk full")

        message = await editor_service.save_dashboard(store, mock_client, "Quarterly")

        assert message.success is False
        assert str(store.state.message) == "❌ Error saving dashboard: Disk full"


class TestLoadDashboard:
    """Test cases for loading a saved dashboard"""

    @pytest.fixture
    def mock_client(self):
        client = AsyncMock()
        client.execute_query.return_value = [{"total": 5}]
        return client

    @pytest.fixture
    def store(self, mock_client, id_factory):
        store = EditorStore(client=mock_client, id_factory=id_factory)
        store.dispatch(AddElement(type="text"))
        return store

    @pytest.mark.asyncio
    async def test_load_replaces_elements_and_fetches(self, store, mock_client):
        """Test loading swaps the collection and fetches each table once"""
        mock_client.load_dashboard.return_value = [
            {"id": "t", "type": "table", "tableName": "sales", "query": "SELECT * FROM sales"},
            {"id": "h", "type": "text", "content": "Header"},
        ]

        message = await editor_service.load_dashboard(store, mock_client, "Ops")
        state = await store.drain()

        mock_client.load_dashboard.assert_awaited_once_with("Ops")
        mock_client.execute_query.assert_awaited_once_with("SELECT * FROM sales")
        assert [el.id for el in state.elements] == ["t", "h"]
        assert state.get("t").data == [{"total": 5}]
        assert state.dashboard_name == "Ops"
        assert message.success is True

    @pytest.mark.asyncio
    async def test_failed_load_keeps_elements(self, store, mock_client):
        """Test a collaborator error leaves the current collection"""
        mock_client.load_dashboard.side_effect = CollaboratorError("dashboard.php", 'Dashboard "Ops" not found')
        before = store.state.elements

        message = await editor_service.load_dashboard(store, mock_client, "Ops")

        assert store.state.elements == before
        assert message.success is False
        assert str(store.state.message) == '❌ Error loading dashboard: Dashboard "Ops" not found'

    @pytest.mark.asyncio
    async def test_malformed_dashboard_keeps_elements(self, store, mock_client):
        mock_client.load_dashboard.return_value = [{"id": "c", "type": "container", "children": ["ghost"]}]
        before = store.state.elements

        message = await editor_service.load_dashboard(store, mock_client, "Broken")

        assert store.state.elements == before
        assert message.success is False
        mock_client.execute_query.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("entries", [[None], ["text"], [{"id": "a", "type": "text"}, None]])
    async def test_non_object_entries_keep_elements(self, store, mock_client, entries):
        """Test a payload with non-object entries becomes an error message"""
        mock_client.load_dashboard.return_value = entries
        before = store.state.elements

        message = await editor_service.load_dashboard(store, mock_client, "Broken")

        assert store.state.elements == before
        assert message.success is False
        assert str(store.state.message).startswith("❌ Error loading dashboard")

    @pytest.mark.asyncio
    async def test_load_requires_name(self, store, mock_client):
        with pytest.raises(ValidationError):
            await editor_service.load_dashboard(store, mock_client, "")

        mock_client.load_dashboard.assert_not_awaited()


class TestRefreshTables:
    """Test cases for the table list"""

    @pytest.mark.asyncio
    async def test_refresh_sets_tables(self, id_factory, sales_tables):
        client = AsyncMock()
        client.list_tables.return_value = list(sales_tables)
        store = EditorStore(client=client, id_factory=id_factory)

        message = await editor_service.refresh_tables(store, client)

        assert [t.name for t in store.state.tables] == ["sales", "customers"]
        assert message.text == "Found 2 tables"

    @pytest.mark.asyncio
    async def test_refresh_failure(self, id_factory):
        client = AsyncMock()
        client.list_tables.side_effect = CollaboratorError("list-tables.php", "Access denied")
        store = EditorStore(client=client, id_factory=id_factory)

        await editor_service.refresh_tables(store, client)

        assert store.state.tables == ()
        assert str(store.state.message) == "❌ Error fetching tables: Access denied"


class TestExportDashboard:
    """Test cases for the JSON export"""

    def setup_method(self):
        """Set up test fixtures"""
        self.store = EditorStore(id_factory=lambda: "el-1")
        self.store.dispatch(AddElement(type="text"))
        self.store.dispatch(UpdateElement(id="el-1", updates={"content": "Hello"}))

    def test_build_export(self):
        """Test the export shape"""
        exported = editor_service.build_export("Ops", self.store.state.elements)

        assert exported["dashboardName"] == "Ops"
        assert exported["elements"][0]["content"] == "Hello"
        assert exported["elements"][0]["positionType"] == "absolute"

    def test_build_export_keeps_variant_fields(self, id_factory, sales_tables):
        """Test each element keeps its own type's fields in the export"""
        store = EditorStore(id_factory=id_factory)
        store.dispatch(SetTables(tables=sales_tables))
        store.dispatch(AddElement(type="container"))
        store.dispatch(AddElement(type="table", parent_id="el-1"))

        exported = editor_service.build_export("Ops", store.state.elements)

        container, table = exported["elements"]
        assert container["children"] == ["el-2"]
        assert table["type"] == "table"
        assert table["tableName"] == "sales"
        assert table["parentId"] == "el-1"

    @pytest.mark.parametrize("name,expected", [
        ("Ops", "Ops.json"),
        ("", "dashboard.json"),
        ("Q1/Q2 report", "Q1_Q2 report.json"),
    ])
    def test_export_filename(self, name, expected):
        assert editor_service.export_filename(name) == expected

    def test_export_writes_file(self, tmp_path):
        """Test the file holds pretty-printed JSON of the session"""
        self.store.dispatch(SetDashboardName("Ops"))

        path = editor_service.export_dashboard(self.store, str(tmp_path))

        assert path == tmp_path / "Ops.json"
        content = path.read_text(encoding="utf-8")
        assert content.startswith('{\n  "dashboardName": "Ops"')
        assert json.loads(content)["elements"][0]["id"] == "el-1"
        assert str(self.store.state.message) == "✅ Dashboard exported successfully"

    def test_export_defaults_to_configured_directory(self, tmp_path):
        """Test EXPORT_DIR is used when no directory is given"""
        target = tmp_path / "exports"

        with patch.object(settings, "EXPORT_DIR", str(target)):
            path = editor_service.export_dashboard(self.store)

        assert path == target / "dashboard.json"
        assert path.exists()
