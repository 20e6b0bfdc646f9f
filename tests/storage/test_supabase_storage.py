"""
Supabase 저장소 테스트 (Mock 클라이언트 사용)
"""

from unittest.mock import patch

import pytest

from dropship_engine.models.product import CatalogEntry
from dropship_engine.storage import SupabaseStorage
from dropship_engine.storage.supabase_storage import (
    CATALOG_TABLE,
    CONFIG_TABLE,
    MIRROR_TABLE,
    ORDER_TABLE,
)


@pytest.fixture
def supabase_storage(mock_supabase_client):
    return SupabaseStorage(client=mock_supabase_client)


class TestSupabaseConfigStore:
    """설정 테이블 테스트"""

    async def test_no_active_config(self, supabase_storage, mock_supabase_client):
        assert await supabase_storage.config.get_active_config() is None

        mock_supabase_client.table.assert_called_with(CONFIG_TABLE)
        query = mock_supabase_client.query
        query.eq.assert_any_call("is_active", True)
        query.order.assert_called_with("created_at", desc=True)
        query.limit.assert_called_with(1)

    async def test_active_config_row(self, supabase_storage, mock_supabase_client):
        mock_supabase_client.query.execute.return_value.data = [
            {
                "id": "cfg-1",
                "provider": "spocket",
                "api_key": "sp-key",
                "api_secret": None,
                "settings": {},
                "is_active": True,
                "created_at": "2026-01-01T00:00:00",
            }
        ]

        config = await supabase_storage.config.get_active_config()

        assert config.provider == "spocket"
        assert config.api_key.get_secret_value() == "sp-key"
        assert await supabase_storage.config.get_active_config("printful") is None

    async def test_upsert_inserts_then_deactivates_others(
        self, supabase_storage, mock_supabase_client
    ):
        query = mock_supabase_client.query
        called = []
        query.insert.side_effect = lambda *args: called.append("insert") or query
        query.update.side_effect = lambda *args: called.append("update") or query

        config = await supabase_storage.config.upsert_config("mock_api", "mock-key")

        assert called == ["insert", "update"]

        update_values = query.update.call_args[0][0]
        assert update_values["is_active"] is False
        assert "superseded_at" in update_values
        query.eq.assert_any_call("is_active", True)
        query.neq.assert_called_with("id", config.id)

        inserted = query.insert.call_args[0][0]
        assert inserted["provider"] == "mock_api"
        assert inserted["api_key"] == "mock-key"
        assert inserted["is_active"] is True
        assert config.provider == "mock_api"

    async def test_upsert_insert_failure_keeps_previous_active(
        self, supabase_storage, mock_supabase_client
    ):
        """새 설정 저장 실패 시 기존 활성 설정은 비활성화되지 않음"""
        query = mock_supabase_client.query
        query.execute.side_effect = RuntimeError("insert rejected")

        with pytest.raises(RuntimeError):
            await supabase_storage.config.upsert_config("spocket", "sp-key")

        query.insert.assert_called_once()
        query.update.assert_not_called()


class TestSupabaseCatalogStore:
    """카탈로그 테이블 테스트"""

    async def test_find_by_external_id(self, supabase_storage, mock_supabase_client):
        await supabase_storage.catalog.find_by_external_id("mock_api", "MOCK-0001")

        mock_supabase_client.table.assert_called_with(CATALOG_TABLE)
        mock_supabase_client.query.eq.assert_any_call("provider", "mock_api")
        mock_supabase_client.query.eq.assert_any_call("external_id", "MOCK-0001")

    async def test_insert_serializes_entry(self, supabase_storage, mock_supabase_client):
        entry = CatalogEntry(provider="mock_api", external_id="MOCK-0001", price="9.99")

        result = await supabase_storage.catalog.insert(entry)

        record = mock_supabase_client.query.insert.call_args[0][0]
        assert record["price"] == "9.99"
        assert record["external_id"] == "MOCK-0001"
        assert result.external_id == "MOCK-0001"

    async def test_update_stock_touches_both_tables(self, supabase_storage, mock_supabase_client):
        await supabase_storage.catalog.update_stock("mock_api", "MOCK-0001", 7)

        tables = [c.args[0] for c in mock_supabase_client.table.call_args_list]
        assert tables == [CATALOG_TABLE, MIRROR_TABLE]

        updates = [c.args[0] for c in mock_supabase_client.query.update.call_args_list]
        assert updates[0]["stock_level"] == 7
        assert "last_synced" in updates[0]
        assert updates[1] == {"stock_quantity": 7}

    async def test_insert_mirror_returns_id(self, supabase_storage, mock_supabase_client):
        entry = CatalogEntry(provider="mock_api", external_id="MOCK-0001", title="Tee")
        mock_supabase_client.query.execute.return_value.data = [{"id": 42}]

        record_id = await supabase_storage.catalog.insert_mirror(entry.to_storefront())

        assert record_id == "42"
        mock_supabase_client.table.assert_called_with(MIRROR_TABLE)

    async def test_insert_mirror_without_rows(self, supabase_storage):
        entry = CatalogEntry(provider="mock_api", external_id="MOCK-0001", title="Tee")
        with pytest.raises(ValueError):
            await supabase_storage.catalog.insert_mirror(entry.to_storefront())

    async def test_query_error_propagates(self, supabase_storage, mock_supabase_client):
        mock_supabase_client.query.execute.side_effect = RuntimeError("connection reset")

        with pytest.raises(RuntimeError):
            await supabase_storage.catalog.list_active("mock_api")


class TestSupabaseFulfillmentStore:
    """주문 전달 기록 테이블 테스트"""

    async def test_find_by_order_id_uses_latest(self, supabase_storage, mock_supabase_client):
        assert await supabase_storage.fulfillment.find_by_order_id("ORD-1") is None

        mock_supabase_client.table.assert_called_with(ORDER_TABLE)
        mock_supabase_client.query.eq.assert_called_with("order_id", "ORD-1")
        mock_supabase_client.query.order.assert_called_with("created_at", desc=True)


class TestSupabaseStorageInit:
    """클라이언트 생성 테스트"""

    def test_creates_client_from_credentials(self):
        with patch("dropship_engine.storage.supabase_storage.create_client") as create_client:
            storage = SupabaseStorage(url="https://test.supabase.co", service_key="service-key")

        create_client.assert_called_once()
        args = create_client.call_args[0]
        assert args == ("https://test.supabase.co", "service-key")
        assert storage.backend == "supabase"
        assert storage.client is create_client.return_value
