"""
JSON 파일 저장소 테스트
"""

from datetime import datetime

from dropship_engine.models.order import FulfillmentRecord, FulfillmentStatus
from dropship_engine.models.product import CatalogEntry
from dropship_engine.models.sync import SyncLogEntry, SyncOperation, SyncStatus
from dropship_engine.storage import JSONStorage


class TestJSONStorage:
    """JSON 저장소 테스트"""

    async def test_data_survives_reload(self, temp_data_dir):
        # Given
        storage = JSONStorage(str(temp_data_dir))
        await storage.config.upsert_config("mock_api", "key-1")
        await storage.config.upsert_config("mock_api", "key-2")

        entry = await storage.catalog.insert(
            CatalogEntry(
                provider="mock_api",
                external_id="MOCK-0001",
                title="Red Tee",
                price="12.50",
                tags={"red", "tee"},
            )
        )
        await storage.catalog.insert_mirror(entry.to_storefront())
        await storage.catalog.update_stock("mock_api", "MOCK-0001", 7)

        await storage.audit.append_sync_log(
            SyncLogEntry.for_run(
                SyncOperation.PRODUCT_IMPORT,
                "mock_api",
                processed=1,
                updated=1,
                failed=0,
                started_at=datetime.now(),
            )
        )
        await storage.fulfillment.insert(
            FulfillmentRecord(
                order_id="ORD-1",
                provider="mock_api",
                product_external_id="MOCK-0001",
                customer_name="Jane",
                quantity=1,
                status=FulfillmentStatus.SENT,
                tracking_number="TRK-1",
            )
        )

        # When
        reloaded = JSONStorage(str(temp_data_dir))

        # Then
        active = await reloaded.config.get_active_config()
        assert active.api_key.get_secret_value() == "key-2"
        assert len(await reloaded.config.list_configs()) == 2

        found = await reloaded.catalog.find_by_external_id("mock_api", "MOCK-0001")
        assert str(found.price) == "12.50"
        assert found.stock_level == 7
        assert found.tags == {"red", "tee"}
        assert found.last_synced is not None
        mirror = await reloaded.catalog.get_mirror("mock_api", "MOCK-0001")
        assert mirror.stock_quantity == 7

        logs = await reloaded.audit.list_sync_logs()
        assert logs[0].status == SyncStatus.SUCCESS

        record = await reloaded.fulfillment.find_by_order_id("ORD-1")
        assert record.tracking_number == "TRK-1"

    async def test_files_created(self, temp_data_dir):
        storage = JSONStorage(str(temp_data_dir))
        await storage.config.upsert_config("mock_api", "key-1")

        assert (temp_data_dir / "dropshipping_config.json").exists()
        assert storage.backend == "json"

    def test_corrupted_file_is_ignored(self, temp_data_dir):
        (temp_data_dir / "dropshipping_sync_logs.json").write_text("{not json", encoding="utf-8")

        storage = JSONStorage(str(temp_data_dir))

        assert storage.audit._logs == []
