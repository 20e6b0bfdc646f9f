"""
카탈로그 가져오기 서비스 테스트
"""

import asyncio
from decimal import Decimal
from unittest.mock import patch

import pytest
import respx
from httpx import Response

from dropship_engine.errors import ConfigurationMissing, TransportFailure
from dropship_engine.models.product import ProductCategory
from dropship_engine.models.sync import SyncOperation, SyncStatus
from dropship_engine.services import CatalogImporter, ProviderConfigService


@pytest.fixture
def configs(storage, test_settings):
    return ProviderConfigService(storage.config, settings=test_settings)


@pytest.fixture
def importer(storage, configs, test_settings):
    return CatalogImporter(storage, configs, test_settings)


@pytest.fixture
async def mock_configured(configs, mock_settings):
    await configs.configure("mock_api", "mock-key", settings=mock_settings)
    return configs


class TestCatalogImport:
    """가져오기 기본 동작 테스트"""

    async def test_requires_active_config(self, importer, storage):
        with pytest.raises(ConfigurationMissing):
            await importer.import_products()
        assert await storage.audit.list_sync_logs() == []

    async def test_import_with_limit(self, importer, storage, mock_configured):
        # When
        result = await importer.import_products(limit=20)

        # Then
        assert result.imported == 20
        assert result.total == 20
        assert result.errors == 0
        assert result.skipped == 0
        assert len(result.products) == 20
        assert await storage.catalog.count() == 20

        entry = await storage.catalog.find_by_external_id("mock_api", "MOCK-0001")
        assert entry is not None
        assert entry.is_active
        assert entry.price > 0

        mirror = await storage.catalog.get_mirror("mock_api", "MOCK-0001")
        assert mirror.name == entry.title
        assert mirror.stock_quantity == entry.stock_level
        assert mirror.is_dropshipped

        logs = await storage.audit.list_sync_logs()
        assert len(logs) == 1
        log = logs[0]
        assert log.operation_type == SyncOperation.PRODUCT_IMPORT
        assert log.status == SyncStatus.SUCCESS
        assert log.products_processed == 20
        assert log.products_updated == 20
        assert log.products_failed == 0
        assert log.error_details["fetched"] == 20
        assert log.completed_at >= log.started_at

    async def test_default_limit(self, importer, storage, mock_configured):
        """limit 미지정 시 기본값 사용 (카탈로그 30개 전체)"""
        result = await importer.import_products()
        assert result.imported == 30

    async def test_reimport_skips_existing(self, importer, storage, mock_configured):
        """이미 등록된 상품은 다시 등록하지 않음"""
        await importer.import_products(limit=20)

        result = await importer.import_products(limit=20)

        assert result.imported == 0
        assert result.skipped == 20
        assert result.errors == 0
        assert await storage.catalog.count() == 20

        latest = (await storage.audit.list_sync_logs())[0]
        assert latest.status == SyncStatus.SUCCESS
        assert latest.products_updated == 0
        assert latest.error_details["skipped"] == 20

    async def test_category_filter(self, importer, storage, mock_configured):
        result = await importer.import_products(category="accessories")

        assert result.imported == 5
        assert all(p.category == ProductCategory.ACCESSORIES for p in result.products)

    async def test_products_keep_supplier_fields(self, importer, storage, mock_configured):
        result = await importer.import_products(limit=3)

        for product in result.products:
            assert product.provider == "mock_api"
            assert len(product.images) == 2
            assert product.weight is not None
            assert product.api_data["id"] == product.external_id


class TestCatalogImportFailures:
    """가져오기 실패 처리 테스트"""

    async def test_listing_failure_writes_error_log(self, importer, configs, storage):
        # Given
        await configs.configure("mock_api", "mock-key", settings={"fail_listing": True})

        # When / Then
        with pytest.raises(TransportFailure):
            await importer.import_products()

        logs = await storage.audit.list_sync_logs()
        assert len(logs) == 1
        assert logs[0].status == SyncStatus.ERROR
        assert logs[0].products_processed == 0
        assert logs[0].error_details["errors"][0]["stage"] == "fetch"
        assert await storage.catalog.count() == 0

    async def test_item_failure_is_partial(self, importer, storage, mock_configured):
        """개별 상품 저장 실패는 배치를 중단하지 않음"""
        original_insert = storage.catalog.insert

        async def flaky_insert(entry):
            if entry.external_id == "MOCK-0002":
                raise RuntimeError("database unavailable")
            return await original_insert(entry)

        with patch.object(storage.catalog, "insert", side_effect=flaky_insert):
            result = await importer.import_products(limit=5)

        assert result.imported == 4
        assert result.errors == 1
        assert result.error_details[0]["product"] == "MOCK-0002"
        assert await storage.catalog.find_by_external_id("mock_api", "MOCK-0002") is None

        log = (await storage.audit.list_sync_logs())[0]
        assert log.status == SyncStatus.PARTIAL
        assert log.products_processed == 5
        assert log.products_updated == 4
        assert log.products_failed == 1

    async def test_classification_counts_skipped_items(self, importer, storage, mock_configured):
        """기존 상품이 대부분인 재실행에서 신규 1건 실패는 일부 실패로 분류"""
        # Given
        await importer.import_products(limit=5)

        # When
        with patch.object(storage.catalog, "insert", side_effect=RuntimeError("write failed")):
            result = await importer.import_products(limit=6)

        # Then
        assert result.skipped == 5
        assert result.errors == 1

        log = (await storage.audit.list_sync_logs())[0]
        assert log.status == SyncStatus.PARTIAL
        assert log.products_processed == 1
        assert log.products_failed == 1
        assert log.error_details["fetched"] == 6

    async def test_mirror_failure_keeps_canonical_record(self, importer, storage, mock_configured):
        with patch.object(
            storage.catalog, "insert_mirror", side_effect=RuntimeError("mirror table locked")
        ):
            result = await importer.import_products(limit=5)

        assert result.imported == 5
        assert result.errors == 0
        assert await storage.catalog.count() == 5
        assert await storage.catalog.get_mirror("mock_api", "MOCK-0001") is None

        log = (await storage.audit.list_sync_logs())[0]
        assert log.status == SyncStatus.SUCCESS
        assert len(log.error_details["mirror_errors"]) == 5

    async def test_concurrency_is_bounded(self, importer, storage, mock_configured, test_settings):
        in_flight = 0
        peak = 0
        original_find = storage.catalog.find_by_external_id

        async def slow_find(provider, external_id):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return await original_find(provider, external_id)

        with patch.object(storage.catalog, "find_by_external_id", side_effect=slow_find):
            result = await importer.import_products(limit=12)

        assert result.imported == 12
        assert 1 < peak <= test_settings.max_concurrency


class TestSpocketImport:
    """실제 공급사 응답 형식 가져오기 테스트"""

    @respx.mock
    async def test_currency_price_and_duplicates(self, importer, configs, storage):
        # Given
        await configs.configure("spocket", "sp-key")
        respx.get(host="api.spocket.co", path="/api/v1/products").mock(
            return_value=Response(
                200,
                json={
                    "products": [
                        {"id": "sp-1", "name": "Linen Scarf", "price": "$19.99 USD"},
                        {"id": "sp-1", "name": "Linen Scarf (dup)", "price": "$19.99 USD"},
                        {"id": "sp-2", "name": "Wool Hat", "price": "24"},
                    ]
                },
            )
        )

        # When
        result = await importer.import_products(limit=10)

        # Then
        assert result.total == 3
        assert result.imported == 2
        assert result.skipped == 1

        scarf = await storage.catalog.find_by_external_id("spocket", "sp-1")
        assert scarf.price == Decimal("19.99")
        assert scarf.title == "Linen Scarf"
        assert scarf.shipping_time == "5-10 business days"
