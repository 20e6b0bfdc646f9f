"""
JSON 파일 기반 저장소
개발/테스트용으로 DB 없이 로컬 파일에 데이터 저장
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from dropship_engine.models.config import ProviderConfig
from dropship_engine.models.order import FulfillmentRecord
from dropship_engine.models.product import CatalogEntry, StorefrontProduct
from dropship_engine.models.sync import SyncLogEntry
from dropship_engine.monitoring import get_logger
from dropship_engine.storage.base import BaseStorage
from dropship_engine.storage.memory_storage import (
    MemoryAuditStore,
    MemoryCatalogStore,
    MemoryConfigStore,
    MemoryFulfillmentStore,
)

logger = get_logger(__name__)


def _read_json(path: Path, default: Any) -> Any:
    if not path.exists():
        return default
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"{path.name} 로드 실패: {e}")
        return default


def _write_json(path: Path, data: Any):
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2, default=str)
    except OSError as e:
        logger.error(f"{path.name} 저장 실패: {e}")
        raise


class JSONConfigStore(MemoryConfigStore):
    """파일에 기록되는 설정 저장소"""

    def __init__(self, path: Path):
        super().__init__()
        self.path = path
        self._configs = [ProviderConfig(**record) for record in _read_json(path, [])]

    def _save(self):
        _write_json(self.path, [c.to_record() for c in self._configs])

    async def upsert_config(
        self,
        provider: str,
        api_key: str,
        api_secret: Optional[str] = None,
        settings: Optional[Dict[str, Any]] = None,
    ) -> ProviderConfig:
        config = await super().upsert_config(provider, api_key, api_secret, settings)
        self._save()
        return config


class JSONCatalogStore(MemoryCatalogStore):
    """파일에 기록되는 카탈로그 저장소"""

    def __init__(self, path: Path):
        super().__init__()
        self.path = path
        data = _read_json(path, {"entries": [], "mirrors": []})
        for record in data.get("entries", []):
            entry = CatalogEntry(**record)
            self._entries[entry.identity] = entry
        for record in data.get("mirrors", []):
            product = StorefrontProduct(**record["product"])
            self._mirrors[(product.provider, product.external_id)] = {
                "id": record["id"],
                "product": product,
            }

    def _save(self):
        _write_json(
            self.path,
            {
                "entries": [e.model_dump(mode="json") for e in self._entries.values()],
                "mirrors": [
                    {"id": m["id"], "product": m["product"].model_dump(mode="json")}
                    for m in self._mirrors.values()
                ],
            },
        )

    async def insert(self, entry: CatalogEntry) -> CatalogEntry:
        result = await super().insert(entry)
        self._save()
        return result

    async def insert_mirror(self, product: StorefrontProduct) -> str:
        record_id = await super().insert_mirror(product)
        self._save()
        return record_id

    async def update_stock(self, provider: str, external_id: str, stock_level: int) -> None:
        await super().update_stock(provider, external_id, stock_level)
        self._save()


class JSONAuditStore(MemoryAuditStore):
    """파일에 기록되는 감사 기록 저장소"""

    def __init__(self, path: Path):
        super().__init__()
        self.path = path
        self._logs = [SyncLogEntry(**record) for record in _read_json(path, [])]

    async def append_sync_log(self, entry: SyncLogEntry) -> None:
        await super().append_sync_log(entry)
        _write_json(self.path, [log.model_dump(mode="json") for log in self._logs])


class JSONFulfillmentStore(MemoryFulfillmentStore):
    """파일에 기록되는 주문 전달 기록 저장소"""

    def __init__(self, path: Path):
        super().__init__()
        self.path = path
        self._records: List[FulfillmentRecord] = [
            FulfillmentRecord(**record) for record in _read_json(path, [])
        ]

    async def insert(self, record: FulfillmentRecord) -> FulfillmentRecord:
        result = await super().insert(record)
        _write_json(self.path, [r.model_dump(mode="json") for r in self._records])
        return result


class JSONStorage(BaseStorage):
    """JSON 파일 저장소 묶음"""

    backend = "json"

    def __init__(self, base_path: str = "./data"):
        """
        Args:
            base_path: 데이터 저장 경로
        """
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

        super().__init__(
            config=JSONConfigStore(self.base_path / "dropshipping_config.json"),
            catalog=JSONCatalogStore(self.base_path / "dropshipping_products.json"),
            audit=JSONAuditStore(self.base_path / "dropshipping_sync_logs.json"),
            fulfillment=JSONFulfillmentStore(self.base_path / "dropshipping_orders.json"),
        )
        logger.info(f"JSON 저장소 초기화: {self.base_path}")
