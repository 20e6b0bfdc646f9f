"""
저장소 기본 인터페이스
Supabase, 메모리, 파일 등 다양한 저장소 구현을 위한 추상 클래스
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from dropship_engine.models.config import ProviderConfig
from dropship_engine.models.order import FulfillmentRecord
from dropship_engine.models.product import CatalogEntry, StorefrontProduct
from dropship_engine.models.sync import SyncLogEntry


class ConfigStore(ABC):
    """공급사 설정 저장소 (추가 전용, 활성 설정은 항상 1개)"""

    @abstractmethod
    async def get_active_config(self, provider: Optional[str] = None) -> Optional[ProviderConfig]:
        """
        활성 설정 조회

        Args:
            provider: 지정 시 해당 공급사의 설정이 활성일 때만 반환

        Returns:
            가장 최근의 활성 설정 또는 None
        """
        pass

    @abstractmethod
    async def upsert_config(
        self,
        provider: str,
        api_key: str,
        api_secret: Optional[str] = None,
        settings: Optional[Dict[str, Any]] = None,
    ) -> ProviderConfig:
        """
        새 설정을 활성 상태로 추가하고 기존 활성 설정은 비활성화

        기존 기록은 삭제하지 않는다.
        """
        pass

    @abstractmethod
    async def list_configs(self, provider: Optional[str] = None) -> List[ProviderConfig]:
        """설정 이력 조회 (최신순)"""
        pass


class CatalogStore(ABC):
    """카탈로그 저장소 (정규 레코드 + 스토어프론트 미러)"""

    @abstractmethod
    async def find_by_external_id(self, provider: str, external_id: str) -> Optional[CatalogEntry]:
        """(공급사, 외부 ID)로 카탈로그 항목 조회"""
        pass

    @abstractmethod
    async def insert(self, entry: CatalogEntry) -> CatalogEntry:
        """
        정규 카탈로그 항목 저장

        Raises:
            ValueError: 같은 (공급사, 외부 ID) 항목이 이미 있음
        """
        pass

    @abstractmethod
    async def insert_mirror(self, product: StorefrontProduct) -> str:
        """
        스토어프론트 미러 레코드 저장

        Returns:
            저장된 레코드 ID
        """
        pass

    @abstractmethod
    async def update_stock(self, provider: str, external_id: str, stock_level: int) -> None:
        """정규 레코드와 미러의 재고를 함께 갱신하고 동기화 시각 기록"""
        pass

    @abstractmethod
    async def list_active(
        self, provider: Optional[str] = None, limit: Optional[int] = None
    ) -> List[CatalogEntry]:
        """활성 카탈로그 항목 목록 (등록순)"""
        pass


class AuditStore(ABC):
    """동기화 감사 기록 저장소"""

    @abstractmethod
    async def append_sync_log(self, entry: SyncLogEntry) -> None:
        pass

    @abstractmethod
    async def list_sync_logs(
        self, provider: Optional[str] = None, limit: Optional[int] = None
    ) -> List[SyncLogEntry]:
        """감사 기록 조회 (최신순)"""
        pass


class FulfillmentStore(ABC):
    """주문 전달 기록 저장소"""

    @abstractmethod
    async def insert(self, record: FulfillmentRecord) -> FulfillmentRecord:
        pass

    @abstractmethod
    async def find_by_order_id(self, order_id: str) -> Optional[FulfillmentRecord]:
        """주문 ID의 가장 최근 전달 기록"""
        pass

    @abstractmethod
    async def list_by_order_id(self, order_id: str) -> List[FulfillmentRecord]:
        """주문 ID의 전체 전달 시도 기록 (최신순)"""
        pass


class BaseStorage:
    """저장소 묶음 (설정, 카탈로그, 감사 기록, 주문 전달 기록)"""

    backend = ""

    def __init__(
        self,
        config: ConfigStore,
        catalog: CatalogStore,
        audit: AuditStore,
        fulfillment: FulfillmentStore,
    ):
        self.config = config
        self.catalog = catalog
        self.audit = audit
        self.fulfillment = fulfillment
