"""
공급사 설정 서비스
설정 등록(추가 전용 기록)과 활성 설정으로 공급사 클라이언트 생성
"""

from typing import Any, Dict, List, Optional

from dropship_engine.config import Settings, get_settings
from dropship_engine.errors import ConfigurationMissing, InvalidRequest
from dropship_engine.models.config import ProviderConfig
from dropship_engine.monitoring import get_logger
from dropship_engine.providers.registry import ProviderRegistry, registry
from dropship_engine.storage.base import ConfigStore
from dropship_engine.suppliers.client import SupplierClient

logger = get_logger(__name__)


class ProviderConfigService:
    """공급사 설정 관리"""

    def __init__(
        self,
        store: ConfigStore,
        providers: Optional[ProviderRegistry] = None,
        settings: Optional[Settings] = None,
    ):
        self.store = store
        self.providers = providers or registry
        self.settings = settings or get_settings()

    async def configure(
        self,
        provider: str,
        api_key: str,
        api_secret: Optional[str] = None,
        settings: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        새 공급사 설정 등록

        기존 활성 설정은 비활성화되지만 삭제되지 않는다.

        Returns:
            인증 정보가 가려진 설정
        """
        if not self.providers.is_registered(provider):
            raise InvalidRequest(f"Unknown provider: {provider}")
        if not api_key:
            raise InvalidRequest("apiKey is required")

        adapter = self.providers.get(provider)
        if adapter.requires_secret and not api_secret:
            logger.warning(f"{provider} 설정에 API 시크릿이 없습니다")

        config = await self.store.upsert_config(provider, api_key, api_secret, settings or {})
        logger.info(f"공급사 설정 등록: {adapter.display_name} (id={config.id})")
        return config.masked()

    async def require_active(self) -> ProviderConfig:
        """활성 설정 조회 (없으면 ConfigurationMissing)"""
        config = await self.store.get_active_config()
        if config is None:
            raise ConfigurationMissing()
        return config

    async def history(self, provider: Optional[str] = None) -> List[Dict[str, Any]]:
        """설정 이력 (인증 정보 가림)"""
        return [config.masked() for config in await self.store.list_configs(provider)]

    def open_client(self, config: ProviderConfig) -> SupplierClient:
        """설정으로 공급사 클라이언트 생성"""
        adapter = self.providers.get(config.provider)
        return SupplierClient(
            adapter,
            api_key=config.api_key.get_secret_value(),
            api_secret=config.api_secret.get_secret_value() if config.api_secret else None,
            settings=config.settings,
            timeout=self.settings.http_timeout,
        )
