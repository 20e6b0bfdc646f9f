"""
공급사 설정 서비스 테스트
"""

import pytest

from dropship_engine.errors import ConfigurationMissing, InvalidRequest
from dropship_engine.services import ProviderConfigService


@pytest.fixture
def configs(storage, test_settings):
    return ProviderConfigService(storage.config, settings=test_settings)


class TestProviderConfigService:
    """공급사 설정 서비스 테스트"""

    async def test_configure_returns_masked_config(self, configs):
        config = await configs.configure("spocket", "sp-secret-key", settings={"region": "us"})

        assert config["provider"] == "spocket"
        assert config["api_key"] == "***"
        assert config["api_secret"] is None
        assert config["is_active"] is True
        assert config["settings"] == {"region": "us"}
        assert "sp-secret-key" not in str(config)

    async def test_reconfigure_supersedes_previous(self, configs):
        """재설정 시 이전 설정은 비활성화되지만 삭제되지 않음"""
        # Given
        await configs.configure("mock_api", "key-1")

        # When
        await configs.configure("mock_api", "key-2")

        # Then
        active = await configs.require_active()
        assert active.api_key.get_secret_value() == "key-2"

        history = await configs.store.list_configs("mock_api")
        assert len(history) == 2
        latest, previous = history
        assert latest.is_active and latest.superseded_at is None
        assert not previous.is_active
        assert previous.superseded_at is not None
        assert previous.api_key.get_secret_value() == "key-1"

    async def test_only_one_active_config_across_providers(self, configs):
        await configs.configure("mock_api", "mock-key")
        await configs.configure("spocket", "sp-key")

        active = await configs.require_active()
        assert active.provider == "spocket"
        assert await configs.store.get_active_config("mock_api") is None

        all_configs = await configs.store.list_configs()
        assert sum(1 for c in all_configs if c.is_active) == 1

    async def test_history_is_masked(self, configs):
        await configs.configure("dropcommerce", "dc-key", "dc-secret")

        history = await configs.history("dropcommerce")
        assert history[0]["api_key"] == "***"
        assert history[0]["api_secret"] == "***"

    async def test_unknown_provider(self, configs):
        with pytest.raises(InvalidRequest, match="Unknown provider"):
            await configs.configure("aliexpress", "key")

    async def test_empty_api_key(self, configs):
        with pytest.raises(InvalidRequest):
            await configs.configure("spocket", "")

    async def test_missing_secret_is_still_stored(self, configs):
        """시크릿이 필요한 공급사도 경고만 남기고 저장"""
        config = await configs.configure("dropcommerce", "dc-key")
        assert config["api_secret"] is None
        assert (await configs.require_active()).provider == "dropcommerce"

    async def test_require_active_without_config(self, configs):
        with pytest.raises(ConfigurationMissing):
            await configs.require_active()

    async def test_open_client_uses_configured_timeout(self, configs):
        await configs.configure("mock_api", "mock-key")
        config = await configs.require_active()

        client = configs.open_client(config)
        try:
            assert client.provider == "mock_api"
            assert client.client.timeout.read == 5.0
            assert client.client.headers["Authorization"] == "Bearer mock-key"
        finally:
            await client.close()
