"""
공급사 레지스트리 테스트
"""

import pytest

from dropship_engine.errors import InvalidRequest
from dropship_engine.providers.mock import MockAdapter
from dropship_engine.providers.registry import ProviderRegistry


class TestProviderRegistry:
    """공급사 레지스트리 테스트"""

    def test_default_providers(self):
        registry = ProviderRegistry()
        assert set(registry.list_providers()) == {"printful", "spocket", "dropcommerce", "mock_api"}

    def test_get_returns_adapter_instance(self):
        adapter = ProviderRegistry().get("mock_api")
        assert isinstance(adapter, MockAdapter)

    def test_unknown_provider(self):
        with pytest.raises(InvalidRequest, match="Unknown provider"):
            ProviderRegistry().get("aliexpress")

    def test_register_new_provider(self):
        class CustomAdapter(MockAdapter):
            provider_id = "custom"

        registry = ProviderRegistry()
        registry.register(CustomAdapter)

        assert registry.is_registered("custom")
        assert registry.get("custom").provider_id == "custom"

    def test_register_requires_provider_id(self):
        class NamelessAdapter(MockAdapter):
            provider_id = ""

        with pytest.raises(ValueError):
            ProviderRegistry().register(NamelessAdapter)
