"""
공급사 어댑터 레지스트리
"""

from typing import Dict, List, Type

from dropship_engine.errors import InvalidRequest
from dropship_engine.providers.base import BaseProviderAdapter
from dropship_engine.providers.dropcommerce import DropCommerceAdapter
from dropship_engine.providers.mock import MockAdapter
from dropship_engine.providers.printful import PrintfulAdapter
from dropship_engine.providers.spocket import SpocketAdapter


class ProviderRegistry:
    """공급사 ID -> 어댑터 클래스"""

    def __init__(self):
        self._adapters: Dict[str, Type[BaseProviderAdapter]] = {}
        self._register_defaults()

    def _register_defaults(self):
        """기본 공급사 등록"""
        for adapter_class in (PrintfulAdapter, SpocketAdapter, DropCommerceAdapter, MockAdapter):
            self.register(adapter_class)

    def register(self, adapter_class: Type[BaseProviderAdapter]):
        """공급사 어댑터 등록"""
        if not adapter_class.provider_id:
            raise ValueError(f"provider_id가 없는 어댑터: {adapter_class.__name__}")
        self._adapters[adapter_class.provider_id] = adapter_class

    def get(self, provider: str) -> BaseProviderAdapter:
        """공급사 어댑터 인스턴스 반환"""
        if provider not in self._adapters:
            raise InvalidRequest(f"Unknown provider: {provider}")
        return self._adapters[provider]()

    def is_registered(self, provider: str) -> bool:
        return provider in self._adapters

    def list_providers(self) -> List[str]:
        """등록된 공급사 목록"""
        return list(self._adapters.keys())


# 전역 레지스트리
registry = ProviderRegistry()
