"""Supplier provider adapters"""

from dropship_engine.providers.base import UNLIMITED_STOCK, BaseProviderAdapter
from dropship_engine.providers.dropcommerce import DropCommerceAdapter
from dropship_engine.providers.mock import MockAdapter
from dropship_engine.providers.printful import PrintfulAdapter
from dropship_engine.providers.registry import ProviderRegistry, registry
from dropship_engine.providers.spocket import SpocketAdapter

__all__ = [
    "BaseProviderAdapter",
    "UNLIMITED_STOCK",
    "DropCommerceAdapter",
    "MockAdapter",
    "PrintfulAdapter",
    "SpocketAdapter",
    "ProviderRegistry",
    "registry",
]
