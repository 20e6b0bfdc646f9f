"""Catalog import, inventory sync and fulfillment services"""

from dropship_engine.services.dispatcher import FulfillmentDispatcher
from dropship_engine.services.importer import CatalogImporter
from dropship_engine.services.provider_config import ProviderConfigService
from dropship_engine.services.reconciler import InventoryReconciler

__all__ = [
    "CatalogImporter",
    "FulfillmentDispatcher",
    "InventoryReconciler",
    "ProviderConfigService",
]
