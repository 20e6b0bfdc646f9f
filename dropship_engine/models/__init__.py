"""Data models"""

from dropship_engine.models.config import ProviderConfig
from dropship_engine.models.order import (
    CustomerInfo,
    FulfillmentOrder,
    FulfillmentRecord,
    FulfillmentStatus,
    ShippingAddress,
    SupplierOrderResult,
)
from dropship_engine.models.product import (
    CatalogEntry,
    Dimensions,
    ProductCategory,
    StorefrontProduct,
    SupplierProduct,
)
from dropship_engine.models.sync import (
    ImportResult,
    SyncLogEntry,
    SyncOperation,
    SyncResult,
    SyncStatus,
)

__all__ = [
    "ProviderConfig",
    "CustomerInfo",
    "FulfillmentOrder",
    "FulfillmentRecord",
    "FulfillmentStatus",
    "ShippingAddress",
    "SupplierOrderResult",
    "CatalogEntry",
    "Dimensions",
    "ProductCategory",
    "StorefrontProduct",
    "SupplierProduct",
    "ImportResult",
    "SyncLogEntry",
    "SyncOperation",
    "SyncResult",
    "SyncStatus",
]
