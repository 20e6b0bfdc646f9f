"""Supplier API clients"""

from dropship_engine.suppliers.client import SupplierClient

__all__ = ["SupplierClient"]
