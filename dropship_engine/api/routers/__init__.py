"""API routers"""

from dropship_engine.api.routers import dropshipping

__all__ = ["dropshipping"]
