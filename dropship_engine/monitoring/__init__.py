"""
모니터링 시스템
"""

from .logger import get_logger, setup_logging

__all__ = ["setup_logging", "get_logger"]
