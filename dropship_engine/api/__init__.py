"""
드랍쉬핑 카탈로그 연동 API
FastAPI 기반 RESTful API 서버
"""

from .main import app, create_app

__all__ = ["app", "create_app"]
