"""
API 서버 메인 애플리케이션
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dropship_engine import __version__
from dropship_engine.config import Settings, get_settings
from dropship_engine.monitoring import get_logger, setup_logging
from dropship_engine.providers.registry import registry
from dropship_engine.service import DropshippingService
from dropship_engine.storage import create_storage
from dropship_engine.storage.base import BaseStorage

from .dependencies import get_storage
from .middleware import TimingMiddleware
from .routers import dropshipping

logger = get_logger(__name__)


def create_app(
    storage: Optional[BaseStorage] = None, settings: Optional[Settings] = None
) -> FastAPI:
    """
    FastAPI 앱 생성

    Args:
        storage: 사용할 저장소 (없으면 설정된 백엔드로 시작 시 생성)
        settings: 애플리케이션 설정
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """애플리케이션 생명주기 관리"""
        setup_logging(
            log_level=settings.log_level,
            log_file=settings.log_file,
            json_logs=settings.is_production(),
        )
        logger.info("API 서버 시작")

        if app.state.storage is None:
            app.state.storage = create_storage(settings)
        app.state.service = DropshippingService(app.state.storage, settings)

        yield

        logger.info("API 서버 종료")

    app = FastAPI(
        title="Dropshipping Catalog Integration API",
        description="공급사 상품 가져오기, 재고 동기화, 주문 전달",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.storage = storage
    app.state.service = DropshippingService(storage, settings) if storage else None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(TimingMiddleware)

    app.include_router(
        dropshipping.router, prefix="/api/v1/dropshipping", tags=["dropshipping"]
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """HTTP 예외 처리"""
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.detail, "error_code": "http_error"},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """검증 오류 처리"""
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "success": False,
                "error": "Validation Error",
                "error_code": "invalid_request",
                "details": [
                    {"loc": list(err.get("loc", [])), "msg": err.get("msg")}
                    for err in exc.errors()
                ],
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """일반 예외 처리"""
        logger.exception(f"처리되지 않은 예외: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": "Internal Server Error", "error_code": "internal_error"},
        )

    @app.get("/")
    async def root():
        """API 상태 확인"""
        return {
            "name": "Dropshipping Catalog Integration API",
            "version": __version__,
            "status": "running",
            "environment": settings.env,
            "docs": "/docs",
            "health": "/health",
        }

    @app.get("/health")
    async def health_check(storage: Optional[BaseStorage] = Depends(get_storage)):
        """헬스 체크"""
        return {
            "status": "healthy" if storage is not None else "degraded",
            "storage": storage.backend if storage is not None else None,
            "providers": registry.list_providers(),
        }

    return app


app = create_app()


def run():
    """API 서버 실행"""
    import uvicorn

    settings = get_settings()
    logger.info(f"API 서버 시작: http://{settings.api_host}:{settings.api_port}")

    uvicorn.run(
        "dropship_engine.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.is_development(),
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
