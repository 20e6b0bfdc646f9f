"""
API 미들웨어
"""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from dropship_engine.monitoring import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class TimingMiddleware(BaseHTTPMiddleware):
    """요청 ID 부여 및 처리 시간 기록"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # 호출자가 보낸 요청 ID가 있으면 그대로 사용
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        request_logger = logger.bind(request_id=request_id)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            request_logger.error(
                f"{request.method} {request.url.path} 처리 실패: {e} "
                f"({time.perf_counter() - started:.3f}s)"
            )
            raise

        elapsed = time.perf_counter() - started
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"

        log = request_logger.warning if response.status_code >= 400 else request_logger.info
        log(f"{request.method} {request.url.path} - {response.status_code} - {elapsed:.3f}s")
        return response
