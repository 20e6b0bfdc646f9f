"""
API 의존성 주입
"""

from typing import Optional

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from dropship_engine.config import settings
from dropship_engine.monitoring import get_logger
from dropship_engine.service import Caller, DropshippingService
from dropship_engine.storage.base import BaseStorage

logger = get_logger(__name__)

# Bearer 토큰 스키마 (토큰 누락은 get_caller에서 401로 처리)
security = HTTPBearer(auto_error=False)


async def get_storage(request: Request) -> BaseStorage:
    """스토리지 인스턴스 반환"""
    return request.app.state.storage


async def get_service(request: Request) -> DropshippingService:
    """작업 서비스 인스턴스 반환"""
    return request.app.state.service


def decode_token(token: str) -> dict:
    """JWT 토큰 디코드"""
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])


async def get_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Caller:
    """요청자 정보 반환 (권한 확인은 작업 서비스에서 수행)"""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        payload = decode_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token has expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    user_id = payload.get("user_id") or payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    return Caller(user_id=str(user_id), role=str(payload.get("role", "")))
