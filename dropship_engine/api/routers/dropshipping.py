"""
드랍쉬핑 API 엔드포인트
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import JSONResponse

from dropship_engine.api.dependencies import get_caller, get_service
from dropship_engine.service import Caller, DropshippingService, OperationResult

router = APIRouter()

# 오류 코드 -> HTTP 상태 코드
STATUS_BY_ERROR_CODE = {
    "unauthorized": status.HTTP_403_FORBIDDEN,
    "invalid_request": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "configuration_missing": status.HTTP_400_BAD_REQUEST,
    "transport_failure": status.HTTP_502_BAD_GATEWAY,
    "fulfillment_failed": status.HTTP_502_BAD_GATEWAY,
    "internal_error": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def to_response(result: OperationResult) -> JSONResponse:
    """작업 결과를 HTTP 응답으로 변환"""
    if result.success:
        return JSONResponse(content={"success": True, **(result.data or {})})

    return JSONResponse(
        status_code=STATUS_BY_ERROR_CODE.get(result.error_code, status.HTTP_400_BAD_REQUEST),
        content={"success": False, "error": result.error, "error_code": result.error_code},
    )


@router.post("/configure")
async def configure_api(
    payload: Dict[str, Any] = Body(...),
    caller: Caller = Depends(get_caller),
    service: DropshippingService = Depends(get_service),
):
    """공급사 API 설정 등록 (인증 정보는 가려서 반환)"""
    return to_response(await service.configure_api(caller, payload))


@router.post("/import")
async def import_products(
    payload: Optional[Dict[str, Any]] = Body(None),
    caller: Caller = Depends(get_caller),
    service: DropshippingService = Depends(get_service),
):
    """공급사 상품 가져오기"""
    return to_response(await service.import_products(caller, payload))


@router.post("/sync")
async def sync_inventory(
    caller: Caller = Depends(get_caller),
    service: DropshippingService = Depends(get_service),
):
    """재고 동기화"""
    return to_response(await service.sync_inventory(caller))


@router.post("/fulfill")
async def fulfill_order(
    payload: Dict[str, Any] = Body(...),
    caller: Caller = Depends(get_caller),
    service: DropshippingService = Depends(get_service),
):
    """공급사 주문 전달"""
    return to_response(await service.fulfill_order(caller, payload))


@router.get("/products")
async def get_products(
    provider: Optional[str] = Query(None, description="공급사 필터"),
    limit: Optional[int] = Query(None, ge=1, le=500),
    caller: Caller = Depends(get_caller),
    service: DropshippingService = Depends(get_service),
):
    """활성 카탈로그 조회"""
    return to_response(
        await service.get_products(caller, {"provider": provider, "limit": limit})
    )


@router.get("/orders/{order_id}")
async def get_order_status(
    order_id: str,
    caller: Caller = Depends(get_caller),
    service: DropshippingService = Depends(get_service),
):
    """주문 전달 상태 조회"""
    return to_response(await service.get_order_status(caller, {"order_id": order_id}))
