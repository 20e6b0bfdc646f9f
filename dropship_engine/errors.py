"""
드랍쉬핑 엔진 예외 정의

BatchFatalError: 작업 전체를 중단시키는 오류 (설정 누락, 권한 없음, 잘못된 요청)
ItemError: 개별 항목에서만 발생하며 배치 작업은 계속 진행되는 오류
"""

from typing import Optional


class DropshippingError(Exception):
    """드랍쉬핑 엔진 기본 예외"""

    error_code = "dropshipping_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BatchFatalError(DropshippingError):
    """작업 전체를 중단시키는 오류"""

    error_code = "batch_fatal"


class ConfigurationMissing(BatchFatalError):
    """활성화된 공급사 설정 없음"""

    error_code = "configuration_missing"

    def __init__(self, message: str = "Dropshipping API not configured"):
        super().__init__(message)


class Unauthorized(BatchFatalError):
    """관리자 권한 없음"""

    error_code = "unauthorized"

    def __init__(self, message: str = "Admin access required"):
        super().__init__(message)


class InvalidRequest(BatchFatalError):
    """요청 형식 오류"""

    error_code = "invalid_request"


class ItemError(DropshippingError):
    """개별 항목 처리 오류 (배치는 계속 진행)"""

    error_code = "item_error"


class TransportFailure(ItemError):
    """공급사 통신 실패 (네트워크 오류, 2xx 이외 응답)"""

    error_code = "transport_failure"

    def __init__(
        self, message: str, status_code: Optional[int] = None, body: Optional[str] = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ParseFailure(ItemError):
    """공급사 응답 파싱 실패"""

    error_code = "parse_failure"


class FulfillmentError(TransportFailure):
    """공급사 주문 생성 실패"""

    error_code = "fulfillment_failed"
