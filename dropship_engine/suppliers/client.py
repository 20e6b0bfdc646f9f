"""
공급사 API 클라이언트
어댑터로 요청을 만들고 httpx로 전송한 뒤 어댑터로 응답을 해석한다.
"""

from typing import Any, Dict, List, Optional

import httpx

from dropship_engine.errors import FulfillmentError, TransportFailure
from dropship_engine.models.order import FulfillmentOrder, SupplierOrderResult
from dropship_engine.models.product import SupplierProduct
from dropship_engine.monitoring import get_logger
from dropship_engine.providers.base import BaseProviderAdapter

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 30.0


class SupplierClient:
    """공급사 1곳과 통신하는 클라이언트 (로컬 저장 없음)"""

    def __init__(
        self,
        adapter: BaseProviderAdapter,
        api_key: str,
        api_secret: Optional[str] = None,
        settings: Optional[Dict[str, Any]] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        초기화

        Args:
            adapter: 공급사 어댑터
            api_key: API 키
            api_secret: API 시크릿 (공급사에 따라 선택)
            settings: 공급사별 추가 설정
            timeout: 요청 타임아웃 (초)
        """
        self.adapter = adapter
        self.settings = settings or {}
        self.logger = logger.bind(provider=adapter.provider_id)

        self.client = httpx.AsyncClient(
            headers=adapter.build_headers(api_key, api_secret, self.settings),
            timeout=timeout,
            transport=adapter.transport(self.settings),
        )

    @property
    def provider(self) -> str:
        return self.adapter.provider_id

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def close(self):
        await self.client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        """요청 전송 후 JSON 응답 반환 (실패 시 TransportFailure)"""
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise TransportFailure(f"{self.provider} 요청 실패: {e}") from e

        if not response.is_success:
            raise TransportFailure(
                f"{self.provider} API error: {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            return response.json()
        except ValueError as e:
            raise TransportFailure(
                f"{self.provider} 응답 JSON 파싱 실패",
                status_code=response.status_code,
                body=response.text,
            ) from e

    async def list_products(
        self, category: Optional[str] = None, limit: int = 50
    ) -> List[SupplierProduct]:
        """
        상품 목록 조회

        Args:
            category: 내부 카테고리 (공급사 값으로 변환, 매핑 없으면 필터 생략)
            limit: 최대 조회 개수

        Raises:
            TransportFailure: 통신 실패 또는 2xx 이외 응답
        """
        external_category = self.adapter.map_category_to_external(category)
        url = self.adapter.build_list_url(external_category, limit)

        self.logger.debug(f"상품 목록 조회: category={external_category}, limit={limit}")
        raw = await self._request("GET", url)
        products = self.adapter.parse_product_list(raw)
        self.logger.info(f"상품 목록 조회 완료: {len(products)}개")
        return products

    async def fetch_stock(self, external_id: str) -> int:
        """
        재고 조회

        Raises:
            TransportFailure: 통신 실패 또는 2xx 이외 응답
        """
        raw = await self._request("GET", self.adapter.build_stock_url(external_id))
        return self.adapter.parse_stock_response(raw)

    async def get_stock(self, external_id: str) -> int:
        """재고 조회 (실패 시 0)"""
        try:
            return await self.fetch_stock(external_id)
        except TransportFailure as e:
            self.logger.warning(f"재고 조회 실패 ({external_id}): {e.message}")
            return 0

    async def create_order(self, order: FulfillmentOrder) -> SupplierOrderResult:
        """
        공급사 주문 생성 (재시도 없음)

        Raises:
            FulfillmentError: 통신 실패 또는 2xx 이외 응답 (상태 코드와 본문 포함)
        """
        payload = self.adapter.encode_order_request(order)
        try:
            raw = await self._request("POST", self.adapter.build_order_url(), json=payload)
        except TransportFailure as e:
            raise FulfillmentError(
                f"Failed to create order: {e.message}",
                status_code=e.status_code,
                body=e.body,
            ) from e

        result = self.adapter.parse_order_result(raw)
        self.logger.info(f"공급사 주문 생성: {order.order_id} -> {result.external_order_id}")
        return result
