"""
공급사 어댑터 기본 클래스

공급사별 요청/응답 형식과 표준 상품/주문 형식 사이의 변환만 담당한다.
상태를 갖지 않으며 네트워크 호출도 하지 않는다.
"""

import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from dropship_engine.errors import ParseFailure
from dropship_engine.models.order import FulfillmentOrder, SupplierOrderResult
from dropship_engine.models.product import ProductCategory, SupplierProduct
from dropship_engine.monitoring import get_logger
from dropship_engine.providers.parsing import (
    parse_dimensions,
    parse_optional_decimal,
    parse_price,
    parse_stock,
    parse_tags,
    safe_list,
    safe_str,
)

logger = get_logger(__name__)

# 주문 제작형 공급사의 재고 기본값
UNLIMITED_STOCK = 9999

# 공급사 카테고리명에 포함된 단어로 내부 카테고리 추정
CATEGORY_KEYWORDS: Dict[ProductCategory, set] = {
    ProductCategory.APPAREL: {
        "apparel", "clothing", "clothes", "shirt", "shirts", "t-shirt", "t-shirts", "tee",
        "tees", "hoodie", "hoodies", "sweatshirt", "sweatshirts", "dress", "dresses",
        "pants", "jacket", "jackets", "fashion",
    },
    ProductCategory.ACCESSORIES: {
        "accessories", "accessory", "bag", "bags", "hat", "hats", "cap", "caps",
        "jewelry", "jewellery", "watch", "watches", "wallet", "wallets",
    },
    ProductCategory.HOME: {
        "home", "living", "kitchen", "decor", "mug", "mugs", "poster", "posters",
        "pillow", "pillows", "blanket", "blankets", "furniture", "garden",
    },
    ProductCategory.ELECTRONICS: {
        "electronics", "electronic", "phone", "phones", "gadget", "gadgets", "tech",
        "audio", "computer", "computers",
    },
    ProductCategory.BEAUTY: {
        "beauty", "cosmetics", "cosmetic", "skincare", "makeup", "fragrance", "health",
    },
    ProductCategory.TOYS: {"toys", "toy", "games", "game", "kids", "baby", "puzzle", "puzzles"},
    ProductCategory.SPORTS: {"sports", "sport", "fitness", "outdoor", "outdoors", "yoga", "gym"},
    ProductCategory.PETS: {"pets", "pet", "dog", "dogs", "cat", "cats"},
    ProductCategory.STATIONERY: {
        "stationery", "notebook", "notebooks", "sticker", "stickers", "office", "paper",
    },
}


class BaseProviderAdapter(ABC):
    """공급사 어댑터 추상 클래스"""

    provider_id: str = ""
    display_name: str = ""
    base_url: str = ""

    default_shipping_time: str = ""
    default_stock: int = 0
    requires_secret: bool = False

    # 공급사 카테고리명(소문자) -> 내부 카테고리
    category_map: Dict[str, ProductCategory] = {}
    # 내부 카테고리 -> 공급사 목록 조회 필터 값
    external_categories: Dict[ProductCategory, str] = {}

    # 목록 조회 파라미터 이름
    category_param: str = "category"
    limit_param: str = "limit"

    # -- 요청 생성 --

    def build_url(self, endpoint: str) -> str:
        return f"{self.base_url.rstrip('/')}/{endpoint.lstrip('/')}"

    def build_list_url(self, category: Optional[str] = None, limit: int = 50) -> str:
        """
        상품 목록 조회 URL

        Args:
            category: 공급사 카테고리 필터 값 (이미 변환된 값, 없으면 필터 생략)
            limit: 최대 조회 개수
        """
        params: Dict[str, Any] = {}
        if category:
            params[self.category_param] = category
        params[self.limit_param] = limit
        return str(httpx.URL(self.build_url("products"), params=params))

    def build_stock_url(self, external_id: str) -> str:
        return self.build_url(f"products/{external_id}/stock")

    def build_order_url(self) -> str:
        return self.build_url("orders")

    @abstractmethod
    def build_headers(
        self,
        api_key: str,
        api_secret: Optional[str] = None,
        settings: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, str]:
        """인증 헤더 생성"""
        pass

    # -- 응답 해석 --

    @abstractmethod
    def parse_product_list(self, raw: Any) -> List[SupplierProduct]:
        """상품 목록 응답을 표준 상품 목록으로 변환"""
        pass

    def parse_stock_response(self, raw: Any) -> int:
        """재고 응답 해석"""
        if isinstance(raw, dict):
            for key in ("stock", "quantity", "inventory"):
                if key in raw:
                    return parse_stock(raw.get(key), self.default_stock)
        return self.default_stock

    def parse_order_result(self, raw: Any) -> SupplierOrderResult:
        """주문 생성 응답 해석"""
        data = raw if isinstance(raw, dict) else {}
        order_id = data.get("id") or data.get("order_id")
        return SupplierOrderResult(
            external_order_id=safe_str(order_id) or None,
            tracking_number=safe_str(data.get("tracking_number")) or None,
            raw=data,
        )

    @abstractmethod
    def encode_order_request(self, order: FulfillmentOrder) -> Dict[str, Any]:
        """내부 주문을 공급사 주문 요청으로 변환"""
        pass

    # -- 카테고리 --

    def map_category_to_external(self, category: Optional[str]) -> Optional[str]:
        """내부 카테고리를 공급사 필터 값으로 변환 (매핑 없으면 None)"""
        if not category:
            return None
        try:
            internal = ProductCategory(category.strip().lower())
        except ValueError:
            return None
        return self.external_categories.get(internal)

    def map_external_to_category(self, raw_category: Any) -> ProductCategory:
        """공급사 카테고리를 내부 카테고리로 변환 (알 수 없으면 general)"""
        if isinstance(raw_category, dict):
            raw_category = raw_category.get("name") or raw_category.get("title")
        name = safe_str(raw_category).lower()
        if not name:
            return ProductCategory.GENERAL

        if name in self.category_map:
            return self.category_map[name]

        try:
            return ProductCategory(name)
        except ValueError:
            pass

        tokens = set(re.split(r"[^a-z0-9-]+", name))
        for category, keywords in CATEGORY_KEYWORDS.items():
            if tokens & keywords:
                return category
        return ProductCategory.GENERAL

    # -- 공통 변환 --

    def transport(
        self, settings: Optional[Dict[str, Any]] = None
    ) -> Optional[httpx.AsyncBaseTransport]:
        """네트워크 대신 사용할 전송 계층 (기본값 없음)"""
        return None

    def _extract_items(self, raw: Any, *keys: str) -> List[Dict[str, Any]]:
        """응답에서 상품 항목 목록 추출"""
        if isinstance(raw, list):
            items = raw
        elif isinstance(raw, dict):
            items = next((raw[k] for k in keys if isinstance(raw.get(k), list)), [])
        else:
            items = []
        return [item for item in items if isinstance(item, dict)]

    def _build_product(
        self,
        item: Dict[str, Any],
        *,
        external_id: Any,
        title: Any,
        description: Any = None,
        price: Any = None,
        sku: Any = None,
        category: Any = None,
        tags: Any = None,
        images: Optional[List[str]] = None,
        stock: Any = None,
        shipping_time: Any = None,
        weight: Any = None,
        dimensions: Any = None,
        variants: Any = None,
    ) -> Optional[SupplierProduct]:
        """필드별 기본값을 적용하여 표준 상품 생성 (ID가 없으면 None)"""
        external_id = safe_str(external_id)
        if not external_id:
            logger.warning(f"[{self.provider_id}] 상품 ID 누락 항목 건너뜀")
            return None

        try:
            return SupplierProduct(
                provider=self.provider_id,
                external_id=external_id,
                title=safe_str(title),
                description=safe_str(description),
                price=parse_price(price),
                sku=safe_str(sku),
                category=self.map_external_to_category(category),
                tags=parse_tags(tags),
                images=images or [],
                stock_level=parse_stock(stock, self.default_stock),
                shipping_time=safe_str(shipping_time) or self.default_shipping_time,
                weight=parse_optional_decimal(weight),
                dimensions=parse_dimensions(dimensions),
                variants=safe_list(variants),
                api_data=item,
            )
        except ValidationError as e:
            raise ParseFailure(f"상품 {external_id}: 필드 오류 {e.error_count()}건") from e

    def _parse_items(self, items: List[Dict[str, Any]], convert) -> List[SupplierProduct]:
        """항목별 변환 (변환 실패 항목은 제외)"""
        products = []
        for item in items:
            try:
                product = convert(item)
            except ParseFailure as e:
                logger.warning(f"[{self.provider_id}] 상품 변환 실패: {e.message}")
                continue
            except (TypeError, ValueError, AttributeError) as e:
                logger.warning(f"[{self.provider_id}] 상품 변환 실패: {e}")
                continue
            if product is not None:
                products.append(product)
        return products


__all__ = ["BaseProviderAdapter", "UNLIMITED_STOCK", "CATEGORY_KEYWORDS"]
