"""
테스트용 Mock 공급사
실제 API 없이 개발/테스트할 수 있도록 결정적인 가짜 데이터 제공

네트워크 대신 httpx.MockTransport로 응답하므로 실제 공급사와 동일한
클라이언트 코드 경로를 그대로 사용한다.
"""

import json
import uuid
from typing import Any, Dict, List, Optional

import httpx
from faker import Faker

from dropship_engine.models.order import FulfillmentOrder
from dropship_engine.models.product import ProductCategory, SupplierProduct
from dropship_engine.monitoring import get_logger
from dropship_engine.providers.base import BaseProviderAdapter
from dropship_engine.providers.parsing import parse_images

logger = get_logger(__name__)

DEFAULT_CATALOG_SIZE = 100

# 공급사 카테고리 슬러그 -> 상품명 접미사
MOCK_CATEGORIES = {
    "t-shirts": ["Tee", "Graphic T-Shirt", "Crew Neck Tee"],
    "bags": ["Tote Bag", "Backpack", "Crossbody Bag"],
    "kitchen": ["Mug", "Cutting Board", "Water Bottle"],
    "gadgets": ["Phone Stand", "Wireless Charger", "Bluetooth Speaker"],
    "skincare": ["Face Serum", "Lip Balm", "Hand Cream"],
    "pet-supplies": ["Dog Collar", "Cat Toy", "Pet Bowl"],
    "misc": ["Gift Card Holder", "Keychain", "Sticker Pack"],
}


class MockCatalog:
    """인덱스 기반 결정적 상품 데이터와 요청 처리기"""

    def __init__(self, settings: Optional[Dict[str, Any]] = None):
        settings = settings or {}
        self.catalog_size = int(settings.get("catalog_size", DEFAULT_CATALOG_SIZE))
        # 장애 시뮬레이션용 설정
        self.fail_listing = bool(settings.get("fail_listing", False))
        self.fail_stock_ids = set(settings.get("fail_stock_ids", []))
        self.timeout_stock_ids = set(settings.get("timeout_stock_ids", []))
        self.fail_orders = bool(settings.get("fail_orders", False))

    @staticmethod
    def external_id(index: int) -> str:
        return f"MOCK-{index:04d}"

    def generate_item(self, index: int) -> Dict[str, Any]:
        """단일 상품 원본 데이터 생성 (같은 인덱스는 항상 같은 결과)"""
        fake = Faker("en_US")
        fake.seed_instance(index)

        slugs = list(MOCK_CATEGORIES.keys())
        slug = slugs[index % len(slugs)]
        price = fake.random_int(500, 9000) / 100
        image_seed = f"mock-{index}"

        return {
            "id": self.external_id(index),
            "name": f"{fake.color_name()} {fake.random_element(MOCK_CATEGORIES[slug])}",
            "description": fake.sentence(nb_words=12),
            "price": f"${price:.2f} USD",
            "sku": f"MK-{fake.bothify('??-####').upper()}",
            "category": slug,
            "tags": fake.words(nb=3, unique=True),
            "images": [
                f"https://picsum.photos/seed/{image_seed}/600/600",
                f"https://picsum.photos/seed/{image_seed}-alt/600/600",
                f"https://picsum.photos/seed/{image_seed}/600/600",
            ],
            "inventory": self.stock_for(index),
            "shipping_time": f"{fake.random_int(3, 5)}-{fake.random_int(7, 12)} business days",
            "weight": f"{fake.random_int(1, 30) / 10} kg",
            "dimensions": f"{fake.random_int(5, 40)}x{fake.random_int(5, 40)}x{fake.random_int(1, 20)}",
            "variants": [],
        }

    @staticmethod
    def stock_for(index: int) -> int:
        return (index * 37) % 200

    def list_items(self, category: Optional[str], limit: int) -> List[Dict[str, Any]]:
        items = []
        for index in range(1, self.catalog_size + 1):
            item = self.generate_item(index)
            if category and item["category"] != category:
                continue
            items.append(item)
            if len(items) >= limit:
                break
        return items

    def index_of(self, external_id: str) -> Optional[int]:
        if not external_id.startswith("MOCK-"):
            return None
        try:
            index = int(external_id[len("MOCK-"):])
        except ValueError:
            return None
        return index if 1 <= index <= self.catalog_size else None

    def handle(self, request: httpx.Request) -> httpx.Response:
        """MockTransport 요청 처리"""
        if not request.headers.get("Authorization", "").startswith("Bearer "):
            return httpx.Response(401, json={"error": "Unauthorized"})

        parts = [p for p in request.url.path.split("/") if p]
        # /v1/products, /v1/products/{id}/stock, /v1/orders
        if parts and parts[0] == "v1":
            parts = parts[1:]

        if request.method == "GET" and parts == ["products"]:
            if self.fail_listing:
                return httpx.Response(503, json={"error": "Service unavailable"})
            limit = int(request.url.params.get("limit", 50))
            category = request.url.params.get("category")
            return httpx.Response(200, json={"products": self.list_items(category, limit)})

        if request.method == "GET" and len(parts) == 3 and parts[0] == "products" and parts[2] == "stock":
            external_id = parts[1]
            if external_id in self.timeout_stock_ids:
                raise httpx.ReadTimeout("Stock lookup timed out", request=request)
            if external_id in self.fail_stock_ids:
                return httpx.Response(500, json={"error": "Stock lookup failed"})
            index = self.index_of(external_id)
            if index is None:
                return httpx.Response(404, json={"error": "Product not found"})
            return httpx.Response(200, json={"product_id": external_id, "stock": self.stock_for(index)})

        if request.method == "POST" and parts == ["orders"]:
            if self.fail_orders:
                return httpx.Response(422, json={"error": "Order rejected by supplier"})
            payload = json.loads(request.content or b"{}")
            reference = str(payload.get("reference", ""))
            token = uuid.uuid5(uuid.NAMESPACE_URL, f"mock-order:{reference}").hex[:12].upper()
            return httpx.Response(
                201,
                json={
                    "id": f"MOCK-ORD-{token}",
                    "status": "received",
                    "tracking_number": f"MOCKTRK{token}",
                },
            )

        return httpx.Response(404, json={"error": "Not found"})


class MockAdapter(BaseProviderAdapter):
    """테스트용 Mock 공급사 어댑터"""

    provider_id = "mock_api"
    display_name = "Mock API"
    base_url = "https://mock-supplier.local/v1"

    default_shipping_time = "5-7 business days"

    category_map = {
        "t-shirts": ProductCategory.APPAREL,
        "bags": ProductCategory.ACCESSORIES,
        "kitchen": ProductCategory.HOME,
        "gadgets": ProductCategory.ELECTRONICS,
        "skincare": ProductCategory.BEAUTY,
        "pet-supplies": ProductCategory.PETS,
    }
    external_categories = {
        ProductCategory.APPAREL: "t-shirts",
        ProductCategory.ACCESSORIES: "bags",
        ProductCategory.HOME: "kitchen",
        ProductCategory.ELECTRONICS: "gadgets",
        ProductCategory.BEAUTY: "skincare",
        ProductCategory.PETS: "pet-supplies",
    }

    def build_headers(
        self,
        api_key: str,
        api_secret: Optional[str] = None,
        settings: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }

    def parse_product_list(self, raw: Any) -> List[SupplierProduct]:
        items = self._extract_items(raw, "products")
        return self._parse_items(items, self._to_product)

    def _to_product(self, item: Dict[str, Any]) -> Optional[SupplierProduct]:
        return self._build_product(
            item,
            external_id=item.get("id"),
            title=item.get("name"),
            description=item.get("description"),
            price=item.get("price"),
            sku=item.get("sku"),
            category=item.get("category"),
            tags=item.get("tags"),
            images=parse_images(item.get("images")),
            stock=item.get("inventory"),
            shipping_time=item.get("shipping_time"),
            weight=item.get("weight"),
            dimensions=item.get("dimensions"),
            variants=item.get("variants"),
        )

    def encode_order_request(self, order: FulfillmentOrder) -> Dict[str, Any]:
        return {
            "reference": order.order_id,
            "product_id": order.product_external_id,
            "quantity": order.quantity,
            "customer": order.customer.model_dump(),
            "shipping_address": order.shipping_address.model_dump(),
        }

    def transport(
        self, settings: Optional[Dict[str, Any]] = None
    ) -> Optional[httpx.AsyncBaseTransport]:
        logger.debug("Mock 공급사 전송 계층 사용")
        return httpx.MockTransport(MockCatalog(settings).handle)
