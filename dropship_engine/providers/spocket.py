"""
Spocket 어댑터
"""

from typing import Any, Dict, List, Optional

from dropship_engine.models.order import FulfillmentOrder
from dropship_engine.models.product import ProductCategory, SupplierProduct
from dropship_engine.providers.base import BaseProviderAdapter
from dropship_engine.providers.parsing import parse_images, split_full_name


class SpocketAdapter(BaseProviderAdapter):
    """Spocket API 어댑터"""

    provider_id = "spocket"
    display_name = "Spocket"
    base_url = "https://api.spocket.co/api/v1"

    default_shipping_time = "5-10 business days"

    category_map = {
        "women's fashion": ProductCategory.APPAREL,
        "men's fashion": ProductCategory.APPAREL,
        "home & garden": ProductCategory.HOME,
        "health & beauty": ProductCategory.BEAUTY,
        "pet supplies": ProductCategory.PETS,
        "toys & games": ProductCategory.TOYS,
        "sports & outdoors": ProductCategory.SPORTS,
        "jewelry & watches": ProductCategory.ACCESSORIES,
        "office supplies": ProductCategory.STATIONERY,
    }
    external_categories = {
        ProductCategory.APPAREL: "fashion",
        ProductCategory.ACCESSORIES: "jewelry-watches",
        ProductCategory.HOME: "home-garden",
        ProductCategory.ELECTRONICS: "electronics",
        ProductCategory.BEAUTY: "health-beauty",
        ProductCategory.TOYS: "toys-games",
        ProductCategory.SPORTS: "sports-outdoors",
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
        items = self._extract_items(raw, "products", "data")
        return self._parse_items(items, self._to_product)

    def _to_product(self, item: Dict[str, Any]) -> Optional[SupplierProduct]:
        return self._build_product(
            item,
            external_id=item.get("id"),
            title=item.get("name") or item.get("title"),
            description=item.get("description"),
            price=item.get("price"),
            sku=item.get("sku"),
            category=item.get("category"),
            tags=item.get("tags"),
            images=parse_images(item.get("images"), "url", "src"),
            stock=item.get("inventory"),
            shipping_time=item.get("shipping_time"),
            weight=item.get("weight"),
            dimensions=item.get("dimensions"),
            variants=item.get("variants"),
        )

    def parse_stock_response(self, raw: Any) -> int:
        if isinstance(raw, dict) and isinstance(raw.get("data"), dict):
            raw = raw["data"]
        return super().parse_stock_response(raw)

    def encode_order_request(self, order: FulfillmentOrder) -> Dict[str, Any]:
        # 수령인 이름을 이름/성으로 분리해서 받음
        first_name, last_name = split_full_name(order.recipient_name)
        address = order.shipping_address
        return {
            "order": {
                "reference": order.order_id,
                "email": order.customer.email,
                "shipping_address": {
                    "first_name": first_name,
                    "last_name": last_name,
                    "address1": address.street,
                    "city": address.city,
                    "province": address.state,
                    "zip": address.zip_code,
                    "country": address.country,
                    "phone": address.phone,
                },
                "line_items": [
                    {
                        "product_id": order.product_external_id,
                        "quantity": order.quantity,
                    }
                ],
            }
        }
