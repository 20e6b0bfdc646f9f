"""
Printful 어댑터 (주문 제작형)
"""

from typing import Any, Dict, List, Optional

from dropship_engine.models.order import FulfillmentOrder, SupplierOrderResult
from dropship_engine.models.product import ProductCategory, SupplierProduct
from dropship_engine.providers.base import UNLIMITED_STOCK, BaseProviderAdapter
from dropship_engine.providers.parsing import parse_images, parse_stock, safe_str


class PrintfulAdapter(BaseProviderAdapter):
    """Printful API 어댑터"""

    provider_id = "printful"
    display_name = "Printful"
    base_url = "https://api.printful.com"

    default_shipping_time = "7-14 business days"
    # 주문 제작이므로 재고 소진이 없음
    default_stock = UNLIMITED_STOCK

    category_map = {
        "men's clothing": ProductCategory.APPAREL,
        "women's clothing": ProductCategory.APPAREL,
        "kids' & youth clothing": ProductCategory.APPAREL,
        "hats": ProductCategory.ACCESSORIES,
        "accessories": ProductCategory.ACCESSORIES,
        "home & living": ProductCategory.HOME,
        "wall art": ProductCategory.HOME,
        "drinkware": ProductCategory.HOME,
        "stationery": ProductCategory.STATIONERY,
    }
    external_categories = {
        ProductCategory.APPAREL: "clothing",
        ProductCategory.ACCESSORIES: "accessories",
        ProductCategory.HOME: "home-living",
        ProductCategory.STATIONERY: "stationery",
    }
    category_param = "category_id"

    def build_headers(
        self,
        api_key: str,
        api_secret: Optional[str] = None,
        settings: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }
        store_id = (settings or {}).get("store_id")
        if store_id:
            headers["X-PF-Store-Id"] = str(store_id)
        return headers

    def parse_product_list(self, raw: Any) -> List[SupplierProduct]:
        items = self._extract_items(raw, "result", "products")
        return self._parse_items(items, self._to_product)

    def _to_product(self, item: Dict[str, Any]) -> Optional[SupplierProduct]:
        category = item.get("category") or item.get("type_name") or item.get("type")
        images = parse_images(item.get("files"), "preview_url", "thumbnail_url", "url")
        if not images:
            images = parse_images(item.get("thumbnail_url") or item.get("image"))

        return self._build_product(
            item,
            external_id=item.get("id"),
            title=item.get("name") or item.get("title"),
            description=item.get("description"),
            price=item.get("price", item.get("retail_price")),
            sku=item.get("sku") or item.get("external_id"),
            category=category,
            tags=item.get("tags"),
            images=images,
            stock=item.get("quantity"),
            shipping_time=item.get("shipping_time"),
            weight=item.get("weight"),
            dimensions=item.get("dimensions"),
            variants=item.get("variants"),
        )

    def parse_stock_response(self, raw: Any) -> int:
        if isinstance(raw, dict) and isinstance(raw.get("result"), dict):
            result = raw["result"]
            return parse_stock(result.get("quantity", result.get("stock")), self.default_stock)
        return super().parse_stock_response(raw)

    def parse_order_result(self, raw: Any) -> SupplierOrderResult:
        data = raw if isinstance(raw, dict) else {}
        result = data.get("result") if isinstance(data.get("result"), dict) else data

        tracking_number = None
        shipments = result.get("shipments")
        if isinstance(shipments, list):
            tracking_number = next(
                (
                    safe_str(s.get("tracking_number"))
                    for s in shipments
                    if isinstance(s, dict) and s.get("tracking_number")
                ),
                None,
            )

        return SupplierOrderResult(
            external_order_id=safe_str(result.get("id")) or None,
            tracking_number=tracking_number or safe_str(result.get("tracking_number")) or None,
            raw=data,
        )

    def encode_order_request(self, order: FulfillmentOrder) -> Dict[str, Any]:
        address = order.shipping_address
        return {
            "external_id": order.order_id,
            "recipient": {
                "name": order.recipient_name,
                "email": order.customer.email,
                "address1": address.street,
                "city": address.city,
                "state_code": address.state,
                "country_code": address.country,
                "zip": address.zip_code,
                "phone": address.phone,
            },
            "items": [
                {
                    "variant_id": order.product_external_id,
                    "quantity": order.quantity,
                }
            ],
        }
