"""
DropCommerce 어댑터
"""

from typing import Any, Dict, List, Optional

from dropship_engine.models.order import FulfillmentOrder, SupplierOrderResult
from dropship_engine.models.product import ProductCategory, SupplierProduct
from dropship_engine.providers.base import BaseProviderAdapter
from dropship_engine.providers.parsing import parse_images, safe_str, split_full_name


class DropCommerceAdapter(BaseProviderAdapter):
    """DropCommerce API 어댑터"""

    provider_id = "dropcommerce"
    display_name = "DropCommerce"
    base_url = "https://api.dropcommerce.com/v1"

    default_shipping_time = "3-7 business days"
    requires_secret = True

    category_map = {
        "apparel & accessories": ProductCategory.APPAREL,
        "home & kitchen": ProductCategory.HOME,
        "beauty & personal care": ProductCategory.BEAUTY,
        "pet products": ProductCategory.PETS,
    }
    external_categories = {
        ProductCategory.APPAREL: "Apparel & Accessories",
        ProductCategory.HOME: "Home & Kitchen",
        ProductCategory.BEAUTY: "Beauty & Personal Care",
        ProductCategory.PETS: "Pet Products",
        ProductCategory.TOYS: "Toys",
        ProductCategory.SPORTS: "Sports",
    }
    category_param = "product_type"

    def build_headers(
        self,
        api_key: str,
        api_secret: Optional[str] = None,
        settings: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "X-API-Key": api_key,
        }
        if api_secret:
            headers["X-API-Secret"] = api_secret
        return headers

    def parse_product_list(self, raw: Any) -> List[SupplierProduct]:
        items = self._extract_items(raw, "products")
        return self._parse_items(items, self._to_product)

    def _to_product(self, item: Dict[str, Any]) -> Optional[SupplierProduct]:
        variants = item.get("variants")
        first_variant = variants[0] if isinstance(variants, list) and variants else {}
        if not isinstance(first_variant, dict):
            first_variant = {}

        price = item.get("price") or first_variant.get("price")
        stock = item.get("inventory_quantity")
        if stock is None:
            stock = first_variant.get("inventory_quantity")

        return self._build_product(
            item,
            external_id=item.get("id"),
            title=item.get("title") or item.get("name"),
            description=item.get("body_html") or item.get("description"),
            price=price,
            sku=item.get("sku") or first_variant.get("sku"),
            category=item.get("product_type") or item.get("category"),
            tags=item.get("tags"),
            images=parse_images(item.get("images"), "src", "url"),
            stock=stock,
            shipping_time=item.get("shipping_time"),
            weight=item.get("weight"),
            dimensions=item.get("dimensions"),
            variants=variants,
        )

    def parse_stock_response(self, raw: Any) -> int:
        if isinstance(raw, dict) and "inventory_quantity" in raw:
            raw = {"stock": raw["inventory_quantity"]}
        return super().parse_stock_response(raw)

    def parse_order_result(self, raw: Any) -> SupplierOrderResult:
        data = raw if isinstance(raw, dict) else {}
        order = data.get("order") if isinstance(data.get("order"), dict) else data

        tracking_number = safe_str(order.get("tracking_number")) or None
        fulfillments = order.get("fulfillments")
        if not tracking_number and isinstance(fulfillments, list):
            tracking_number = next(
                (
                    safe_str(f.get("tracking_number"))
                    for f in fulfillments
                    if isinstance(f, dict) and f.get("tracking_number")
                ),
                None,
            )

        return SupplierOrderResult(
            external_order_id=safe_str(order.get("id") or order.get("order_id")) or None,
            tracking_number=tracking_number,
            raw=data,
        )

    def encode_order_request(self, order: FulfillmentOrder) -> Dict[str, Any]:
        first_name, last_name = split_full_name(order.recipient_name)
        address = order.shipping_address
        return {
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
