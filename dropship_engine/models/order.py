"""
주문 전달 관련 데이터 모델
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class FulfillmentStatus(str, Enum):
    """공급사 주문 전달 상태"""

    SENT = "sent"  # 전달 완료
    FAILED = "failed"  # 전달 실패


class CustomerInfo(BaseModel):
    """주문자 정보"""

    name: str = Field(..., min_length=1)
    email: str = Field(default="")


class ShippingAddress(BaseModel):
    """배송지 정보"""

    full_name: str = Field(default="", alias="fullName")
    street: str
    city: str
    state: str = Field(default="")
    zip_code: str = Field(default="", alias="zipCode")
    country: str
    phone: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class FulfillmentOrder(BaseModel):
    """공급사로 전달할 내부 주문"""

    order_id: str = Field(..., min_length=1, alias="orderId")
    product_external_id: str = Field(..., min_length=1, alias="productExternalId")
    customer: CustomerInfo = Field(..., alias="customerInfo")
    shipping_address: ShippingAddress = Field(..., alias="shippingAddress")
    quantity: int = Field(..., gt=0)

    model_config = ConfigDict(populate_by_name=True)

    @property
    def recipient_name(self) -> str:
        """수령인 이름 (배송지 이름 우선)"""
        return self.shipping_address.full_name or self.customer.name


class SupplierOrderResult(BaseModel):
    """공급사 주문 생성 결과"""

    external_order_id: Optional[str] = None
    tracking_number: Optional[str] = None
    raw: Dict[str, Any] = Field(default_factory=dict)


class FulfillmentRecord(BaseModel):
    """공급사 주문 전달 기록 (성공/실패 모두 저장)"""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    order_id: str
    external_order_id: Optional[str] = None
    provider: str
    product_external_id: str
    customer_name: str
    customer_email: str = ""
    shipping_address: Dict[str, Any] = Field(default_factory=dict)
    quantity: int
    status: FulfillmentStatus
    tracking_number: Optional[str] = None
    fulfillment_data: Dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now)

    @classmethod
    def from_order(cls, order: FulfillmentOrder, provider: str, **kwargs) -> FulfillmentRecord:
        """주문 시점의 고객/배송지 스냅샷으로 기록 생성"""
        return cls(
            order_id=order.order_id,
            provider=provider,
            product_external_id=order.product_external_id,
            customer_name=order.customer.name,
            customer_email=order.customer.email,
            shipping_address=order.shipping_address.model_dump(mode="json"),
            quantity=order.quantity,
            **kwargs,
        )
