"""
상품 데이터 모델 정의
모든 공급사 간 데이터 교환을 위한 표준 형식
"""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, Field, field_validator


class ProductCategory(str, Enum):
    """내부 카테고리 체계"""

    GENERAL = "general"  # 기본값
    APPAREL = "apparel"  # 의류
    ACCESSORIES = "accessories"  # 액세서리
    HOME = "home"  # 홈/리빙
    ELECTRONICS = "electronics"  # 전자제품
    BEAUTY = "beauty"  # 뷰티
    TOYS = "toys"  # 완구
    SPORTS = "sports"  # 스포츠
    PETS = "pets"  # 반려동물
    STATIONERY = "stationery"  # 문구


class Dimensions(BaseModel):
    """상품 규격 (cm)"""

    length: Decimal = Field(..., ge=0)
    width: Decimal = Field(..., ge=0)
    height: Decimal = Field(..., ge=0)


class SupplierProduct(BaseModel):
    """공급사 독립적인 표준 상품 모델"""

    # 식별자: (provider, external_id)
    provider: str = Field(..., description="공급사 코드")
    external_id: str = Field(..., description="공급사 상품 ID")

    # 상품 정보
    title: str = Field(default="")
    description: str = Field(default="")
    price: Decimal = Field(default=Decimal(0), ge=0)
    sku: str = Field(default="")
    category: ProductCategory = Field(default=ProductCategory.GENERAL)
    tags: Set[str] = Field(default_factory=set)
    images: List[str] = Field(default_factory=list, description="이미지 URL (순서 유지)")

    # 재고 및 배송
    stock_level: int = Field(default=0, ge=0)
    shipping_time: str = Field(default="")
    weight: Optional[Decimal] = Field(None, ge=0, description="무게 (kg)")
    dimensions: Optional[Dimensions] = None

    # 옵션 조합 (가공 없이 전달)
    variants: List[Any] = Field(default_factory=list)

    # 원본 데이터
    api_data: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("images")
    @classmethod
    def dedupe_images(cls, v: List[str]) -> List[str]:
        """중복 이미지 제거 (처음 나온 순서 유지)"""
        return list(dict.fromkeys(v))

    @property
    def identity(self) -> tuple:
        return (self.provider, self.external_id)


class StorefrontProduct(BaseModel):
    """스토어프론트 상품 목록용 비정규화 레코드"""

    name: str
    description: str = ""
    price: Decimal
    images: List[str] = Field(default_factory=list)
    category: ProductCategory = ProductCategory.GENERAL
    sku: str = ""
    stock_quantity: int = 0
    is_dropshipped: bool = True
    external_id: str
    provider: str
    dropship_metadata: Dict[str, Any] = Field(default_factory=dict)
    tags: List[str] = Field(default_factory=list)
    is_active: bool = True


class CatalogEntry(SupplierProduct):
    """카탈로그에 등록된 공급사 상품"""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    is_active: bool = True
    last_synced: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @classmethod
    def from_supplier_product(cls, product: SupplierProduct) -> CatalogEntry:
        """공급사 상품으로부터 카탈로그 항목 생성"""
        return cls(**product.model_dump())

    def to_storefront(self) -> StorefrontProduct:
        """스토어프론트 미러 레코드 생성"""
        return StorefrontProduct(
            name=self.title,
            description=self.description,
            price=self.price,
            images=list(self.images),
            category=self.category,
            sku=self.sku,
            stock_quantity=self.stock_level,
            external_id=self.external_id,
            provider=self.provider,
            dropship_metadata={
                "shipping_time": self.shipping_time,
                "weight": float(self.weight) if self.weight is not None else None,
                "dimensions": (
                    self.dimensions.model_dump(mode="json") if self.dimensions else None
                ),
            },
            tags=sorted(self.tags),
            is_active=self.is_active,
        )
