"""
동기화 작업 기록 모델
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dropship_engine.models.product import CatalogEntry


class SyncOperation(str, Enum):
    """작업 종류"""

    PRODUCT_IMPORT = "product_import"
    INVENTORY_SYNC = "inventory_sync"


class SyncStatus(str, Enum):
    """작업 결과 분류"""

    SUCCESS = "success"  # 실패 없음
    PARTIAL = "partial"  # 일부 실패
    ERROR = "error"  # 전체 실패

    @classmethod
    def classify(cls, processed: int, failed: int) -> SyncStatus:
        """실패 비율로 결과 분류"""
        if failed == 0:
            return cls.SUCCESS
        if failed < processed:
            return cls.PARTIAL
        return cls.ERROR


class SyncLogEntry(BaseModel):
    """가져오기/재고 동기화 1회 실행 감사 기록 (생성 후 변경 불가)"""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    operation_type: SyncOperation
    provider: str
    status: SyncStatus
    products_processed: int = Field(default=0, ge=0)
    products_updated: int = Field(default=0, ge=0)
    products_failed: int = Field(default=0, ge=0)
    error_details: Optional[Dict[str, Any]] = None
    started_at: datetime = Field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None
    duration_ms: Optional[int] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_counts(self):
        if self.products_updated + self.products_failed > self.products_processed:
            raise ValueError("updated + failed 합계가 processed를 초과할 수 없습니다")
        return self

    @classmethod
    def for_run(
        cls,
        operation_type: SyncOperation,
        provider: str,
        processed: int,
        updated: int,
        failed: int,
        started_at: datetime,
        errors: Optional[List[Dict[str, Any]]] = None,
        extra_details: Optional[Dict[str, Any]] = None,
        status: Optional[SyncStatus] = None,
    ) -> SyncLogEntry:
        """
        실행 결과로부터 기록 생성

        status를 지정하지 않으면 실패 비율로 분류한다.
        """
        completed_at = datetime.now()
        details: Dict[str, Any] = {}
        if errors:
            details["errors"] = errors
        if extra_details:
            details.update(extra_details)

        return cls(
            operation_type=operation_type,
            provider=provider,
            status=status or SyncStatus.classify(processed, failed),
            products_processed=processed,
            products_updated=updated,
            products_failed=failed,
            error_details=details or None,
            started_at=started_at,
            completed_at=completed_at,
            duration_ms=int((completed_at - started_at).total_seconds() * 1000),
        )


class ImportResult(BaseModel):
    """상품 가져오기 결과"""

    imported: int
    total: int
    errors: int
    skipped: int = 0
    error_details: List[Dict[str, Any]] = Field(default_factory=list)
    products: List[CatalogEntry] = Field(default_factory=list)


class SyncResult(BaseModel):
    """재고 동기화 결과"""

    processed: int
    updated: int
    failed: int
    errors: List[Dict[str, Any]] = Field(default_factory=list)
