"""
드랍쉬핑 작업 진입점

모든 작업은 관리자 권한 확인 -> 요청 검증 -> 실행 순서로 처리되며
성공 여부와 결과 또는 오류 메시지를 담은 OperationResult를 반환한다.
"""

from typing import Any, Awaitable, Callable, Dict, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from dropship_engine.config import Settings, get_settings
from dropship_engine.errors import DropshippingError, InvalidRequest, Unauthorized
from dropship_engine.models.order import FulfillmentOrder
from dropship_engine.monitoring import get_logger
from dropship_engine.providers.registry import ProviderRegistry, registry
from dropship_engine.services.dispatcher import FulfillmentDispatcher
from dropship_engine.services.importer import CatalogImporter
from dropship_engine.services.provider_config import ProviderConfigService
from dropship_engine.services.reconciler import InventoryReconciler
from dropship_engine.storage.base import BaseStorage

logger = get_logger(__name__)

RequestT = TypeVar("RequestT", bound=BaseModel)


class Caller(BaseModel):
    """요청자 식별 정보"""

    user_id: str
    role: str = ""

    def is_admin(self, admin_role: str = "admin") -> bool:
        return self.role == admin_role


class ConfigureRequest(BaseModel):
    """공급사 설정 요청"""

    provider: str = Field(..., min_length=1)
    api_key: str = Field(..., min_length=1, alias="apiKey")
    api_secret: Optional[str] = Field(None, alias="apiSecret")
    settings: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True)


class ImportRequest(BaseModel):
    """상품 가져오기 요청"""

    category: Optional[str] = None
    limit: Optional[int] = Field(None, ge=1)


class SyncRequest(BaseModel):
    """재고 동기화 요청 (파라미터 없음)"""


class ProductQuery(BaseModel):
    """카탈로그 조회 요청"""

    provider: Optional[str] = None
    limit: Optional[int] = Field(None, ge=1)


class OrderStatusRequest(BaseModel):
    """주문 전달 상태 조회 요청"""

    order_id: str = Field(..., min_length=1, alias="orderId")

    model_config = ConfigDict(populate_by_name=True)


class OperationResult(BaseModel):
    """작업 결과"""

    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def ok(cls, data: Dict[str, Any]) -> "OperationResult":
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, error: str, error_code: str) -> "OperationResult":
        return cls(success=False, error=error, error_code=error_code)


def _validation_message(error: ValidationError) -> str:
    """검증 오류 메시지 (입력값은 포함하지 않음)"""
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'request'}: {err['msg']}"
        for err in error.errors()
    )


class DropshippingService:
    """드랍쉬핑 작업 모음"""

    def __init__(
        self,
        storage: BaseStorage,
        settings: Optional[Settings] = None,
        providers: Optional[ProviderRegistry] = None,
    ):
        self.storage = storage
        self.settings = settings or get_settings()
        self.providers = providers or registry

        self.configs = ProviderConfigService(storage.config, self.providers, self.settings)
        self.importer = CatalogImporter(storage, self.configs, self.settings)
        self.reconciler = InventoryReconciler(storage, self.configs, self.settings)
        self.dispatcher = FulfillmentDispatcher(storage, self.configs)

    async def _execute(
        self,
        action: str,
        caller: Caller,
        request_model: Type[RequestT],
        request: Union[RequestT, Dict[str, Any], None],
        handler: Callable[[RequestT], Awaitable[Dict[str, Any]]],
    ) -> OperationResult:
        """권한 확인, 요청 검증, 실행, 오류 변환"""
        try:
            if not caller.is_admin(self.settings.admin_role):
                raise Unauthorized()

            if isinstance(request, request_model):
                parsed = request
            else:
                try:
                    parsed = request_model.model_validate(request or {})
                except ValidationError as e:
                    raise InvalidRequest(_validation_message(e)) from e

            data = await handler(parsed)

        except DropshippingError as e:
            logger.bind(user_id=caller.user_id).warning(
                f"{action} 실패 [{e.error_code}]: {e.message}"
            )
            return OperationResult.failure(e.message, e.error_code)
        except Exception as e:
            logger.bind(user_id=caller.user_id).exception(
                f"{action} 처리 중 예상치 못한 오류: {e}"
            )
            return OperationResult.failure(str(e), "internal_error")

        return OperationResult.ok(data)

    # -- 작업 --

    async def configure_api(
        self, caller: Caller, request: Union[ConfigureRequest, Dict[str, Any]]
    ) -> OperationResult:
        """공급사 설정 등록"""

        async def handle(req: ConfigureRequest) -> Dict[str, Any]:
            config = await self.configs.configure(
                req.provider, req.api_key, req.api_secret, req.settings
            )
            return {"config": config}

        return await self._execute("configure_api", caller, ConfigureRequest, request, handle)

    async def import_products(
        self, caller: Caller, request: Union[ImportRequest, Dict[str, Any], None] = None
    ) -> OperationResult:
        """상품 가져오기"""

        async def handle(req: ImportRequest) -> Dict[str, Any]:
            if req.limit is not None and req.limit > self.settings.max_import_limit:
                raise InvalidRequest(f"limit must be <= {self.settings.max_import_limit}")
            result = await self.importer.import_products(req.category, req.limit)
            return result.model_dump(mode="json")

        return await self._execute("import_products", caller, ImportRequest, request, handle)

    async def sync_inventory(
        self, caller: Caller, request: Union[SyncRequest, Dict[str, Any], None] = None
    ) -> OperationResult:
        """재고 동기화"""

        async def handle(req: SyncRequest) -> Dict[str, Any]:
            result = await self.reconciler.sync_inventory()
            return result.model_dump(mode="json")

        return await self._execute("sync_inventory", caller, SyncRequest, request, handle)

    async def fulfill_order(
        self, caller: Caller, request: Union[FulfillmentOrder, Dict[str, Any]]
    ) -> OperationResult:
        """공급사 주문 전달"""

        async def handle(req: FulfillmentOrder) -> Dict[str, Any]:
            record = await self.dispatcher.fulfill_order(req)
            return {
                "fulfillmentId": record.external_order_id,
                "trackingNumber": record.tracking_number,
                "tracking": record.model_dump(mode="json"),
            }

        return await self._execute("fulfill_order", caller, FulfillmentOrder, request, handle)

    async def get_products(
        self, caller: Caller, request: Union[ProductQuery, Dict[str, Any], None] = None
    ) -> OperationResult:
        """활성 카탈로그 조회 (최신순)"""

        async def handle(req: ProductQuery) -> Dict[str, Any]:
            entries = list(reversed(await self.storage.catalog.list_active(req.provider)))
            if req.limit:
                entries = entries[: req.limit]
            return {"products": [e.model_dump(mode="json") for e in entries]}

        return await self._execute("get_products", caller, ProductQuery, request, handle)

    async def get_order_status(
        self, caller: Caller, request: Union[OrderStatusRequest, Dict[str, Any]]
    ) -> OperationResult:
        """주문 전달 기록 조회 (없으면 order=None)"""

        async def handle(req: OrderStatusRequest) -> Dict[str, Any]:
            record = await self.storage.fulfillment.find_by_order_id(req.order_id)
            return {"order": record.model_dump(mode="json") if record else None}

        return await self._execute("get_order_status", caller, OrderStatusRequest, request, handle)
