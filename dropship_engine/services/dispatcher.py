"""
주문 전달 서비스
확정된 내부 주문을 공급사에 1회 전달하고 결과를 기록 (자동 재시도 없음)
"""

from dropship_engine.errors import FulfillmentError
from dropship_engine.models.order import FulfillmentOrder, FulfillmentRecord, FulfillmentStatus
from dropship_engine.monitoring import get_logger
from dropship_engine.services.provider_config import ProviderConfigService
from dropship_engine.storage.base import BaseStorage

logger = get_logger(__name__)


class FulfillmentDispatcher:
    """공급사 주문 전달"""

    def __init__(self, storage: BaseStorage, configs: ProviderConfigService):
        self.storage = storage
        self.configs = configs

    async def fulfill_order(self, order: FulfillmentOrder) -> FulfillmentRecord:
        """
        주문 전달

        성공/실패 모두 전달 기록을 남긴다. 실패 시 기록 후 예외를 다시 발생시킨다.

        Returns:
            status=sent 전달 기록

        Raises:
            ConfigurationMissing: 활성 공급사 설정 없음
            FulfillmentError: 공급사 주문 생성 실패
        """
        config = await self.configs.require_active()
        provider = config.provider
        logger.info(f"주문 전달 시작: {order.order_id} -> {provider}")

        async with self.configs.open_client(config) as client:
            try:
                result = await client.create_order(order)
            except FulfillmentError as e:
                record = FulfillmentRecord.from_order(
                    order,
                    provider,
                    status=FulfillmentStatus.FAILED,
                    error_message=e.message,
                    fulfillment_data={"status_code": e.status_code, "body": e.body},
                )
                logger.error(f"주문 전달 실패: {order.order_id} - {e.message}")
                try:
                    await self.storage.fulfillment.insert(record)
                except Exception as storage_error:
                    logger.error(f"주문 전달 실패 기록 저장 실패: {order.order_id} - {storage_error}")
                raise

        record = FulfillmentRecord.from_order(
            order,
            provider,
            status=FulfillmentStatus.SENT,
            external_order_id=result.external_order_id,
            tracking_number=result.tracking_number,
            fulfillment_data=result.raw,
        )
        record = await self.storage.fulfillment.insert(record)
        logger.info(f"주문 전달 완료: {order.order_id} -> {result.external_order_id}")
        return record
