from __future__ import annotations

from typing import Protocol, Union

import structlog
from starlette.concurrency import run_in_threadpool

from premiumgate.api.v1.schemas.stripe_event import (
    CheckoutSessionCompletedEvent,
    UnhandledEvent,
)
from premiumgate.core.errors import DataStoreError, MissingUserId

logger = structlog.get_logger()


class PremiumStore(Protocol):
    def set_premium(self, user_id: str) -> None: ...


async def apply_event(
    event: Union[CheckoutSessionCompletedEvent, UnhandledEvent],
    store: PremiumStore,
) -> None:
    """
    이벤트 타입별 상태 변경. 지금은 checkout 완료 -> premium 부여만 있다.
    """
    if isinstance(event, CheckoutSessionCompletedEvent):
        await grant_premium(event, store)
        return

    # 모르는 타입도 200으로 받되 흔적은 남긴다
    logger.info("stripe_event_ignored", event_id=event.id, event_type=event.type)


async def grant_premium(event: CheckoutSessionCompletedEvent, store: PremiumStore) -> str:
    session = event.data.object
    user_id = session.user_id()
    if not user_id:
        logger.warning("premium_user_id_missing", event_id=event.id, session_id=session.id)
        raise MissingUserId()

    # requests는 blocking이라 threadpool에서
    try:
        await run_in_threadpool(store.set_premium, user_id)
    except DataStoreError as e:
        logger.error("premium_update_failed", event_id=event.id, user_id=user_id, error=e.details)
        raise

    logger.info("premium_granted", event_id=event.id, user_id=user_id)
    return user_id
