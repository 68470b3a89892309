from __future__ import annotations

from typing import Optional, Union

from premiumgate.api.v1.schemas.stripe_event import (
    CheckoutSessionCompletedEvent,
    UnhandledEvent,
    parse_event,
)
from premiumgate.integrations.stripe.signature import verify_signature


def construct_event(
    payload: bytes,
    signature: str,
    secret: str,
    *,
    tolerance_sec: Optional[int] = None,
) -> Union[CheckoutSessionCompletedEvent, UnhandledEvent]:
    """
    Stripe signature 검증 + event 파싱.
    검증 실패는 WebhookError, JSON/스키마 오류는 그대로 예외 (상위에서 500 처리).
    """
    raw_body = payload.decode("utf-8", errors="replace")
    verify_signature(raw_body, signature, secret, tolerance_sec=tolerance_sec)
    return parse_event(raw_body)
