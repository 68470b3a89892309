from collections.abc import Callable

import structlog
from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import Response

from premiumgate.api.deps import get_settings, profiles_store_factory
from premiumgate.api.responses import (
    error_response,
    json_response,
    preflight_response,
    webhook_error_response,
)
from premiumgate.core.config import GatewayConfig, Settings, resolve_gateway_config
from premiumgate.core.errors import (
    ConfigurationError,
    InvalidSignature,
    MissingSignatureHeader,
    SignatureTimestampOutOfTolerance,
    WebhookError,
)
from premiumgate.integrations.stripe.webhook import construct_event
from premiumgate.services.premium import PremiumStore, apply_event

logger = structlog.get_logger()

router = APIRouter(prefix="/stripe", tags=["stripe"])

WEBHOOK_PATH = "/webhook"
WEBHOOK_URL = "/api/v1/stripe" + WEBHOOK_PATH
ALLOWED_METHODS = frozenset({"POST", "OPTIONS"})


@router.options(WEBHOOK_PATH)
def stripe_webhook_preflight():
    return preflight_response()


@router.post(WEBHOOK_PATH)
async def stripe_webhook(
    request: Request,
    cfg: Settings = Depends(get_settings),
    store_factory: Callable[[GatewayConfig], PremiumStore] = Depends(profiles_store_factory),
    stripe_signature: str | None = Header(default=None, alias="Stripe-Signature"),
) -> Response:
    # 어떤 예외든 여기서 JSON 500으로 끝낸다 (프로세스는 절대 안 죽음)
    try:
        return await _handle(request, cfg, store_factory, stripe_signature)
    except WebhookError as e:
        return webhook_error_response(e)
    except Exception as e:
        logger.exception("webhook_unhandled_error", error=str(e))
        return error_response("Unhandled error", 500, details=str(e))


async def reject_unsupported_methods(request: Request, call_next) -> Response:
    """
    app 레벨 http middleware. webhook 경로는 POST/OPTIONS 외 전부 405 (HEAD, TRACE, 임의 verb 포함).
    Starlette 기본 405는 CORS 헤더가 없어서 여기서 먼저 끊는다.
    """
    if request.url.path.rstrip("/") == WEBHOOK_URL and request.method not in ALLOWED_METHODS:
        return error_response("Method not allowed", 405)
    return await call_next(request)


async def _handle(
    request: Request,
    cfg: Settings,
    store_factory: Callable[[GatewayConfig], PremiumStore],
    stripe_signature: str | None,
) -> Response:
    # 0) Config
    try:
        config = resolve_gateway_config(cfg)
    except ConfigurationError as e:
        logger.error("webhook_config_missing", missing=e.missing)
        raise

    if not stripe_signature:
        raise MissingSignatureHeader()

    payload = await request.body()

    # 1) Verify + parse
    try:
        event = construct_event(
            payload,
            stripe_signature,
            config.webhook_secret,
            tolerance_sec=config.signature_tolerance_sec,
        )
    except (InvalidSignature, SignatureTimestampOutOfTolerance) as e:
        logger.warning("stripe_signature_rejected", reason=e.error, body_bytes=len(payload))
        raise

    logger.info("stripe_event_verified", event_id=event.id, event_type=event.type)

    # 2) Apply
    await apply_event(event, store_factory(config))

    return json_response({"received": True})
