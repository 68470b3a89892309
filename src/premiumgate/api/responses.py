from __future__ import annotations

from typing import Any, Final, Optional

from fastapi.responses import JSONResponse, PlainTextResponse

from premiumgate.core.errors import WebhookError

CORS_HEADERS: Final[dict[str, str]] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type, stripe-signature",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


def json_response(body: Any, status_code: int = 200) -> JSONResponse:
    # 성공/실패 상관없이 항상 CORS 헤더
    return JSONResponse(content=body, status_code=status_code, headers=CORS_HEADERS)


def error_response(error: str, status_code: int, details: Optional[str] = None) -> JSONResponse:
    payload: dict[str, Any] = {"error": error}
    if details is not None:
        payload["details"] = details
    return json_response(payload, status_code=status_code)


def webhook_error_response(exc: WebhookError) -> JSONResponse:
    return json_response(exc.to_payload(), status_code=exc.status_code)


def preflight_response() -> PlainTextResponse:
    return PlainTextResponse("ok", status_code=200, headers=CORS_HEADERS)
