from __future__ import annotations

from typing import Optional


class WebhookError(Exception):
    """
    webhook 처리 중 '예상된' 실패. status_code/error/details 그대로 응답 body가 된다.
    """

    status_code: int = 500
    error: str = "Webhook error"

    def __init__(self, details: Optional[str] = None) -> None:
        super().__init__(details or self.error)
        self.details = details

    def to_payload(self) -> dict:
        payload: dict = {"error": self.error}
        if self.details is not None:
            payload["details"] = self.details
        return payload


# --- configuration fault (재배포 전까지 재시도 의미 없음) ---


class ConfigurationError(WebhookError):
    status_code = 500
    error = "Missing env"

    def __init__(self, missing: list[str]) -> None:
        # 어떤 env가 빠졌는지는 로그에만 남기고 응답에는 싣지 않는다
        super().__init__()
        self.missing = missing


# --- client/protocol fault ---


class MissingSignatureHeader(WebhookError):
    status_code = 400
    error = "Missing stripe-signature header"


class BadSignatureFormat(WebhookError):
    status_code = 400
    error = "Bad stripe-signature format"


class InvalidSignature(WebhookError):
    status_code = 400
    error = "Invalid Stripe signature"


class SignatureTimestampOutOfTolerance(WebhookError):
    status_code = 400
    error = "Stripe signature timestamp outside tolerance"


class MissingUserId(WebhookError):
    status_code = 400
    error = "No user id in session"


# --- downstream fault (Stripe가 5xx 보고 알아서 재시도) ---


class DataStoreError(WebhookError):
    status_code = 500
    error = "DB update failed"

    def __init__(self, message: str) -> None:
        super().__init__(message)
