"""
Stripe-Signature 헤더 검증.

Header: t=<unix seconds>,v1=<hex hmac>[,k=v ...]
Signed payload: "{t}.{raw body}" 그대로 (body를 파싱/재직렬화하면 바이트가 달라져서 검증이 깨진다).
"""

from __future__ import annotations

import hashlib
import hmac
import time
from dataclasses import dataclass
from typing import Callable, Optional

from premiumgate.core.errors import (
    BadSignatureFormat,
    InvalidSignature,
    SignatureTimestampOutOfTolerance,
)


@dataclass(frozen=True)
class SignatureHeader:
    timestamp: str
    v1: str


def parse_signature_header(header: str) -> SignatureHeader:
    parts: dict[str, str] = {}
    for segment in header.split(","):
        key, sep, value = segment.strip().partition("=")
        if not sep:
            continue
        parts[key] = value

    timestamp = parts.get("t")
    v1 = parts.get("v1")
    if not timestamp or not v1:
        raise BadSignatureFormat()

    return SignatureHeader(timestamp=timestamp, v1=v1)


def compute_signature(secret: str, timestamp: str, raw_body: str) -> str:
    signed_payload = f"{timestamp}.{raw_body}"
    return hmac.new(
        secret.encode("utf-8"),
        signed_payload.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def timing_safe_equal(a: str, b: str) -> bool:
    # 길이 다르면 바로 False (길이 자체는 비밀이 아님)
    if len(a) != len(b):
        return False
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def verify_signature(
    raw_body: str,
    header: str,
    secret: str,
    *,
    tolerance_sec: Optional[int] = None,
    now: Callable[[], float] = time.time,
) -> SignatureHeader:
    """
    검증 성공 시 파싱된 헤더를 반환, 실패 시 WebhookError 하위 예외.
    """
    parsed = parse_signature_header(header)

    expected = compute_signature(secret, parsed.timestamp, raw_body)
    if not timing_safe_equal(expected, parsed.v1):
        raise InvalidSignature()

    # 0 또는 None이면 검사 안 함 (Stripe SDK와 동일)
    if tolerance_sec:
        try:
            signed_at = int(parsed.timestamp)
        except ValueError:
            raise SignatureTimestampOutOfTolerance() from None
        if abs(now() - signed_at) > tolerance_sec:
            raise SignatureTimestampOutOfTolerance()

    return parsed
