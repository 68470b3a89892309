from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from premiumgate.core.errors import ConfigurationError


class Settings(BaseSettings):
    env: str = "local"

    stripe_webhook_secret: SecretStr | None = None
    # None 또는 0이면 timestamp 검사 안 함 (원래 동작 유지)
    stripe_signature_tolerance_sec: int | None = None

    supabase_url: str | None = None
    supabase_service_role_key: SecretStr | None = None
    supabase_timeout_sec: int = 10

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_json: bool = False

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, v: Any) -> Any:
        return v.strip().upper() if isinstance(v, str) else v


@dataclass(frozen=True)
class GatewayConfig:
    webhook_secret: str
    service_role_key: str
    supabase_url: str
    supabase_timeout_sec: int = 10
    signature_tolerance_sec: int | None = None


def _secret(value: SecretStr | None) -> str:
    return value.get_secret_value() if value else ""


def resolve_gateway_config(s: Settings) -> GatewayConfig:
    """
    webhook 처리에 필요한 3개 값을 꺼낸다. 하나라도 비어 있으면 배포 설정 오류.
    """
    webhook_secret = _secret(s.stripe_webhook_secret)
    service_role_key = _secret(s.supabase_service_role_key)
    supabase_url = (s.supabase_url or "").strip()

    missing = [
        name
        for name, value in (
            ("STRIPE_WEBHOOK_SECRET", webhook_secret),
            ("SUPABASE_SERVICE_ROLE_KEY", service_role_key),
            ("SUPABASE_URL", supabase_url),
        )
        if not value
    ]
    if missing:
        raise ConfigurationError(missing)

    return GatewayConfig(
        webhook_secret=webhook_secret,
        service_role_key=service_role_key,
        supabase_url=supabase_url.rstrip("/"),
        supabase_timeout_sec=s.supabase_timeout_sec,
        signature_tolerance_sec=s.stripe_signature_tolerance_sec,
    )


settings = Settings()
