from collections.abc import Callable

from premiumgate.core.config import GatewayConfig, Settings, settings
from premiumgate.integrations.supabase.profiles import ProfilesClient
from premiumgate.services.premium import PremiumStore


def get_settings() -> Settings:
    """FastAPI dependency: process-wide settings (테스트에서 override)"""
    return settings


def profiles_store_factory() -> Callable[[GatewayConfig], PremiumStore]:
    """FastAPI dependency: config -> store. 설정 검증 뒤에 만들어야 해서 factory로 넘긴다."""

    def build(config: GatewayConfig) -> PremiumStore:
        return ProfilesClient(
            config.supabase_url,
            config.service_role_key,
            timeout_sec=config.supabase_timeout_sec,
        )

    return build
