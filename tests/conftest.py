"""Pytest fixtures for premiumgate tests."""

import json
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from premiumgate.api.deps import get_settings, profiles_store_factory
from premiumgate.core.config import Settings
from premiumgate.core.errors import DataStoreError
from premiumgate.integrations.stripe.signature import compute_signature
from premiumgate.main import app

WEBHOOK_URL = "/api/v1/stripe/webhook"
WEBHOOK_SECRET = "whsec_test_secret"
TIMESTAMP = "1700000000"


class FakeProfilesStore:
    """Records set_premium calls instead of hitting Supabase."""

    def __init__(self, error: str | None = None) -> None:
        self.error = error
        self.calls: list[str] = []

    def set_premium(self, user_id: str) -> None:
        self.calls.append(user_id)
        if self.error is not None:
            raise DataStoreError(self.error)


def make_settings(**overrides) -> Settings:
    values = {
        "stripe_webhook_secret": WEBHOOK_SECRET,
        "supabase_service_role_key": "service-role-key",
        "supabase_url": "https://project.supabase.co",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def sign(body: str, secret: str = WEBHOOK_SECRET, timestamp: str = TIMESTAMP) -> str:
    return f"t={timestamp},v1={compute_signature(secret, timestamp, body)}"


def checkout_event(session: dict, event_type: str = "checkout.session.completed") -> str:
    return json.dumps(
        {
            "id": "evt_test_1",
            "type": event_type,
            "data": {"object": session},
        }
    )


@pytest.fixture
def store() -> FakeProfilesStore:
    return FakeProfilesStore()


@pytest.fixture
def settings_override() -> dict:
    """Mutable holder so tests can swap settings before the request."""
    return {"settings": make_settings()}


@pytest.fixture
def client(store: FakeProfilesStore, settings_override: dict) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_settings] = lambda: settings_override["settings"]
    app.dependency_overrides[profiles_store_factory] = lambda: (lambda config: store)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
