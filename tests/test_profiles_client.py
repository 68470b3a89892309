"""Tests for the Supabase profiles client."""

from unittest.mock import MagicMock

import pytest
import requests

from premiumgate.core.errors import DataStoreError
from premiumgate.integrations.supabase.profiles import ProfilesClient


def _response(status_code: int, body=None, text: str = "") -> MagicMock:
    resp = MagicMock(spec=requests.Response)
    resp.status_code = status_code
    resp.text = text
    if body is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = body
    return resp


def test_set_premium_patches_profile_row():
    session = MagicMock()
    session.patch.return_value = _response(204)
    client = ProfilesClient("https://project.supabase.co/", "srk", timeout_sec=5, session=session)

    client.set_premium("user-1")

    session.patch.assert_called_once()
    args, kwargs = session.patch.call_args
    assert args == ("https://project.supabase.co/rest/v1/profiles",)
    assert kwargs["params"] == {"id": "eq.user-1"}
    assert kwargs["json"] == {"is_premium": True}
    assert kwargs["timeout"] == 5
    assert kwargs["headers"]["apikey"] == "srk"
    assert kwargs["headers"]["Authorization"] == "Bearer srk"
    assert kwargs["headers"]["Prefer"] == "return=minimal"


def test_postgrest_error_message_is_surfaced():
    session = MagicMock()
    session.patch.return_value = _response(
        401, body={"code": "42501", "message": "permission denied for table profiles"}
    )
    client = ProfilesClient("https://project.supabase.co", "srk", session=session)

    with pytest.raises(DataStoreError) as exc_info:
        client.set_premium("user-1")

    assert exc_info.value.details == "permission denied for table profiles"
    assert exc_info.value.status_code == 500


def test_non_json_error_falls_back_to_text_then_status():
    session = MagicMock()
    session.patch.return_value = _response(502, text="Bad Gateway")
    client = ProfilesClient("https://project.supabase.co", "srk", session=session)

    with pytest.raises(DataStoreError) as exc_info:
        client.set_premium("user-1")
    assert exc_info.value.details == "Bad Gateway"

    session.patch.return_value = _response(500)
    with pytest.raises(DataStoreError) as exc_info:
        client.set_premium("user-1")
    assert exc_info.value.details == "HTTP 500"


def test_network_errors_propagate():
    session = MagicMock()
    session.patch.side_effect = requests.ConnectionError("boom")
    client = ProfilesClient("https://project.supabase.co", "srk", session=session)

    with pytest.raises(requests.ConnectionError):
        client.set_premium("user-1")
