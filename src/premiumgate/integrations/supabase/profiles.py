from __future__ import annotations

from typing import Optional

import requests

from premiumgate.core.errors import DataStoreError

PROFILES_TABLE = "profiles"


class ProfilesClient:
    """
    Supabase PostgREST로 profiles 테이블을 갱신하는 최소 클라이언트 (service role key 사용).
    """

    def __init__(
        self,
        base_url: str,
        service_role_key: str,
        *,
        timeout_sec: int = 10,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_sec = timeout_sec
        self._session = session or requests.Session()
        self._headers = {
            "apikey": service_role_key,
            "Authorization": f"Bearer {service_role_key}",
            "Content-Type": "application/json",
            "Prefer": "return=minimal",
        }

    @property
    def table_url(self) -> str:
        return f"{self.base_url}/rest/v1/{PROFILES_TABLE}"

    def set_premium(self, user_id: str) -> None:
        """
        is_premium = true (idempotent). 이미 true여도 같은 결과.
        네트워크 예외는 잡지 않는다.
        """
        resp = self._session.patch(
            self.table_url,
            params={"id": f"eq.{user_id}"},
            json={"is_premium": True},
            headers=self._headers,
            timeout=self.timeout_sec,
        )
        if resp.status_code >= 400:
            raise DataStoreError(_error_message(resp))


def _error_message(resp: requests.Response) -> str:
    # PostgREST 에러 body: {"code": ..., "message": ..., "details": ..., "hint": ...}
    try:
        body = resp.json()
    except ValueError:
        body = None

    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])

    text = (resp.text or "").strip()
    return text or f"HTTP {resp.status_code}"
