from __future__ import annotations

import json
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Discriminator, Tag, TypeAdapter

from premiumgate.core.stripe_events import CHECKOUT_SESSION_COMPLETED


def _to_id(value: Any) -> Optional[str]:
    # 숫자 id도 문자열로. falsy("" / 0 / None)는 없는 것으로 본다
    return str(value) if value else None


def _dict_or_none(value: Any) -> Any:
    return value if isinstance(value, dict) else None


OptionalId = Annotated[Optional[str], BeforeValidator(_to_id)]


class CheckoutSessionMetadata(BaseModel):
    model_config = ConfigDict(extra="allow")

    supabase_user_id: OptionalId = None


class CheckoutSession(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: OptionalId = None
    client_reference_id: OptionalId = None
    metadata: Annotated[Optional[CheckoutSessionMetadata], BeforeValidator(_dict_or_none)] = None

    def user_id(self) -> Optional[str]:
        # client_reference_id 우선, 비어 있으면 metadata.supabase_user_id
        if self.client_reference_id:
            return self.client_reference_id
        if self.metadata and self.metadata.supabase_user_id:
            return self.metadata.supabase_user_id
        return None


class CheckoutSessionData(BaseModel):
    model_config = ConfigDict(extra="allow")

    object: CheckoutSession


class CheckoutSessionCompletedEvent(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: OptionalId = None
    type: Literal["checkout.session.completed"]
    data: CheckoutSessionData


class UnhandledEvent(BaseModel):
    """
    아직 처리 안 하는 이벤트 타입. 필드는 안 쓰니까 검증도 안 한다 (어떤 모양이든 200).
    type은 로그로 남긴다.
    """

    model_config = ConfigDict(extra="allow")

    id: Any = None
    type: Any = None
    data: Any = None


def _event_tag(value: Any) -> str:
    event_type = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    if event_type == CHECKOUT_SESSION_COMPLETED:
        return "checkout_session_completed"
    return "unhandled"


StripeEvent = Annotated[
    Union[
        Annotated[CheckoutSessionCompletedEvent, Tag("checkout_session_completed")],
        Annotated[UnhandledEvent, Tag("unhandled")],
    ],
    Discriminator(_event_tag),
]

_event_adapter: TypeAdapter[StripeEvent] = TypeAdapter(StripeEvent)


def parse_event(raw_body: str) -> Union[CheckoutSessionCompletedEvent, UnhandledEvent]:
    """
    JSON 파싱 + 타입별 모델로 디코드.
    JSON 오류, null envelope, data.object 없는 checkout 이벤트는 예외 그대로 (상위에서 500).
    """
    payload = json.loads(raw_body)
    if payload is None:
        raise ValueError("Event envelope is null")
    if not isinstance(payload, dict):
        # 배열/문자열/숫자: type이 없으니 처리 대상 아님
        return UnhandledEvent()
    return _event_adapter.validate_python(payload)
