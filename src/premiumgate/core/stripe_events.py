from typing import Final

# 상태 변경을 일으키는 이벤트는 지금 하나뿐. 나머지는 로그만 남기고 200.
CHECKOUT_SESSION_COMPLETED: Final[str] = "checkout.session.completed"
