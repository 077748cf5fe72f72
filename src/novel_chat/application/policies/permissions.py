from __future__ import annotations

from novel_chat.application.dto.principal import Principal
from novel_chat.application.exceptions import AuthorizationError


def assert_admin(principal: Principal) -> None:
    if not principal.is_admin:
        raise AuthorizationError("Admin access required")


def resolve_receiver(
    principal: Principal,
    requested_receiver_id: int | None,
    privileged_user_id: int,
) -> int | None:
    """Pick who a message is actually delivered to.

    Rate-limited users can only write to the privileged account; whatever
    receiver they asked for is ignored.
    """
    if principal.role.is_rate_limited:
        return privileged_user_id
    return requested_receiver_id
