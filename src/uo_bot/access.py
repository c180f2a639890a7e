"""Role-based permission wrappers for bot commands."""

import functools
import logging
from collections.abc import Callable

from uo_bot.config import get_settings
from uo_bot.slack.notifier import list_roles, send_direct_message

logger = logging.getLogger(__name__)

PERMISSIONS_ERROR = "invalid user permissions"
PERMISSIONS_MESSAGE = "You don't have permission to run this command!"

REGULAR_GROUPS = ["Regulars"]


async def user_in_groups(user_id: str, groups: list[str]) -> bool:
    """Check whether a user belongs to any of the named user groups (name or handle)."""
    wanted = {g.lower() for g in groups}
    for role in await list_roles():
        if (role.name.lower() in wanted or role.handle.lower() in wanted) and user_id in role.users:
            return True
    return False


def permissioned(groups: Callable[[], list[str]]) -> Callable:
    """Build a decorator restricting a command to members of ``groups()``.

    Group names are resolved at call time so settings changes (and test
    overrides) apply without re-importing.
    """

    def wrapper(fn: Callable) -> Callable:
        @functools.wraps(fn)
        async def guarded(ctx, msg, args: list[str]) -> str:
            if await user_in_groups(msg.user_id, groups()):
                return await fn(ctx, msg, args)

            logger.warning("User %s denied %s", msg.user_id, fn.__name__)
            await send_direct_message(msg.user_id, PERMISSIONS_MESSAGE)
            return PERMISSIONS_ERROR

        return guarded

    return wrapper


admin = permissioned(lambda: get_settings().admin_role_names)
regular = permissioned(lambda: REGULAR_GROUPS)
