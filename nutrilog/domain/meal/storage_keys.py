"""Storage key scheme for meals and calorie goals.

Two generations of the same layout:

- unscoped (single installation): ``@meals`` / ``@calorie_goal``
- scoped (per user): ``@meals:<user_id>`` / ``@calorie_goal:<user_id>``

The unscoped keys double as the legacy keys consumed by migration.
"""

from dataclasses import dataclass
from typing import Optional

from nutrilog.domain.shared.errors import InvalidUserError

LEGACY_MEALS_KEY = "@meals"
LEGACY_CALORIE_GOAL_KEY = "@calorie_goal"


def assert_user_id(user_id: Optional[str]) -> str:
    """
    Validate a user identifier for scoped storage.

    Returns:
        The identifier unchanged

    Raises:
        InvalidUserError: If the identifier is None, empty or blank
    """
    if not isinstance(user_id, str) or not user_id.strip():
        raise InvalidUserError("User identifier is missing")
    return user_id


def meals_key(user_id: str) -> str:
    return f"{LEGACY_MEALS_KEY}:{assert_user_id(user_id)}"


def calorie_goal_key(user_id: str) -> str:
    return f"{LEGACY_CALORIE_GOAL_KEY}:{assert_user_id(user_id)}"


@dataclass(frozen=True)
class StorageKeys:
    """
    Key scheme selected by ``multi_tenant``.

    With ``multi_tenant=False`` every caller shares the legacy keys and the
    user id is ignored.

    Example:
        >>> StorageKeys(multi_tenant=True).meals("u1")
        '@meals:u1'
        >>> StorageKeys(multi_tenant=False).meals(None)
        '@meals'
    """

    multi_tenant: bool = True

    def validate(self, user_id: Optional[str]) -> Optional[str]:
        """Fail fast on a missing user id when keys are scoped."""
        if self.multi_tenant:
            return assert_user_id(user_id)
        return user_id

    def meals(self, user_id: Optional[str]) -> str:
        if not self.multi_tenant:
            return LEGACY_MEALS_KEY
        return meals_key(assert_user_id(user_id))

    def calorie_goal(self, user_id: Optional[str]) -> str:
        if not self.multi_tenant:
            return LEGACY_CALORIE_GOAL_KEY
        return calorie_goal_key(assert_user_id(user_id))
