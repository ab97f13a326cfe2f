"""Capability checks over user feature flags."""
from typing import FrozenSet, Optional
from src.models.user import User

CREATE_RECOVERY_TOKEN_USERNAME = "create:recovery_token:username"


class AuthorizationService:
    """
    Answers "can this caller do X" for feature-flag capabilities.

    Anonymous callers are represented by ``None`` and only hold the
    anonymous feature set. Nuked accounts hold nothing.
    """

    ANONYMOUS_FEATURES: FrozenSet[str] = frozenset({
        "create:recovery_token:email",
        "read:recovery_token",
        "update:recovery_token",
    })

    def can(self, user: Optional[User], feature: str) -> bool:
        """
        Check a capability.

        Args:
            user: Caller, or None when anonymous
            feature: Capability name

        Returns:
            True if the caller holds the capability
        """
        if user is None:
            return feature in self.ANONYMOUS_FEATURES

        if user.is_nuked:
            return False

        return user.has_feature(feature)
