"""Recovery token lifecycle."""
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Mapping
from uuid import UUID

from src.config import DEFAULT_RECOVERY_TOKEN_EXPIRATION_MINUTES
from src.models.recovery_token import RecoveryToken
from src.repositories.recovery_token_repository import RecoveryTokenRepository


@dataclass(frozen=True)
class RecoveryTokenConfig:
    """Settings of the token lifecycle."""

    expiration_minutes: int = DEFAULT_RECOVERY_TOKEN_EXPIRATION_MINUTES

    def __post_init__(self):
        if self.expiration_minutes <= 0:
            raise ValueError("expiration_minutes must be positive")

    @property
    def expires_in(self) -> timedelta:
        return timedelta(minutes=self.expiration_minutes)

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "RecoveryTokenConfig":
        """Build from a Flask config (or any mapping)."""
        return cls(
            expiration_minutes=int(
                config.get(
                    "RECOVERY_TOKEN_EXPIRATION_MINUTES",
                    DEFAULT_RECOVERY_TOKEN_EXPIRATION_MINUTES,
                )
            )
        )


@dataclass
class TokenIssue:
    """Outcome of asking for a recovery token."""

    token: RecoveryToken
    should_notify: bool


class RecoveryTokenService:
    """
    Decides whether a user gets a new recovery token.

    A user holding a valid token keeps it and is not emailed again. This
    keeps repeated requests from spamming the inbox. The check and the
    insert are not locked: two concurrent requests may both mint a token,
    which only costs an extra valid token and email.
    """

    def __init__(
        self,
        token_repository: RecoveryTokenRepository,
        config: RecoveryTokenConfig,
    ):
        """
        Initialize service.

        Args:
            token_repository: Repository for recovery tokens
            config: Lifecycle settings (token time to live)
        """
        self._token_repo = token_repository
        self._config = config

    def issue_for_user(self, user_id: UUID) -> TokenIssue:
        """
        Reuse the user's valid token or create a new one.

        Args:
            user_id: UUID of the target user

        Returns:
            TokenIssue; should_notify is True only for a new token
        """
        existing = self._token_repo.find_one_valid_by_user_id(user_id)
        if existing:
            return TokenIssue(token=existing, should_notify=False)

        token = self._token_repo.create(user_id, self._config.expires_in)
        return TokenIssue(token=token, should_notify=True)

    def simulate(self) -> TokenIssue:
        """
        Build an ephemeral token for a target with no usable account.

        The token has the same shape and timestamp ordering as a real one
        but is never saved and never triggers an email.
        """
        token = RecoveryToken.build(user_id=None, expires_in=self._config.expires_in)
        return TokenIssue(token=token, should_notify=False)
