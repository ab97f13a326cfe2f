"""Password recovery request handling."""
from dataclasses import dataclass
from typing import Optional, Union

from src.errors import ForbiddenError, NotFoundError
from src.models.recovery_token import RecoveryToken
from src.models.user import User
from src.repositories.user_repository import UserRepository
from src.services.authorization_service import (
    AuthorizationService,
    CREATE_RECOVERY_TOKEN_USERNAME,
)
from src.services.recovery_token_service import RecoveryTokenService, TokenIssue


@dataclass(frozen=True)
class ActiveUser:
    """Target resolved to a usable account."""

    user: User


@dataclass(frozen=True)
class NukedUser:
    """Target resolved to a nuked account. Must look like NoSuchUser outside."""

    user: User


@dataclass(frozen=True)
class NoSuchUser:
    """No account matched the lookup."""


ResolvedTarget = Union[ActiveUser, NukedUser, NoSuchUser]


def resolve_target(user: Optional[User]) -> ResolvedTarget:
    """Classify a lookup result once per request."""
    if user is None:
        return NoSuchUser()
    if user.is_nuked:
        return NukedUser(user)
    return ActiveUser(user)


@dataclass
class RecoveryResult:
    """Result of a recovery request."""

    token: RecoveryToken
    notify_user: Optional[User] = None


class RecoveryService:
    """
    Recovery business logic.

    Pure service - does NOT send emails. The route emits an event for
    ``notify_user`` and the event handler does the delivery.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        token_service: RecoveryTokenService,
        authorization_service: AuthorizationService,
    ):
        """
        Initialize service.

        Args:
            user_repository: Repository for user lookups
            token_service: Token lifecycle service
            authorization_service: Capability checks
        """
        self._user_repo = user_repository
        self._token_service = token_service
        self._authorization = authorization_service

    def request_recovery(
        self,
        caller: Optional[User],
        username: Optional[str] = None,
        email: Optional[str] = None,
    ) -> RecoveryResult:
        """Dispatch to the username or email flow (exactly one is given)."""
        if username is not None:
            return self.request_by_username(caller, username)
        if email is not None:
            return self.request_by_email(email)
        raise ValueError("Either username or email is required")

    def request_by_username(self, caller: Optional[User], username: str) -> RecoveryResult:
        """
        Issue a token for another user picked by username.

        Only callers holding "create:recovery_token:username" may do this.
        Missing and nuked accounts produce the same NotFoundError.

        Raises:
            ForbiddenError: Caller lacks the capability
            NotFoundError: Username unknown or nuked
        """
        if not self._authorization.can(caller, CREATE_RECOVERY_TOKEN_USERNAME):
            raise ForbiddenError(
                message="Você não possui permissão para criar um token de recuperação com username.",
                action=f'Verifique se este usuário tem a feature "{CREATE_RECOVERY_TOKEN_USERNAME}".',
                error_location_code="CONTROLLER:RECOVERY:POST_HANDLER:CAN_NOT_CREATE_RECOVERY_TOKEN_USERNAME",
            )

        target = resolve_target(self._user_repo.find_by_username(username))

        if isinstance(target, ActiveUser):
            return self._issue(target.user)
        if isinstance(target, (NukedUser, NoSuchUser)):
            raise NotFoundError(
                message='O "username" informado não foi encontrado no sistema.',
                action='Verifique se o "username" está digitado corretamente.',
                error_location_code="MODEL:USER:FIND_ONE_BY_USERNAME:NOT_FOUND",
                key="username",
            )
        raise TypeError(f"Unhandled recovery target: {target!r}")

    def request_by_email(self, email: str) -> RecoveryResult:
        """
        Issue a token for the account owning an email.

        Always succeeds so callers cannot learn which emails are
        registered. Unknown and nuked accounts get an ephemeral token and
        no email.
        """
        target = resolve_target(self._user_repo.find_by_email(email))

        if isinstance(target, ActiveUser):
            return self._issue(target.user)
        if isinstance(target, (NukedUser, NoSuchUser)):
            return RecoveryResult(token=self._token_service.simulate().token)
        raise TypeError(f"Unhandled recovery target: {target!r}")

    def _issue(self, user: User) -> RecoveryResult:
        issue: TokenIssue = self._token_service.issue_for_user(user.id)
        return RecoveryResult(
            token=issue.token,
            notify_user=user if issue.should_notify else None,
        )
