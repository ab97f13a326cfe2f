"""Recovery email event handler."""
import logging
from uuid import UUID

from src.events.domain import IEventHandler, DomainEvent, EventResult
from src.events.recovery_events import RecoveryTokenCreatedEvent
from src.services.email_service import EmailService
from src.services.activity_logger import ActivityLogger

logger = logging.getLogger(__name__)

RECOVERY_EMAIL_TEMPLATE = "password_recovery"
RECOVERY_EMAIL_SUBJECT = "Recuperação de Senha"


class RecoveryEmailHandler(IEventHandler):
    """
    Sends the recovery link when a new token is created.

    Flow:
    1. Route emits RecoveryTokenCreatedEvent → 2. This handler renders and
    sends the email → 3. Outcome logged

    Delivery failures are logged and returned as an error result. They are
    never raised: the token is already committed and the HTTP response
    must not depend on the mail server.
    """

    def __init__(
        self,
        email_service: EmailService,
        activity_logger: ActivityLogger,
        recovery_url_base: str,
        app_name: str = "Example",
        expires_in_minutes: int = 15,
    ):
        """
        Initialize handler with dependencies.

        Args:
            email_service: Service for sending emails
            activity_logger: Logger for activity tracking
            recovery_url_base: Base URL of the recovery page
            app_name: Product name used in the email signature
            expires_in_minutes: Token lifetime shown to the user
        """
        self._email_service = email_service
        self._activity_logger = activity_logger
        self._recovery_url_base = recovery_url_base.rstrip("/")
        self._app_name = app_name
        self._expires_in_minutes = expires_in_minutes

    def build_recovery_url(self, token_id: UUID) -> str:
        """Link to the page where the token is redeemed."""
        return f"{self._recovery_url_base}/{token_id}"

    def can_handle(self, event: DomainEvent) -> bool:
        """Check if this handler can handle the event."""
        return isinstance(event, RecoveryTokenCreatedEvent)

    def handle(self, event: DomainEvent) -> EventResult:
        """
        Send the recovery email described by the event.

        Args:
            event: RecoveryTokenCreatedEvent

        Returns:
            EventResult with success/failure status
        """
        if not isinstance(event, RecoveryTokenCreatedEvent):
            return EventResult.error_result("Unknown event type")

        return self._deliver(
            user_id=event.user_id,
            username=event.username,
            email=event.email,
            token_id=event.token_id,
            request_ip=event.request_ip,
        )

    def send(self, user, token) -> EventResult:
        """Send the recovery email for a user and a token directly."""
        return self._deliver(
            user_id=user.id,
            username=user.username,
            email=user.email,
            token_id=token.id,
        )

    def _deliver(self, user_id, username, email, token_id, request_ip=None) -> EventResult:
        recovery_url = self.build_recovery_url(token_id)

        try:
            result = self._email_service.send_template(
                to=email,
                template=RECOVERY_EMAIL_TEMPLATE,
                subject=RECOVERY_EMAIL_SUBJECT,
                context={
                    "username": username,
                    "recovery_url": recovery_url,
                    "expires_in_minutes": self._expires_in_minutes,
                    "app_name": self._app_name,
                },
            )
            error = None if result.success else result.error
        except Exception as e:
            logger.exception(f"Recovery email transport failed for user {user_id}")
            error = str(e)

        if error is not None:
            self._activity_logger.log(
                action="recovery_email_failed",
                user_id=user_id,
                metadata={"ip": request_ip, "error": error},
            )
            return EventResult.error_result(error=error, error_type="email_failed")

        self._activity_logger.log(
            action="recovery_email_sent",
            user_id=user_id,
            metadata={"ip": request_ip},
        )
        return EventResult.success_result({"recovery_url": recovery_url})
