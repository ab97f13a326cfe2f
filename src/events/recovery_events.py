"""Recovery-related domain events."""
from dataclasses import dataclass, field
from typing import Optional
from uuid import UUID

from src.events.domain import DomainEvent


@dataclass
class RecoveryTokenCreatedEvent(DomainEvent):
    """
    Emitted by route when a new recovery token must be emailed.

    Flow: Route emits → Dispatcher → RecoveryEmailHandler → EmailService
    """

    name: str = field(default="security.recovery_token.created", init=False)
    user_id: Optional[UUID] = None
    username: str = ""
    email: str = ""
    token_id: Optional[UUID] = None
    request_ip: Optional[str] = None
