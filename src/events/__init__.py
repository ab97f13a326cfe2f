"""Domain events."""
from src.events.domain import DomainEvent, EventResult, IEventHandler, DomainEventDispatcher
from src.events.recovery_events import RecoveryTokenCreatedEvent

__all__ = [
    "DomainEvent",
    "EventResult",
    "IEventHandler",
    "DomainEventDispatcher",
    "RecoveryTokenCreatedEvent",
]
