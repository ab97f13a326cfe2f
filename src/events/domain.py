"""Domain event primitives and dispatcher."""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class DomainEvent:
    """Base domain event."""

    name: str = ""
    occurred_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class EventResult:
    """Result of handling an event."""

    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    error_type: Optional[str] = None

    @classmethod
    def success_result(cls, data: Optional[Dict[str, Any]] = None) -> "EventResult":
        return cls(success=True, data=data)

    @classmethod
    def error_result(
        cls, error: Optional[str], error_type: Optional[str] = None
    ) -> "EventResult":
        return cls(success=False, error=error, error_type=error_type)


class IEventHandler(ABC):
    """Interface for event handlers."""

    @abstractmethod
    def can_handle(self, event: DomainEvent) -> bool:
        """Check if this handler can handle the event."""

    @abstractmethod
    def handle(self, event: DomainEvent) -> EventResult:
        """Handle the event."""


class DomainEventDispatcher:
    """
    Routes emitted events to registered handlers.

    Handlers run synchronously in registration order. A handler that raises
    is logged and reported as a failed result; the remaining handlers still
    run and the exception never reaches the emitter.
    """

    def __init__(self):
        self._handlers: List[IEventHandler] = []

    def register(self, handler: IEventHandler) -> None:
        """Register a handler."""
        self._handlers.append(handler)

    def emit(self, event: DomainEvent) -> EventResult:
        """
        Emit event to every handler that accepts it.

        Args:
            event: The event to dispatch

        Returns:
            Last handler result, a failure if any handler failed, or a
            success with no data when nobody handled the event
        """
        results: List[EventResult] = []

        for handler in self._handlers:
            if not handler.can_handle(event):
                continue
            try:
                results.append(handler.handle(event))
            except Exception as e:
                logger.exception(
                    f"Handler {handler.__class__.__name__} failed for {event.name}"
                )
                results.append(EventResult.error_result(str(e), "handler_exception"))

        if not results:
            logger.debug(f"No handler registered for event {event.name}")
            return EventResult.success_result()

        for result in results:
            if not result.success:
                return result
        return results[-1]
