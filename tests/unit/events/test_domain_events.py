"""Tests for the domain event dispatcher."""
import pytest
from unittest.mock import Mock


def make_handler(result=None, accepts=True, raises=None):
    handler = Mock()
    handler.can_handle.return_value = accepts
    if raises:
        handler.handle.side_effect = raises
    else:
        handler.handle.return_value = result
    return handler


class TestDomainEventDispatcher:
    """Test suite for DomainEventDispatcher."""

    @pytest.fixture
    def dispatcher(self):
        from src.events.domain import DomainEventDispatcher

        return DomainEventDispatcher()

    @pytest.fixture
    def event(self):
        from src.events.recovery_events import RecoveryTokenCreatedEvent

        return RecoveryTokenCreatedEvent(username="someone", email="someone@example.com")

    def test_event_name(self, event):
        assert event.name == "security.recovery_token.created"
        assert event.occurred_at is not None

    def test_no_handlers_is_success(self, dispatcher, event):
        result = dispatcher.emit(event)

        assert result.success is True
        assert result.data is None

    def test_skips_handlers_that_do_not_accept(self, dispatcher, event):
        handler = make_handler(accepts=False)
        dispatcher.register(handler)

        dispatcher.emit(event)

        handler.handle.assert_not_called()

    def test_returns_handler_result(self, dispatcher, event):
        from src.events.domain import EventResult

        dispatcher.register(make_handler(EventResult.success_result({"sent": True})))

        assert dispatcher.emit(event).data == {"sent": True}

    def test_failure_wins_over_success(self, dispatcher, event):
        from src.events.domain import EventResult

        dispatcher.register(make_handler(EventResult.error_result("down", "email_failed")))
        dispatcher.register(make_handler(EventResult.success_result()))

        result = dispatcher.emit(event)

        assert result.success is False
        assert result.error_type == "email_failed"

    def test_handler_exception_is_contained(self, dispatcher, event):
        from src.events.domain import EventResult

        later = make_handler(EventResult.success_result())
        dispatcher.register(make_handler(raises=RuntimeError("boom")))
        dispatcher.register(later)

        result = dispatcher.emit(event)

        assert result.success is False
        assert result.error == "boom"
        assert result.error_type == "handler_exception"
        later.handle.assert_called_once_with(event)
