"""Event handlers for domain events."""
from src.handlers.recovery_handler import RecoveryEmailHandler

__all__ = [
    "RecoveryEmailHandler",
]
