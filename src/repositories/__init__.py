"""Repository implementations."""
from src.repositories.base import BaseRepository
from src.repositories.user_repository import UserRepository
from src.repositories.session_repository import SessionRepository
from src.repositories.recovery_token_repository import RecoveryTokenRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "SessionRepository",
    "RecoveryTokenRepository",
]
