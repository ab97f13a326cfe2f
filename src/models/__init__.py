"""Domain models package."""
from src.models.user import User, NUKED_FEATURE
from src.models.user_session import UserSession
from src.models.recovery_token import RecoveryToken

__all__ = [
    # Models
    "User",
    "UserSession",
    "RecoveryToken",
    # Feature sentinels
    "NUKED_FEATURE",
]
