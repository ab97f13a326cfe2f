"""Activity logging service for audit trail."""
import logging
from typing import Any, Dict, Optional
from datetime import datetime

logger = logging.getLogger(__name__)


class ActivityLogger:
    """
    Writes audit entries for security-sensitive recovery actions.

    Entries go to the "src.services.activity_logger" logger with the
    structured fields attached as ``extra`` so log shippers can index them.
    """

    def __init__(self, audit_logger: Optional[logging.Logger] = None):
        self._logger = audit_logger or logger

    def log(
        self,
        action: str,
        user_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Log an activity.

        Args:
            action: Action identifier (e.g., "recovery_email_sent")
            user_id: Optional user ID associated with the action
            metadata: Optional additional data to log

        Returns:
            The entry that was logged
        """
        entry = {
            "timestamp": datetime.utcnow().isoformat(),
            "action": action,
            "user_id": str(user_id) if user_id is not None else None,
            "metadata": metadata or {},
        }

        self._logger.info(f"Activity: {action}", extra={"activity": entry})
        return entry

    def log_security_event(
        self,
        event_type: str,
        user_id: Optional[str] = None,
        ip_address: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Log a security-related event.

        Args:
            event_type: Type of security event
            user_id: User ID if applicable
            ip_address: IP address of the request
            details: Additional event details
        """
        metadata = {
            "ip": ip_address,
            "event_type": event_type,
            **(details or {})
        }

        return self.log(
            action=f"security.{event_type}",
            user_id=user_id,
            metadata=metadata
        )
