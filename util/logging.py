"""
Structured audit logging for the brokerage CRM.
Record store writes, approval workflow transitions and login attempts all go through here.
"""

import logging
import os
from typing import Any, Dict

SENSITIVE_FIELDS = ['password', 'token', 'secret']


class StructuredLogger:
    """Structured logger for record, approval and session operations."""

    def __init__(self, name: str = "brokerage_crm"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        self.logger.info(message)

    def log_record_operation(self, operation: str, module: str, record_id: str = None,
                             status: str = "success", details: Dict[str, Any] = None):
        """Log a record store operation against a module collection."""
        log_details = {"module": module}
        if record_id is not None:
            log_details["record_id"] = record_id
        if details:
            log_details.update(details)

        self.log_operation(f"record.{operation}", status, log_details)

    def log_pending_action(self, action_id: str, action_type: str, module: str, requested_by: str,
                           data: Dict[str, Any] = None):
        """Log creation of a pending action; the proposed payload is sanitized."""
        log_details = {
            "action_id": action_id,
            "type": action_type,
            "module": module,
            "requested_by": requested_by
        }
        if data:
            log_details["payload"] = sanitize_payload(data)
        self.log_operation("approval.enqueued", "pending", log_details)

    def log_resolution(self, action_id: str, decision: str, resolved_by: str = None, notes: str = ""):
        """Log an approve/reject decision on a pending action."""
        log_details = {
            "action_id": action_id,
            "decision": decision,
            "resolved_by": resolved_by or "unknown",
            "notes": notes[:100] if notes else ""
        }
        self.log_operation("approval.resolved", decision, log_details)

    def log_gate_decision(self, actor_id: str, role: str, action_type: str, module: str, applied: bool):
        """Log how the mutation gate routed a proposal."""
        log_details = {
            "actor_id": actor_id,
            "role": role,
            "type": action_type,
            "module": module
        }
        self.log_operation("gate.propose", "applied" if applied else "queued", log_details)

    def log_auth_event(self, login: str, success: bool, reason: str = ""):
        """Log a login attempt. Credentials are never logged."""
        log_details = {"login": login}
        if reason:
            log_details["reason"] = reason
        self.log_operation("auth.login", "success" if success else "failure", log_details)

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)


# Global logger instance
logger = StructuredLogger()


def sanitize_payload(payload: Any) -> Any:
    """Redact sensitive fields and truncate long strings before logging."""
    if isinstance(payload, dict):
        return {
            k: "[REDACTED]" if k in SENSITIVE_FIELDS else sanitize_payload(v)
            for k, v in payload.items()
        }
    elif isinstance(payload, str):
        # Truncate long strings
        return payload[:100] + "..." if len(payload) > 100 else payload
    elif isinstance(payload, list):
        return [sanitize_payload(item) for item in payload]
    else:
        return payload
