"""
Typed records for the approval workflow: actors, pending actions and gate results.
Pending actions are stored with camelCase keys.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .config import ADMIN_ROLE, EMPLOYEE_ROLE, MODULES

ACTION_TYPES = ("create", "update", "delete")
ROLES = (ADMIN_ROLE, EMPLOYEE_ROLE)

PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"
STATUSES = (PENDING, APPROVED, REJECTED)
DECISIONS = (APPROVED, REJECTED)


def new_id() -> str:
    return uuid.uuid4().hex


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def validate_mutation(action_type: str, module: str):
    """Raise ValueError for an unknown mutation type or target module."""
    if action_type not in ACTION_TYPES:
        raise ValueError(f"type must be one of: {list(ACTION_TYPES)}")
    if module not in MODULES:
        raise ValueError(f"module must be one of: {list(MODULES)}")


@dataclass
class Actor:
    id: str
    name: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "name": self.name, "role": self.role}


@dataclass
class PendingAction:
    id: str
    type: str  # create, update, delete
    module: str
    data: Dict[str, Any]
    requested_by: str
    requested_by_name: str
    requested_at: str
    status: str = PENDING  # pending, approved, rejected
    original_data: Optional[Dict[str, Any]] = None
    admin_notes: Optional[str] = None
    resolved_by: Optional[str] = None
    resolved_at: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status != PENDING

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the stored camelCase form."""
        data = {
            "id": self.id,
            "type": self.type,
            "module": self.module,
            "data": self.data,
            "requestedBy": self.requested_by,
            "requestedByName": self.requested_by_name,
            "requestedAt": self.requested_at,
            "status": self.status,
        }
        if self.original_data is not None:
            data["originalData"] = self.original_data
        if self.admin_notes is not None:
            data["adminNotes"] = self.admin_notes
        if self.resolved_by is not None:
            data["resolvedBy"] = self.resolved_by
        if self.resolved_at is not None:
            data["resolvedAt"] = self.resolved_at
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PendingAction':
        """Create from the stored camelCase form."""
        return cls(
            id=str(data["id"]),
            type=data["type"],
            module=data["module"],
            data=data.get("data") or {},
            requested_by=data.get("requestedBy", ""),
            requested_by_name=data.get("requestedByName", ""),
            requested_at=data.get("requestedAt", ""),
            status=data.get("status", PENDING),
            original_data=data.get("originalData"),
            admin_notes=data.get("adminNotes"),
            resolved_by=data.get("resolvedBy"),
            resolved_at=data.get("resolvedAt"),
        )


@dataclass
class GateResult:
    """Outcome of a proposal: either applied to the store or queued for approval."""
    applied: bool
    record: Optional[Dict[str, Any]] = None
    pending_action: Optional[PendingAction] = field(default=None)

    def to_dict(self) -> Dict[str, Any]:
        if self.applied:
            return {"applied": True, "record": self.record}
        return {"applied": False, "pendingAction": self.pending_action.to_dict()}
