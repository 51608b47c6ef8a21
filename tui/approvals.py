"""
Operations dashboard - pending action listing and approve/reject triggers.
"""

from typing import Any, Dict, List, Optional, Tuple

from crm.core.errors import CRMError
from crm.core.gate import MutationGate
from crm.core.schema import APPROVED, REJECTED, Actor, PendingAction
from util.logging import logger

COLUMNS = ("ID", "Type", "Module", "Requested By", "Requested At", "Change")


def summarize_change(action: PendingAction, limit: int = 60) -> str:
    """One-line description of what a pending action would do."""
    if action.type == "update":
        before = action.original_data or {}
        changes = [
            f"{key}: {before.get(key, '')} -> {value}"
            for key, value in action.data.items()
            if key != "id" and before.get(key) != value
        ]
        summary = ", ".join(changes) or "no field changes"
    else:
        label = action.data.get("name") or action.data.get("landParcelName") or action.data.get("id", "")
        summary = f"{action.type} {label}".strip()

    return summary if len(summary) <= limit else summary[:limit - 3] + "..."


def pending_rows(gate: MutationGate, module: str = None) -> List[Tuple[str, ...]]:
    """Rows for the approvals table, oldest request first."""
    return [
        (
            action.id,
            action.type,
            action.module,
            action.requested_by_name or action.requested_by,
            action.requested_at[:19].replace("T", " "),
            summarize_change(action),
        )
        for action in gate.ledger.list_pending(module)
    ]


def _resolve(gate: MutationGate, action_id: str, decision: str, actor: Actor,
             notes: Optional[str]) -> Dict[str, Any]:
    try:
        action = gate.ledger.resolve(action_id, decision, notes or None, actor)
    except CRMError as e:
        logger.warning(f"Dashboard {decision} failed for {action_id}: {e}")
        return {"success": False, "action_id": action_id, "error": str(e)}

    return {
        "success": True,
        "action_id": action.id,
        "status": action.status,
        "message": f"{action.type} on {action.module} {action.status}"
    }


def approve_action(gate: MutationGate, action_id: str, actor: Actor, notes: str = None) -> Dict[str, Any]:
    """Approve a pending action and replay it against the record store."""
    return _resolve(gate, action_id, APPROVED, actor, notes)


def reject_action(gate: MutationGate, action_id: str, actor: Actor, notes: str = None) -> Dict[str, Any]:
    """Reject a pending action."""
    return _resolve(gate, action_id, REJECTED, actor, notes)
