"""
Pending-action ledger - queue of proposed mutations awaiting an admin decision.
Entries are stored in insertion order and never hard-deleted.
"""

import copy
from typing import Any, Callable, Dict, List, Optional

from util.logging import logger

from .config import PENDING_ACTIONS_COLLECTION
from .errors import InvalidStateError, NotFoundError
from .schema import (
    APPROVED,
    DECISIONS,
    PENDING,
    Actor,
    PendingAction,
    new_id,
    utc_now,
    validate_mutation,
)

# applier(type, module, data, original_data) -> record
Applier = Callable[[str, str, Dict[str, Any], Optional[Dict[str, Any]]], Dict[str, Any]]


class PendingActionLedger:
    """Persists pending actions through the record store.

    Approval replays the queued mutation through ``applier`` before the
    decision is written, so a failed replay leaves the entry pending. If the
    replay succeeds but writing the decision fails, the change is already in
    the store while the entry is still pending; approving it again applies
    the change a second time.
    """

    def __init__(self, store, applier: Optional[Applier] = None):
        self.store = store
        self.applier = applier

    def _load(self) -> List[PendingAction]:
        return [PendingAction.from_dict(item) for item in self.store.get(PENDING_ACTIONS_COLLECTION)]

    def _save(self, actions: List[PendingAction]) -> None:
        self.store.put(PENDING_ACTIONS_COLLECTION, [a.to_dict() for a in actions])

    def enqueue(self, action_type: str, module: str, data: Dict[str, Any],
                original_data: Optional[Dict[str, Any]] = None, actor: Actor = None) -> PendingAction:
        """Queue a proposed mutation and return the stored entry."""
        validate_mutation(action_type, module)
        if actor is None:
            raise ValueError("actor is required to enqueue a pending action")
        if action_type in ("update", "delete") and original_data is None:
            raise ValueError(f"originalData is required for {action_type} actions")

        action = PendingAction(
            id=new_id(),
            type=action_type,
            module=module,
            data=copy.deepcopy(data),
            original_data=copy.deepcopy(original_data) if action_type != "create" else None,
            requested_by=actor.id,
            requested_by_name=actor.name,
            requested_at=utc_now(),
            status=PENDING,
        )

        actions = self._load()
        actions.append(action)
        self._save(actions)

        logger.log_pending_action(action.id, action_type, module, actor.id, action.data)
        return action

    def list_pending(self, module: str = None) -> List[PendingAction]:
        """Pending entries in insertion order, optionally for one module."""
        return self.list_actions(module=module, status=PENDING)

    def list_actions(self, module: str = None, status: str = None) -> List[PendingAction]:
        """All entries (audit history), optionally filtered by module and status."""
        return [
            a for a in self._load()
            if (module is None or a.module == module) and (status is None or a.status == status)
        ]

    def get(self, action_id: str) -> PendingAction:
        for action in self._load():
            if action.id == action_id:
                return action
        raise NotFoundError("Pending action", action_id)

    def resolve(self, action_id: str, decision: str, notes: str = None,
                resolved_by: Actor = None) -> PendingAction:
        """Approve or reject a pending entry.

        Raises:
            NotFoundError: no entry with that id, or an approved replay targets a missing record.
            InvalidStateError: the entry is already approved or rejected.
            ValueError: decision is not 'approved' or 'rejected'.
            RuntimeError: approval with no applier wired to the ledger.
        """
        if decision not in DECISIONS:
            raise ValueError(f"decision must be one of: {list(DECISIONS)}")

        actions = self._load()
        action = next((a for a in actions if a.id == action_id), None)
        if action is None:
            raise NotFoundError("Pending action", action_id)
        if action.is_terminal:
            raise InvalidStateError(action_id, action.status)

        if decision == APPROVED:
            if self.applier is None:
                raise RuntimeError("Cannot approve without an applier; build the ledger through MutationGate")
            # Replay first; on failure the entry is never written as resolved.
            self.applier(action.type, action.module, action.data, action.original_data)

        action.status = decision
        action.admin_notes = notes
        action.resolved_by = resolved_by.id if resolved_by else None
        action.resolved_at = utc_now()
        self._save(actions)

        logger.log_resolution(action_id, decision, action.resolved_by, notes or "")
        return action
