"""
Mutation gate - routes proposed record mutations by actor role.
Admins write straight to the record store; everyone else goes through the pending-action ledger.
"""

import copy
from typing import Any, Dict, List, Optional

from util.logging import logger

from .errors import NotFoundError
from .ledger import PendingActionLedger
from .schema import Actor, GateResult, new_id, utc_now, validate_mutation


class MutationGate:
    """Single entry point for record mutations regardless of module."""

    def __init__(self, store, ledger: PendingActionLedger = None):
        self.store = store
        self.ledger = ledger or PendingActionLedger(store)
        self.ledger.applier = self.apply_direct

    def propose(self, actor: Actor, action_type: str, module: str, data: Dict[str, Any],
                original_data: Optional[Dict[str, Any]] = None) -> GateResult:
        """Apply the mutation for admins, queue it for everyone else."""
        validate_mutation(action_type, module)

        if actor.is_admin:
            record = self.apply_direct(action_type, module, data, original_data)
            logger.log_gate_decision(actor.id, actor.role, action_type, module, applied=True)
            return GateResult(applied=True, record=record)

        if action_type in ("update", "delete") and original_data is None:
            original_data = self._find(self.store.get(module), module, self._record_id(data))

        pending = self.ledger.enqueue(action_type, module, data, original_data, actor)
        logger.log_gate_decision(actor.id, actor.role, action_type, module, applied=False)
        return GateResult(applied=False, pending_action=pending)

    def apply_direct(self, action_type: str, module: str, data: Dict[str, Any],
                     original_data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Mutate the record store immediately and return the affected record.

        Raises:
            NotFoundError: update or delete of a record id that is not stored.
        """
        validate_mutation(action_type, module)
        records = self.store.get(module)

        if action_type == "create":
            record = copy.deepcopy(data)
            record["id"] = self._fresh_id(records)
            record["createdAt"] = utc_now()
            records.append(record)
            self.store.put(module, records)
            logger.log_record_operation("create", module, record["id"])
            return record

        record_id = self._record_id(data)
        existing = self._find(records, module, record_id)

        if action_type == "update":
            updated = {**existing, **copy.deepcopy(data), "id": existing["id"]}
            records = [updated if str(r.get("id")) == record_id else r for r in records]
            self.store.put(module, records)
            logger.log_record_operation("update", module, record_id)
            return updated

        records = [r for r in records if str(r.get("id")) != record_id]
        self.store.put(module, records)
        logger.log_record_operation("delete", module, record_id)
        return existing

    @staticmethod
    def _record_id(data: Dict[str, Any]) -> str:
        record_id = data.get("id") if data else None
        if record_id is None or str(record_id) == "":
            raise ValueError("data.id is required for update and delete")
        return str(record_id)

    @staticmethod
    def _find(records: List[Dict[str, Any]], module: str, record_id: str) -> Dict[str, Any]:
        for record in records:
            if str(record.get("id")) == record_id:
                return record
        raise NotFoundError("Record", record_id, module)

    @staticmethod
    def _fresh_id(records: List[Dict[str, Any]]) -> str:
        taken = {str(r.get("id")) for r in records}
        record_id = new_id()
        while record_id in taken:
            record_id = new_id()
        return record_id
