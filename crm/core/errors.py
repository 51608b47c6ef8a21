"""Domain errors raised by the approval workflow."""


class CRMError(Exception):
    """Base class for domain errors."""


class NotFoundError(CRMError):
    """A referenced record or pending action does not exist."""

    def __init__(self, kind: str, identifier: str, module: str = None):
        self.kind = kind
        self.identifier = identifier
        self.module = module
        where = f" in {module}" if module else ""
        super().__init__(f"{kind} '{identifier}' not found{where}")


class InvalidStateError(CRMError):
    """Attempted transition out of a terminal pending-action state."""

    def __init__(self, action_id: str, status: str):
        self.action_id = action_id
        self.status = status
        super().__init__(f"Pending action '{action_id}' is already {status}")
