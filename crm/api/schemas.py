"""
Request/response models for the CRM HTTP API.
"""

from pydantic import BaseModel, field_validator
from typing import Optional, List, Dict, Any


class LoginRequest(BaseModel):
    usernameOrEmail: str
    password: str

    @field_validator('usernameOrEmail')
    @classmethod
    def login_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('usernameOrEmail cannot be empty')
        return v.strip()


class ActorResponse(BaseModel):
    id: str
    name: str
    role: str


class LoginResponse(BaseModel):
    token: str
    actor: ActorResponse


class LogoutResponse(BaseModel):
    success: bool


class HealthResponse(BaseModel):
    status: str
    version: str
    store: str
    store_health: bool
    pending_count: int


class PendingActionResponse(BaseModel):
    id: str
    type: str
    module: str
    data: Dict[str, Any]
    originalData: Optional[Dict[str, Any]] = None
    requestedBy: str
    requestedByName: str
    requestedAt: str
    status: str  # pending, approved, rejected
    adminNotes: Optional[str] = None
    resolvedBy: Optional[str] = None
    resolvedAt: Optional[str] = None


class PendingActionListResponse(BaseModel):
    pending_actions: List[PendingActionResponse]


class GateResultResponse(BaseModel):
    applied: bool
    record: Optional[Dict[str, Any]] = None
    pendingAction: Optional[PendingActionResponse] = None


class ImportResponse(BaseModel):
    applied: int
    queued: int
    results: List[GateResultResponse]


class RecordListResponse(BaseModel):
    module: str
    records: List[Dict[str, Any]]


class DecisionRequest(BaseModel):
    notes: Optional[str] = None


class ErrorResponse(BaseModel):
    error_type: str
    message: str
