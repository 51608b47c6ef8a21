"""
HTTP API for the brokerage CRM.
Every record mutation goes through the mutation gate; admins resolve pending actions.
"""

from typing import Any, Dict, Optional

from fastapi import Body, Depends, FastAPI, Header, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError

from util.logging import logger

from ..core.config import MODULES, VERSION, debug_enabled, get_record_store, seed_demo_users_enabled
from ..core.csv_io import export_records, import_records
from ..core.errors import InvalidStateError, NotFoundError
from ..core.gate import MutationGate
from ..core.schema import APPROVED, REJECTED, Actor, GateResult, PendingAction
from ..core.session import SessionProvider, UserDirectory
from ..core.validation import validate_record
from .schemas import (
    ActorResponse,
    DecisionRequest,
    GateResultResponse,
    HealthResponse,
    ImportResponse,
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    PendingActionListResponse,
    PendingActionResponse,
    RecordListResponse,
)


def _check_module(module: str):
    if module not in MODULES:
        raise ValueError(f"module must be one of: {list(MODULES)}")


def _pending_response(action: PendingAction) -> PendingActionResponse:
    return PendingActionResponse(**action.to_dict())


def _gate_response(result: GateResult) -> GateResultResponse:
    if result.applied:
        return GateResultResponse(applied=True, record=result.record)
    return GateResultResponse(applied=False, pendingAction=_pending_response(result.pending_action))


def create_app(store=None) -> FastAPI:
    """Build the API around a record store (the configured one by default)."""
    store = store if store is not None else get_record_store()
    directory = UserDirectory(store)
    if seed_demo_users_enabled():
        directory.seed_demo_users()

    app = FastAPI(
        title="Brokerage CRM API",
        version=VERSION,
        description="Inventory and project master records with admin approval of employee edits",
        docs_url="/docs" if debug_enabled() else None,
        redoc_url="/redoc" if debug_enabled() else None
    )

    app.state.store = store
    app.state.sessions = SessionProvider(store, directory)
    app.state.gate = MutationGate(store)

    # Allow the browser front-end
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://127.0.0.1:3000", "http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"error_type": "NOT_FOUND", "message": str(exc)})

    @app.exception_handler(InvalidStateError)
    async def invalid_state_handler(request: Request, exc: InvalidStateError):
        return JSONResponse(status_code=409, content={"error_type": "INVALID_STATE", "message": str(exc)})

    @app.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError):
        errors = exc.errors(include_url=False, include_context=False, include_input=False)
        return JSONResponse(status_code=422, content={"error_type": "VALIDATION_ERROR", "message": "Invalid record", "errors": errors})

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return JSONResponse(status_code=400, content={"error_type": "BAD_REQUEST", "message": str(exc)})

    def current_actor(x_session_token: Optional[str] = Header(None)) -> Actor:
        actor = app.state.sessions.current_actor(x_session_token) if x_session_token else None
        if actor is None:
            raise HTTPException(status_code=401, detail="Login required")
        return actor

    def admin_actor(actor: Actor = Depends(current_actor)) -> Actor:
        if not actor.is_admin:
            raise HTTPException(status_code=403, detail="Admin role required")
        return actor

    @app.get("/health", response_model=HealthResponse)
    def health_check_endpoint():
        """Check system health."""
        store_health = app.state.store.health_check()
        return HealthResponse(
            status="healthy" if store_health else "unhealthy",
            version=VERSION,
            store=app.state.store.provider if store_health else "unavailable",
            store_health=store_health,
            pending_count=len(app.state.gate.ledger.list_pending())
        )

    @app.post("/auth/login", response_model=LoginResponse)
    def login_endpoint(req: LoginRequest):
        token = app.state.sessions.login(req.usernameOrEmail, req.password)
        if not token:
            raise HTTPException(status_code=401, detail="Invalid username/email or password")
        actor = app.state.sessions.current_actor(token)
        return LoginResponse(token=token, actor=ActorResponse(**actor.to_dict()))

    @app.post("/auth/logout", response_model=LogoutResponse)
    def logout_endpoint(x_session_token: Optional[str] = Header(None)):
        return LogoutResponse(success=bool(x_session_token) and app.state.sessions.logout(x_session_token))

    @app.get("/auth/me", response_model=ActorResponse)
    def me_endpoint(actor: Actor = Depends(current_actor)):
        return ActorResponse(**actor.to_dict())

    @app.get("/records/{module}", response_model=RecordListResponse)
    def list_records_endpoint(module: str, record_type: Optional[str] = None,
                              actor: Actor = Depends(current_actor)):
        _check_module(module)
        records = app.state.store.get(module)
        if record_type:
            records = [r for r in records if r.get("type") == record_type]
        return RecordListResponse(module=module, records=records)

    @app.get("/records/{module}/export")
    def export_records_endpoint(module: str, record_type: Optional[str] = None,
                                actor: Actor = Depends(current_actor)):
        _check_module(module)
        records = app.state.store.get(module)
        if record_type:
            records = [r for r in records if r.get("type") == record_type]
        filename = f"{record_type or module}_{module}.csv"
        return PlainTextResponse(
            export_records(records),
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'}
        )

    @app.post("/records/{module}/import", response_model=ImportResponse)
    async def import_records_endpoint(module: str, request: Request, record_type: Optional[str] = None,
                                      actor: Actor = Depends(current_actor)):
        _check_module(module)
        text = (await request.body()).decode("utf-8-sig")
        results = import_records(app.state.gate, actor, module, text, record_type)
        applied = sum(1 for r in results if r.applied)
        return ImportResponse(
            applied=applied,
            queued=len(results) - applied,
            results=[_gate_response(r) for r in results]
        )

    @app.post("/records/{module}", response_model=GateResultResponse)
    def create_record_endpoint(module: str, payload: Dict[str, Any] = Body(...),
                               actor: Actor = Depends(current_actor)):
        _check_module(module)
        data = validate_record(module, payload)
        return _gate_response(app.state.gate.propose(actor, "create", module, data))

    def _existing(module: str, record_id: str) -> Dict[str, Any]:
        for record in app.state.store.get(module):
            if str(record.get("id")) == record_id:
                return record
        raise NotFoundError("Record", record_id, module)

    @app.put("/records/{module}/{record_id}", response_model=GateResultResponse)
    def update_record_endpoint(module: str, record_id: str, payload: Dict[str, Any] = Body(...),
                               actor: Actor = Depends(current_actor)):
        _check_module(module)
        existing = _existing(module, record_id)
        cleaned = validate_record(module, {**existing, **payload})
        data = {k: cleaned[k] for k in payload if k in cleaned}
        data["id"] = record_id
        return _gate_response(app.state.gate.propose(actor, "update", module, data, existing))

    @app.delete("/records/{module}/{record_id}", response_model=GateResultResponse)
    def delete_record_endpoint(module: str, record_id: str, actor: Actor = Depends(current_actor)):
        _check_module(module)
        existing = _existing(module, record_id)
        return _gate_response(app.state.gate.propose(actor, "delete", module, existing, existing))

    @app.get("/pending", response_model=PendingActionListResponse)
    def list_pending_endpoint(module: Optional[str] = None, actor: Actor = Depends(admin_actor)):
        pending = app.state.gate.ledger.list_pending(module)
        return PendingActionListResponse(pending_actions=[_pending_response(a) for a in pending])

    # Define /pending/history BEFORE /pending/{action_id} to avoid path parameter conflict
    @app.get("/pending/history", response_model=PendingActionListResponse)
    def pending_history_endpoint(module: Optional[str] = None, status: Optional[str] = None,
                                 actor: Actor = Depends(admin_actor)):
        actions = app.state.gate.ledger.list_actions(module=module, status=status)
        return PendingActionListResponse(pending_actions=[_pending_response(a) for a in actions])

    @app.get("/pending/{action_id}", response_model=PendingActionResponse)
    def get_pending_endpoint(action_id: str, actor: Actor = Depends(current_actor)):
        action = app.state.gate.ledger.get(action_id)
        if not actor.is_admin and action.requested_by != actor.id:
            raise HTTPException(status_code=403, detail="Not your request")
        return _pending_response(action)

    @app.post("/pending/{action_id}/approve", response_model=PendingActionResponse)
    def approve_endpoint(action_id: str, decision: Optional[DecisionRequest] = None,
                         actor: Actor = Depends(admin_actor)):
        notes = decision.notes if decision else None
        return _pending_response(app.state.gate.ledger.resolve(action_id, APPROVED, notes, actor))

    @app.post("/pending/{action_id}/reject", response_model=PendingActionResponse)
    def reject_endpoint(action_id: str, decision: Optional[DecisionRequest] = None,
                        actor: Actor = Depends(admin_actor)):
        notes = decision.notes if decision else None
        return _pending_response(app.state.gate.ledger.resolve(action_id, REJECTED, notes, actor))

    logger.info(f"Brokerage CRM API initialized (store: {type(store).__name__})")
    return app


app = create_app()
