from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from src.api.dependencies import (
    get_current_user,
    get_session_service,
    require_change_feed_secret,
)
from src.core.errors import BadRequestError
from src.models.crm import CurrentUser
from src.schemas.session import LoginRequest, SessionUser
from src.services.session_service import SessionService
from src.services.session_state import ChangeEvent
from src.shared.response import ResponseEnvelope, build_meta

router = APIRouter(prefix="/session", tags=["session"])


@router.post("/login")
def login(
    request: LoginRequest,
    service: SessionService = Depends(get_session_service),
) -> ResponseEnvelope[SessionUser]:
    data = service.login(request.email)
    return ResponseEnvelope(data=data, meta=build_meta("advisors"))


@router.post("/logout")
def logout(
    user: CurrentUser = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
) -> ResponseEnvelope[Dict[str, bool]]:
    closed = service.logout(user.email)
    return ResponseEnvelope(data={"closed": closed}, meta=build_meta("session"))


@router.get("/me")
def current_session_user(
    user: CurrentUser = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
) -> ResponseEnvelope[SessionUser]:
    return ResponseEnvelope(data=service.to_session_user(user), meta=build_meta("advisors"))


@router.post("/reload")
def reload_session(
    user: CurrentUser = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
) -> ResponseEnvelope[Dict[str, int]]:
    state = service.reload(user)
    counts = {table: len(records) for table, records in state.collections.items()}
    return ResponseEnvelope(data=counts, meta=build_meta("advisors,leads,sales,monthly_goals,appointments,lots"))


@router.post("/changes", dependencies=[Depends(require_change_feed_secret)])
def apply_change_event(
    payload: Dict[str, Any],
    service: SessionService = Depends(get_session_service),
) -> ResponseEnvelope[Dict[str, int]]:
    try:
        event = ChangeEvent.from_payload(payload)
    except ValueError as exc:
        raise BadRequestError(str(exc)) from exc
    applied = service.apply_change(event)
    return ResponseEnvelope(data={"sessions": applied}, meta=build_meta(event.table, "now"))
