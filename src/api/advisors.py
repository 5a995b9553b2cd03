from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_advisors_service, get_current_user, require_leader
from src.models.crm import CurrentUser
from src.schemas.advisors import Advisor, AdvisorCreateRequest, AdvisorUpdateRequest
from src.services.advisors_service import AdvisorsService
from src.shared.response import ResponseEnvelope, build_meta

router = APIRouter(prefix="/advisors", tags=["advisors"])


@router.get("")
def list_advisors(
    active_only: bool = Query(default=False, alias="activeOnly"),
    _: CurrentUser = Depends(get_current_user),
    service: AdvisorsService = Depends(get_advisors_service),
) -> ResponseEnvelope[List[Advisor]]:
    data = service.list_advisors(active_only=active_only)
    return ResponseEnvelope(data=data, meta=build_meta("advisors"))


@router.get("/{advisor_id}")
def get_advisor(
    advisor_id: str,
    _: CurrentUser = Depends(get_current_user),
    service: AdvisorsService = Depends(get_advisors_service),
) -> ResponseEnvelope[Advisor]:
    return ResponseEnvelope(data=service.get_advisor(advisor_id), meta=build_meta("advisors"))


@router.post("", status_code=201)
def create_advisor(
    request: AdvisorCreateRequest,
    _: CurrentUser = Depends(require_leader),
    service: AdvisorsService = Depends(get_advisors_service),
) -> ResponseEnvelope[Advisor]:
    return ResponseEnvelope(data=service.create_advisor(request), meta=build_meta("advisors"))


@router.patch("/{advisor_id}")
def update_advisor(
    advisor_id: str,
    request: AdvisorUpdateRequest,
    _: CurrentUser = Depends(require_leader),
    service: AdvisorsService = Depends(get_advisors_service),
) -> ResponseEnvelope[Advisor]:
    data = service.update_advisor(advisor_id, request)
    return ResponseEnvelope(data=data, meta=build_meta("advisors"))
