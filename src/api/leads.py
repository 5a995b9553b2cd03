from __future__ import annotations

from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_current_user, get_leads_service
from src.models.crm import CurrentUser
from src.models.enums import LeadStage
from src.schemas.leads import (
    KanbanColumn,
    Lead,
    LeadBulkCreateRequest,
    LeadCreateRequest,
    LeadStageChangeRequest,
    LeadStageChangeResult,
    LeadUpdateRequest,
)
from src.services.leads_service import LeadsService
from src.shared.response import ResponseEnvelope, build_meta

router = APIRouter(prefix="/leads", tags=["leads"])


@router.get("")
def list_leads(
    asesor_id: Optional[str] = Query(default=None, alias="asesorId"),
    estatus: Optional[LeadStage] = Query(default=None),
    user: CurrentUser = Depends(get_current_user),
    service: LeadsService = Depends(get_leads_service),
) -> ResponseEnvelope[List[Lead]]:
    data = service.list_leads(user, asesor_id=asesor_id, estatus=estatus)
    return ResponseEnvelope(data=data, meta=build_meta("leads"))


@router.get("/kanban")
def leads_kanban(
    asesor_id: Optional[str] = Query(default=None, alias="asesorId"),
    user: CurrentUser = Depends(get_current_user),
    service: LeadsService = Depends(get_leads_service),
) -> ResponseEnvelope[List[KanbanColumn]]:
    return ResponseEnvelope(data=service.get_kanban(user, asesor_id), meta=build_meta("leads"))


@router.get("/{lead_id}")
def get_lead(
    lead_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: LeadsService = Depends(get_leads_service),
) -> ResponseEnvelope[Lead]:
    return ResponseEnvelope(data=service.get_lead(user, lead_id), meta=build_meta("leads"))


@router.post("", status_code=201)
def create_lead(
    request: LeadCreateRequest,
    user: CurrentUser = Depends(get_current_user),
    service: LeadsService = Depends(get_leads_service),
) -> ResponseEnvelope[Lead]:
    return ResponseEnvelope(data=service.create_lead(user, request), meta=build_meta("leads"))


@router.post("/bulk", status_code=201)
def create_leads_bulk(
    request: LeadBulkCreateRequest,
    user: CurrentUser = Depends(get_current_user),
    service: LeadsService = Depends(get_leads_service),
) -> ResponseEnvelope[List[Lead]]:
    data = service.create_leads(user, request.leads)
    return ResponseEnvelope(data=data, meta=build_meta("leads"))


@router.patch("/{lead_id}")
def update_lead(
    lead_id: str,
    request: LeadUpdateRequest,
    user: CurrentUser = Depends(get_current_user),
    service: LeadsService = Depends(get_leads_service),
) -> ResponseEnvelope[Lead]:
    data = service.update_lead(user, lead_id, request)
    return ResponseEnvelope(data=data, meta=build_meta("leads"))


@router.post("/{lead_id}/stage")
def change_lead_stage(
    lead_id: str,
    request: LeadStageChangeRequest,
    user: CurrentUser = Depends(get_current_user),
    service: LeadsService = Depends(get_leads_service),
) -> ResponseEnvelope[LeadStageChangeResult]:
    data = service.change_stage(user, lead_id, request)
    return ResponseEnvelope(data=data, meta=build_meta("leads,sales"))


@router.delete("/{lead_id}")
def delete_lead(
    lead_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: LeadsService = Depends(get_leads_service),
) -> ResponseEnvelope[Dict[str, bool]]:
    service.delete_lead(user, lead_id)
    return ResponseEnvelope(data={"deleted": True}, meta=build_meta("leads"))
