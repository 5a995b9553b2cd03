from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_appointments_service, get_current_user
from src.models.crm import CurrentUser
from src.schemas.appointments import Appointment, AppointmentCreateRequest
from src.services.appointments_service import AppointmentsService
from src.shared.response import ResponseEnvelope, build_meta

router = APIRouter(prefix="/appointments", tags=["appointments"])


@router.get("")
def list_appointments(
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    month: Optional[int] = Query(default=None, ge=1, le=12),
    asesor_id: Optional[str] = Query(default=None, alias="asesorId"),
    user: CurrentUser = Depends(get_current_user),
    service: AppointmentsService = Depends(get_appointments_service),
) -> ResponseEnvelope[List[Appointment]]:
    today = date.today()
    year = year or today.year
    month = month or today.month
    data = service.list_month(user, year, month, asesor_id)
    return ResponseEnvelope(data=data, meta=build_meta("appointments", f"{year}-{month:02d}"))


@router.post("", status_code=201)
def create_appointment(
    request: AppointmentCreateRequest,
    user: CurrentUser = Depends(get_current_user),
    service: AppointmentsService = Depends(get_appointments_service),
) -> ResponseEnvelope[Appointment]:
    data = service.create_appointment(user, request)
    return ResponseEnvelope(data=data, meta=build_meta("appointments"))


@router.delete("/{appointment_id}")
def delete_appointment(
    appointment_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: AppointmentsService = Depends(get_appointments_service),
) -> ResponseEnvelope[Dict[str, bool]]:
    service.delete_appointment(user, appointment_id)
    return ResponseEnvelope(data={"deleted": True}, meta=build_meta("appointments"))
