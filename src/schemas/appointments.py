from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import ConfigDict

from src.models.enums import AppointmentType
from src.shared.base import BaseSchema


class Appointment(BaseSchema):
    id: str
    type: AppointmentType
    date: datetime
    asesor_id: str
    notes: Optional[str] = None
    created_by_email: str


class AppointmentCreateRequest(BaseSchema):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    type: AppointmentType = AppointmentType.DEVELOPMENT_VISIT
    date: datetime
    asesor_id: str = ""
    notes: Optional[str] = None
