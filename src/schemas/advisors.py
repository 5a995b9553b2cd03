from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import ConfigDict, Field

from src.models.enums import AdvisorStatus
from src.shared.base import BaseSchema


class Advisor(BaseSchema):
    id: str
    nombre_completo: str
    email: str
    fecha_ingreso: date
    fecha_nacimiento: Optional[date] = None
    estatus: AdvisorStatus


class AdvisorCreateRequest(BaseSchema):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    nombre_completo: str = Field(min_length=1)
    email: str = Field(min_length=3)
    fecha_ingreso: date
    fecha_nacimiento: Optional[date] = None
    estatus: AdvisorStatus = AdvisorStatus.ACTIVE


class AdvisorUpdateRequest(BaseSchema):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    nombre_completo: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = Field(default=None, min_length=3)
    fecha_ingreso: Optional[date] = None
    fecha_nacimiento: Optional[date] = None
    estatus: Optional[AdvisorStatus] = None
