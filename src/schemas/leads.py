from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import ConfigDict, Field

from src.models.enums import LeadStage
from src.schemas.sales import Sale
from src.shared.base import BaseSchema


class Lead(BaseSchema):
    id: str
    nombre_completo: str
    telefono: str
    correo: str
    fecha_prospeccion: date
    lugar_prospeccion: str
    interes: str
    observaciones: str
    estatus: LeadStage
    ciudad_origen: str
    asesor_id: str
    motivo_descarte: Optional[str] = None
    interacciones: int
    created_by_email: str


class LeadCreateRequest(BaseSchema):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    nombre_completo: str = Field(min_length=1)
    telefono: str = ""
    correo: str = ""
    fecha_prospeccion: date
    lugar_prospeccion: str = ""
    interes: str = ""
    observaciones: str = ""
    estatus: LeadStage = LeadStage.NOT_CONTACTED
    ciudad_origen: str = ""
    asesor_id: str = ""
    motivo_descarte: Optional[str] = None


class LeadBulkCreateRequest(BaseSchema):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    leads: List[LeadCreateRequest] = Field(min_length=1, max_length=1000)


class LeadUpdateRequest(BaseSchema):
    """Edits every field except the pipeline stage, which only moves through a transition."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    nombre_completo: Optional[str] = Field(default=None, min_length=1)
    telefono: Optional[str] = None
    correo: Optional[str] = None
    fecha_prospeccion: Optional[date] = None
    lugar_prospeccion: Optional[str] = None
    interes: Optional[str] = None
    observaciones: Optional[str] = None
    ciudad_origen: Optional[str] = None
    asesor_id: Optional[str] = None


class LeadStageChangeRequest(BaseSchema):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    estatus: LeadStage
    motivo_descarte: Optional[str] = None


class LeadStageChangeResult(BaseSchema):
    lead: Lead
    changed: bool
    created_sale: Optional[Sale] = None
    sale_creation_error: Optional[str] = None


class KanbanColumn(BaseSchema):
    stage: LeadStage
    leads: List[Lead]
