from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import ConfigDict, Field

from src.models.enums import SaleStage, SaleStatus
from src.shared.base import BaseSchema


class Sale(BaseSchema):
    id: str
    nombre_lote: str
    nombre_cliente: str
    monto: float
    fecha_inicio_proceso: date
    etapa_proceso: SaleStage
    fecha_cierre: Optional[date] = None
    asesor_principal_id: str
    asesor_secundario_id: Optional[str] = None
    estatus_proceso: SaleStatus
    observaciones: Optional[str] = None
    created_by_email: str


class SaleCreateRequest(BaseSchema):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    nombre_lote: str = ""
    nombre_cliente: str = Field(min_length=1)
    monto: float = Field(default=0, ge=0)
    fecha_inicio_proceso: date
    etapa_proceso: SaleStage = SaleStage.RESERVED
    fecha_cierre: Optional[date] = None
    asesor_principal_id: str = ""
    asesor_secundario_id: Optional[str] = None
    observaciones: Optional[str] = None


class SaleUpdateRequest(BaseSchema):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    nombre_lote: Optional[str] = None
    nombre_cliente: Optional[str] = Field(default=None, min_length=1)
    monto: Optional[float] = Field(default=None, ge=0)
    fecha_inicio_proceso: Optional[date] = None
    etapa_proceso: Optional[SaleStage] = None
    fecha_cierre: Optional[date] = None
    asesor_principal_id: Optional[str] = None
    asesor_secundario_id: Optional[str] = None
    observaciones: Optional[str] = None


class SaleInProcess(BaseSchema):
    sale: Sale
    advisor_names: str
    days_in_process: int
    formatted_amount: str
    max_process_days: int
    is_overdue: bool
