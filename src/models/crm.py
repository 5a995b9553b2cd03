from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from src.models.enums import (
    AdvisorStatus,
    AppointmentType,
    LeadStage,
    LotStatus,
    Role,
    SaleStage,
    SaleStatus,
)


class AdvisorRecord(BaseModel):
    id: str
    nombre_completo: str
    email: str
    fecha_ingreso: date
    fecha_nacimiento: Optional[date] = None
    estatus: AdvisorStatus = AdvisorStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.estatus == AdvisorStatus.ACTIVE


class LeadRecord(BaseModel):
    id: str
    nombre_completo: str
    telefono: str = ""
    correo: str = ""
    fecha_prospeccion: date
    lugar_prospeccion: str = ""
    interes: str = ""
    observaciones: str = ""
    estatus: LeadStage = LeadStage.NOT_CONTACTED
    ciudad_origen: str = ""
    asesor_id: str
    motivo_descarte: Optional[str] = None
    interacciones: int = Field(default=1, ge=1)
    created_by_email: str = ""


class SaleRecord(BaseModel):
    id: str
    nombre_lote: str
    nombre_cliente: str
    monto: Decimal = Field(default=Decimal("0"), ge=0)
    fecha_inicio_proceso: date
    etapa_proceso: SaleStage = SaleStage.RESERVED
    fecha_cierre: Optional[date] = None
    asesor_principal_id: str
    asesor_secundario_id: Optional[str] = None
    estatus_proceso: SaleStatus = SaleStatus.IN_PROGRESS
    observaciones: Optional[str] = None
    created_by_email: str = ""

    @property
    def reference_date(self) -> date:
        """Close date when known, otherwise the process start."""
        return self.fecha_cierre or self.fecha_inicio_proceso

    def involves(self, advisor_id: str) -> bool:
        return advisor_id in (self.asesor_principal_id, self.asesor_secundario_id)


class MonthlyGoalRecord(BaseModel):
    id: str
    asesor_id: str
    year: int
    month: int = Field(ge=1, le=12)
    goal_amount: Decimal = Decimal("0")


class AppointmentRecord(BaseModel):
    id: str
    type: AppointmentType
    date: datetime
    asesor_id: str
    notes: Optional[str] = None
    created_by_email: str = ""


class LotRecord(BaseModel):
    id: str
    nombre_lote: str
    precio: Decimal = Field(default=Decimal("0"), ge=0)
    estatus: LotStatus = LotStatus.AVAILABLE


class CurrentUser(BaseModel):
    id: str
    nombre_completo: str
    email: str
    role: Role
    advisor: Optional[AdvisorRecord] = None

    @property
    def is_leader(self) -> bool:
        return self.role == Role.LEADER
