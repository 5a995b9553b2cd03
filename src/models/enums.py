from __future__ import annotations

import enum
from typing import Optional


class LeadStage(str, enum.Enum):
    NOT_CONTACTED = "No Contactado"
    CONTACTED = "Contactado"
    PROFILED = "Perfilado"
    INTERESTED = "Interesado"
    APPOINTMENT = "Cita"
    REVIEWING_PROPOSAL = "Revisando Propuesta"
    OBJECTIONS = "Objeciones"
    RESERVED = "Apartado"
    DISCARDED = "Descartado"


KANBAN_STAGES = list(LeadStage)


class SaleStage(str, enum.Enum):
    RESERVED = "Apartado"
    DOWN_PAYMENT = "DS"
    DOWN_PAYMENT_COMPLETE = "Enganche"
    CONTRACTED = "Contratado"
    CANCELLED = "Cancelado"


PENDING_SALE_STAGES = frozenset(
    {SaleStage.RESERVED, SaleStage.DOWN_PAYMENT, SaleStage.DOWN_PAYMENT_COMPLETE}
)
CLOSING_SALE_STAGES = frozenset({SaleStage.CONTRACTED, SaleStage.CANCELLED})


class SaleStatus(str, enum.Enum):
    IN_PROGRESS = "En Progreso"
    CLOSED = "Cerrado"


class AdvisorStatus(str, enum.Enum):
    ACTIVE = "Activo"
    INACTIVE = "Inactivo"

    @classmethod
    def _missing_(cls, value: object) -> Optional["AdvisorStatus"]:
        # Stored rows are not consistent about casing ("activo", "ACTIVO").
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value.lower() == normalized:
                    return member
        return None


class Role(str, enum.Enum):
    LEADER = "Líder"
    ADVISOR = "Asesor"


class AppointmentType(str, enum.Enum):
    DEVELOPMENT_VISIT = "Visita a Desarrollo"
    ZOOM = "Zoom"
    VIDEO_CALL = "Videollamada"
    OFFICE_VISIT = "Visita a Oficina"


class LotStatus(str, enum.Enum):
    AVAILABLE = "Disponible"
    RESERVED = "Apartado"
    SOLD = "Vendido"


class PeriodType(str, enum.Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"
