from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

from src.models.crm import SaleRecord
from src.models.enums import CLOSING_SALE_STAGES, SaleStage, SaleStatus
from src.shared.formatting import days_since


def derive_process_status(stage: SaleStage) -> SaleStatus:
    # fecha_cierre never drives the status, only the stage does.
    if stage in CLOSING_SALE_STAGES:
        return SaleStatus.CLOSED
    return SaleStatus.IN_PROGRESS


def with_derived_status(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Return a storage payload whose ``estatus_proceso`` matches its ``etapa_proceso``."""
    if "etapa_proceso" not in payload:
        return dict(payload)
    stage = SaleStage(payload["etapa_proceso"])
    return {**payload, "estatus_proceso": derive_process_status(stage).value}


def days_in_process(sale: SaleRecord, today: Optional[date] = None) -> int:
    return days_since(sale.fecha_inicio_proceso, today)


def is_overdue(sale: SaleRecord, max_process_days: int, today: Optional[date] = None) -> bool:
    if sale.estatus_proceso != SaleStatus.IN_PROGRESS:
        return False
    return days_in_process(sale, today) > max_process_days
