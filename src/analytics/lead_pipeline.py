from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, Optional

from src.models.crm import LeadRecord, SaleRecord
from src.models.enums import LeadStage, SaleStage, SaleStatus

PLACEHOLDER_LOT_NAME = "Lote por Asignar"
AUTO_SALE_OBSERVATION = "Venta creada automáticamente desde el prospecto."


@dataclass(frozen=True)
class LeadTransition:
    """Outcome of moving a lead to a new stage.

    ``lead_changes`` is the single storage write for the lead (stage, counter
    and discard reason together). ``sale_payload`` is the follow-up sale to
    create, if the move reached ``Apartado`` and no sale matches the client.
    """

    lead: LeadRecord
    changed: bool
    lead_changes: Dict[str, Any]
    sale_payload: Optional[Dict[str, Any]] = None


def normalize_client_name(value: str) -> str:
    return value.strip().lower()


def find_matching_sale(lead: LeadRecord, sales: Iterable[SaleRecord]) -> Optional[SaleRecord]:
    # Matching by name is a heuristic; existing sales carry no lead id.
    prospect_name = normalize_client_name(lead.nombre_completo)
    for sale in sales:
        if normalize_client_name(sale.nombre_cliente) == prospect_name:
            return sale
    return None


def build_reserved_sale(lead: LeadRecord, created_by_email: str, today: date) -> Dict[str, Any]:
    return {
        "nombre_lote": PLACEHOLDER_LOT_NAME,
        "nombre_cliente": lead.nombre_completo,
        "monto": 0,
        "fecha_inicio_proceso": today.isoformat(),
        "etapa_proceso": SaleStage.RESERVED.value,
        "asesor_principal_id": lead.asesor_id,
        "asesor_secundario_id": None,
        "estatus_proceso": SaleStatus.IN_PROGRESS.value,
        "observaciones": AUTO_SALE_OBSERVATION,
        "created_by_email": created_by_email,
    }


def transition_lead(
    lead: LeadRecord,
    new_stage: LeadStage,
    existing_sales: Iterable[SaleRecord],
    discard_reason: Optional[str] = None,
    created_by_email: str = "",
    today: Optional[date] = None,
) -> LeadTransition:
    if new_stage == lead.estatus:
        return LeadTransition(lead=lead, changed=False, lead_changes={})

    if new_stage == LeadStage.DISCARDED:
        motivo_descarte = discard_reason
    else:
        motivo_descarte = None

    lead_changes: Dict[str, Any] = {
        "estatus": new_stage.value,
        "motivo_descarte": motivo_descarte,
        "interacciones": lead.interacciones + 1,
    }
    updated = lead.model_copy(
        update={
            "estatus": new_stage,
            "motivo_descarte": motivo_descarte,
            "interacciones": lead.interacciones + 1,
        }
    )

    sale_payload = None
    if new_stage == LeadStage.RESERVED and find_matching_sale(lead, existing_sales) is None:
        sale_payload = build_reserved_sale(lead, created_by_email, today or date.today())

    return LeadTransition(
        lead=updated,
        changed=True,
        lead_changes=lead_changes,
        sale_payload=sale_payload,
    )
