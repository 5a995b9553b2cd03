from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from src.core.supabase import SupabaseClient
from src.models.crm import LeadRecord

MAX_QUERY_ROWS = 5000


class LeadsRepository:
    def __init__(self) -> None:
        self.client = SupabaseClient()

    def list_leads(self, asesor_id: Optional[str] = None) -> List[LeadRecord]:
        filters: List[Tuple[str, str]] = []
        if asesor_id:
            filters.append(("asesor_id", f"eq.{asesor_id}"))
        rows = self.client.select(
            table="leads",
            select="*",
            filters=filters,
            limit=MAX_QUERY_ROWS,
            order="fecha_prospeccion.desc",
        )
        return [LeadRecord.model_validate(row) for row in rows]

    def get_lead(self, lead_id: str) -> Optional[LeadRecord]:
        rows = self.client.select(
            table="leads",
            select="*",
            filters=[("id", f"eq.{lead_id}")],
            limit=1,
        )
        return LeadRecord.model_validate(rows[0]) if rows else None

    def create_leads(self, payloads: List[Dict[str, Any]]) -> List[LeadRecord]:
        if not payloads:
            return []
        rows = self.client.insert(table="leads", payload=payloads)
        return [LeadRecord.model_validate(row) for row in rows]

    def update_lead(self, lead_id: str, payload: Dict[str, Any]) -> Optional[LeadRecord]:
        rows = self.client.update(table="leads", payload=payload, filters=[("id", f"eq.{lead_id}")])
        return LeadRecord.model_validate(rows[0]) if rows else None

    def delete_lead(self, lead_id: str) -> bool:
        rows = self.client.delete(table="leads", filters=[("id", f"eq.{lead_id}")])
        return bool(rows)
