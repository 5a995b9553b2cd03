from __future__ import annotations

from typing import Any, Dict, List, Optional

from src.core.supabase import SupabaseClient
from src.models.crm import SaleRecord

MAX_QUERY_ROWS = 5000


class SalesRepository:
    def __init__(self) -> None:
        self.client = SupabaseClient()

    def list_sales(self) -> List[SaleRecord]:
        rows = self.client.select(
            table="sales",
            select="*",
            limit=MAX_QUERY_ROWS,
            order="fecha_inicio_proceso.desc",
        )
        return [SaleRecord.model_validate(row) for row in rows]

    def get_sale(self, sale_id: str) -> Optional[SaleRecord]:
        rows = self.client.select(
            table="sales",
            select="*",
            filters=[("id", f"eq.{sale_id}")],
            limit=1,
        )
        return SaleRecord.model_validate(rows[0]) if rows else None

    def create_sale(self, payload: Dict[str, Any]) -> SaleRecord:
        rows = self.client.insert(table="sales", payload=payload)
        return SaleRecord.model_validate(rows[0])

    def update_sale(self, sale_id: str, payload: Dict[str, Any]) -> Optional[SaleRecord]:
        rows = self.client.update(table="sales", payload=payload, filters=[("id", f"eq.{sale_id}")])
        return SaleRecord.model_validate(rows[0]) if rows else None
