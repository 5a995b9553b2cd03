from __future__ import annotations

from typing import Any, Dict, List, Optional

from src.core.supabase import SupabaseClient
from src.models.crm import LotRecord

MAX_QUERY_ROWS = 5000


class LotsRepository:
    def __init__(self) -> None:
        self.client = SupabaseClient()

    def list_lots(self) -> List[LotRecord]:
        rows = self.client.select(
            table="lots",
            select="id,nombre_lote,precio,estatus",
            limit=MAX_QUERY_ROWS,
            order="nombre_lote.asc",
        )
        return [LotRecord.model_validate(row) for row in rows]

    def get_lot(self, lot_id: str) -> Optional[LotRecord]:
        rows = self.client.select(
            table="lots",
            select="id,nombre_lote,precio,estatus",
            filters=[("id", f"eq.{lot_id}")],
            limit=1,
        )
        return LotRecord.model_validate(rows[0]) if rows else None

    def create_lot(self, payload: Dict[str, Any]) -> LotRecord:
        rows = self.client.insert(table="lots", payload=payload)
        return LotRecord.model_validate(rows[0])

    def update_lot(self, lot_id: str, payload: Dict[str, Any]) -> Optional[LotRecord]:
        rows = self.client.update(table="lots", payload=payload, filters=[("id", f"eq.{lot_id}")])
        return LotRecord.model_validate(rows[0]) if rows else None

    def delete_lot(self, lot_id: str) -> bool:
        rows = self.client.delete(table="lots", filters=[("id", f"eq.{lot_id}")])
        return bool(rows)
