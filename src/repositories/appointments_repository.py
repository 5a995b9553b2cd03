from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from src.core.supabase import SupabaseClient
from src.models.crm import AppointmentRecord

MAX_QUERY_ROWS = 5000


class AppointmentsRepository:
    def __init__(self) -> None:
        self.client = SupabaseClient()

    def list_appointments(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> List[AppointmentRecord]:
        filters: List[Tuple[str, str]] = []
        if start:
            filters.append(("date", f"gte.{start.isoformat()}"))
        if end:
            filters.append(("date", f"lt.{end.isoformat()}"))
        rows = self.client.select(
            table="appointments",
            select="id,type,date,asesor_id,notes,created_by_email",
            filters=filters,
            limit=MAX_QUERY_ROWS,
            order="date.asc",
        )
        return [AppointmentRecord.model_validate(row) for row in rows]

    def get_appointment(self, appointment_id: str) -> Optional[AppointmentRecord]:
        rows = self.client.select(
            table="appointments",
            select="id,type,date,asesor_id,notes,created_by_email",
            filters=[("id", f"eq.{appointment_id}")],
            limit=1,
        )
        return AppointmentRecord.model_validate(rows[0]) if rows else None

    def create_appointment(self, payload: Dict[str, Any]) -> AppointmentRecord:
        rows = self.client.insert(table="appointments", payload=payload)
        return AppointmentRecord.model_validate(rows[0])

    def delete_appointment(self, appointment_id: str) -> bool:
        rows = self.client.delete(table="appointments", filters=[("id", f"eq.{appointment_id}")])
        return bool(rows)
