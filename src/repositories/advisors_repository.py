from __future__ import annotations

from typing import Any, Dict, List, Optional

from src.core.supabase import SupabaseClient
from src.models.crm import AdvisorRecord

MAX_QUERY_ROWS = 5000
MAX_EMAIL_MATCHES = 25
ADVISOR_COLUMNS = "id,nombre_completo,email,fecha_ingreso,fecha_nacimiento,estatus"


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so ``_`` and ``%`` in an email match literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class AdvisorsRepository:
    def __init__(self) -> None:
        self.client = SupabaseClient()

    def list_advisors(self) -> List[AdvisorRecord]:
        rows = self.client.select(
            table="advisors",
            select=ADVISOR_COLUMNS,
            limit=MAX_QUERY_ROWS,
            order="nombre_completo.asc",
        )
        return [AdvisorRecord.model_validate(row) for row in rows]

    def get_advisor(self, advisor_id: str) -> Optional[AdvisorRecord]:
        rows = self.client.select(
            table="advisors",
            select=ADVISOR_COLUMNS,
            filters=[("id", f"eq.{advisor_id}")],
            limit=1,
        )
        return AdvisorRecord.model_validate(rows[0]) if rows else None

    def find_by_email(self, email: str) -> Optional[AdvisorRecord]:
        normalized = email.strip().lower()
        rows = self.client.select(
            table="advisors",
            select=ADVISOR_COLUMNS,
            filters=[("email", f"ilike.{escape_like(normalized)}")],
            limit=MAX_EMAIL_MATCHES,
        )
        for row in rows:
            advisor = AdvisorRecord.model_validate(row)
            if advisor.email.strip().lower() == normalized:
                return advisor
        return None

    def create_advisor(self, payload: Dict[str, Any]) -> AdvisorRecord:
        rows = self.client.insert(table="advisors", payload=payload)
        return AdvisorRecord.model_validate(rows[0])

    def update_advisor(self, advisor_id: str, payload: Dict[str, Any]) -> Optional[AdvisorRecord]:
        rows = self.client.update(
            table="advisors", payload=payload, filters=[("id", f"eq.{advisor_id}")]
        )
        return AdvisorRecord.model_validate(rows[0]) if rows else None
