from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from src.core.supabase import SupabaseClient
from src.models.crm import MonthlyGoalRecord

MAX_QUERY_ROWS = 5000


class MonthlyGoalsRepository:
    def __init__(self) -> None:
        self.client = SupabaseClient()

    def list_goals(self, year: Optional[int] = None, month: Optional[int] = None) -> List[MonthlyGoalRecord]:
        filters: List[Tuple[str, str]] = []
        if year is not None:
            filters.append(("year", f"eq.{year}"))
        if month is not None:
            filters.append(("month", f"eq.{month}"))
        rows = self.client.select(
            table="monthly_goals",
            select="id,asesor_id,year,month,goal_amount",
            filters=filters,
            limit=MAX_QUERY_ROWS,
        )
        return [MonthlyGoalRecord.model_validate(row) for row in rows]

    def create_goal(self, payload: Dict[str, Any]) -> MonthlyGoalRecord:
        rows = self.client.insert(table="monthly_goals", payload=payload)
        return MonthlyGoalRecord.model_validate(rows[0])

    def update_goal(self, goal_id: str, payload: Dict[str, Any]) -> Optional[MonthlyGoalRecord]:
        rows = self.client.update(
            table="monthly_goals", payload=payload, filters=[("id", f"eq.{goal_id}")]
        )
        return MonthlyGoalRecord.model_validate(rows[0]) if rows else None
