from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from src.analytics.goals import build_goal_rows, find_goal, team_goal_totals
from src.analytics.visibility import visible_advisors
from src.core.errors import NotFoundError
from src.core.supabase import storage_errors
from src.models.crm import CurrentUser
from src.repositories.advisors_repository import AdvisorsRepository
from src.repositories.monthly_goals_repository import MonthlyGoalsRepository
from src.repositories.sales_repository import SalesRepository
from src.schemas.goals import GoalsReport, MonthlyGoal, MonthlyGoalUpsertRequest
from src.services.session_state import SessionRegistry

logger = logging.getLogger(__name__)


class GoalsService:
    def __init__(
        self,
        repository: MonthlyGoalsRepository,
        advisors_repository: AdvisorsRepository,
        sales_repository: SalesRepository,
        sessions: Optional[SessionRegistry] = None,
    ) -> None:
        self.repository = repository
        self.advisors_repository = advisors_repository
        self.sales_repository = sales_repository
        self.sessions = sessions

    def upsert_goal(self, request: MonthlyGoalUpsertRequest) -> MonthlyGoal:
        """Keep at most one goal per advisor and month: update it if present."""
        with storage_errors("load advisor"):
            advisor = self.advisors_repository.get_advisor(request.asesor_id)
        if advisor is None:
            raise NotFoundError("Advisor not found")

        with storage_errors("list monthly goals"):
            goals = self.repository.list_goals(request.year, request.month)
        existing = find_goal(goals, request.asesor_id, request.year, request.month)
        goal_amount = str(Decimal(str(request.goal_amount)))

        if existing is not None:
            with storage_errors("update monthly goal"):
                record = self.repository.update_goal(existing.id, {"goal_amount": goal_amount})
            if record is None:
                raise NotFoundError("Monthly goal not found")
        else:
            payload = request.model_dump(mode="json")
            payload["goal_amount"] = goal_amount
            with storage_errors("create monthly goal"):
                record = self.repository.create_goal(payload)
        logger.info(
            "Goal for advisor %s %d-%02d set to %s",
            record.asesor_id,
            record.year,
            record.month,
            record.goal_amount,
        )
        if self.sessions is not None:
            self.sessions.record_saved("monthly_goals", record)
        return MonthlyGoal.model_validate(record.model_dump())

    def get_report(self, user: CurrentUser, year: int, month: int) -> GoalsReport:
        with storage_errors("load goal report data"):
            advisors = visible_advisors(user, self.advisors_repository.list_advisors())
            sales = self.sales_repository.list_sales()
            goals = self.repository.list_goals(year, month)
        rows = build_goal_rows(advisors, sales, goals, year, month)
        return GoalsReport(year=year, month=month, advisors=rows, team=team_goal_totals(rows))
