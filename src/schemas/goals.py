from __future__ import annotations

from typing import List

from pydantic import ConfigDict, Field

from src.shared.base import BaseSchema


class MonthlyGoal(BaseSchema):
    id: str
    asesor_id: str
    year: int
    month: int
    goal_amount: float


class MonthlyGoalUpsertRequest(BaseSchema):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    asesor_id: str = Field(min_length=1)
    year: int = Field(ge=2000, le=2100)
    month: int = Field(ge=1, le=12)
    goal_amount: float = Field(ge=0)


class AdvisorGoalProgress(BaseSchema):
    asesor_id: str
    nombre_completo: str
    goal_amount: float
    amount_achieved: float
    amount_pending: float
    progress: float


class TeamGoalTotals(BaseSchema):
    total_goal: float
    total_achieved: float
    total_pending: float
    total_progress: float


class GoalsReport(BaseSchema):
    year: int
    month: int
    advisors: List[AdvisorGoalProgress]
    team: TeamGoalTotals
