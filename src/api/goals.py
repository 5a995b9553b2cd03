from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_current_user, get_goals_service, require_leader
from src.models.crm import CurrentUser
from src.schemas.goals import GoalsReport, MonthlyGoal, MonthlyGoalUpsertRequest
from src.services.goals_service import GoalsService
from src.shared.response import ResponseEnvelope, build_meta

router = APIRouter(prefix="/goals", tags=["goals"])


@router.get("")
def goals_report(
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    month: Optional[int] = Query(default=None, ge=1, le=12),
    user: CurrentUser = Depends(get_current_user),
    service: GoalsService = Depends(get_goals_service),
) -> ResponseEnvelope[GoalsReport]:
    today = date.today()
    year = year or today.year
    month = month or today.month
    data = service.get_report(user, year, month)
    return ResponseEnvelope(
        data=data, meta=build_meta("monthly_goals,sales,advisors", f"{year}-{month:02d}")
    )


@router.put("")
def upsert_goal(
    request: MonthlyGoalUpsertRequest,
    _: CurrentUser = Depends(require_leader),
    service: GoalsService = Depends(get_goals_service),
) -> ResponseEnvelope[MonthlyGoal]:
    data = service.upsert_goal(request)
    return ResponseEnvelope(
        data=data, meta=build_meta("monthly_goals", f"{request.year}-{request.month:02d}")
    )
