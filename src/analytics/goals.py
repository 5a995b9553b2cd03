from __future__ import annotations

from decimal import Decimal
from typing import Iterable, List, Optional

from src.analytics.allocation import ZERO, assigned_amount
from src.models.crm import AdvisorRecord, MonthlyGoalRecord, SaleRecord
from src.models.enums import PENDING_SALE_STAGES, SaleStage
from src.schemas.goals import AdvisorGoalProgress, TeamGoalTotals
from src.shared.time import is_in_month

HUNDRED = Decimal("100")


def goal_progress(achieved: Decimal, goal_amount: Decimal) -> Decimal:
    if goal_amount <= 0:
        return ZERO
    return min(HUNDRED, achieved / goal_amount * HUNDRED)


def find_goal(
    goals: Iterable[MonthlyGoalRecord], advisor_id: str, year: int, month: int
) -> Optional[MonthlyGoalRecord]:
    for goal in goals:
        if goal.asesor_id == advisor_id and goal.year == year and goal.month == month:
            return goal
    return None


def advisor_goal_progress(
    advisor: AdvisorRecord,
    sales: Iterable[SaleRecord],
    goals: Iterable[MonthlyGoalRecord],
    year: int,
    month: int,
) -> AdvisorGoalProgress:
    started_this_month = [
        sale
        for sale in sales
        if sale.involves(advisor.id) and is_in_month(sale.fecha_inicio_proceso, year, month)
    ]
    amount_achieved = sum(
        (
            assigned_amount(sale, advisor.id)
            for sale in started_this_month
            if sale.etapa_proceso == SaleStage.CONTRACTED
        ),
        ZERO,
    )
    amount_pending = sum(
        (
            assigned_amount(sale, advisor.id)
            for sale in started_this_month
            if sale.etapa_proceso in PENDING_SALE_STAGES
        ),
        ZERO,
    )
    goal = find_goal(goals, advisor.id, year, month)
    goal_amount = goal.goal_amount if goal else ZERO

    return AdvisorGoalProgress(
        asesor_id=advisor.id,
        nombre_completo=advisor.nombre_completo,
        goal_amount=float(goal_amount),
        amount_achieved=float(amount_achieved),
        amount_pending=float(amount_pending),
        progress=float(goal_progress(amount_achieved, goal_amount)),
    )


def team_goal_totals(rows: Iterable[AdvisorGoalProgress]) -> TeamGoalTotals:
    rows = list(rows)
    total_goal = sum((Decimal(str(row.goal_amount)) for row in rows), ZERO)
    total_achieved = sum((Decimal(str(row.amount_achieved)) for row in rows), ZERO)
    total_pending = sum((Decimal(str(row.amount_pending)) for row in rows), ZERO)
    return TeamGoalTotals(
        total_goal=float(total_goal),
        total_achieved=float(total_achieved),
        total_pending=float(total_pending),
        total_progress=float(goal_progress(total_achieved, total_goal)),
    )


def build_goal_rows(
    advisors: Iterable[AdvisorRecord],
    sales: Iterable[SaleRecord],
    goals: Iterable[MonthlyGoalRecord],
    year: int,
    month: int,
) -> List[AdvisorGoalProgress]:
    sales = list(sales)
    goals = list(goals)
    return [advisor_goal_progress(advisor, sales, goals, year, month) for advisor in advisors]
