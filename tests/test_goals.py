from __future__ import annotations

from decimal import Decimal

from src.analytics.goals import build_goal_rows, goal_progress, team_goal_totals
from src.models.crm import MonthlyGoalRecord
from src.models.enums import SaleStage, SaleStatus
from tests.stubs import make_advisor, make_sale


def test_progress_is_clamped_at_one_hundred():
    assert goal_progress(Decimal("15000"), Decimal("10000")) == Decimal("100")
    assert goal_progress(Decimal("2500"), Decimal("10000")) == Decimal("25")


def test_progress_without_goal_is_zero():
    assert goal_progress(Decimal("2500"), Decimal("0")) == Decimal("0")


def test_goal_rows_and_team_totals():
    advisors = [
        make_advisor("asesor-1", "Ana López", "ana@maderas.mx"),
        make_advisor("asesor-2", "Bruno Díaz", "bruno@maderas.mx"),
    ]
    sales = [
        make_sale("s1", "A", "8000"),
        make_sale(
            "s2",
            "B",
            "4000",
            etapa_proceso=SaleStage.DOWN_PAYMENT_COMPLETE,
            estatus_proceso=SaleStatus.IN_PROGRESS,
            asesor_secundario_id="asesor-2",
        ),
    ]
    goals = [
        MonthlyGoalRecord(id="g1", asesor_id="asesor-1", year=2024, month=3, goal_amount=Decimal("4000")),
        MonthlyGoalRecord(id="g2", asesor_id="asesor-2", year=2024, month=3, goal_amount=Decimal("8000")),
    ]

    rows = build_goal_rows(advisors, sales, goals, 2024, 3)
    ana, bruno = rows
    assert (ana.amount_achieved, ana.amount_pending, ana.progress) == (8000, 2000, 100)
    assert (bruno.amount_achieved, bruno.amount_pending, bruno.progress) == (0, 2000, 0)

    team = team_goal_totals(rows)
    assert team.total_goal == 12000
    assert team.total_achieved == 8000
    assert team.total_pending == 4000
    assert round(team.total_progress, 4) == 66.6667
