from __future__ import annotations

from decimal import Decimal

import pytest

from src.core.errors import BadRequestError, NotFoundError
from src.models.enums import LotStatus
from src.schemas.goals import MonthlyGoalUpsertRequest
from src.schemas.lots import LotCreateRequest, LotUpdateRequest
from src.services.goals_service import GoalsService
from src.services.lots_service import LotsService
from src.services.session_state import SessionRegistry


def test_lot_in_open_sale_cannot_be_deleted(store):
    service = LotsService(store.lots, store.sales)
    with pytest.raises(BadRequestError):
        service.delete_lot("lot-1")

    service.delete_lot("lot-2")
    assert store.lots.get_lot("lot-2") is None

    with pytest.raises(NotFoundError):
        service.delete_lot("lot-2")


def test_lot_listing_filters(store):
    service = LotsService(store.lots, store.sales)
    service.create_lot(LotCreateRequest(nombre_lote="Lote 31", precio=150000))

    available = service.list_lots(estatus=LotStatus.AVAILABLE)
    assert sorted(lot.nombre_lote for lot in available) == ["Lote 30", "Lote 31"]
    assert [lot.id for lot in service.list_lots(search="14")] == ["lot-1"]


def test_lot_changes_reach_open_sessions(store, advisor_user):
    registry = SessionRegistry()
    state = registry.open(advisor_user, {"lots": store.lots.list_lots()})
    service = LotsService(store.lots, store.sales, registry)

    created = service.create_lot(LotCreateRequest(nombre_lote="Lote 31", precio=150000))
    service.update_lot("lot-2", LotUpdateRequest(estatus=LotStatus.SOLD))
    service.delete_lot(created.id)

    lots = {lot.id: lot for lot in state.records("lots")}
    assert sorted(lots) == ["lot-1", "lot-2"]
    assert lots["lot-2"].estatus == LotStatus.SOLD


def test_goal_upsert_keeps_one_goal_per_advisor_and_month(store):
    service = GoalsService(store.goals, store.advisors, store.sales)

    updated = service.upsert_goal(
        MonthlyGoalUpsertRequest(asesor_id="asesor-1", year=2024, month=3, goal_amount=20000)
    )
    assert updated.id == "goal-1"
    assert updated.goal_amount == 20000
    assert store.goals.created == []

    created = service.upsert_goal(
        MonthlyGoalUpsertRequest(asesor_id="asesor-2", year=2024, month=3, goal_amount=8000)
    )
    assert created.id != "goal-1"
    assert len(store.goals.list_goals(2024, 3)) == 2
    assert store.goals.records[created.id].goal_amount == Decimal("8000")

    with pytest.raises(NotFoundError):
        service.upsert_goal(
            MonthlyGoalUpsertRequest(asesor_id="missing", year=2024, month=3, goal_amount=1)
        )


def test_goal_report_is_scoped_for_advisors(store, leader, advisor_user):
    service = GoalsService(store.goals, store.advisors, store.sales)

    team = service.get_report(leader, 2024, 3)
    assert [row.asesor_id for row in team.advisors] == ["asesor-1", "asesor-2"]
    ana = team.advisors[0]
    assert (ana.goal_amount, ana.amount_achieved, ana.amount_pending, ana.progress) == (
        5000,
        10000,
        100000,
        100,
    )

    own = service.get_report(advisor_user, 2024, 3)
    assert [row.asesor_id for row in own.advisors] == ["asesor-1"]
