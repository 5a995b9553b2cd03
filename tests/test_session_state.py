from __future__ import annotations

import pytest

from src.services.session_state import ChangeEvent, SessionRegistry, SessionState
from tests.stubs import make_lead, make_sale


def _realtime(event_type, table, new=None, old=None):
    return {"eventType": event_type, "table": table, "new": new or {}, "old": old or {}}


def _lead_row(lead_id="lead-9", name="Nuevo Prospecto"):
    return {
        "id": lead_id,
        "nombreCompleto": name,
        "fechaProspeccion": "2024-03-10",
        "estatus": "Contactado",
        "asesorId": "asesor-1",
        "interacciones": 1,
    }


def test_duplicate_insert_events_are_ignored(leader):
    state = SessionState(leader)
    state.load({"leads": [make_lead("lead-1", "Juan Pérez", "asesor-1")]})
    event = ChangeEvent.from_payload(_realtime("INSERT", "leads", new=_lead_row()))

    state.apply_event(event)
    state.apply_event(event)

    assert sorted(lead.id for lead in state.records("leads")) == ["lead-1", "lead-9"]


def test_update_replaces_and_delete_removes(leader):
    state = SessionState(leader)
    state.load({"leads": [make_lead("lead-1", "Juan Pérez", "asesor-1")]})

    state.apply_event(
        ChangeEvent.from_payload(_realtime("UPDATE", "leads", new=_lead_row("lead-1", "Juan P.")))
    )
    assert state.records("leads")[0].nombre_completo == "Juan P."

    state.apply_event(ChangeEvent.from_payload(_realtime("DELETE", "leads", old={"id": "lead-1"})))
    assert state.records("leads") == []


def test_webhook_payload_shape_is_accepted():
    event = ChangeEvent.from_payload(
        {"type": "insert", "table": "leads", "record": _lead_row(), "old_record": None}
    )
    assert event.kind == "INSERT"
    assert event.record_id == "lead-9"


@pytest.mark.parametrize(
    "payload",
    [
        {"eventType": "TRUNCATE", "table": "leads"},
        {"eventType": "INSERT", "table": "unknown", "new": {"id": "x"}},
    ],
)
def test_unsupported_payloads_raise(payload):
    with pytest.raises(ValueError):
        ChangeEvent.from_payload(payload)


def test_broadcast_only_reaches_sessions_that_can_see_the_row(leader, advisor_user):
    registry = SessionRegistry()
    leader_state = registry.open(leader, {"leads": []})
    advisor_state = registry.open(advisor_user, {"leads": []})

    other_lead = _lead_row("lead-x", "Prospecto Ajeno")
    other_lead["asesorId"] = "asesor-2"
    applied = registry.broadcast(ChangeEvent.from_payload(_realtime("INSERT", "leads", new=other_lead)))

    assert applied == 2
    assert [lead.id for lead in leader_state.records("leads")] == ["lead-x"]
    assert advisor_state.records("leads") == []


def test_advisor_session_ignores_other_advisors_rows(advisor_user):
    registry = SessionRegistry()
    state = registry.open(advisor_user, {})

    registry.record_saved("leads", make_lead("lead-x", "Prospecto Ajeno", "asesor-2"))
    registry.record_saved(
        "sales", make_sale("sale-x", "Cliente Ajeno", "1000", asesor_principal_id="asesor-2")
    )
    registry.broadcast(
        ChangeEvent.from_payload(
            _realtime(
                "INSERT",
                "monthly_goals",
                new={"id": "g1", "asesorId": "asesor-2", "year": 2024, "month": 3, "goalAmount": 1000},
            )
        )
    )
    registry.broadcast(
        ChangeEvent.from_payload(
            _realtime(
                "INSERT",
                "monthly_goals",
                new={"id": "g2", "asesorId": "asesor-1", "year": 2024, "month": 3, "goalAmount": 1000},
            )
        )
    )

    assert state.records("leads") == []
    assert state.records("sales") == []
    assert [goal.id for goal in state.records("monthly_goals")] == ["g2"]


def test_lead_reassigned_away_leaves_advisor_session(advisor_user):
    registry = SessionRegistry()
    state = registry.open(advisor_user, {"leads": [make_lead("lead-1", "Juan Pérez", "asesor-1")]})

    registry.record_saved("leads", make_lead("lead-1", "Juan Pérez", "asesor-2"))

    assert state.records("leads") == []


def test_lead_created_by_advisor_stays_visible_after_reassignment(advisor_user):
    registry = SessionRegistry()
    state = registry.open(advisor_user, {})

    registry.record_saved(
        "leads",
        make_lead("lead-7", "Referido", "asesor-2", created_by_email="ana@maderas.mx"),
    )

    assert [lead.id for lead in state.records("leads")] == ["lead-7"]


def test_registry_lifecycle(advisor_user):
    registry = SessionRegistry()
    advisor_state = registry.open(advisor_user, {"leads": []})
    registry.broadcast(ChangeEvent.from_payload(_realtime("INSERT", "leads", new=_lead_row())))
    assert len(advisor_state.records("leads")) == 1

    assert registry.close(" ANA@maderas.mx ") is True
    assert advisor_state.records("leads") == []
    assert registry.get(advisor_user.email) is None
    assert registry.close(advisor_user.email) is False
