from __future__ import annotations

from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel

from src.core.errors import PersistenceError
from src.models.crm import (
    AdvisorRecord,
    AppointmentRecord,
    LeadRecord,
    LotRecord,
    MonthlyGoalRecord,
    SaleRecord,
)
from src.models.enums import AdvisorStatus, LeadStage, LotStatus, SaleStage, SaleStatus

LEADER_EMAIL = "lider@maderas.mx"


class StubRepository:
    """Dict-backed stand-in for a Supabase table."""

    record_type: type[BaseModel]
    prefix = "row"

    def __init__(self, records: Iterable[BaseModel] = ()) -> None:
        self.records: Dict[str, BaseModel] = {record.id: record for record in records}
        self.created: List[Dict[str, Any]] = []
        self.updates: List[Dict[str, Any]] = []
        self._counter = 0

    def _all(self) -> List[Any]:
        return list(self.records.values())

    def _get(self, record_id: str) -> Optional[Any]:
        return self.records.get(record_id)

    def _create(self, payload: Dict[str, Any]) -> Any:
        self._counter += 1
        self.created.append(payload)
        record = self.record_type.model_validate({**payload, "id": f"new-{self.prefix}-{self._counter}"})
        self.records[record.id] = record
        return record

    def _update(self, record_id: str, payload: Dict[str, Any]) -> Optional[Any]:
        current = self.records.get(record_id)
        if current is None:
            return None
        self.updates.append(payload)
        record = self.record_type.model_validate({**current.model_dump(), **payload})
        self.records[record_id] = record
        return record

    def _delete(self, record_id: str) -> bool:
        return self.records.pop(record_id, None) is not None


class StubAdvisorsRepository(StubRepository):
    record_type = AdvisorRecord
    prefix = "asesor"

    def list_advisors(self) -> List[AdvisorRecord]:
        return self._all()

    def get_advisor(self, advisor_id: str) -> Optional[AdvisorRecord]:
        return self._get(advisor_id)

    def find_by_email(self, email: str) -> Optional[AdvisorRecord]:
        normalized = email.strip().lower()
        for advisor in self._all():
            if advisor.email.strip().lower() == normalized:
                return advisor
        return None

    def create_advisor(self, payload: Dict[str, Any]) -> AdvisorRecord:
        return self._create(payload)

    def update_advisor(self, advisor_id: str, payload: Dict[str, Any]) -> Optional[AdvisorRecord]:
        return self._update(advisor_id, payload)


class StubLeadsRepository(StubRepository):
    record_type = LeadRecord
    prefix = "lead"

    def list_leads(self, asesor_id: Optional[str] = None) -> List[LeadRecord]:
        return [lead for lead in self._all() if not asesor_id or lead.asesor_id == asesor_id]

    def get_lead(self, lead_id: str) -> Optional[LeadRecord]:
        return self._get(lead_id)

    def create_leads(self, payloads: List[Dict[str, Any]]) -> List[LeadRecord]:
        return [self._create(payload) for payload in payloads]

    def update_lead(self, lead_id: str, payload: Dict[str, Any]) -> Optional[LeadRecord]:
        return self._update(lead_id, payload)

    def delete_lead(self, lead_id: str) -> bool:
        return self._delete(lead_id)


class StubSalesRepository(StubRepository):
    record_type = SaleRecord
    prefix = "sale"

    def __init__(self, records: Iterable[BaseModel] = ()) -> None:
        super().__init__(records)
        self.fail_on_create = False

    def list_sales(self) -> List[SaleRecord]:
        return self._all()

    def get_sale(self, sale_id: str) -> Optional[SaleRecord]:
        return self._get(sale_id)

    def create_sale(self, payload: Dict[str, Any]) -> SaleRecord:
        if self.fail_on_create:
            raise PersistenceError("Could not create sale for reserved lead")
        return self._create(payload)

    def update_sale(self, sale_id: str, payload: Dict[str, Any]) -> Optional[SaleRecord]:
        return self._update(sale_id, payload)


class StubMonthlyGoalsRepository(StubRepository):
    record_type = MonthlyGoalRecord
    prefix = "goal"

    def list_goals(self, year: Optional[int] = None, month: Optional[int] = None) -> List[MonthlyGoalRecord]:
        return [
            goal
            for goal in self._all()
            if (year is None or goal.year == year) and (month is None or goal.month == month)
        ]

    def create_goal(self, payload: Dict[str, Any]) -> MonthlyGoalRecord:
        return self._create(payload)

    def update_goal(self, goal_id: str, payload: Dict[str, Any]) -> Optional[MonthlyGoalRecord]:
        return self._update(goal_id, payload)


class StubAppointmentsRepository(StubRepository):
    record_type = AppointmentRecord
    prefix = "cita"

    def list_appointments(self, start=None, end=None) -> List[AppointmentRecord]:
        return [
            appointment
            for appointment in self._all()
            if (start is None or appointment.date >= start) and (end is None or appointment.date < end)
        ]

    def get_appointment(self, appointment_id: str) -> Optional[AppointmentRecord]:
        return self._get(appointment_id)

    def create_appointment(self, payload: Dict[str, Any]) -> AppointmentRecord:
        return self._create(payload)

    def delete_appointment(self, appointment_id: str) -> bool:
        return self._delete(appointment_id)


class StubLotsRepository(StubRepository):
    record_type = LotRecord
    prefix = "lote"

    def list_lots(self) -> List[LotRecord]:
        return self._all()

    def get_lot(self, lot_id: str) -> Optional[LotRecord]:
        return self._get(lot_id)

    def create_lot(self, payload: Dict[str, Any]) -> LotRecord:
        return self._create(payload)

    def update_lot(self, lot_id: str, payload: Dict[str, Any]) -> Optional[LotRecord]:
        return self._update(lot_id, payload)

    def delete_lot(self, lot_id: str) -> bool:
        return self._delete(lot_id)


def make_advisor(advisor_id: str, name: str, email: str, **overrides: Any) -> AdvisorRecord:
    values: Dict[str, Any] = {
        "id": advisor_id,
        "nombre_completo": name,
        "email": email,
        "fecha_ingreso": date(2020, 1, 10),
        "estatus": AdvisorStatus.ACTIVE,
    }
    values.update(overrides)
    return AdvisorRecord(**values)


def make_lead(lead_id: str, name: str, asesor_id: str, **overrides: Any) -> LeadRecord:
    values: Dict[str, Any] = {
        "id": lead_id,
        "nombre_completo": name,
        "fecha_prospeccion": date(2024, 3, 4),
        "lugar_prospeccion": "Facebook",
        "estatus": LeadStage.INTERESTED,
        "asesor_id": asesor_id,
        "interacciones": 2,
    }
    values.update(overrides)
    return LeadRecord(**values)


def make_sale(sale_id: str, client_name: str, monto: str, **overrides: Any) -> SaleRecord:
    values: Dict[str, Any] = {
        "id": sale_id,
        "nombre_lote": "Lote 1",
        "nombre_cliente": client_name,
        "monto": Decimal(monto),
        "fecha_inicio_proceso": date(2024, 3, 5),
        "etapa_proceso": SaleStage.CONTRACTED,
        "estatus_proceso": SaleStatus.CLOSED,
        "asesor_principal_id": "asesor-1",
    }
    values.update(overrides)
    return SaleRecord(**values)


def build_store() -> SimpleNamespace:
    return SimpleNamespace(
        advisors=StubAdvisorsRepository(
            [
                make_advisor("asesor-1", "Ana López", "ana@maderas.mx"),
                make_advisor(
                    "asesor-2", "Bruno Díaz", "bruno@maderas.mx", fecha_ingreso=date(2024, 6, 1)
                ),
                make_advisor(
                    "asesor-3", "Carla Ruiz", "carla@maderas.mx", estatus=AdvisorStatus.INACTIVE
                ),
            ]
        ),
        leads=StubLeadsRepository(
            [
                make_lead("lead-1", "Juan Pérez", "asesor-1"),
                make_lead("lead-2", "María García", "asesor-2", estatus=LeadStage.CONTACTED),
            ]
        ),
        sales=StubSalesRepository(
            [
                make_sale("sale-1", "Pedro Sánchez", "10000", nombre_lote="Lote 12"),
                make_sale(
                    "sale-2",
                    "Laura Gómez",
                    "200000",
                    nombre_lote="Lote 14",
                    fecha_inicio_proceso=date(2024, 3, 10),
                    etapa_proceso=SaleStage.RESERVED,
                    estatus_proceso=SaleStatus.IN_PROGRESS,
                    asesor_secundario_id="asesor-2",
                ),
            ]
        ),
        goals=StubMonthlyGoalsRepository(
            [
                MonthlyGoalRecord(
                    id="goal-1", asesor_id="asesor-1", year=2024, month=3, goal_amount=Decimal("5000")
                )
            ]
        ),
        appointments=StubAppointmentsRepository(),
        lots=StubLotsRepository(
            [
                LotRecord(id="lot-1", nombre_lote="Lote 14", precio=Decimal("200000"), estatus=LotStatus.RESERVED),
                LotRecord(id="lot-2", nombre_lote="Lote 30", precio=Decimal("180000")),
            ]
        ),
    )


