from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from src.analytics.visibility import scoped_advisor_id, visible_appointments
from src.core.errors import BadRequestError, ForbiddenError, NotFoundError
from src.core.supabase import storage_errors
from src.models.crm import AppointmentRecord, CurrentUser
from src.repositories.appointments_repository import AppointmentsRepository
from src.schemas.appointments import Appointment, AppointmentCreateRequest
from src.services.session_state import SessionRegistry
from src.shared.time import add_months


class AppointmentsService:
    def __init__(
        self, repository: AppointmentsRepository, sessions: Optional[SessionRegistry] = None
    ) -> None:
        self.repository = repository
        self.sessions = sessions

    def list_month(
        self,
        user: CurrentUser,
        year: int,
        month: int,
        asesor_id: Optional[str] = None,
    ) -> List[Appointment]:
        start = datetime(year, month, 1, tzinfo=timezone.utc)
        next_month = add_months(start.date(), 1)
        end = datetime(next_month.year, next_month.month, 1, tzinfo=timezone.utc)
        with storage_errors("list appointments"):
            records = self.repository.list_appointments(start, end)
        records = visible_appointments(user, records, asesor_id)
        return [self._to_appointment(record) for record in records]

    def create_appointment(
        self, user: CurrentUser, request: AppointmentCreateRequest
    ) -> Appointment:
        asesor_id = scoped_advisor_id(user, request.asesor_id or None)
        if not asesor_id:
            raise BadRequestError("Por favor seleccione un asesor.")
        appointment_date = request.date
        if appointment_date.tzinfo is None:
            appointment_date = appointment_date.replace(tzinfo=timezone.utc)
        payload = request.model_dump(mode="json")
        payload["date"] = appointment_date.isoformat()
        payload["asesor_id"] = asesor_id
        payload["created_by_email"] = user.email
        with storage_errors("create appointment"):
            record = self.repository.create_appointment(payload)
        if self.sessions is not None:
            self.sessions.record_saved("appointments", record)
        return self._to_appointment(record)

    def delete_appointment(self, user: CurrentUser, appointment_id: str) -> None:
        with storage_errors("load appointment"):
            record = self.repository.get_appointment(appointment_id)
        if record is None:
            raise NotFoundError("Appointment not found")
        if not visible_appointments(user, [record]):
            raise ForbiddenError("Appointment belongs to another advisor")
        with storage_errors("delete appointment"):
            deleted = self.repository.delete_appointment(appointment_id)
        if not deleted:
            raise NotFoundError("Appointment not found")
        if self.sessions is not None:
            self.sessions.record_deleted("appointments", appointment_id)

    @staticmethod
    def _to_appointment(record: AppointmentRecord) -> Appointment:
        return Appointment.model_validate(record.model_dump())
