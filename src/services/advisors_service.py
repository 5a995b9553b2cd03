from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from src.core.errors import ConflictError, NotFoundError
from src.core.supabase import storage_errors
from src.models.crm import AdvisorRecord
from src.repositories.advisors_repository import AdvisorsRepository
from src.schemas.advisors import Advisor, AdvisorCreateRequest, AdvisorUpdateRequest
from src.services.identity_service import normalize_email
from src.services.session_state import SessionRegistry

DUPLICATE_EMAIL_MESSAGE = "El correo electrónico ya está en uso por otro asesor."

logger = logging.getLogger(__name__)


def email_in_use(
    advisors: Iterable[AdvisorRecord], email: str, exclude_id: Optional[str] = None
) -> bool:
    normalized = normalize_email(email)
    return any(
        normalize_email(advisor.email) == normalized
        for advisor in advisors
        if advisor.id != exclude_id
    )


class AdvisorsService:
    def __init__(
        self, repository: AdvisorsRepository, sessions: Optional[SessionRegistry] = None
    ) -> None:
        self.repository = repository
        self.sessions = sessions

    def list_advisors(self, active_only: bool = False) -> List[Advisor]:
        with storage_errors("list advisors"):
            records = self.repository.list_advisors()
        if active_only:
            records = [record for record in records if record.is_active]
        return [self._to_advisor(record) for record in records]

    def get_advisor(self, advisor_id: str) -> Advisor:
        with storage_errors("load advisor"):
            record = self.repository.get_advisor(advisor_id)
        if not record:
            raise NotFoundError("Advisor not found")
        return self._to_advisor(record)

    def create_advisor(self, request: AdvisorCreateRequest) -> Advisor:
        with storage_errors("list advisors"):
            existing = self.repository.list_advisors()
        if email_in_use(existing, request.email):
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

        payload = request.model_dump(mode="json")
        payload["email"] = request.email.strip()
        with storage_errors("create advisor"):
            record = self.repository.create_advisor(payload)
        logger.info("Created advisor %s", record.id)
        self._publish(record)
        return self._to_advisor(record)

    def update_advisor(self, advisor_id: str, request: AdvisorUpdateRequest) -> Advisor:
        with storage_errors("list advisors"):
            existing = self.repository.list_advisors()
        if not any(advisor.id == advisor_id for advisor in existing):
            raise NotFoundError("Advisor not found")

        payload = request.model_dump(mode="json", exclude_unset=True)
        if "email" in payload and payload["email"] is not None:
            if email_in_use(existing, payload["email"], exclude_id=advisor_id):
                raise ConflictError(DUPLICATE_EMAIL_MESSAGE)
            payload["email"] = payload["email"].strip()

        with storage_errors("update advisor"):
            record = self.repository.update_advisor(advisor_id, payload)
        if record is None:
            raise NotFoundError("Advisor not found")
        self._publish(record)
        return self._to_advisor(record)

    def _publish(self, record: AdvisorRecord) -> None:
        if self.sessions is not None:
            self.sessions.record_saved("advisors", record)

    @staticmethod
    def _to_advisor(record: AdvisorRecord) -> Advisor:
        return Advisor.model_validate(record.model_dump())
