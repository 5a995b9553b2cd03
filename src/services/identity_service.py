from __future__ import annotations

import logging

from src.core.config import get_leader_emails, get_settings
from src.core.errors import UnauthorizedError
from src.core.supabase import storage_errors
from src.models.crm import CurrentUser
from src.models.enums import Role
from src.repositories.advisors_repository import AdvisorsRepository

LEADER_USER_ID = "LIDER"

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class IdentityService:
    def __init__(self, repository: AdvisorsRepository) -> None:
        self.repository = repository
        self.settings = get_settings()

    def resolve(self, email: str) -> CurrentUser:
        """Map an email to the Leader role or an active Advisor."""
        normalized = normalize_email(email)
        if not normalized:
            raise UnauthorizedError("Email is required")

        if normalized in get_leader_emails():
            return CurrentUser(
                id=LEADER_USER_ID,
                nombre_completo=self.settings.leader_name,
                email=normalized,
                role=Role.LEADER,
            )

        with storage_errors("look up advisor"):
            advisor = self.repository.find_by_email(normalized)
        if advisor is None or normalize_email(advisor.email) != normalized:
            logger.info("Rejected sign-in for unknown email %s", normalized)
            raise UnauthorizedError("Email is not allowed to access the CRM")
        if not advisor.is_active:
            logger.info("Rejected sign-in for inactive advisor %s", advisor.id)
            raise UnauthorizedError("Advisor is inactive")

        return CurrentUser(
            id=advisor.id,
            nombre_completo=advisor.nombre_completo,
            email=normalized,
            role=Role.ADVISOR,
            advisor=advisor,
        )
