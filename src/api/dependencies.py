from __future__ import annotations

import hmac
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header

from src.core.config import get_settings
from src.core.errors import ForbiddenError, UnauthorizedError
from src.models.crm import CurrentUser
from src.repositories.advisors_repository import AdvisorsRepository
from src.repositories.appointments_repository import AppointmentsRepository
from src.repositories.leads_repository import LeadsRepository
from src.repositories.lots_repository import LotsRepository
from src.repositories.monthly_goals_repository import MonthlyGoalsRepository
from src.repositories.sales_repository import SalesRepository
from src.services.advisors_service import AdvisorsService
from src.services.appointments_service import AppointmentsService
from src.services.goals_service import GoalsService
from src.services.identity_service import IdentityService
from src.services.leads_service import LeadsService
from src.services.lots_service import LotsService
from src.services.reports_service import ReportsService
from src.services.sales_service import SalesService
from src.services.session_service import SessionService
from src.services.session_state import SessionRegistry


@lru_cache
def get_advisors_repository() -> AdvisorsRepository:
    return AdvisorsRepository()


@lru_cache
def get_leads_repository() -> LeadsRepository:
    return LeadsRepository()


@lru_cache
def get_sales_repository() -> SalesRepository:
    return SalesRepository()


@lru_cache
def get_monthly_goals_repository() -> MonthlyGoalsRepository:
    return MonthlyGoalsRepository()


@lru_cache
def get_appointments_repository() -> AppointmentsRepository:
    return AppointmentsRepository()


@lru_cache
def get_lots_repository() -> LotsRepository:
    return LotsRepository()


@lru_cache
def get_session_registry() -> SessionRegistry:
    return SessionRegistry()


def get_identity_service() -> IdentityService:
    return IdentityService(repository=get_advisors_repository())


def get_current_user(
    x_user_email: Optional[str] = Header(default=None),
    identity_service: IdentityService = Depends(get_identity_service),
) -> CurrentUser:
    if not x_user_email or not x_user_email.strip():
        raise UnauthorizedError("Missing X-User-Email header")
    return identity_service.resolve(x_user_email)


def require_leader(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_leader:
        raise ForbiddenError("Only the leader can perform this action")
    return user


def require_change_feed_secret(x_webhook_secret: Optional[str] = Header(default=None)) -> None:
    expected = get_settings().change_feed_secret
    # Without a configured secret the change feed stays closed.
    supplied = (x_webhook_secret or "").encode()
    if not expected or not hmac.compare_digest(supplied, expected.encode()):
        raise UnauthorizedError("Missing or invalid X-Webhook-Secret header")


def get_session_service() -> SessionService:
    return SessionService(
        identity_service=get_identity_service(),
        registry=get_session_registry(),
        advisors_repository=get_advisors_repository(),
        leads_repository=get_leads_repository(),
        sales_repository=get_sales_repository(),
        goals_repository=get_monthly_goals_repository(),
        appointments_repository=get_appointments_repository(),
        lots_repository=get_lots_repository(),
    )


def get_advisors_service() -> AdvisorsService:
    return AdvisorsService(repository=get_advisors_repository(), sessions=get_session_registry())


def get_leads_service() -> LeadsService:
    return LeadsService(
        repository=get_leads_repository(),
        sales_repository=get_sales_repository(),
        sessions=get_session_registry(),
    )


def get_sales_service() -> SalesService:
    return SalesService(
        repository=get_sales_repository(),
        advisors_repository=get_advisors_repository(),
        sessions=get_session_registry(),
    )


def get_goals_service() -> GoalsService:
    return GoalsService(
        repository=get_monthly_goals_repository(),
        advisors_repository=get_advisors_repository(),
        sales_repository=get_sales_repository(),
        sessions=get_session_registry(),
    )


def get_appointments_service() -> AppointmentsService:
    return AppointmentsService(
        repository=get_appointments_repository(), sessions=get_session_registry()
    )


def get_lots_service() -> LotsService:
    return LotsService(
        repository=get_lots_repository(),
        sales_repository=get_sales_repository(),
        sessions=get_session_registry(),
    )


def get_reports_service() -> ReportsService:
    return ReportsService(
        sales_repository=get_sales_repository(),
        advisors_repository=get_advisors_repository(),
        leads_repository=get_leads_repository(),
        appointments_repository=get_appointments_repository(),
    )
