from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel

from src.analytics.visibility import (
    visible_appointments,
    visible_goals,
    visible_leads,
    visible_sales,
)
from src.core.supabase import storage_errors
from src.models.crm import CurrentUser
from src.repositories.advisors_repository import AdvisorsRepository
from src.repositories.appointments_repository import AppointmentsRepository
from src.repositories.leads_repository import LeadsRepository
from src.repositories.lots_repository import LotsRepository
from src.repositories.monthly_goals_repository import MonthlyGoalsRepository
from src.repositories.sales_repository import SalesRepository
from src.schemas.advisors import Advisor
from src.schemas.session import SessionUser
from src.services.identity_service import IdentityService
from src.services.session_state import ChangeEvent, SessionRegistry, SessionState


class SessionService:
    def __init__(
        self,
        identity_service: IdentityService,
        registry: SessionRegistry,
        advisors_repository: AdvisorsRepository,
        leads_repository: LeadsRepository,
        sales_repository: SalesRepository,
        goals_repository: MonthlyGoalsRepository,
        appointments_repository: AppointmentsRepository,
        lots_repository: LotsRepository,
    ) -> None:
        self.identity_service = identity_service
        self.registry = registry
        self.advisors_repository = advisors_repository
        self.leads_repository = leads_repository
        self.sales_repository = sales_repository
        self.goals_repository = goals_repository
        self.appointments_repository = appointments_repository
        self.lots_repository = lots_repository

    def login(self, email: str) -> SessionUser:
        user = self.identity_service.resolve(email)
        self.registry.open(user, self.load_snapshot(user))
        return self.to_session_user(user)

    def logout(self, email: str) -> bool:
        return self.registry.close(email)

    def reload(self, user: CurrentUser) -> SessionState:
        """Full refetch, used when a session reconnects or after an error."""
        state = self.registry.get(user.email)
        if state is None:
            return self.registry.open(user, self.load_snapshot(user))
        state.load(self.load_snapshot(user))
        return state

    def apply_change(self, event: ChangeEvent) -> int:
        return self.registry.broadcast(event)

    def load_snapshot(self, user: CurrentUser) -> Dict[str, List[BaseModel]]:
        with storage_errors("load session data"):
            advisors = self.advisors_repository.list_advisors()
            leads = self.leads_repository.list_leads()
            sales = self.sales_repository.list_sales()
            goals = self.goals_repository.list_goals()
            appointments = self.appointments_repository.list_appointments()
            lots = self.lots_repository.list_lots()
        return {
            "advisors": list(advisors),
            "leads": list(visible_leads(user, leads)),
            "sales": list(visible_sales(user, sales)),
            "monthly_goals": visible_goals(user, goals),
            "appointments": list(visible_appointments(user, appointments)),
            "lots": list(lots),
        }

    @staticmethod
    def to_session_user(user: CurrentUser) -> SessionUser:
        advisor = Advisor.model_validate(user.advisor.model_dump()) if user.advisor else None
        return SessionUser(
            id=user.id,
            nombre_completo=user.nombre_completo,
            email=user.email,
            role=user.role,
            advisor=advisor,
        )
