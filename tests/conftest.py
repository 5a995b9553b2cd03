from __future__ import annotations

import os
from types import SimpleNamespace

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ["LEADER_EMAILS"] = "lider@maderas.mx"
os.environ["CHANGE_FEED_SECRET"] = "feed-secret"

import pytest
from fastapi.testclient import TestClient

from src.api import dependencies
from src.main import create_app
from src.models.crm import CurrentUser
from src.models.enums import Role
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
from tests.stubs import LEADER_EMAIL, build_store


@pytest.fixture()
def store() -> SimpleNamespace:
    return build_store()


@pytest.fixture()
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture()
def leader() -> CurrentUser:
    return CurrentUser(id="LIDER", nombre_completo="Líder", email=LEADER_EMAIL, role=Role.LEADER)


@pytest.fixture()
def advisor_user(store: SimpleNamespace) -> CurrentUser:
    advisor = store.advisors.get_advisor("asesor-1")
    return CurrentUser(
        id=advisor.id,
        nombre_completo=advisor.nombre_completo,
        email=advisor.email,
        role=Role.ADVISOR,
        advisor=advisor,
    )


@pytest.fixture()
def client(store: SimpleNamespace, registry: SessionRegistry) -> TestClient:
    app = create_app()
    overrides = {
        dependencies.get_identity_service: lambda: IdentityService(repository=store.advisors),
        dependencies.get_session_service: lambda: SessionService(
            identity_service=IdentityService(repository=store.advisors),
            registry=registry,
            advisors_repository=store.advisors,
            leads_repository=store.leads,
            sales_repository=store.sales,
            goals_repository=store.goals,
            appointments_repository=store.appointments,
            lots_repository=store.lots,
        ),
        dependencies.get_advisors_service: lambda: AdvisorsService(store.advisors, registry),
        dependencies.get_leads_service: lambda: LeadsService(store.leads, store.sales, registry),
        dependencies.get_sales_service: lambda: SalesService(store.sales, store.advisors, registry),
        dependencies.get_goals_service: lambda: GoalsService(
            store.goals, store.advisors, store.sales, registry
        ),
        dependencies.get_appointments_service: lambda: AppointmentsService(store.appointments, registry),
        dependencies.get_lots_service: lambda: LotsService(store.lots, store.sales, registry),
        dependencies.get_reports_service: lambda: ReportsService(
            store.sales, store.advisors, store.leads, store.appointments
        ),
    }
    app.dependency_overrides.update(overrides)
    yield TestClient(app)
    app.dependency_overrides.clear()
