from __future__ import annotations

from fastapi import APIRouter

from src.api.advisors import router as advisors_router
from src.api.appointments import router as appointments_router
from src.api.goals import router as goals_router
from src.api.health import router as health_router
from src.api.leads import router as leads_router
from src.api.lots import router as lots_router
from src.api.reports import router as reports_router
from src.api.sales import router as sales_router
from src.api.session import router as session_router


api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(session_router)
api_router.include_router(advisors_router)
api_router.include_router(leads_router)
api_router.include_router(sales_router)
api_router.include_router(goals_router)
api_router.include_router(appointments_router)
api_router.include_router(lots_router)
api_router.include_router(reports_router)
