from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_current_user, get_reports_service, require_leader
from src.core.config import get_settings
from src.models.crm import CurrentUser
from src.models.enums import PeriodType
from src.schemas.reports import (
    AdvisorDashboardResponse,
    CommissionReport,
    LeadKpis,
    LeaderDashboardResponse,
    MonthlyActivityReport,
    SalesSummaryFilters,
    SalesSummaryResponse,
)
from src.services.reports_service import ReportsService
from src.shared.response import ResponseEnvelope, build_meta

router = APIRouter(prefix="/reports", tags=["reports"])


def get_sales_summary_filters(
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    period_type: PeriodType = Query(default=PeriodType.MONTHLY, alias="periodType"),
    asesor_id: Optional[str] = Query(default=None, alias="asesorId"),
) -> SalesSummaryFilters:
    return SalesSummaryFilters(
        start_date=start_date,
        end_date=end_date,
        period_type=period_type,
        asesor_id=asesor_id,
    )


def _resolve_month(year: Optional[int], month: Optional[int]) -> tuple[int, int]:
    today = date.today()
    return year or today.year, month or today.month


@router.get("/sales-summary")
def sales_summary(
    filters: SalesSummaryFilters = Depends(get_sales_summary_filters),
    user: CurrentUser = Depends(get_current_user),
    service: ReportsService = Depends(get_reports_service),
) -> ResponseEnvelope[SalesSummaryResponse]:
    data = service.get_sales_summary(user, filters)
    meta = build_meta("sales", filters.period_type.value, get_settings().currency_code)
    return ResponseEnvelope(data=data, meta=meta)


@router.get("/commissions")
def commissions(
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    month: Optional[int] = Query(default=None, ge=1, le=12),
    _: CurrentUser = Depends(require_leader),
    service: ReportsService = Depends(get_reports_service),
) -> ResponseEnvelope[CommissionReport]:
    year, month = _resolve_month(year, month)
    data = service.get_commissions(year, month)
    meta = build_meta("sales,advisors", f"{year}-{month:02d}", get_settings().currency_code)
    return ResponseEnvelope(data=data, meta=meta)


@router.get("/leader-dashboard")
def leader_dashboard(
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    month: Optional[int] = Query(default=None, ge=1, le=12),
    _: CurrentUser = Depends(require_leader),
    service: ReportsService = Depends(get_reports_service),
) -> ResponseEnvelope[LeaderDashboardResponse]:
    year, month = _resolve_month(year, month)
    data = service.get_leader_dashboard(year, month)
    meta = build_meta("sales,advisors", f"{year}-{month:02d}", get_settings().currency_code)
    return ResponseEnvelope(data=data, meta=meta)


@router.get("/advisor-dashboard/{advisor_id}")
def advisor_dashboard(
    advisor_id: str,
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    month: Optional[int] = Query(default=None, ge=1, le=12),
    user: CurrentUser = Depends(get_current_user),
    service: ReportsService = Depends(get_reports_service),
) -> ResponseEnvelope[AdvisorDashboardResponse]:
    year, month = _resolve_month(year, month)
    data = service.get_advisor_dashboard(user, advisor_id, year, month)
    meta = build_meta("sales,advisors", f"{year}-{month:02d}", get_settings().currency_code)
    return ResponseEnvelope(data=data, meta=meta)


@router.get("/lead-kpis")
def lead_kpis(
    asesor_id: Optional[str] = Query(default=None, alias="asesorId"),
    user: CurrentUser = Depends(get_current_user),
    service: ReportsService = Depends(get_reports_service),
) -> ResponseEnvelope[LeadKpis]:
    data = service.get_lead_kpis(user, asesor_id)
    return ResponseEnvelope(data=data, meta=build_meta("leads,appointments", "all"))


@router.get("/monthly-activity")
def monthly_activity(
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    month: Optional[int] = Query(default=None, ge=1, le=12),
    asesor_id: Optional[str] = Query(default=None, alias="asesorId"),
    user: CurrentUser = Depends(get_current_user),
    service: ReportsService = Depends(get_reports_service),
) -> ResponseEnvelope[MonthlyActivityReport]:
    year, month = _resolve_month(year, month)
    data = service.get_monthly_activity(user, year, month, asesor_id)
    return ResponseEnvelope(data=data, meta=build_meta("leads,advisors", f"{year}-{month:02d}"))
