from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from src.analytics.commissions import calculate_commissions
from src.analytics.historical_average import calculate_monthly_average
from src.analytics.lead_kpis import build_lead_kpis, monthly_activity
from src.analytics.sales_dashboards import (
    advisor_month_sales,
    contracted_total,
    leader_dashboard_rows,
)
from src.analytics.sales_summary import (
    filter_sales_for_summary,
    summarize_sales,
    summarize_totals,
)
from src.analytics.visibility import (
    scoped_advisor_id,
    visible_advisors,
    visible_appointments,
    visible_leads,
    visible_sales,
)
from src.core.config import get_settings
from src.core.errors import NotFoundError
from src.core.supabase import storage_errors
from src.models.crm import CurrentUser
from src.repositories.advisors_repository import AdvisorsRepository
from src.repositories.appointments_repository import AppointmentsRepository
from src.repositories.leads_repository import LeadsRepository
from src.repositories.sales_repository import SalesRepository
from src.schemas.reports import (
    AdvisorDashboardResponse,
    CommissionReport,
    LeadKpis,
    LeaderDashboardResponse,
    MonthlyActivityReport,
    SalesSummaryFilters,
    SalesSummaryResponse,
)
from src.schemas.sales import Sale


class ReportsService:
    """Derived views, recomputed from the full record set on every call."""

    def __init__(
        self,
        sales_repository: SalesRepository,
        advisors_repository: AdvisorsRepository,
        leads_repository: LeadsRepository,
        appointments_repository: AppointmentsRepository,
    ) -> None:
        self.sales_repository = sales_repository
        self.advisors_repository = advisors_repository
        self.leads_repository = leads_repository
        self.appointments_repository = appointments_repository
        self.settings = get_settings()

    def get_sales_summary(
        self, user: CurrentUser, filters: SalesSummaryFilters
    ) -> SalesSummaryResponse:
        with storage_errors("list sales"):
            sales = self.sales_repository.list_sales()
        advisor_id = scoped_advisor_id(user, filters.asesor_id)
        selected = filter_sales_for_summary(sales, filters.start_date, filters.end_date, advisor_id)
        rows = summarize_sales(selected, filters.period_type)
        return SalesSummaryResponse(
            period_type=filters.period_type,
            start_date=filters.start_date,
            end_date=filters.end_date,
            rows=rows,
            totals=summarize_totals(rows, selected),
        )

    def get_commissions(self, year: int, month: int) -> CommissionReport:
        with storage_errors("load commission data"):
            advisors = [advisor for advisor in self.advisors_repository.list_advisors() if advisor.is_active]
            sales = self.sales_repository.list_sales()
        rate = Decimal(str(self.settings.commission_rate))
        rows = calculate_commissions(advisors, sales, year, month, rate)
        return CommissionReport(
            year=year,
            month=month,
            commission_rate=float(rate),
            rows=rows,
            total_sold=sum(row.monto_total_vendido for row in rows),
            total_commission=sum(row.comision for row in rows),
        )

    def get_leader_dashboard(
        self, year: int, month: int, today: Optional[date] = None
    ) -> LeaderDashboardResponse:
        with storage_errors("load dashboard data"):
            advisors = [advisor for advisor in self.advisors_repository.list_advisors() if advisor.is_active]
            sales = self.sales_repository.list_sales()
        minimum = Decimal(str(self.settings.min_monthly_sales))
        return LeaderDashboardResponse(
            year=year,
            month=month,
            minimum_monthly_amount=float(minimum),
            rows=leader_dashboard_rows(advisors, sales, year, month, minimum, today),
        )

    def get_advisor_dashboard(
        self,
        user: CurrentUser,
        advisor_id: str,
        year: int,
        month: int,
        today: Optional[date] = None,
    ) -> AdvisorDashboardResponse:
        target_id = scoped_advisor_id(user, advisor_id) or advisor_id
        with storage_errors("load dashboard data"):
            advisor = self.advisors_repository.get_advisor(target_id)
            all_sales = self.sales_repository.list_sales()
        if advisor is None:
            raise NotFoundError("Advisor not found")

        month_sales = advisor_month_sales(advisor.id, visible_sales(user, all_sales), year, month)
        return AdvisorDashboardResponse(
            asesor_id=advisor.id,
            nombre_completo=advisor.nombre_completo,
            year=year,
            month=month,
            total_month_amount=float(contracted_total(advisor.id, month_sales)),
            monthly_average=float(calculate_monthly_average(advisor, all_sales, today)),
            sales=[Sale.model_validate(sale.model_dump()) for sale in month_sales],
        )

    def get_lead_kpis(self, user: CurrentUser, asesor_id: Optional[str] = None) -> LeadKpis:
        with storage_errors("load KPI data"):
            leads = self.leads_repository.list_leads()
            appointments = self.appointments_repository.list_appointments()
        return build_lead_kpis(
            visible_leads(user, leads, asesor_id),
            visible_appointments(user, appointments, asesor_id),
        )

    def get_monthly_activity(
        self, user: CurrentUser, year: int, month: int, asesor_id: Optional[str] = None
    ) -> MonthlyActivityReport:
        with storage_errors("load activity data"):
            leads = self.leads_repository.list_leads()
            advisors = self.advisors_repository.list_advisors()
        return MonthlyActivityReport(
            year=year,
            month=month,
            days=monthly_activity(
                visible_leads(user, leads),
                visible_advisors(user, advisors, asesor_id),
                year,
                month,
            ),
        )
