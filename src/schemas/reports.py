from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import ConfigDict, Field

from src.models.enums import PeriodType
from src.schemas.sales import Sale
from src.shared.base import BaseSchema


class SalesSummaryFilters(BaseSchema):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    period_type: PeriodType = PeriodType.MONTHLY
    asesor_id: Optional[str] = None


class SalesSummaryRow(BaseSchema):
    period: str
    label: str
    total_amount: float
    pending_amount: float
    deal_count: int


class SalesSummaryTotals(BaseSchema):
    total_amount: float
    total_pending: float
    average_per_advisor: float
    advisor_count: int


class SalesSummaryResponse(BaseSchema):
    period_type: PeriodType
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    rows: List[SalesSummaryRow]
    totals: SalesSummaryTotals


class CommissionRow(BaseSchema):
    asesor_id: str
    nombre_completo: str
    monto_total_vendido: float
    comision: float


class CommissionReport(BaseSchema):
    year: int
    month: int
    commission_rate: float
    rows: List[CommissionRow]
    total_sold: float
    total_commission: float


class LeaderDashboardRow(BaseSchema):
    rank: int
    asesor_id: str
    nombre_completo: str
    total_month_amount: float
    monthly_average: float
    below_minimum: bool


class LeaderDashboardResponse(BaseSchema):
    year: int
    month: int
    minimum_monthly_amount: float
    rows: List[LeaderDashboardRow]


class AdvisorDashboardResponse(BaseSchema):
    asesor_id: str
    nombre_completo: str
    year: int
    month: int
    total_month_amount: float
    monthly_average: float
    sales: List[Sale]


class PeriodCount(BaseSchema):
    period: str
    count: int


class SourceCount(BaseSchema):
    name: str
    value: int


class LeadKpis(BaseSchema):
    total_leads: int
    prospects_per_month: List[PeriodCount]
    prospects_by_source: List[SourceCount]
    appointment_count: int
    conversion_rate: float
    total_interactions: int


class AdvisorDailyActivity(BaseSchema):
    asesor_id: str
    new_prospects: int = Field(default=0, ge=0)
    follow_ups: int = Field(default=0, ge=0)


class DailyActivityRow(BaseSchema):
    date: date
    advisors: List[AdvisorDailyActivity]


class MonthlyActivityReport(BaseSchema):
    year: int
    month: int
    days: List[DailyActivityRow]
