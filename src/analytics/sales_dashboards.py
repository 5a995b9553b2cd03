from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from src.analytics.allocation import ZERO, assigned_amount
from src.analytics.commissions import contracted_amount_in_month
from src.analytics.historical_average import calculate_monthly_average
from src.models.crm import AdvisorRecord, SaleRecord
from src.models.enums import SaleStage, SaleStatus
from src.schemas.reports import LeaderDashboardRow
from src.shared.time import is_in_month


def leader_dashboard_rows(
    advisors: Iterable[AdvisorRecord],
    sales: Iterable[SaleRecord],
    year: int,
    month: int,
    minimum_monthly_amount: Decimal,
    today: Optional[date] = None,
) -> List[LeaderDashboardRow]:
    sales = list(sales)
    computed = []
    for advisor in advisors:
        month_amount = contracted_amount_in_month(advisor.id, sales, year, month)
        average = calculate_monthly_average(advisor, sales, today)
        computed.append((advisor, month_amount, average))
    computed.sort(key=lambda item: item[1], reverse=True)

    return [
        LeaderDashboardRow(
            rank=index,
            asesor_id=advisor.id,
            nombre_completo=advisor.nombre_completo,
            total_month_amount=float(month_amount),
            monthly_average=float(average),
            below_minimum=month_amount < minimum_monthly_amount,
        )
        for index, (advisor, month_amount, average) in enumerate(computed, start=1)
    ]


def advisor_month_sales(
    advisor_id: str, sales: Iterable[SaleRecord], year: int, month: int
) -> List[SaleRecord]:
    return [
        sale
        for sale in sales
        if sale.involves(advisor_id) and is_in_month(sale.fecha_inicio_proceso, year, month)
    ]


def contracted_total(advisor_id: str, sales: Iterable[SaleRecord]) -> Decimal:
    return sum(
        (
            assigned_amount(sale, advisor_id)
            for sale in sales
            if sale.etapa_proceso == SaleStage.CONTRACTED
        ),
        ZERO,
    )


def sales_in_process(
    sales: Iterable[SaleRecord], stage: Optional[SaleStage] = None
) -> List[SaleRecord]:
    return [
        sale
        for sale in sales
        if sale.estatus_proceso == SaleStatus.IN_PROGRESS
        and (stage is None or sale.etapa_proceso == stage)
    ]


def closed_sales_history(sales: Iterable[SaleRecord]) -> List[SaleRecord]:
    closed = [sale for sale in sales if sale.estatus_proceso == SaleStatus.CLOSED]
    return sorted(closed, key=lambda sale: sale.reference_date, reverse=True)


def advisor_names(sale: SaleRecord, advisors_by_id: Dict[str, AdvisorRecord]) -> str:
    names = []
    for advisor_id in (sale.asesor_principal_id, sale.asesor_secundario_id):
        advisor = advisors_by_id.get(advisor_id or "")
        if advisor:
            names.append(advisor.nombre_completo)
    return " / ".join(names)
