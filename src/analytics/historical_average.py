from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from src.analytics.allocation import ZERO, assigned_amount
from src.models.crm import AdvisorRecord, SaleRecord
from src.models.enums import SaleStage
from src.shared.time import month_start, months_between, subtract_years


def calculate_monthly_average(
    advisor: AdvisorRecord,
    sales: Iterable[SaleRecord],
    today: Optional[date] = None,
) -> Decimal:
    """Trailing monthly average of contracted sales, excluding the current month.

    Advisors hired more than a year ago are averaged over the elapsed months
    of the current year; newer advisors over the whole months since hire.
    """
    reference = today or date.today()
    current_month_start = month_start(reference)

    closed_before_month = [
        sale
        for sale in sales
        if sale.involves(advisor.id)
        and sale.etapa_proceso == SaleStage.CONTRACTED
        and sale.fecha_inicio_proceso < current_month_start
    ]

    one_year_ago = subtract_years(reference, 1)
    if advisor.fecha_ingreso < one_year_ago:
        start_of_year = date(reference.year, 1, 1)
        window = [sale for sale in closed_before_month if sale.fecha_inicio_proceso >= start_of_year]
        # month index of today, i.e. completed months this year
        divisor = reference.month - 1
    else:
        window = closed_before_month
        divisor = months_between(advisor.fecha_ingreso, current_month_start)

    if divisor <= 0 or not window:
        return ZERO

    total = sum((assigned_amount(sale, advisor.id) for sale in window), ZERO)
    return total / Decimal(divisor)
