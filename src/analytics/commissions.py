from __future__ import annotations

from decimal import Decimal
from typing import Iterable, List

from src.analytics.allocation import ZERO, assigned_amount
from src.models.crm import AdvisorRecord, SaleRecord
from src.models.enums import SaleStage
from src.schemas.reports import CommissionRow
from src.shared.time import is_in_month


def contracted_amount_in_month(
    advisor_id: str, sales: Iterable[SaleRecord], year: int, month: int
) -> Decimal:
    """Assigned contracted amount dated (close date, else start) in the month."""
    return sum(
        (
            assigned_amount(sale, advisor_id)
            for sale in sales
            if sale.involves(advisor_id)
            and sale.etapa_proceso == SaleStage.CONTRACTED
            and is_in_month(sale.reference_date, year, month)
        ),
        ZERO,
    )


def calculate_commissions(
    advisors: Iterable[AdvisorRecord],
    sales: Iterable[SaleRecord],
    year: int,
    month: int,
    commission_rate: Decimal,
) -> List[CommissionRow]:
    sales = list(sales)
    rows: List[tuple[Decimal, CommissionRow]] = []
    for advisor in advisors:
        sold = contracted_amount_in_month(advisor.id, sales, year, month)
        commission = sold * commission_rate
        rows.append(
            (
                commission,
                CommissionRow(
                    asesor_id=advisor.id,
                    nombre_completo=advisor.nombre_completo,
                    monto_total_vendido=float(sold),
                    comision=float(commission),
                ),
            )
        )
    rows.sort(key=lambda item: item[0], reverse=True)
    return [row for _, row in rows]
