from __future__ import annotations

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from src.analytics.allocation import ZERO
from src.models.crm import SaleRecord
from src.models.enums import PENDING_SALE_STAGES, PeriodType, SaleStage
from src.schemas.reports import SalesSummaryRow, SalesSummaryTotals

MONTH_NAMES = [
    "enero",
    "febrero",
    "marzo",
    "abril",
    "mayo",
    "junio",
    "julio",
    "agosto",
    "septiembre",
    "octubre",
    "noviembre",
    "diciembre",
]


def period_key(value: date, period_type: PeriodType) -> str:
    if period_type == PeriodType.QUARTERLY:
        quarter = (value.month - 1) // 3 + 1
        return f"{value.year}-Q{quarter}"
    if period_type == PeriodType.YEARLY:
        return f"{value.year}"
    return f"{value.year}-{value.month:02d}"


def period_label(key: str, period_type: PeriodType) -> str:
    if period_type == PeriodType.YEARLY:
        return key
    if period_type == PeriodType.QUARTERLY:
        return key.replace("-", " ")
    year, month = key.split("-")
    return f"{MONTH_NAMES[int(month) - 1]} de {year}"


def filter_sales_for_summary(
    sales: Iterable[SaleRecord],
    start_date: Optional[date],
    end_date: Optional[date],
    advisor_id: Optional[str] = None,
) -> List[SaleRecord]:
    selected: List[SaleRecord] = []
    for sale in sales:
        if start_date and sale.fecha_inicio_proceso < start_date:
            continue
        if end_date and sale.fecha_inicio_proceso > end_date:
            continue
        if advisor_id and not sale.involves(advisor_id):
            continue
        selected.append(sale)
    return selected


def summarize_sales(
    sales: Iterable[SaleRecord], period_type: PeriodType
) -> List[SalesSummaryRow]:
    buckets: Dict[str, Dict[str, Decimal]] = defaultdict(
        lambda: {"total_amount": ZERO, "pending_amount": ZERO, "deal_count": ZERO}
    )
    for sale in sales:
        bucket = buckets[period_key(sale.fecha_inicio_proceso, period_type)]
        if sale.etapa_proceso == SaleStage.CONTRACTED:
            bucket["total_amount"] += sale.monto
            bucket["deal_count"] += 1
        elif sale.etapa_proceso in PENDING_SALE_STAGES:
            bucket["pending_amount"] += sale.monto

    return [
        SalesSummaryRow(
            period=key,
            label=period_label(key, period_type),
            total_amount=float(buckets[key]["total_amount"]),
            pending_amount=float(buckets[key]["pending_amount"]),
            deal_count=int(buckets[key]["deal_count"]),
        )
        for key in sorted(buckets.keys())
    ]


def summarize_totals(
    rows: Iterable[SalesSummaryRow], sales: Iterable[SaleRecord]
) -> SalesSummaryTotals:
    rows = list(rows)
    total_amount = sum(row.total_amount for row in rows)
    total_pending = sum(row.pending_amount for row in rows)

    advisor_ids = set()
    for sale in sales:
        advisor_ids.add(sale.asesor_principal_id)
        if sale.asesor_secundario_id:
            advisor_ids.add(sale.asesor_secundario_id)
    divisor = len(advisor_ids) or 1

    return SalesSummaryTotals(
        total_amount=total_amount,
        total_pending=total_pending,
        average_per_advisor=total_amount / divisor,
        advisor_count=len(advisor_ids),
    )
