from __future__ import annotations

import calendar
from collections import Counter
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List

from src.models.crm import AdvisorRecord, AppointmentRecord, LeadRecord
from src.models.enums import LeadStage
from src.schemas.reports import (
    AdvisorDailyActivity,
    DailyActivityRow,
    LeadKpis,
    PeriodCount,
    SourceCount,
)

UNKNOWN_SOURCE = "N/A"


def prospects_per_month(leads: Iterable[LeadRecord]) -> List[PeriodCount]:
    counts = Counter(
        f"{lead.fecha_prospeccion.year}-{lead.fecha_prospeccion.month:02d}" for lead in leads
    )
    return [PeriodCount(period=key, count=counts[key]) for key in sorted(counts)]


def prospects_by_source(leads: Iterable[LeadRecord]) -> List[SourceCount]:
    counts: Counter[str] = Counter()
    for lead in leads:
        counts[lead.lugar_prospeccion.strip() or UNKNOWN_SOURCE] += 1
    return [SourceCount(name=name, value=value) for name, value in counts.most_common()]


def conversion_rate(leads: List[LeadRecord]) -> float:
    if not leads:
        return 0.0
    reserved = sum(1 for lead in leads if lead.estatus == LeadStage.RESERVED)
    rate = Decimal(reserved) / Decimal(len(leads)) * Decimal("100")
    return float(rate.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def build_lead_kpis(
    leads: Iterable[LeadRecord], appointments: Iterable[AppointmentRecord]
) -> LeadKpis:
    leads = list(leads)
    return LeadKpis(
        total_leads=len(leads),
        prospects_per_month=prospects_per_month(leads),
        prospects_by_source=prospects_by_source(leads),
        appointment_count=len(list(appointments)),
        conversion_rate=conversion_rate(leads),
        total_interactions=sum(lead.interacciones for lead in leads),
    )


def monthly_activity(
    leads: Iterable[LeadRecord],
    advisors: Iterable[AdvisorRecord],
    year: int,
    month: int,
) -> List[DailyActivityRow]:
    """Per-day new prospects and follow-ups for every advisor in ``advisors``.

    Follow-ups are approximated by each new prospect's interaction count, with
    a minimum of one; interactions carry no dates of their own.
    """
    advisor_ids = [advisor.id for advisor in advisors]
    days_in_month = calendar.monthrange(year, month)[1]
    grid = {
        date(year, month, day): {
            advisor_id: AdvisorDailyActivity(asesor_id=advisor_id) for advisor_id in advisor_ids
        }
        for day in range(1, days_in_month + 1)
    }
    for lead in leads:
        cell = grid.get(lead.fecha_prospeccion, {}).get(lead.asesor_id)
        if cell is None:
            continue
        cell.new_prospects += 1
        cell.follow_ups += lead.interacciones if lead.interacciones > 0 else 1

    return [
        DailyActivityRow(date=day, advisors=list(cells.values()))
        for day, cells in sorted(grid.items())
    ]
