from __future__ import annotations

from typing import Iterable, List, Optional

from pydantic import BaseModel

from src.models.crm import (
    AdvisorRecord,
    AppointmentRecord,
    CurrentUser,
    LeadRecord,
    MonthlyGoalRecord,
    SaleRecord,
)


def _same_email(left: str, right: str) -> bool:
    return left.strip().lower() == right.strip().lower()


def visible_leads(
    user: CurrentUser, leads: Iterable[LeadRecord], advisor_id: Optional[str] = None
) -> List[LeadRecord]:
    if user.is_leader:
        return [lead for lead in leads if not advisor_id or lead.asesor_id == advisor_id]
    return [
        lead
        for lead in leads
        if lead.asesor_id == user.id or _same_email(lead.created_by_email, user.email)
    ]


def visible_sales(
    user: CurrentUser, sales: Iterable[SaleRecord], advisor_id: Optional[str] = None
) -> List[SaleRecord]:
    if user.is_leader:
        return [sale for sale in sales if not advisor_id or sale.involves(advisor_id)]
    return [
        sale
        for sale in sales
        if sale.involves(user.id) or _same_email(sale.created_by_email, user.email)
    ]


def visible_appointments(
    user: CurrentUser,
    appointments: Iterable[AppointmentRecord],
    advisor_id: Optional[str] = None,
) -> List[AppointmentRecord]:
    if user.is_leader:
        return [
            appointment
            for appointment in appointments
            if not advisor_id or appointment.asesor_id == advisor_id
        ]
    return [
        appointment
        for appointment in appointments
        if appointment.asesor_id == user.id
        or _same_email(appointment.created_by_email, user.email)
    ]


def visible_advisors(
    user: CurrentUser, advisors: Iterable[AdvisorRecord], advisor_id: Optional[str] = None
) -> List[AdvisorRecord]:
    """Active advisors the user may report on."""
    active = [advisor for advisor in advisors if advisor.is_active]
    if user.is_leader:
        return [advisor for advisor in active if not advisor_id or advisor.id == advisor_id]
    return [advisor for advisor in active if advisor.id == user.id]


def scoped_advisor_id(user: CurrentUser, requested: Optional[str]) -> Optional[str]:
    """Advisors are always pinned to their own id; leaders may pick any."""
    if user.is_leader:
        return requested
    return user.id


def visible_goals(
    user: CurrentUser, goals: Iterable[MonthlyGoalRecord]
) -> List[MonthlyGoalRecord]:
    if user.is_leader:
        return list(goals)
    return [goal for goal in goals if goal.asesor_id == user.id]


_RECORD_FILTERS = {
    "leads": visible_leads,
    "sales": visible_sales,
    "appointments": visible_appointments,
    "monthly_goals": visible_goals,
}


def is_visible(user: CurrentUser, table: str, record: BaseModel) -> bool:
    """Whether a single stored row belongs in the user's view of ``table``.

    Advisors and lots are shared with every user.
    """
    record_filter = _RECORD_FILTERS.get(table)
    if record_filter is None:
        return True
    return bool(record_filter(user, [record]))
