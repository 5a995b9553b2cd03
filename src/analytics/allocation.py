from __future__ import annotations

from decimal import Decimal

from src.models.crm import SaleRecord

ZERO = Decimal("0")
SPLIT_DIVISOR = Decimal("2")


def assigned_amount(sale: SaleRecord, advisor_id: str) -> Decimal:
    """Share of ``sale.monto`` credited to ``advisor_id``.

    A sale with a secondary advisor always splits 50/50 between the two
    advisors; a sale without one belongs entirely to the primary advisor.
    """
    if sale.asesor_secundario_id:
        if advisor_id in (sale.asesor_principal_id, sale.asesor_secundario_id):
            return sale.monto / SPLIT_DIVISOR
        return ZERO
    if advisor_id == sale.asesor_principal_id:
        return sale.monto
    return ZERO
