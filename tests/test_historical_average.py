from __future__ import annotations

from datetime import date
from decimal import Decimal

from src.analytics.historical_average import calculate_monthly_average
from src.models.enums import SaleStage, SaleStatus
from tests.stubs import make_advisor, make_sale

TODAY = date(2024, 4, 15)


def test_established_advisor_averages_over_completed_months_this_year():
    advisor = make_advisor("asesor-1", "Ana López", "ana@maderas.mx", fecha_ingreso=date(2020, 1, 10))
    sales = [
        make_sale("s1", "A", "3000", fecha_inicio_proceso=date(2024, 1, 12)),
        make_sale("s2", "B", "6000", fecha_inicio_proceso=date(2024, 2, 3), asesor_secundario_id="asesor-2"),
        # current month and previous year are outside the window
        make_sale("s3", "C", "9000", fecha_inicio_proceso=date(2024, 4, 2)),
        make_sale("s4", "D", "9000", fecha_inicio_proceso=date(2023, 12, 28)),
        make_sale(
            "s5",
            "E",
            "9000",
            fecha_inicio_proceso=date(2024, 3, 1),
            etapa_proceso=SaleStage.RESERVED,
            estatus_proceso=SaleStatus.IN_PROGRESS,
        ),
    ]
    assert calculate_monthly_average(advisor, sales, TODAY) == Decimal("2000")


def test_first_year_advisor_averages_over_months_since_hire():
    advisor = make_advisor("asesor-2", "Bruno Díaz", "bruno@maderas.mx", fecha_ingreso=date(2024, 1, 20))
    sales = [
        make_sale(
            "s1", "A", "9000", fecha_inicio_proceso=date(2024, 2, 10), asesor_principal_id="asesor-2"
        )
    ]
    assert calculate_monthly_average(advisor, sales, TODAY) == Decimal("3000")


def test_no_qualifying_sales_gives_zero():
    advisor = make_advisor("asesor-1", "Ana López", "ana@maderas.mx")
    assert calculate_monthly_average(advisor, [], TODAY) == Decimal("0")


def test_non_positive_divisor_gives_zero():
    established = make_advisor("asesor-1", "Ana López", "ana@maderas.mx")
    january_sales = [make_sale("s1", "A", "5000", fecha_inicio_proceso=date(2023, 12, 1))]
    assert calculate_monthly_average(established, january_sales, date(2024, 1, 20)) == Decimal("0")

    hired_this_month = make_advisor(
        "asesor-4", "Nuevo", "nuevo@maderas.mx", fecha_ingreso=date(2024, 4, 1)
    )
    assert calculate_monthly_average(hired_this_month, [], TODAY) == Decimal("0")
