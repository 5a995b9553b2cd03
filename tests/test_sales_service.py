from __future__ import annotations

from datetime import date

import pytest

from src.core.errors import BadRequestError, ForbiddenError
from src.models.enums import SaleStage, SaleStatus
from src.schemas.sales import SaleCreateRequest, SaleUpdateRequest
from src.services.sales_service import SalesService


@pytest.fixture()
def service(store) -> SalesService:
    return SalesService(store.sales, store.advisors)


def _request(**overrides) -> SaleCreateRequest:
    values = {
        "nombre_lote": "Lote 30",
        "nombre_cliente": "Sofía Luna",
        "monto": 180000,
        "fecha_inicio_proceso": date(2024, 4, 2),
        "asesor_principal_id": "asesor-1",
    }
    values.update(overrides)
    return SaleCreateRequest(**values)


def test_status_is_derived_from_stage_on_create(service, leader):
    sale = service.create_sale(leader, _request(etapa_proceso=SaleStage.CONTRACTED))
    assert sale.estatus_proceso == SaleStatus.CLOSED

    open_sale = service.create_sale(leader, _request(etapa_proceso=SaleStage.DOWN_PAYMENT))
    assert open_sale.estatus_proceso == SaleStatus.IN_PROGRESS


def test_status_is_rederived_on_update(service, leader):
    cancelled = service.update_sale(leader, "sale-2", SaleUpdateRequest(etapa_proceso=SaleStage.CANCELLED))
    assert cancelled.estatus_proceso == SaleStatus.CLOSED

    reopened = service.update_sale(leader, "sale-1", SaleUpdateRequest(etapa_proceso=SaleStage.DOWN_PAYMENT))
    assert reopened.estatus_proceso == SaleStatus.IN_PROGRESS

    renamed = service.update_sale(leader, "sale-1", SaleUpdateRequest(nombre_cliente="Pedro S."))
    assert renamed.estatus_proceso == SaleStatus.IN_PROGRESS


def test_close_date_alone_does_not_close_a_sale(service, leader):
    sale = service.update_sale(leader, "sale-2", SaleUpdateRequest(fecha_cierre=date(2024, 4, 1)))
    assert sale.estatus_proceso == SaleStatus.IN_PROGRESS


def test_invalid_advisor_selection(service, leader, advisor_user):
    with pytest.raises(BadRequestError):
        service.create_sale(leader, _request(asesor_principal_id=""))
    with pytest.raises(BadRequestError):
        service.create_sale(leader, _request(asesor_secundario_id="asesor-1"))
    with pytest.raises(BadRequestError):
        service.create_sale(leader, _request(nombre_lote="  "))
    with pytest.raises(ForbiddenError):
        service.create_sale(advisor_user, _request(asesor_principal_id="asesor-2"))


def test_in_process_view(service, leader):
    rows = service.list_in_process(leader, today=date(2024, 5, 1))
    assert len(rows) == 1
    row = rows[0]
    assert row.sale.id == "sale-2"
    assert row.advisor_names == "Ana López / Bruno Díaz"
    assert row.days_in_process == 52
    assert row.max_process_days == 45
    assert row.is_overdue is True
    assert row.formatted_amount == "$200,000.00"


def test_history_lists_closed_sales(service, advisor_user):
    assert [sale.id for sale in service.list_history(advisor_user)] == ["sale-1"]
