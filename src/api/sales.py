from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_current_user, get_sales_service
from src.models.crm import CurrentUser
from src.models.enums import SaleStage
from src.schemas.sales import Sale, SaleCreateRequest, SaleInProcess, SaleUpdateRequest
from src.services.sales_service import SalesService
from src.shared.response import ResponseEnvelope, build_meta, paginate_list

router = APIRouter(prefix="/sales", tags=["sales"])


@router.get("")
def list_sales(
    asesor_id: Optional[str] = Query(default=None, alias="asesorId"),
    user: CurrentUser = Depends(get_current_user),
    service: SalesService = Depends(get_sales_service),
) -> ResponseEnvelope[List[Sale]]:
    data = service.list_sales(user, asesor_id)
    return ResponseEnvelope(data=data, meta=build_meta("sales"))


@router.get("/in-process")
def list_sales_in_process(
    etapa: Optional[SaleStage] = Query(default=None),
    asesor_id: Optional[str] = Query(default=None, alias="asesorId"),
    user: CurrentUser = Depends(get_current_user),
    service: SalesService = Depends(get_sales_service),
) -> ResponseEnvelope[List[SaleInProcess]]:
    data = service.list_in_process(user, etapa=etapa, asesor_id=asesor_id)
    return ResponseEnvelope(data=data, meta=build_meta("sales,advisors", "open"))


@router.get("/history")
def list_sales_history(
    asesor_id: Optional[str] = Query(default=None, alias="asesorId"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=50, ge=1, le=200, alias="pageSize"),
    user: CurrentUser = Depends(get_current_user),
    service: SalesService = Depends(get_sales_service),
) -> ResponseEnvelope[List[Sale]]:
    history = service.list_history(user, asesor_id)
    data, pagination = paginate_list(history, page, page_size)
    return ResponseEnvelope(data=data, pagination=pagination, meta=build_meta("sales", "closed"))


@router.get("/{sale_id}")
def get_sale(
    sale_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: SalesService = Depends(get_sales_service),
) -> ResponseEnvelope[Sale]:
    return ResponseEnvelope(data=service.get_sale(user, sale_id), meta=build_meta("sales"))


@router.post("", status_code=201)
def create_sale(
    request: SaleCreateRequest,
    user: CurrentUser = Depends(get_current_user),
    service: SalesService = Depends(get_sales_service),
) -> ResponseEnvelope[Sale]:
    return ResponseEnvelope(data=service.create_sale(user, request), meta=build_meta("sales"))


@router.patch("/{sale_id}")
def update_sale(
    sale_id: str,
    request: SaleUpdateRequest,
    user: CurrentUser = Depends(get_current_user),
    service: SalesService = Depends(get_sales_service),
) -> ResponseEnvelope[Sale]:
    data = service.update_sale(user, sale_id, request)
    return ResponseEnvelope(data=data, meta=build_meta("sales"))
