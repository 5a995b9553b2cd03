from __future__ import annotations

from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_current_user, get_lots_service, require_leader
from src.models.crm import CurrentUser
from src.models.enums import LotStatus
from src.schemas.lots import Lot, LotCreateRequest, LotUpdateRequest
from src.services.lots_service import LotsService
from src.shared.response import ResponseEnvelope, build_meta

router = APIRouter(prefix="/lots", tags=["lots"])


@router.get("")
def list_lots(
    estatus: Optional[LotStatus] = Query(default=None),
    search: Optional[str] = Query(default=None),
    _: CurrentUser = Depends(get_current_user),
    service: LotsService = Depends(get_lots_service),
) -> ResponseEnvelope[List[Lot]]:
    data = service.list_lots(estatus=estatus, search=search)
    return ResponseEnvelope(data=data, meta=build_meta("lots"))


@router.post("", status_code=201)
def create_lot(
    request: LotCreateRequest,
    _: CurrentUser = Depends(require_leader),
    service: LotsService = Depends(get_lots_service),
) -> ResponseEnvelope[Lot]:
    return ResponseEnvelope(data=service.create_lot(request), meta=build_meta("lots"))


@router.patch("/{lot_id}")
def update_lot(
    lot_id: str,
    request: LotUpdateRequest,
    _: CurrentUser = Depends(require_leader),
    service: LotsService = Depends(get_lots_service),
) -> ResponseEnvelope[Lot]:
    return ResponseEnvelope(data=service.update_lot(lot_id, request), meta=build_meta("lots"))


@router.delete("/{lot_id}")
def delete_lot(
    lot_id: str,
    _: CurrentUser = Depends(require_leader),
    service: LotsService = Depends(get_lots_service),
) -> ResponseEnvelope[Dict[str, bool]]:
    service.delete_lot(lot_id)
    return ResponseEnvelope(data={"deleted": True}, meta=build_meta("lots,sales"))
