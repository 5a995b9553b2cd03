from __future__ import annotations

from typing import List, Optional

from src.core.errors import BadRequestError, NotFoundError
from src.core.supabase import storage_errors
from src.models.crm import LotRecord
from src.models.enums import LotStatus, SaleStatus
from src.repositories.lots_repository import LotsRepository
from src.repositories.sales_repository import SalesRepository
from src.schemas.lots import Lot, LotCreateRequest, LotUpdateRequest
from src.services.session_state import SessionRegistry

LOT_IN_SALE_MESSAGE = "No se puede eliminar un lote que está asociado a una venta en progreso."


class LotsService:
    def __init__(
        self,
        repository: LotsRepository,
        sales_repository: SalesRepository,
        sessions: Optional[SessionRegistry] = None,
    ) -> None:
        self.repository = repository
        self.sales_repository = sales_repository
        self.sessions = sessions

    def list_lots(self, estatus: Optional[LotStatus] = None, search: Optional[str] = None) -> List[Lot]:
        with storage_errors("list lots"):
            records = self.repository.list_lots()
        if estatus is not None:
            records = [record for record in records if record.estatus == estatus]
        if search:
            term = search.strip().lower()
            records = [record for record in records if term in record.nombre_lote.lower()]
        return [self._to_lot(record) for record in records]

    def create_lot(self, request: LotCreateRequest) -> Lot:
        with storage_errors("create lot"):
            record = self.repository.create_lot(request.model_dump(mode="json"))
        self._publish(record)
        return self._to_lot(record)

    def update_lot(self, lot_id: str, request: LotUpdateRequest) -> Lot:
        payload = request.model_dump(mode="json", exclude_unset=True)
        with storage_errors("update lot"):
            record = self.repository.update_lot(lot_id, payload)
        if record is None:
            raise NotFoundError("Lot not found")
        self._publish(record)
        return self._to_lot(record)

    def delete_lot(self, lot_id: str) -> None:
        with storage_errors("load lot"):
            lot = self.repository.get_lot(lot_id)
        if lot is None:
            raise NotFoundError("Lot not found")
        with storage_errors("list sales"):
            sales = self.sales_repository.list_sales()
        if any(
            sale.nombre_lote == lot.nombre_lote and sale.estatus_proceso == SaleStatus.IN_PROGRESS
            for sale in sales
        ):
            raise BadRequestError(LOT_IN_SALE_MESSAGE)
        with storage_errors("delete lot"):
            self.repository.delete_lot(lot_id)
        if self.sessions is not None:
            self.sessions.record_deleted("lots", lot_id)

    def _publish(self, record: LotRecord) -> None:
        if self.sessions is not None:
            self.sessions.record_saved("lots", record)

    @staticmethod
    def _to_lot(record: LotRecord) -> Lot:
        return Lot.model_validate(record.model_dump())
