from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from src.analytics.sale_process import days_in_process, is_overdue, with_derived_status
from src.analytics.sales_dashboards import advisor_names, closed_sales_history, sales_in_process
from src.analytics.visibility import visible_sales
from src.core.config import get_settings
from src.core.errors import BadRequestError, ForbiddenError, NotFoundError
from src.core.supabase import storage_errors
from src.models.crm import CurrentUser, SaleRecord
from src.models.enums import SaleStage
from src.repositories.advisors_repository import AdvisorsRepository
from src.repositories.sales_repository import SalesRepository
from src.schemas.sales import Sale, SaleCreateRequest, SaleInProcess, SaleUpdateRequest
from src.services.session_state import SessionRegistry
from src.shared.formatting import format_currency

MISSING_PRIMARY_ADVISOR_MESSAGE = "Por favor, seleccione un asesor principal."
MISSING_LOT_MESSAGE = "Por favor, ingrese un nombre de lote."

logger = logging.getLogger(__name__)


class SalesService:
    def __init__(
        self,
        repository: SalesRepository,
        advisors_repository: AdvisorsRepository,
        sessions: Optional[SessionRegistry] = None,
    ) -> None:
        self.repository = repository
        self.advisors_repository = advisors_repository
        self.sessions = sessions
        self.settings = get_settings()

    def list_sales(self, user: CurrentUser, asesor_id: Optional[str] = None) -> List[Sale]:
        return [self._to_sale(record) for record in self._visible_sales(user, asesor_id)]

    def get_sale(self, user: CurrentUser, sale_id: str) -> Sale:
        return self._to_sale(self._load_visible(user, sale_id))

    def list_in_process(
        self,
        user: CurrentUser,
        etapa: Optional[SaleStage] = None,
        asesor_id: Optional[str] = None,
        today: Optional[date] = None,
    ) -> List[SaleInProcess]:
        records = sales_in_process(self._visible_sales(user, asesor_id), etapa)
        with storage_errors("list advisors"):
            advisors_by_id = {advisor.id: advisor for advisor in self.advisors_repository.list_advisors()}
        max_days = self.settings.max_process_days
        return [
            SaleInProcess(
                sale=self._to_sale(record),
                advisor_names=advisor_names(record, advisors_by_id),
                days_in_process=days_in_process(record, today),
                formatted_amount=format_currency(float(record.monto)),
                max_process_days=max_days,
                is_overdue=is_overdue(record, max_days, today),
            )
            for record in records
        ]

    def list_history(self, user: CurrentUser, asesor_id: Optional[str] = None) -> List[Sale]:
        records = closed_sales_history(self._visible_sales(user, asesor_id))
        return [self._to_sale(record) for record in records]

    def create_sale(self, user: CurrentUser, request: SaleCreateRequest) -> Sale:
        payload = request.model_dump(mode="json")
        self._validate_payload(user, payload)
        payload["created_by_email"] = user.email
        payload = with_derived_status(payload)
        with storage_errors("create sale"):
            record = self.repository.create_sale(payload)
        logger.info("Created sale %s (%s)", record.id, record.etapa_proceso.value)
        self._publish(record)
        return self._to_sale(record)

    def update_sale(self, user: CurrentUser, sale_id: str, request: SaleUpdateRequest) -> Sale:
        current = self._load_visible(user, sale_id)
        changes = request.model_dump(mode="json", exclude_unset=True)
        merged = {**current.model_dump(mode="json"), **changes}
        self._validate_payload(user, merged)
        # Status is always recomputed from the (possibly unchanged) stage.
        changes["etapa_proceso"] = merged["etapa_proceso"]
        changes = with_derived_status(changes)
        if "asesor_secundario_id" in changes and not changes["asesor_secundario_id"]:
            changes["asesor_secundario_id"] = None
        with storage_errors("update sale"):
            record = self.repository.update_sale(sale_id, changes)
        if record is None:
            raise NotFoundError("Sale not found")
        self._publish(record)
        return self._to_sale(record)

    def _validate_payload(self, user: CurrentUser, payload: Dict[str, Any]) -> None:
        if not payload.get("asesor_principal_id"):
            raise BadRequestError(MISSING_PRIMARY_ADVISOR_MESSAGE)
        if not str(payload.get("nombre_lote") or "").strip():
            raise BadRequestError(MISSING_LOT_MESSAGE)
        secondary = payload.get("asesor_secundario_id") or None
        if secondary and secondary == payload["asesor_principal_id"]:
            raise BadRequestError("Secondary advisor must differ from the primary advisor")
        payload["asesor_secundario_id"] = secondary
        if not user.is_leader and user.id not in (payload["asesor_principal_id"], secondary):
            raise ForbiddenError("Advisors can only register sales they take part in")

    def _visible_sales(self, user: CurrentUser, asesor_id: Optional[str]) -> List[SaleRecord]:
        with storage_errors("list sales"):
            records = self.repository.list_sales()
        return visible_sales(user, records, asesor_id)

    def _load_visible(self, user: CurrentUser, sale_id: str) -> SaleRecord:
        with storage_errors("load sale"):
            record = self.repository.get_sale(sale_id)
        if record is None:
            raise NotFoundError("Sale not found")
        if not visible_sales(user, [record]):
            raise ForbiddenError("Sale belongs to another advisor")
        return record

    def _publish(self, record: SaleRecord) -> None:
        if self.sessions is not None:
            self.sessions.record_saved("sales", record)

    @staticmethod
    def _to_sale(record: SaleRecord) -> Sale:
        return Sale.model_validate(record.model_dump())
