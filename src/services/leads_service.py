from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from src.analytics.lead_pipeline import transition_lead
from src.analytics.visibility import scoped_advisor_id, visible_leads
from src.core.errors import BadRequestError, ForbiddenError, NotFoundError, PersistenceError
from src.core.supabase import storage_errors
from src.models.crm import CurrentUser, LeadRecord, SaleRecord
from src.models.enums import KANBAN_STAGES, LeadStage
from src.repositories.leads_repository import LeadsRepository
from src.repositories.sales_repository import SalesRepository
from src.schemas.leads import (
    KanbanColumn,
    Lead,
    LeadCreateRequest,
    LeadStageChangeRequest,
    LeadStageChangeResult,
    LeadUpdateRequest,
)
from src.schemas.sales import Sale
from src.services.session_state import SessionRegistry

MISSING_ADVISOR_MESSAGE = "Por favor, seleccione un asesor."
MISSING_DISCARD_REASON_MESSAGE = "Por favor, indique el motivo de descarte."

logger = logging.getLogger(__name__)


class LeadsService:
    def __init__(
        self,
        repository: LeadsRepository,
        sales_repository: SalesRepository,
        sessions: Optional[SessionRegistry] = None,
    ) -> None:
        self.repository = repository
        self.sales_repository = sales_repository
        self.sessions = sessions

    def list_leads(
        self,
        user: CurrentUser,
        asesor_id: Optional[str] = None,
        estatus: Optional[LeadStage] = None,
    ) -> List[Lead]:
        with storage_errors("list leads"):
            records = self.repository.list_leads()
        records = visible_leads(user, records, asesor_id)
        if estatus is not None:
            records = [record for record in records if record.estatus == estatus]
        return [self._to_lead(record) for record in records]

    def get_kanban(self, user: CurrentUser, asesor_id: Optional[str] = None) -> List[KanbanColumn]:
        leads = self.list_leads(user, asesor_id)
        return [
            KanbanColumn(stage=stage, leads=[lead for lead in leads if lead.estatus == stage])
            for stage in KANBAN_STAGES
        ]

    def get_lead(self, user: CurrentUser, lead_id: str) -> Lead:
        return self._to_lead(self._load_visible(user, lead_id))

    def create_lead(self, user: CurrentUser, request: LeadCreateRequest) -> Lead:
        created = self.create_leads(user, [request])
        return created[0]

    def create_leads(self, user: CurrentUser, requests: List[LeadCreateRequest]) -> List[Lead]:
        payloads = [self._new_lead_payload(user, request) for request in requests]
        with storage_errors("create leads"):
            records = self.repository.create_leads(payloads)
        logger.info("Created %d lead(s) for %s", len(records), user.email)
        for record in records:
            self._publish(record)
        return [self._to_lead(record) for record in records]

    def update_lead(self, user: CurrentUser, lead_id: str, request: LeadUpdateRequest) -> Lead:
        self._load_visible(user, lead_id)
        payload = request.model_dump(mode="json", exclude_unset=True)
        if "asesor_id" in payload:
            if not payload["asesor_id"]:
                raise BadRequestError(MISSING_ADVISOR_MESSAGE)
            if not user.is_leader and payload["asesor_id"] != user.id:
                raise ForbiddenError("Advisors can only assign leads to themselves")
        if not payload:
            return self.get_lead(user, lead_id)
        with storage_errors("update lead"):
            record = self.repository.update_lead(lead_id, payload)
        if record is None:
            raise NotFoundError("Lead not found")
        self._publish(record)
        return self._to_lead(record)

    def delete_lead(self, user: CurrentUser, lead_id: str) -> None:
        self._load_visible(user, lead_id)
        with storage_errors("delete lead"):
            deleted = self.repository.delete_lead(lead_id)
        if not deleted:
            raise NotFoundError("Lead not found")
        if self.sessions is not None:
            self.sessions.record_deleted("leads", lead_id)

    def change_stage(
        self,
        user: CurrentUser,
        lead_id: str,
        request: LeadStageChangeRequest,
        today: Optional[date] = None,
    ) -> LeadStageChangeResult:
        lead = self._load_visible(user, lead_id)
        if request.estatus == lead.estatus:
            return LeadStageChangeResult(lead=self._to_lead(lead), changed=False)

        discard_reason = (request.motivo_descarte or "").strip()
        if request.estatus == LeadStage.DISCARDED and not discard_reason:
            raise BadRequestError(MISSING_DISCARD_REASON_MESSAGE)

        existing_sales: List[SaleRecord] = []
        if request.estatus == LeadStage.RESERVED:
            with storage_errors("list sales"):
                existing_sales = self.sales_repository.list_sales()

        transition = transition_lead(
            lead,
            request.estatus,
            existing_sales,
            discard_reason=discard_reason or None,
            created_by_email=user.email,
            today=today,
        )

        # Stage, counter and discard reason go out as one write.
        with storage_errors("update lead stage"):
            record = self.repository.update_lead(lead_id, transition.lead_changes)
        if record is None:
            raise NotFoundError("Lead not found")
        self._publish(record)
        logger.info(
            "Lead %s moved %s -> %s", lead_id, lead.estatus.value, request.estatus.value
        )

        created_sale: Optional[Sale] = None
        sale_creation_error: Optional[str] = None
        if transition.sale_payload is not None:
            try:
                with storage_errors("create sale for reserved lead"):
                    sale_record = self.sales_repository.create_sale(transition.sale_payload)
            except PersistenceError as exc:
                # The lead update stands; the sale can be registered by hand.
                logger.warning("Lead %s reserved but sale creation failed: %s", lead_id, exc.message)
                sale_creation_error = exc.message
            else:
                created_sale = Sale.model_validate(sale_record.model_dump())
                if self.sessions is not None:
                    self.sessions.record_saved("sales", sale_record)

        return LeadStageChangeResult(
            lead=self._to_lead(record),
            changed=True,
            created_sale=created_sale,
            sale_creation_error=sale_creation_error,
        )

    def _load_visible(self, user: CurrentUser, lead_id: str) -> LeadRecord:
        with storage_errors("load lead"):
            record = self.repository.get_lead(lead_id)
        if record is None:
            raise NotFoundError("Lead not found")
        if not visible_leads(user, [record]):
            raise ForbiddenError("Lead belongs to another advisor")
        return record

    @staticmethod
    def _new_lead_payload(user: CurrentUser, request: LeadCreateRequest) -> Dict[str, Any]:
        asesor_id = scoped_advisor_id(user, request.asesor_id or None)
        if not asesor_id:
            raise BadRequestError(MISSING_ADVISOR_MESSAGE)
        payload = request.model_dump(mode="json")
        payload["asesor_id"] = asesor_id
        if request.estatus != LeadStage.DISCARDED:
            payload["motivo_descarte"] = None
        elif not (request.motivo_descarte or "").strip():
            raise BadRequestError(MISSING_DISCARD_REASON_MESSAGE)
        payload["interacciones"] = 1
        payload["created_by_email"] = user.email
        return payload

    def _publish(self, record: LeadRecord) -> None:
        if self.sessions is not None:
            self.sessions.record_saved("leads", record)

    @staticmethod
    def _to_lead(record: LeadRecord) -> Lead:
        return Lead.model_validate(record.model_dump())
