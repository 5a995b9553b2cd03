from __future__ import annotations

import logging
from threading import Lock
from typing import Any, Dict, List, Mapping, Optional, Type

from pydantic import BaseModel

from src.analytics.visibility import is_visible
from src.models.crm import (
    AdvisorRecord,
    AppointmentRecord,
    CurrentUser,
    LeadRecord,
    LotRecord,
    MonthlyGoalRecord,
    SaleRecord,
)
from src.shared.base import keys_to_snake

logger = logging.getLogger(__name__)

RECORD_TYPES: Dict[str, Type[BaseModel]] = {
    "advisors": AdvisorRecord,
    "leads": LeadRecord,
    "sales": SaleRecord,
    "monthly_goals": MonthlyGoalRecord,
    "appointments": AppointmentRecord,
    "lots": LotRecord,
}


class SessionState:
    """In-memory record collections for one signed-in user.

    Built on login, emptied on logout. Collections are keyed by record id so
    change events can be applied more than once without duplicating rows.
    """

    def __init__(self, user: CurrentUser) -> None:
        self.user = user
        self.collections: Dict[str, Dict[str, BaseModel]] = {table: {} for table in RECORD_TYPES}

    def load(self, snapshot: Mapping[str, List[BaseModel]]) -> None:
        for table in RECORD_TYPES:
            self.collections[table] = {
                str(getattr(record, "id")): record for record in snapshot.get(table, [])
            }

    def clear(self) -> None:
        for table in RECORD_TYPES:
            self.collections[table] = {}

    def records(self, table: str) -> List[BaseModel]:
        return list(self.collections[table].values())

    def insert(self, table: str, record: BaseModel) -> bool:
        collection = self.collections[table]
        record_id = str(getattr(record, "id"))
        if record_id in collection:
            return False
        collection[record_id] = record
        return True

    def replace(self, table: str, record: BaseModel) -> None:
        self.collections[table][str(getattr(record, "id"))] = record

    def remove(self, table: str, record_id: str) -> bool:
        return self.collections[table].pop(record_id, None) is not None

    def apply_event(self, event: "ChangeEvent") -> None:
        if event.table not in self.collections:
            return
        if event.record is not None and not is_visible(self.user, event.table, event.record):
            # Rows reassigned away from this user leave the session.
            self.remove(event.table, str(getattr(event.record, "id")))
            return
        if event.kind == "INSERT" and event.record is not None:
            self.insert(event.table, event.record)
        elif event.kind == "UPDATE" and event.record is not None:
            self.replace(event.table, event.record)
        elif event.kind == "DELETE" and event.record_id:
            self.remove(event.table, event.record_id)


class ChangeEvent:
    def __init__(
        self,
        kind: str,
        table: str,
        record: Optional[BaseModel] = None,
        record_id: Optional[str] = None,
    ) -> None:
        self.kind = kind
        self.table = table
        self.record = record
        self.record_id = record_id

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ChangeEvent":
        """Parse a realtime payload (``eventType``/``new``/``old``) or a
        database webhook payload (``type``/``record``/``old_record``)."""
        kind = str(payload.get("eventType") or payload.get("type") or "").upper()
        table = str(payload.get("table") or "")
        new_row = payload.get("new") or payload.get("record") or {}
        old_row = payload.get("old") or payload.get("old_record") or {}
        if kind not in ("INSERT", "UPDATE", "DELETE"):
            raise ValueError(f"Unsupported change event type: {kind or 'missing'}")
        if table not in RECORD_TYPES:
            raise ValueError(f"Unsupported change event table: {table or 'missing'}")

        record = None
        if kind != "DELETE":
            record = RECORD_TYPES[table].model_validate(keys_to_snake(new_row))
            record_id = str(getattr(record, "id"))
        else:
            record_id = str(old_row.get("id") or "") or None
        return cls(kind=kind, table=table, record=record, record_id=record_id)


class SessionRegistry:
    def __init__(self) -> None:
        self._sessions: Dict[str, SessionState] = {}
        self._lock = Lock()

    def open(self, user: CurrentUser, snapshot: Mapping[str, List[BaseModel]]) -> SessionState:
        state = SessionState(user)
        state.load(snapshot)
        with self._lock:
            self._sessions[user.email] = state
        logger.info("Opened session for %s (%s)", user.email, user.role.value)
        return state

    def close(self, email: str) -> bool:
        with self._lock:
            state = self._sessions.pop(email.strip().lower(), None)
        if state is None:
            return False
        state.clear()
        logger.info("Closed session for %s", email)
        return True

    def get(self, email: str) -> Optional[SessionState]:
        return self._sessions.get(email.strip().lower())

    def broadcast(self, event: ChangeEvent) -> int:
        with self._lock:
            sessions = list(self._sessions.values())
        for state in sessions:
            state.apply_event(event)
        return len(sessions)

    def record_saved(self, table: str, record: BaseModel) -> None:
        self.broadcast(ChangeEvent(kind="UPDATE", table=table, record=record))

    def record_deleted(self, table: str, record_id: str) -> None:
        self.broadcast(ChangeEvent(kind="DELETE", table=table, record_id=record_id))
