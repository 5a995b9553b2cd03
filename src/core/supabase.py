from __future__ import annotations

import logging
from contextlib import contextmanager
from threading import Lock
from typing import Any, Dict, Iterator, List, Optional, Tuple
from urllib.parse import urlencode

import httpx

from src.core.config import get_settings
from src.core.errors import PersistenceError

logger = logging.getLogger(__name__)


class SupabaseClient:
    _shared_client: httpx.Client | None = None
    _client_lock: Lock = Lock()

    def __init__(self) -> None:
        settings = get_settings()
        self.base_url = settings.supabase_url.rstrip("/") + "/rest/v1"
        self.api_key = settings.supabase_service_role_key or settings.supabase_anon_key
        if not self.api_key:
            raise ValueError("Supabase API key is required")
        self._client = self._get_shared_client()

    @classmethod
    def _get_shared_client(cls) -> httpx.Client:
        if cls._shared_client is not None:
            return cls._shared_client
        with cls._client_lock:
            if cls._shared_client is None:
                cls._shared_client = httpx.Client(
                    timeout=30.0,
                    limits=httpx.Limits(max_keepalive_connections=20, max_connections=100),
                )
        return cls._shared_client

    def _headers(self, write: bool = False) -> Dict[str, str]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
        }
        if write:
            headers["Content-Type"] = "application/json"
            headers["Prefer"] = "return=representation"
        return headers

    def _url(self, table: str, params: Optional[List[Tuple[str, str]]] = None) -> str:
        url = f"{self.base_url}/{table}"
        if params:
            url = f"{url}?{urlencode(params, doseq=True)}"
        return url

    @staticmethod
    def _rows(response: httpx.Response) -> List[Dict[str, Any]]:
        response.raise_for_status()
        if not response.content:
            return []
        data = response.json()
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            return [data]
        return []

    def select(
        self,
        table: str,
        select: str,
        filters: Optional[List[Tuple[str, str]]] = None,
        limit: Optional[int] = None,
        order: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        params: List[Tuple[str, str]] = [("select", select)]
        if filters:
            params.extend(filters)
        if limit is not None:
            params.append(("limit", str(limit)))
        if order:
            params.append(("order", order))
        logger.debug("Supabase select %s %s", table, filters or "")
        return self._rows(self._client.get(self._url(table, params), headers=self._headers()))

    def insert(
        self, table: str, payload: Dict[str, Any] | List[Dict[str, Any]]
    ) -> List[Dict[str, Any]]:
        logger.debug("Supabase insert into %s", table)
        response = self._client.post(self._url(table), headers=self._headers(write=True), json=payload)
        return self._rows(response)

    def update(
        self,
        table: str,
        payload: Dict[str, Any],
        filters: List[Tuple[str, str]],
    ) -> List[Dict[str, Any]]:
        if not filters:
            raise ValueError("Refusing to update without filters")
        logger.debug("Supabase update %s %s", table, filters)
        response = self._client.patch(
            self._url(table, filters), headers=self._headers(write=True), json=payload
        )
        return self._rows(response)

    def delete(self, table: str, filters: List[Tuple[str, str]]) -> List[Dict[str, Any]]:
        if not filters:
            raise ValueError("Refusing to delete without filters")
        logger.debug("Supabase delete from %s %s", table, filters)
        headers = self._headers()
        headers["Prefer"] = "return=representation"
        return self._rows(self._client.delete(self._url(table, filters), headers=headers))


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """Translate transport/HTTP failures from the store into PersistenceError."""
    try:
        yield
    except httpx.HTTPStatusError as exc:
        logger.error(
            "Supabase %s failed with status %s: %s",
            action,
            exc.response.status_code,
            exc.response.text,
        )
        raise PersistenceError(f"Could not {action}") from exc
    except httpx.HTTPError as exc:
        logger.error("Supabase %s failed: %s", action, exc)
        raise PersistenceError(f"Could not {action}") from exc
