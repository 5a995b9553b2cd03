from __future__ import annotations

import json

import httpx
import pytest

from src.core.config import get_settings
from src.core.errors import PersistenceError
from src.core.supabase import SupabaseClient, storage_errors
from src.models.enums import LeadStage
from src.repositories.advisors_repository import AdvisorsRepository
from src.repositories.leads_repository import LeadsRepository


def _repository(handler) -> LeadsRepository:
    repository = LeadsRepository()
    repository.client._client = httpx.Client(transport=httpx.MockTransport(handler))
    return repository


def test_select_sends_filters_and_parses_rows():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["apikey"] = request.headers["apikey"]
        return httpx.Response(
            200,
            json=[
                {
                    "id": "lead-1",
                    "nombre_completo": "Juan Pérez",
                    "fecha_prospeccion": "2024-03-04",
                    "estatus": "Cita",
                    "asesor_id": "asesor-1",
                    "interacciones": 4,
                }
            ],
        )

    leads = _repository(handler).list_leads(asesor_id="asesor-1")

    assert "/rest/v1/leads?" in seen["url"]
    assert "asesor_id=eq.asesor-1" in seen["url"]
    assert seen["apikey"] == get_settings().supabase_service_role_key
    assert leads[0].estatus == LeadStage.APPOINTMENT


def test_update_asks_for_representation():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "PATCH"
        assert request.headers["Prefer"] == "return=representation"
        assert json.loads(request.content) == {"telefono": "555"}
        return httpx.Response(200, content=b"")

    assert _repository(handler).update_lead("lead-1", {"telefono": "555"}) is None


def test_store_failures_become_persistence_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    repository = _repository(handler)
    with pytest.raises(PersistenceError) as excinfo:
        with storage_errors("list leads"):
            repository.list_leads()
    assert excinfo.value.status_code == 502
    assert excinfo.value.message == "Could not list leads"


def test_delete_requires_filters():
    with pytest.raises(ValueError):
        SupabaseClient().delete("leads", [])


def test_email_lookup_treats_like_wildcards_literally():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["email"] = request.url.params["email"]
        return httpx.Response(
            200,
            json=[
                {
                    "id": "asesor-8",
                    "nombre_completo": "Juan Xavier",
                    "email": "juanxp@maderas.mx",
                    "fecha_ingreso": "2022-01-01",
                    "estatus": "Activo",
                },
                {
                    "id": "asesor-9",
                    "nombre_completo": "Juan Pablo",
                    "email": "Juan_P@maderas.mx",
                    "fecha_ingreso": "2023-05-01",
                    "estatus": "Activo",
                },
            ],
        )

    repository = AdvisorsRepository()
    repository.client._client = httpx.Client(transport=httpx.MockTransport(handler))

    advisor = repository.find_by_email(" juan_p@maderas.mx ")

    assert seen["email"] == "ilike.juan\\_p@maderas.mx"
    assert advisor is not None
    assert advisor.id == "asesor-9"
