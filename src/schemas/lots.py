from __future__ import annotations

from typing import Optional

from pydantic import ConfigDict, Field

from src.models.enums import LotStatus
from src.shared.base import BaseSchema


class Lot(BaseSchema):
    id: str
    nombre_lote: str
    precio: float
    estatus: LotStatus


class LotCreateRequest(BaseSchema):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    nombre_lote: str = Field(min_length=1)
    precio: float = Field(default=0, ge=0)
    estatus: LotStatus = LotStatus.AVAILABLE


class LotUpdateRequest(BaseSchema):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    nombre_lote: Optional[str] = Field(default=None, min_length=1)
    precio: Optional[float] = Field(default=None, ge=0)
    estatus: Optional[LotStatus] = None
