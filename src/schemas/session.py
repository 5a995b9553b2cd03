from __future__ import annotations

from typing import Optional

from pydantic import ConfigDict, Field

from src.models.enums import Role
from src.schemas.advisors import Advisor
from src.shared.base import BaseSchema


class LoginRequest(BaseSchema):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    email: str = Field(min_length=3)


class SessionUser(BaseSchema):
    id: str
    nombre_completo: str
    email: str
    role: Role
    advisor: Optional[Advisor] = None
