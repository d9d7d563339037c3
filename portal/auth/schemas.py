"""Auth Pydantic v2 schemas — the session user as the HRMS API reports it."""

from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from portal.common.constants import UserRole
from portal.common.payload import ref_id
from portal.upstream import ApiClient


class CurrentUser(BaseModel):
    """Body of ``GET /api/auth/me``; extra fields are ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., alias="_id")
    email: str
    role: UserRole
    employee_id: Optional[str] = Field(None, alias="employeeId")

    @field_validator("id", "employee_id", mode="before")
    @classmethod
    def _normalise_ref(cls, value: Any) -> Optional[str]:
        return ref_id(value)


@dataclass
class SessionContext:
    """Who is asking, plus a client that calls the API as them."""

    user: CurrentUser
    api: ApiClient

    @property
    def role(self) -> UserRole:
        return self.user.role
