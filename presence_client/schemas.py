from __future__ import annotations
from typing import Annotated, Literal, Union
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .core.qr import ScannedToken

UNREACHABLE = "server unreachable"

Str255 = Annotated[str, Field(min_length=1, max_length=255)]

class CamelModel(BaseModel):
    # wire format is camelCase (firstName, sessionToken, statusCode ...)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

# -------- Check-in form --------
class CheckinForm(CamelModel):
    model_config = ConfigDict(validate_assignment=True)

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    signature: str = ""  # signature pad image as a data URI, stored verbatim

    def missing_fields(self) -> list[str]:
        return [name for name in type(self).model_fields if not getattr(self, name).strip()]

    def is_complete(self) -> bool:
        return not self.missing_fields()

    def update(self, **fields: str) -> None:
        for name, value in fields.items():
            if name not in type(self).model_fields:
                raise AttributeError(f"unknown form field: {name}")
            setattr(self, name, value)

    def clear(self) -> None:
        for name in type(self).model_fields:
            setattr(self, name, "")

# -------- Outbound payloads --------
class SessionValidateRequest(CamelModel):
    model_config = ConfigDict(frozen=True)

    session_token: str

class PresencePayload(CamelModel):
    model_config = ConfigDict(frozen=True)

    first_name: str
    last_name: str
    email: str
    signature: str
    session_token: str

    @classmethod
    def from_scan(cls, form: CheckinForm, token: ScannedToken) -> "PresencePayload":
        return cls(
            first_name=form.first_name.strip(),
            last_name=form.last_name.strip(),
            email=form.email.strip(),
            signature=form.signature,
            session_token=token.raw,
        )

class UserCreate(CamelModel):
    first_name: str
    last_name: str
    email: str
    role: str

# -------- Outcomes --------
class CheckinSuccess(CamelModel):
    kind: Literal["success"] = "success"
    session_id: str

    @property
    def message(self) -> str:
        return f"Presence recorded for session {self.session_id}!"

class CheckinValidationError(CamelModel):
    kind: Literal["validation_error"] = "validation_error"
    reason: str

    @property
    def message(self) -> str:
        return self.reason

class CheckinNetworkError(CamelModel):
    kind: Literal["network_error"] = "network_error"
    reason: str = UNREACHABLE

    @property
    def message(self) -> str:
        return self.reason

class CheckinServerError(CamelModel):
    kind: Literal["server_error"] = "server_error"
    status_code: int
    message: str

CheckinOutcome = Annotated[
    Union[CheckinSuccess, CheckinValidationError, CheckinNetworkError, CheckinServerError],
    Field(discriminator="kind"),
]

class RegistrationResult(CamelModel):
    ok: bool
    message: str
    status_code: int | None = None

# -------- Local bridge --------
class PermissionReport(BaseModel):
    granted: bool

class FormPatch(CamelModel):
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    signature: str | None = None

class ScanDecoded(BaseModel):
    data: str

class StateRead(CamelModel):
    state: str
    busy: bool
    form: CheckinForm
    last_outcome: CheckinOutcome | None = None
    message: str | None = None

class StudentCreate(CamelModel):
    first_name: Str255
    last_name: Str255
    email: Str255
    role: str | None = None
