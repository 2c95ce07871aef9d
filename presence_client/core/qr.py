from __future__ import annotations
import re
from pydantic import BaseModel, ConfigDict, model_validator

from .errors import TokenSyntaxError

# <session id digits>|<opaque alphanumeric suffix>, ASCII only, whole string
SESSION_TOKEN_RE = re.compile(r"\d+\|[A-Za-z0-9]+", re.ASCII)
SEPARATOR = "|"

def is_session_token(raw: object) -> bool:
    return isinstance(raw, str) and SESSION_TOKEN_RE.fullmatch(raw) is not None

class ScannedToken(BaseModel):
    model_config = ConfigDict(frozen=True)

    raw: str
    session_id: str

    @model_validator(mode="after")
    def _check_shape(self) -> "ScannedToken":
        if not is_session_token(self.raw):
            raise ValueError("raw is not a session token")
        if self.session_id != self.raw.split(SEPARATOR, 1)[0]:
            raise ValueError("session_id does not match raw token")
        return self

def parse_session_token(raw: str) -> ScannedToken:
    """Validate a decoded QR payload locally, before any network call."""
    if not is_session_token(raw):
        raise TokenSyntaxError(log_message=f"rejected QR payload {raw!r:.64}")
    session_id, _ = raw.split(SEPARATOR, 1)
    return ScannedToken(raw=raw, session_id=session_id)
