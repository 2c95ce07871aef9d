from __future__ import annotations
import logging
from typing import Any
import httpx
from pydantic import BaseModel

from ..core.qr import ScannedToken
from ..schemas import (
    UNREACHABLE,
    CheckinForm,
    CheckinNetworkError,
    CheckinOutcome,
    CheckinServerError,
    CheckinSuccess,
    PresencePayload,
    SessionValidateRequest,
)

logger = logging.getLogger(__name__)

VALIDATE_PATH = "/session/validate"
PRESENCES_PATH = "/presences"

# no response ever arrived for these
_NO_RESPONSE = (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError)

def server_message(response: httpx.Response) -> str:
    """`error` from the JSON body when the backend sent one, else a generic status line."""
    try:
        body: Any = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, str) and err.strip():
            return err
    return f"Server error ({response.status_code})"

def outcome_from_transport_error(exc: Exception) -> CheckinNetworkError:
    if isinstance(exc, _NO_RESPONSE):
        return CheckinNetworkError(reason=UNREACHABLE)
    return CheckinNetworkError(reason=str(exc) or type(exc).__name__)

class PresenceSubmitter:
    """Validate the scanned token, then write the presence record. Never both at once."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def submit(self, token: ScannedToken, form: CheckinForm) -> CheckinOutcome:
        payload = PresencePayload.from_scan(form, token)

        # 1) the server must confirm the session before anything is written
        failure = await self._post(VALIDATE_PATH, SessionValidateRequest(session_token=token.raw))
        if failure is not None:
            return failure

        # 2) presence record
        failure = await self._post(PRESENCES_PATH, payload)
        if failure is not None:
            return failure

        logger.info("Presence recorded for session %s", token.session_id)
        return CheckinSuccess(session_id=token.session_id)

    async def _post(self, path: str, body: BaseModel) -> CheckinOutcome | None:
        try:
            r = await self._client.post(path, json=body.model_dump(by_alias=True))
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("POST %s failed: %r", path, exc)
            return outcome_from_transport_error(exc)
        if r.is_success:
            return None
        message = server_message(r)
        logger.warning("POST %s rejected with %s: %s", path, r.status_code, message)
        return CheckinServerError(status_code=r.status_code, message=message)
