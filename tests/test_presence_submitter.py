from __future__ import annotations

import asyncio

import httpx

from presence_client.core.qr import parse_session_token
from presence_client.schemas import (
    CheckinForm,
    CheckinNetworkError,
    CheckinServerError,
    CheckinSuccess,
)
from presence_client.services.presence import PresenceSubmitter


def _form() -> CheckinForm:
    return CheckinForm(first_name=" Jane", last_name="Doe ", email="jane@x.com", signature="<sig>")


def _submit(backend, raw="7|XYZ9", form=None):
    async def go():
        async with backend.client() as client:
            return await PresenceSubmitter(client).submit(parse_session_token(raw), form or _form())

    return asyncio.run(go())


def test_validates_then_submits_presence(backend):
    outcome = _submit(backend)

    assert outcome == CheckinSuccess(session_id="7")
    assert backend.calls == [
        ("/api/session/validate", {"sessionToken": "7|XYZ9"}),
        (
            "/api/presences",
            {
                "firstName": "Jane",
                "lastName": "Doe",
                "email": "jane@x.com",
                "signature": "<sig>",
                "sessionToken": "7|XYZ9",
            },
        ),
    ]


def test_validate_rejection_never_reaches_presences(backend):
    backend.respond("/session/validate", (400, {"error": "Session expired"}))

    outcome = _submit(backend)

    assert outcome == CheckinServerError(status_code=400, message="Session expired")
    assert backend.paths() == ["/api/session/validate"]


def test_server_error_without_body_uses_status_message(backend):
    backend.respond("/session/validate", (500, None))

    outcome = _submit(backend)

    assert outcome == CheckinServerError(status_code=500, message="Server error (500)")


def test_server_error_with_unusable_error_field(backend):
    backend.respond("/session/validate", (422, {"error": {"code": 7}}))

    outcome = _submit(backend)

    assert outcome == CheckinServerError(status_code=422, message="Server error (422)")


def test_presence_rejection_after_validation(backend):
    backend.respond("/presences", (409, {"error": "Already checked in"}))

    outcome = _submit(backend)

    assert outcome == CheckinServerError(status_code=409, message="Already checked in")
    assert backend.paths() == ["/api/session/validate", "/api/presences"]


def test_redirect_is_not_success(backend):
    backend.respond("/session/validate", (302, None))

    outcome = _submit(backend)

    assert isinstance(outcome, CheckinServerError)
    assert outcome.status_code == 302
    assert backend.paths() == ["/api/session/validate"]


def test_timeout_is_reported_as_unreachable(backend):
    backend.respond("/session/validate", httpx.ConnectTimeout)

    outcome = _submit(backend)

    assert outcome == CheckinNetworkError(reason="server unreachable")
    assert backend.paths() == ["/api/session/validate"]


def test_connection_refused_is_reported_as_unreachable(backend):
    backend.respond("/session/validate", httpx.ConnectError)

    assert _submit(backend) == CheckinNetworkError(reason="server unreachable")


def test_dropped_response_on_presences_is_unreachable(backend):
    backend.respond("/presences", httpx.ReadTimeout)

    outcome = _submit(backend)

    assert outcome == CheckinNetworkError(reason="server unreachable")
    assert backend.paths() == ["/api/session/validate", "/api/presences"]


def test_other_transport_failure_keeps_its_message(backend):
    backend.respond("/session/validate", httpx.UnsupportedProtocol)

    outcome = _submit(backend)

    assert outcome == CheckinNetworkError(reason="simulated failure")
