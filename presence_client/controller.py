"""Check-in session orchestration: permission, form gating, scan, submit, reset."""
from __future__ import annotations

import logging
from typing import Callable, Protocol

from .core.errors import CameraUnavailable, FormIncomplete, SessionBusy, TokenSyntaxError
from .core.qr import ScannedToken, parse_session_token
from .schemas import CheckinForm, CheckinOutcome, CheckinSuccess, CheckinValidationError
from .services.camera import CameraPermissionGate, PermissionStatus
from .state import BUSY, IN_FLIGHT, TRANSITIONS, CheckinState, IllegalTransition, StateChange

logger = logging.getLogger(__name__)

TransitionListener = Callable[[StateChange], None]


class Submitter(Protocol):
    async def submit(self, token: ScannedToken, form: CheckinForm) -> CheckinOutcome: ...


class CheckinSessionController:
    """Owns the check-in form and the single scan/submit cycle."""

    def __init__(
        self,
        *,
        permission_gate: CameraPermissionGate,
        submitter: Submitter,
        parser: Callable[[str], ScannedToken] = parse_session_token,
    ) -> None:
        self._gate = permission_gate
        self._submitter = submitter
        self._parse = parser
        self._state = CheckinState.PERMISSION_PENDING
        self._listeners: list[TransitionListener] = []
        self.form = CheckinForm()
        self.last_outcome: CheckinOutcome | None = None

    @property
    def state(self) -> CheckinState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._state in BUSY

    @property
    def message(self) -> str | None:
        return self.last_outcome.message if self.last_outcome is not None else None

    def add_listener(self, listener: TransitionListener) -> None:
        self._listeners.append(listener)

    def _advance(self, target: CheckinState) -> None:
        current = self._state
        if target not in TRANSITIONS[current]:
            raise IllegalTransition(current, target)
        self._state = target
        logger.info("Check-in state %s -> %s", current.value, target.value)
        change = StateChange(previous=current, current=target)
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                logger.exception("Transition listener failed on %s -> %s", current.value, target.value)

    async def initialize(self) -> CheckinState:
        if self._state is not CheckinState.PERMISSION_PENDING:
            return self._state
        status = await self._gate.request_permission()
        # a concurrent initialize() may have settled it while we waited
        if self._state is CheckinState.PERMISSION_PENDING:
            self._advance(CheckinState.IDLE if status is PermissionStatus.GRANTED else CheckinState.NO_CAMERA)
        return self._state

    def update_form(self, **fields: str) -> CheckinForm:
        # the scanner covers the form; it was checked complete when the scan opened
        if self._state in IN_FLIGHT:
            raise SessionBusy()
        self.form.update(**fields)
        return self.form

    def start_scan(self) -> bool:
        """Open the scanner. False when a cycle is already open (repeated taps)."""
        if self._state in IN_FLIGHT:
            logger.debug("start_scan ignored in %s", self._state.value)
            return False
        if self._state is not CheckinState.IDLE:
            raise CameraUnavailable()
        missing = self.form.missing_fields()
        if missing:
            raise FormIncomplete(missing)
        self.last_outcome = None
        self._advance(CheckinState.SCANNING)
        return True

    def cancel_scan(self) -> bool:
        if self._state is not CheckinState.SCANNING:
            return False
        self._advance(CheckinState.IDLE)
        return True

    async def on_decoded(self, raw: str) -> CheckinOutcome | None:
        # None when no scan is open: the camera keeps firing after the first decode
        if self._state is not CheckinState.SCANNING:
            logger.debug("Decode event ignored in %s", self._state.value)
            return None
        self._advance(CheckinState.RESOLVING)

        try:
            token = self._parse(raw)
        except TokenSyntaxError as exc:
            logger.warning("%s", exc)
            return self._finish(CheckinState.REJECTED, CheckinValidationError(reason=exc.user_message))

        self._advance(CheckinState.SUBMITTING)
        try:
            outcome = await self._submitter.submit(token, self.form)
        except Exception:
            logger.exception("Submission for session %s crashed", token.session_id)
            self._advance(CheckinState.FAILED)
            self._advance(CheckinState.IDLE)
            raise

        if isinstance(outcome, CheckinSuccess):
            return self._finish(CheckinState.SUCCEEDED, outcome)
        return self._finish(CheckinState.FAILED, outcome)

    def _finish(self, terminal: CheckinState, outcome: CheckinOutcome) -> CheckinOutcome:
        self.last_outcome = outcome
        self._advance(terminal)
        if terminal is CheckinState.SUCCEEDED:
            self.form.clear()
        self._advance(CheckinState.IDLE)
        return outcome
