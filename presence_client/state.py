"""Check-in session states and the transitions allowed between them."""
from __future__ import annotations

import enum
from dataclasses import dataclass


class CheckinState(str, enum.Enum):
    """
    1. PERMISSION_PENDING - waiting for the camera permission answer
    2. NO_CAMERA          - permission denied (terminal)
    3. IDLE               - form editable, scan can be started
    4. SCANNING           - scanner open, waiting for a decode
    5. RESOLVING          - decoded payload being checked locally
    6. SUBMITTING         - validate + presence calls in flight
    7. SUCCEEDED          - presence recorded → IDLE, form cleared
    8. FAILED             - network/server failure → IDLE, form kept
    9. REJECTED           - malformed QR payload → IDLE, form kept
    """
    PERMISSION_PENDING = "permission_pending"
    NO_CAMERA = "no_camera"
    IDLE = "idle"
    SCANNING = "scanning"
    RESOLVING = "resolving"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    REJECTED = "rejected"


TRANSITIONS: dict[CheckinState, frozenset[CheckinState]] = {
    CheckinState.PERMISSION_PENDING: frozenset({CheckinState.IDLE, CheckinState.NO_CAMERA}),
    CheckinState.NO_CAMERA: frozenset(),
    CheckinState.IDLE: frozenset({CheckinState.SCANNING}),
    CheckinState.SCANNING: frozenset({CheckinState.RESOLVING, CheckinState.IDLE}),
    CheckinState.RESOLVING: frozenset({CheckinState.SUBMITTING, CheckinState.REJECTED}),
    CheckinState.SUBMITTING: frozenset({CheckinState.SUCCEEDED, CheckinState.FAILED}),
    CheckinState.SUCCEEDED: frozenset({CheckinState.IDLE}),
    CheckinState.FAILED: frozenset({CheckinState.IDLE}),
    CheckinState.REJECTED: frozenset({CheckinState.IDLE}),
}

# a scan/submit cycle is open in these
IN_FLIGHT: frozenset[CheckinState] = frozenset(
    {CheckinState.SCANNING, CheckinState.RESOLVING, CheckinState.SUBMITTING}
)
# UI shows a spinner in these
BUSY: frozenset[CheckinState] = frozenset({CheckinState.RESOLVING, CheckinState.SUBMITTING})


class IllegalTransition(RuntimeError):
    def __init__(self, current: CheckinState, target: CheckinState) -> None:
        super().__init__(f"illegal transition {current.value} -> {target.value}")
        self.current = current
        self.target = target


@dataclass(frozen=True)
class StateChange:
    previous: CheckinState
    current: CheckinState


__all__ = ["CheckinState", "TRANSITIONS", "IN_FLIGHT", "BUSY", "IllegalTransition", "StateChange"]
