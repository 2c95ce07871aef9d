from __future__ import annotations


class CheckinError(Exception):
    """Local, recoverable check-in failure with a message fit for the user."""

    default_message = "Check-in failed"

    def __init__(self, user_message: str | None = None, *, log_message: str | None = None) -> None:
        self.user_message = user_message or self.default_message
        super().__init__(log_message or self.user_message)


class FormIncomplete(CheckinError, ValueError):
    default_message = "Please fill in every field before scanning."

    def __init__(self, missing: list[str] | None = None) -> None:
        self.missing = list(missing or [])
        super().__init__(log_message=f"form incomplete: missing {', '.join(self.missing) or '?'}")


class TokenSyntaxError(CheckinError, ValueError):
    default_message = "Invalid QR code format"


class CameraUnavailable(CheckinError, PermissionError):
    default_message = "No access to the camera"


class SessionBusy(CheckinError):
    default_message = "A check-in is in progress"
