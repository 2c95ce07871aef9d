from __future__ import annotations
import asyncio
import enum
import logging
from typing import Awaitable, Callable, Union

logger = logging.getLogger(__name__)

class PermissionStatus(str, enum.Enum):
    GRANTED = "granted"
    DENIED = "denied"

PermissionRequester = Callable[[], Awaitable[Union[PermissionStatus, bool]]]

def _as_status(answer: PermissionStatus | bool) -> PermissionStatus:
    if isinstance(answer, PermissionStatus):
        return answer
    return PermissionStatus.GRANTED if answer else PermissionStatus.DENIED

class CameraPermissionGate:
    """Asks for camera access once; every later or concurrent caller gets the same answer."""

    def __init__(self, requester: PermissionRequester) -> None:
        self._requester = requester
        self._status: PermissionStatus | None = None
        self._task: asyncio.Task[PermissionStatus] | None = None

    @property
    def status(self) -> PermissionStatus | None:
        return self._status

    async def request_permission(self) -> PermissionStatus:
        if self._status is not None:
            return self._status
        if self._task is None:
            self._task = asyncio.ensure_future(self._resolve())
        return await self._task

    async def _resolve(self) -> PermissionStatus:
        try:
            status = _as_status(await self._requester())
        except Exception:
            logger.exception("Camera permission request failed; treating as denied")
            status = PermissionStatus.DENIED
        self._status = status
        logger.info("Camera permission %s", status.value)
        return status

class ReportedCameraPermission:
    """Requester answered by the UI shell, which owns the native permission prompt."""

    def __init__(self) -> None:
        self._future: asyncio.Future[PermissionStatus] | None = None

    def _ensure_future(self) -> asyncio.Future[PermissionStatus]:
        if self._future is None:
            self._future = asyncio.get_running_loop().create_future()
        return self._future

    async def __call__(self) -> PermissionStatus:
        return await self._ensure_future()

    def report(self, granted: bool) -> bool:
        """Return False when an answer was already reported."""
        fut = self._ensure_future()
        if fut.done():
            return False
        fut.set_result(PermissionStatus.GRANTED if granted else PermissionStatus.DENIED)
        return True
