from __future__ import annotations

import asyncio

from presence_client.services.camera import (
    CameraPermissionGate,
    PermissionStatus,
    ReportedCameraPermission,
)


class CountingRequester:
    def __init__(self, answer):
        self.answer = answer
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        await asyncio.sleep(0)
        if isinstance(self.answer, Exception):
            raise self.answer
        return self.answer


def test_permission_is_requested_once():
    requester = CountingRequester(PermissionStatus.GRANTED)
    gate = CameraPermissionGate(requester)

    async def go():
        first = await gate.request_permission()
        second = await gate.request_permission()
        return first, second

    assert asyncio.run(go()) == (PermissionStatus.GRANTED, PermissionStatus.GRANTED)
    assert requester.calls == 1
    assert gate.status is PermissionStatus.GRANTED


def test_concurrent_callers_share_one_request():
    requester = CountingRequester(True)
    gate = CameraPermissionGate(requester)

    async def go():
        return await asyncio.gather(*(gate.request_permission() for _ in range(3)))

    assert asyncio.run(go()) == [PermissionStatus.GRANTED] * 3
    assert requester.calls == 1


def test_boolean_denial_maps_to_denied():
    gate = CameraPermissionGate(CountingRequester(False))
    assert asyncio.run(gate.request_permission()) is PermissionStatus.DENIED


def test_failing_requester_counts_as_denied():
    gate = CameraPermissionGate(CountingRequester(RuntimeError("no camera module")))

    assert asyncio.run(gate.request_permission()) is PermissionStatus.DENIED
    assert gate.status is PermissionStatus.DENIED


def test_reported_permission_resolves_waiting_gate():
    async def go():
        reported = ReportedCameraPermission()
        gate = CameraPermissionGate(reported)
        waiting = asyncio.create_task(gate.request_permission())
        await asyncio.sleep(0)
        assert not waiting.done()

        assert reported.report(True) is True
        assert reported.report(False) is False
        return await waiting

    assert asyncio.run(go()) is PermissionStatus.GRANTED
