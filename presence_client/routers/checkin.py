from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException, status

from ..controller import CheckinSessionController
from ..core.errors import CameraUnavailable, FormIncomplete, SessionBusy
from ..deps import get_camera_permission, get_controller
from ..schemas import FormPatch, PermissionReport, ScanDecoded, StateRead
from ..services.camera import ReportedCameraPermission

router = APIRouter(prefix="/checkin", tags=["checkin"])

def _read(ctl: CheckinSessionController) -> StateRead:
    return StateRead(
        state=ctl.state.value,
        busy=ctl.busy,
        form=ctl.form.model_copy(),
        last_outcome=ctl.last_outcome,
        message=ctl.message,
    )

@router.get("/state", response_model=StateRead, response_model_by_alias=True)
async def read_state(ctl: CheckinSessionController = Depends(get_controller)):
    return _read(ctl)

# --- 1) UI shell reports the native camera permission answer
@router.post("/camera/permission", response_model=StateRead, response_model_by_alias=True)
async def report_permission(
    payload: PermissionReport,
    ctl: CheckinSessionController = Depends(get_controller),
    permission: ReportedCameraPermission = Depends(get_camera_permission),
):
    if not permission.report(payload.granted):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Camera permission already reported")
    await ctl.initialize()
    return _read(ctl)

# --- 2) form edits (partial)
@router.patch("/form", response_model=StateRead, response_model_by_alias=True)
async def patch_form(payload: FormPatch, ctl: CheckinSessionController = Depends(get_controller)):
    fields = payload.model_dump(exclude_none=True)
    if "signature" in fields and not fields["signature"].strip():
        raise HTTPException(status_code=422, detail="Empty signature")
    try:
        ctl.update_form(**fields)
    except SessionBusy as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.user_message)
    return _read(ctl)

# --- 3) scanner lifecycle
@router.post("/scan/start", response_model=StateRead, response_model_by_alias=True)
async def start_scan(ctl: CheckinSessionController = Depends(get_controller)):
    try:
        ctl.start_scan()
    except CameraUnavailable as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.user_message)
    except FormIncomplete as e:
        raise HTTPException(
            status_code=422,
            detail={"message": e.user_message, "missing": e.missing},
        )
    return _read(ctl)

@router.post("/scan/cancel", response_model=StateRead, response_model_by_alias=True)
async def cancel_scan(ctl: CheckinSessionController = Depends(get_controller)):
    ctl.cancel_scan()
    return _read(ctl)

# --- 4) decoded QR payload; holds the request open for validate + submit
@router.post("/scan/decoded", response_model=StateRead, response_model_by_alias=True)
async def scan_decoded(payload: ScanDecoded, ctl: CheckinSessionController = Depends(get_controller)):
    outcome = await ctl.on_decoded(payload.data)
    if outcome is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="No scan in progress")
    return _read(ctl)
