from __future__ import annotations
import httpx
from fastapi import Request

from .controller import CheckinSessionController
from .core.config import Settings, get_settings
from .services.camera import ReportedCameraPermission

settings = get_settings()

# --- outbound client ---

def make_backend_client(
    cfg: Settings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    cfg = cfg or settings
    return httpx.AsyncClient(
        base_url=cfg.api_base_url,
        timeout=cfg.http_timeout_seconds,
        headers={"Content-Type": "application/json"},
        transport=transport,
    )

# --- request-scoped accessors (objects live on app.state, built in lifespan) ---

def get_controller(request: Request) -> CheckinSessionController:
    return request.app.state.controller

def get_camera_permission(request: Request) -> ReportedCameraPermission:
    return request.app.state.camera_permission

def get_backend_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.backend_client
