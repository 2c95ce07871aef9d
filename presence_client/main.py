from __future__ import annotations
import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from .controller import CheckinSessionController
from .core.config import get_settings
from .core.log import setup_logging
from .deps import make_backend_client
from .routers import checkin, students
from .services.camera import CameraPermissionGate, ReportedCameraPermission
from .services.presence import PresenceSubmitter

settings = get_settings()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level)
    # tests plug an httpx.MockTransport in here
    transport = getattr(app.state, "backend_transport", None)
    client = make_backend_client(settings, transport=transport)

    permission = ReportedCameraPermission()
    controller = CheckinSessionController(
        permission_gate=CameraPermissionGate(permission),
        submitter=PresenceSubmitter(client),
    )
    app.state.backend_client = client
    app.state.camera_permission = permission
    app.state.controller = controller

    # resolves once the UI shell reports the camera permission
    init_task = asyncio.create_task(controller.initialize())
    logger.info("Check-in bridge ready (backend %s)", settings.api_base_url)
    yield
    if not init_task.done():
        init_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await init_task
    await client.aclose()

app = FastAPI(title="presence-client", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(checkin.router)
app.include_router(students.router)

@app.get("/health")
async def health():
    return {"status": "ok", "service": "presence-client"}

Instrumentator().instrument(app).expose(app)
