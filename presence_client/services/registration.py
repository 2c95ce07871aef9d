from __future__ import annotations
import logging
import httpx

from ..schemas import RegistrationResult, UserCreate
from .presence import server_message

logger = logging.getLogger(__name__)

USERS_PATH = "/users"

async def create_user(
    client: httpx.AsyncClient,
    *,
    first_name: str,
    last_name: str,
    email: str,
    role: str,
) -> RegistrationResult:
    """Register a student. Success or failure, never raises for remote errors."""
    if not (first_name and last_name and email):
        return RegistrationResult(ok=False, message="All fields are required")

    body = UserCreate(first_name=first_name, last_name=last_name, email=email, role=role)
    try:
        r = await client.post(USERS_PATH, json=body.model_dump(by_alias=True))
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.warning("POST %s failed: %r", USERS_PATH, exc)
        return RegistrationResult(ok=False, message="Network error or server unreachable")

    if not r.is_success:
        logger.warning("Backend refused user creation (%s): %s", r.status_code, server_message(r))
        return RegistrationResult(ok=False, message="Creation failed", status_code=r.status_code)

    logger.info("Student %s %s registered", first_name, last_name)
    return RegistrationResult(ok=True, message="Student added successfully!", status_code=r.status_code)
