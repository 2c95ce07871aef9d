from __future__ import annotations
import httpx
from fastapi import APIRouter, Depends, HTTPException, status

from ..core.config import get_settings
from ..deps import get_backend_client
from ..schemas import RegistrationResult, StudentCreate
from ..services.registration import create_user

settings = get_settings()
router = APIRouter(prefix="/students", tags=["students"])

# empty fields are already refused by StudentCreate (422)
@router.post("", response_model=RegistrationResult, response_model_by_alias=True, status_code=201)
async def register_student(payload: StudentCreate, client: httpx.AsyncClient = Depends(get_backend_client)):
    result = await create_user(
        client,
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        role=payload.role or settings.default_user_role,
    )
    if not result.ok:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result.message)
    return result
