"""Password routes; the principal comes from the authorization gate."""

from typing import List

from fastapi import APIRouter, Depends, Response

from ...schemas.password_schemas import (
    PasswordCreate,
    PasswordRead,
    PasswordSummary,
    PasswordUpdate,
)
from ...services.password_service import PasswordService
from ..deps import get_password_service, get_principal

router = APIRouter(prefix="/api/user", tags=["passwords"], dependencies=[Depends(get_principal)])


@router.put("/password", status_code=202)
def add_password(body: PasswordCreate, service: PasswordService = Depends(get_password_service)):
    service.create(body)
    return Response(status_code=202)


@router.get("/passwords", response_model=List[PasswordSummary])
def list_passwords(service: PasswordService = Depends(get_password_service)):
    return service.list_all()


@router.get("/password/{title}", response_model=PasswordRead)
def get_password(title: str, service: PasswordService = Depends(get_password_service)):
    return service.get_by_title(title)


@router.post("/password/update/{title}", status_code=202)
def update_password(
    title: str,
    body: PasswordUpdate,
    service: PasswordService = Depends(get_password_service),
):
    service.update(title, body)
    return Response(status_code=202)


@router.delete("/password/{title}")
def delete_password(title: str, service: PasswordService = Depends(get_password_service)):
    service.delete(title)
    return Response(status_code=200)
