"""File routes.

Uploads send the payload as the raw request body and the metadata in
x-file-* headers; downloads return the payload as application/octet-stream.
"""

from typing import List

from fastapi import APIRouter, Depends, Header, Response
from pydantic import ValidationError as PydanticValidationError

from ...constants import Header as VaultHeader
from ...exceptions import validation_failed
from ...schemas.file_schemas import FileCreate, FileSummary, FileUpdate
from ...services.file_service import FileService
from ..deps import get_file_service, get_principal, read_body

router = APIRouter(prefix="/api/user", tags=["files"], dependencies=[Depends(get_principal)])


@router.put("/file")
def add_file(
    content: bytes = Depends(read_body),
    file_name: str = Header("", alias=VaultHeader.FILE_NAME.value),
    title: str = Header("", alias=VaultHeader.FILE_TITLE.value),
    description: str = Header("", alias=VaultHeader.FILE_DESCRIPTION.value),
    service: FileService = Depends(get_file_service),
):
    try:
        metadata = FileCreate(title=title, fname=file_name, description=description)
    except PydanticValidationError as e:
        error = e.errors()[0]
        raise validation_failed(
            ".".join(str(part) for part in error["loc"]), error.get("input"), error["msg"], cause=e
        )

    service.create(metadata, content)
    return Response(status_code=200)


@router.get("/files", response_model=List[FileSummary])
def list_files(service: FileService = Depends(get_file_service)):
    return service.list_all()


@router.get("/file/{title}")
def get_file(title: str, service: FileService = Depends(get_file_service)):
    metadata = service.get_by_title(title)
    return Response(
        content=service.open_content(title),
        media_type="application/octet-stream",
        headers={VaultHeader.FILE_NAME.value: metadata.file_name},
    )


@router.post("/file/update/{title}", status_code=202)
def update_file(title: str, body: FileUpdate, service: FileService = Depends(get_file_service)):
    service.update(title, body)
    return Response(status_code=202)


@router.delete("/file/{title}")
def delete_file(title: str, service: FileService = Depends(get_file_service)):
    service.delete(title)
    return Response(status_code=200)
