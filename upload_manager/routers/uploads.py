"""Upload and multipart upload routes."""

from fastapi import APIRouter, Depends, Query, Request, status
from starlette.datastructures import UploadFile
from ..core.dependencies import get_storage_service
from ..middleware.rate_limit import limiter, upload_rate_limit
from ..schemas.uploads import (
    BeginMultipartUploadPayload,
    BeginMultipartUploadResponse,
    CancelMultipartUploadPayload,
    CommitMultipartUploadPayload,
    PartSizesResponse,
    UploadResponse,
    WebResource,
)
from ..services.storage_service import StorageService
from ..utils.constants import MULTIPART_FORM_OVERHEAD
from ..utils.exceptions import FileSizeExceeded, InvalidArgument

router = APIRouter(prefix="/uploads", tags=["uploads"])


@router.post("/resolve", response_model=WebResource)
async def resolve_access_url(
    web_resource: WebResource,
    service: StorageService = Depends(get_storage_service),
):
    """Swap a stored href for a short-lived signed URL."""
    return await service.resolve_access_url(web_resource)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def delete_object(
    href: str = Query(..., min_length=1),
    service: StorageService = Depends(get_storage_service),
):
    """Delete the object an href points to."""
    await service.delete_object(href)


@router.get("/multipart/part-sizes", response_model=PartSizesResponse)
async def get_part_sizes(service: StorageService = Depends(get_storage_service)):
    """Minimum and default part sizes for multipart uploads."""
    return PartSizesResponse(
        minimum_part_size=service.get_minimum_part_size(),
        default_part_size=service.get_default_part_size(),
    )


@router.post(
    "/multipart/{field_name}/begin",
    response_model=BeginMultipartUploadResponse,
    status_code=status.HTTP_201_CREATED,
)
async def begin_multipart_upload(
    field_name: str,
    payload: BeginMultipartUploadPayload,
    service: StorageService = Depends(get_storage_service),
):
    """
    Begin a multipart upload.

    Returns a presigned URL per part that the client uploads directly to
    the object store.
    """
    return await service.begin_multipart(field_name, payload)


@router.post("/multipart/commit", response_model=WebResource)
async def commit_multipart_upload(
    payload: CommitMultipartUploadPayload,
    service: StorageService = Depends(get_storage_service),
):
    """Complete a multipart upload after all parts were uploaded."""
    return await service.commit_multipart(payload)


@router.post("/multipart/cancel", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_multipart_upload(
    payload: CancelMultipartUploadPayload,
    service: StorageService = Depends(get_storage_service),
):
    """Abort a multipart upload and let the store discard its parts."""
    await service.cancel_multipart(payload)


@router.post("/{field_name}", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(upload_rate_limit())
async def upload_file(
    request: Request,
    field_name: str,
    service: StorageService = Depends(get_storage_service),
):
    """
    Upload a file sent as the "file" field of a multipart form.

    A declared Content-Length beyond the size limit is rejected before the
    form is parsed. Otherwise the spooled form file is streamed to storage
    and rejected once it passes the size limit.
    """
    max_file_size = service.config.max_file_size
    content_length = request.headers.get("content-length", "")
    if content_length.isdigit() and int(content_length) > max_file_size + MULTIPART_FORM_OVERHEAD:
        raise FileSizeExceeded(max_file_size)

    async with request.form(max_files=1) as form:
        file = form.get("file")
        if not isinstance(file, UploadFile):
            raise InvalidArgument("Missing file field")
        return await service.upload_object(
            field_name,
            file.file,
            mime_type=file.content_type or "application/octet-stream",
            original_name=file.filename or "unnamed",
        )
