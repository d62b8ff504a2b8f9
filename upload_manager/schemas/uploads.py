"""Upload and multipart upload schemas."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class UploadResponse(BaseModel):
    """Result of a streamed upload."""

    size: int = Field(..., description="Bytes written to storage")
    filename: str = Field(..., description="Unsigned href of the stored object")


class WebResource(BaseModel):
    """A stored file as the host application references it."""

    model_config = ConfigDict(extra="allow")

    href: Optional[str] = None
    filename: Optional[str] = None
    size: Optional[int] = None
    content_type: Optional[str] = None


class BeginMultipartUploadPayload(BaseModel):
    """Request to begin a client-driven multipart upload."""

    filename: str
    content_type: str = Field(..., description="MIME type of the file")
    size: int = Field(..., description="Total file size in bytes")
    chunk_size: int = Field(..., description="Requested part size in bytes")


class UploadPart(BaseModel):
    """One part of a multipart upload and the URL to PUT it to."""

    model_config = ConfigDict(populate_by_name=True)

    part_number: int = Field(..., alias="partNumber", description="Part number (1-indexed)")
    chunk_size: int = Field(..., alias="chunkSize", description="Exact size of this part in bytes")
    url: str = Field(..., description="Presigned URL for uploading this part")


class BeginMultipartUploadResponse(BaseModel):
    """Response from beginning a multipart upload."""

    model_config = ConfigDict(populate_by_name=True)

    file_key: str = Field(..., alias="fileKey")
    upload_id: str = Field(..., alias="uploadId")
    upload_parts: List[UploadPart] = Field(..., alias="uploadParts")


class CommitMultipartUploadPayload(BaseModel):
    """Request to complete a multipart upload."""

    model_config = ConfigDict(populate_by_name=True)

    file_key: str = Field(..., alias="fileKey")
    upload_id: str = Field(..., alias="uploadId")
    filename: str
    provider_commit_data: Dict[str, Any] = Field(
        default_factory=dict,
        alias="providerCommitData",
        description="Completion data passed to the store as is, e.g. {'Parts': [{'PartNumber': 1, 'ETag': '...'}]}",
    )


class CancelMultipartUploadPayload(BaseModel):
    """Request to abort a multipart upload."""

    model_config = ConfigDict(populate_by_name=True)

    file_key: str = Field(..., alias="fileKey")
    upload_id: str = Field(..., alias="uploadId")


class PartSizesResponse(BaseModel):
    """Multipart part size limits."""

    minimum_part_size: int
    default_part_size: int
