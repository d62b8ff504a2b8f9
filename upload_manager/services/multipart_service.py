"""Client-driven multipart upload lifecycle: begin, commit, cancel."""

import asyncio
from typing import List
from ..repositories.storage_repo import STORE_ERRORS, StorageRepository
from ..schemas.uploads import (
    BeginMultipartUploadPayload,
    BeginMultipartUploadResponse,
    CancelMultipartUploadPayload,
    CommitMultipartUploadPayload,
    UploadPart,
    WebResource,
)
from ..utils.chunking import ChunkPlanEntry, plan_chunks
from ..utils.exceptions import (
    MultipartCancelFailed,
    MultipartCommitFailed,
    MultipartInitFailed,
    SigningFailed,
)
from ..utils.helpers import generate_file_key
from ..utils.logger import get_logger

logger = get_logger(__name__)


class MultipartService:
    """
    Runs multipart uploads against the store.

    Nothing is kept between calls: the caller carries file_key and
    upload_id from begin to commit or cancel, and the store is the
    authority on in-progress uploads.
    """

    def __init__(
        self,
        storage_repo: StorageRepository,
        storage_class: str,
        part_url_expiration: int,
    ):
        self.storage_repo = storage_repo
        self.storage_class = storage_class
        self.part_url_expiration = part_url_expiration

    async def begin(
        self, field_name: str, payload: BeginMultipartUploadPayload
    ) -> BeginMultipartUploadResponse:
        """
        Create a multipart upload and presign one URL per planned part.
        Returns parts in ascending part number order.
        """
        file_key = generate_file_key(field_name)

        try:
            upload_id = await self.storage_repo.create_multipart_upload(
                key=file_key,
                content_type=payload.content_type,
                content_disposition=f"inline; {payload.filename}",
                storage_class=self.storage_class,
            )
        except STORE_ERRORS as e:
            logger.error("Failed to create multipart upload", key=file_key, error=str(e))
            raise MultipartInitFailed(f"Failed to create multipart upload: {e}", e) from e

        if upload_id is None:
            raise MultipartInitFailed("Failed to create multipart upload.")

        plan = plan_chunks(payload.size, payload.chunk_size)
        upload_parts = await self._get_upload_parts(file_key, upload_id, plan)

        logger.info(
            "Multipart upload started",
            key=file_key,
            upload_id=upload_id,
            parts=len(upload_parts),
        )
        return BeginMultipartUploadResponse(
            file_key=file_key, upload_id=upload_id, upload_parts=upload_parts
        )

    async def _get_upload_parts(
        self, file_key: str, upload_id: str, plan: List[ChunkPlanEntry]
    ) -> List[UploadPart]:
        # Part URLs are bound to one part number and length, so they are never cached.
        try:
            urls = await asyncio.gather(
                *(
                    self.storage_repo.generate_presigned_part_url(
                        key=file_key,
                        upload_id=upload_id,
                        part_number=entry.part_number,
                        part_size=entry.chunk_size,
                        expiration=self.part_url_expiration,
                    )
                    for entry in plan
                )
            )
        except STORE_ERRORS as e:
            raise SigningFailed(f"Failed to sign part URLs for {file_key}: {e}", e) from e

        return [
            UploadPart(part_number=entry.part_number, chunk_size=entry.chunk_size, url=url)
            for entry, url in zip(plan, urls)
        ]

    async def commit(self, payload: CommitMultipartUploadPayload) -> WebResource:
        """
        Complete a multipart upload and describe the assembled object.
        Size and content type come from the store, not from the client.
        """
        try:
            await self.storage_repo.complete_multipart_upload(
                key=payload.file_key,
                upload_id=payload.upload_id,
                multipart_upload=payload.provider_commit_data,
            )
            head = await self.storage_repo.head_object(payload.file_key)
        except STORE_ERRORS as e:
            logger.error(
                "Failed to complete multipart upload",
                key=payload.file_key,
                upload_id=payload.upload_id,
                error=str(e),
            )
            raise MultipartCommitFailed(f"Failed to complete multipart upload: {e}", e) from e

        logger.info("Multipart upload completed", key=payload.file_key, upload_id=payload.upload_id)
        return WebResource(
            href=self.storage_repo.build_href(payload.file_key),
            filename=payload.filename,
            size=head.get("ContentLength"),
            content_type=head.get("ContentType"),
        )

    async def cancel(self, payload: CancelMultipartUploadPayload) -> None:
        """Abort a multipart upload. Store errors surface unchanged in meaning."""
        try:
            await self.storage_repo.abort_multipart_upload(
                key=payload.file_key, upload_id=payload.upload_id
            )
        except STORE_ERRORS as e:
            logger.warning(
                "Failed to abort multipart upload",
                key=payload.file_key,
                upload_id=payload.upload_id,
                error=str(e),
            )
            raise MultipartCancelFailed(f"Failed to abort multipart upload: {e}", e) from e

        logger.info("Multipart upload aborted", key=payload.file_key, upload_id=payload.upload_id)
