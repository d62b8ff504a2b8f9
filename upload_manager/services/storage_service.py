"""Storage service: the entry point the host application talks to."""

from typing import BinaryIO, Callable, Optional
import time
from botocore.client import BaseClient
from ..config.settings import Settings, settings as default_settings
from ..config.storage import get_storage_client
from ..repositories.storage_repo import STORE_ERRORS, StorageRepository
from ..schemas.uploads import (
    BeginMultipartUploadPayload,
    BeginMultipartUploadResponse,
    CancelMultipartUploadPayload,
    CommitMultipartUploadPayload,
    UploadResponse,
    WebResource,
)
from ..utils.exceptions import DeleteFailed
from ..utils.helpers import generate_file_key, get_key_from_href
from ..utils.logger import get_logger
from .bounded_upload import BoundedUploader
from .multipart_service import MultipartService
from .url_cache import SignedURLCache

logger = get_logger(__name__)


class StorageService:
    """
    Service for object storage operations.

    Owns the single S3 client and shares it with the uploader, the
    multipart service and the signed URL cache.
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        client: Optional[BaseClient] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or default_settings
        self.client = client if client is not None else get_storage_client(self.config)
        self.storage_class = self.config.storage_class.value

        self.storage_repo = StorageRepository(
            self.client, bucket=self.config.bucket, endpoint=self.config.endpoint
        )
        self.uploader = BoundedUploader(self.storage_repo, self.config.max_file_size)
        self.multipart = MultipartService(
            self.storage_repo,
            storage_class=self.storage_class,
            part_url_expiration=self.config.signed_url_expire_time_seconds,
        )
        self.url_cache = SignedURLCache(
            self._sign_url,
            ttl_seconds=self.config.signed_url_cache_expire_time_seconds,
            clock=clock,
        )

    async def _sign_url(self, key: str) -> str:
        return await self.storage_repo.generate_presigned_url(
            key, expiration=self.config.signed_url_expire_time_seconds
        )

    async def upload_object(
        self,
        field_name: str,
        stream: BinaryIO,
        mime_type: str,
        original_name: str,
    ) -> UploadResponse:
        """
        Stream a file to storage under a fresh key.
        Raises FileSizeExceeded or UploadFailed.
        """
        key = generate_file_key(field_name)
        logger.info("Uploading object", key=key, content_type=mime_type)
        result = await self.uploader.upload(
            key,
            stream,
            content_type=mime_type,
            disposition_hint=original_name,
            storage_class=self.storage_class,
        )
        return UploadResponse(size=result.bytes_written, filename=result.href)

    async def delete_object(self, href: str) -> None:
        """Delete the object an href points to."""
        key = get_key_from_href(href)
        try:
            await self.storage_repo.delete_object(key)
        except STORE_ERRORS as e:
            logger.error("Failed to delete object", key=key, error=str(e))
            raise DeleteFailed(f"Failed to delete {key}: {e}", e) from e
        logger.info("Object deleted", key=key)

    async def resolve_access_url(self, web_resource: WebResource) -> WebResource:
        """Replace the resource href with a cached signed URL."""
        if web_resource.href is None:
            return web_resource
        key = get_key_from_href(web_resource.href)
        signed_url = await self.url_cache.get(key)
        return web_resource.model_copy(update={"href": signed_url})

    async def begin_multipart(
        self, field_name: str, payload: BeginMultipartUploadPayload
    ) -> BeginMultipartUploadResponse:
        """Begin a client-driven multipart upload."""
        return await self.multipart.begin(field_name, payload)

    async def commit_multipart(self, payload: CommitMultipartUploadPayload) -> WebResource:
        """Complete a multipart upload."""
        return await self.multipart.commit(payload)

    async def cancel_multipart(self, payload: CancelMultipartUploadPayload) -> None:
        """Abort a multipart upload."""
        await self.multipart.cancel(payload)

    def get_minimum_part_size(self) -> int:
        return self.config.minimum_multipart_upload_size

    def get_default_part_size(self) -> int:
        return self.config.default_multipart_upload_size

    async def check_connectivity(self) -> bool:
        """Check that the configured bucket is reachable."""
        return await self.storage_repo.check_connectivity()
