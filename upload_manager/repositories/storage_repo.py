"""Storage repository wrapping the S3 command protocol."""

import asyncio
from functools import partial
from typing import Any, BinaryIO, Callable, Dict, Optional
from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError
from ..utils.helpers import build_href

# Errors the store client raises for a failed command.
STORE_ERRORS = (BotoCoreError, ClientError)


class StorageRepository:
    """
    Async facade over one S3 client and bucket.

    boto3 is blocking, so every command runs in the event loop's default
    executor and suspends the calling task until the round trip completes.
    The client is shared and never built here.
    """

    def __init__(self, client: BaseClient, bucket: str, endpoint: str):
        self.client = client
        self.bucket_name = bucket
        self.endpoint = endpoint

    async def _run(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args, **kwargs))

    def build_href(self, key: str) -> str:
        """Canonical unsigned href for an object in this bucket."""
        return build_href(self.endpoint, self.bucket_name, key)

    async def check_connectivity(self) -> bool:
        """Check that the bucket is reachable with the configured credentials."""
        try:
            await self._run(self.client.head_bucket, Bucket=self.bucket_name)
            return True
        except STORE_ERRORS:
            return False

    async def upload_fileobj(
        self,
        fileobj: BinaryIO,
        key: str,
        content_type: str,
        content_disposition: str,
        storage_class: str,
    ) -> None:
        """
        Stream a file-like object to storage.
        The client's managed transfer switches to multipart for large bodies
        and aborts its own multipart upload when reading the body fails.
        """
        await self._run(
            self.client.upload_fileobj,
            Fileobj=fileobj,
            Bucket=self.bucket_name,
            Key=key,
            ExtraArgs={
                "ContentType": content_type,
                "ContentDisposition": content_disposition,
                "StorageClass": storage_class,
            },
        )

    async def delete_object(self, key: str) -> None:
        """Delete an object."""
        await self._run(self.client.delete_object, Bucket=self.bucket_name, Key=key)

    async def head_object(self, key: str) -> Dict[str, Any]:
        """Fetch object metadata."""
        return await self._run(self.client.head_object, Bucket=self.bucket_name, Key=key)

    async def generate_presigned_url(self, key: str, expiration: int) -> str:
        """
        Generate presigned URL for file download.
        Args:
            key: Storage key
            expiration: URL expiration time in seconds
        Returns:
            Presigned URL
        """
        return await self._run(
            self.client.generate_presigned_url,
            "get_object",
            Params={"Bucket": self.bucket_name, "Key": key},
            ExpiresIn=expiration,
        )

    async def create_multipart_upload(
        self,
        key: str,
        content_type: str,
        content_disposition: str,
        storage_class: str,
    ) -> Optional[str]:
        """
        Initiate multipart upload.
        Returns:
            upload_id assigned by the store, or None if it did not send one
        """
        response = await self._run(
            self.client.create_multipart_upload,
            Bucket=self.bucket_name,
            Key=key,
            ContentType=content_type,
            ContentDisposition=content_disposition,
            StorageClass=storage_class,
        )
        return response.get("UploadId")

    async def generate_presigned_part_url(
        self,
        key: str,
        upload_id: str,
        part_number: int,
        part_size: int,
        expiration: int,
    ) -> str:
        """Generate a presigned URL for uploading one part of a multipart upload."""
        return await self._run(
            self.client.generate_presigned_url,
            "upload_part",
            Params={
                "Bucket": self.bucket_name,
                "Key": key,
                "UploadId": upload_id,
                "PartNumber": part_number,
                "ContentLength": part_size,
            },
            ExpiresIn=expiration,
        )

    async def complete_multipart_upload(
        self, key: str, upload_id: str, multipart_upload: Dict[str, Any]
    ) -> None:
        """Complete multipart upload by combining all parts."""
        await self._run(
            self.client.complete_multipart_upload,
            Bucket=self.bucket_name,
            Key=key,
            UploadId=upload_id,
            MultipartUpload=multipart_upload,
        )

    async def abort_multipart_upload(self, key: str, upload_id: str) -> None:
        """Abort multipart upload and clean up parts."""
        await self._run(
            self.client.abort_multipart_upload,
            Bucket=self.bucket_name,
            Key=key,
            UploadId=upload_id,
        )
