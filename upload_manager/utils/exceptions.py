"""Errors raised by the upload manager."""

from typing import Optional


class StorageError(Exception):
    """Base class for upload manager errors."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class InvalidArgument(StorageError):
    """Raised for invalid caller input such as a bad chunk plan."""


class FileSizeExceeded(StorageError):
    """Raised when a streamed upload grows past the configured ceiling."""

    def __init__(self, limit: int):
        super().__init__(f"File size exceeded the limit of {limit} bytes.")
        self.limit = limit


class UploadFailed(StorageError):
    """Raised when the store rejects or fails a streaming put."""

    def __init__(self, cause: BaseException):
        super().__init__(f"Upload failed: {cause}", cause)


class MultipartInitFailed(StorageError):
    """Raised when a multipart upload cannot be created."""


class MultipartCommitFailed(StorageError):
    """Raised when completing a multipart upload fails."""


class MultipartCancelFailed(StorageError):
    """Raised when aborting a multipart upload fails."""


class DeleteFailed(StorageError):
    """Raised when an object cannot be deleted."""


class SigningFailed(StorageError):
    """Raised when a signed URL cannot be produced."""
