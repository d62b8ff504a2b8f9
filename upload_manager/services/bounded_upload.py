"""Streaming upload with a size ceiling enforced during transfer."""

import asyncio
from dataclasses import dataclass
from typing import BinaryIO
from ..repositories.storage_repo import StorageRepository
from ..utils.constants import DRAIN_CHUNK_SIZE
from ..utils.exceptions import FileSizeExceeded, UploadFailed
from ..utils.logger import get_logger

logger = get_logger(__name__)


class _SizeLimitReached(Exception):
    """Raised from inside the transfer to make the store client abort it."""


class _UploadCancelled(Exception):
    """Raised from inside the transfer once the caller has gone away."""


class MonitoredStream:
    """
    Read-only view of a source stream that counts bytes as they are read.

    Every read is a progress checkpoint: once the running total passes
    max_size the read raises and the transfer reading from it fails.
    """

    def __init__(self, source: BinaryIO, max_size: int):
        self._source = source
        self._max_size = max_size
        self.bytes_read = 0
        self.closed = False

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return False

    def read(self, size: int = -1) -> bytes:
        if self.closed:
            raise _UploadCancelled(self.bytes_read)
        chunk = self._source.read(size)
        self.bytes_read += len(chunk)
        if self.bytes_read > self._max_size:
            raise _SizeLimitReached(self.bytes_read)
        return chunk

    def close(self) -> None:
        """Fail every later read so the transfer aborts instead of completing."""
        self.closed = True

    @property
    def limit_reached(self) -> bool:
        return self.bytes_read > self._max_size


@dataclass(frozen=True)
class BoundedUploadResult:
    bytes_written: int
    href: str


def drain(stream: BinaryIO) -> int:
    """Read and discard everything left in stream. Returns bytes discarded."""
    discarded = 0
    while True:
        chunk = stream.read(DRAIN_CHUNK_SIZE)
        if not chunk:
            return discarded
        discarded += len(chunk)


class BoundedUploader:
    """Uploads whole objects, aborting any that grow past max_file_size."""

    def __init__(self, storage_repo: StorageRepository, max_file_size: int):
        self.storage_repo = storage_repo
        self.max_file_size = max_file_size

    async def upload(
        self,
        object_key: str,
        content_stream: BinaryIO,
        content_type: str,
        disposition_hint: str,
        storage_class: str,
    ) -> BoundedUploadResult:
        """
        Stream content_stream to object_key.

        Raises FileSizeExceeded when the stream passes the ceiling and
        UploadFailed for any other transfer error. The source stream is
        drained before returning on every path. If the caller is cancelled
        the transfer is made to abort and is waited for before draining.
        """
        monitored = MonitoredStream(content_stream, self.max_file_size)
        transfer = asyncio.ensure_future(
            self.storage_repo.upload_fileobj(
                monitored,
                key=object_key,
                content_type=content_type,
                content_disposition=f"inline; filename={disposition_hint}",
                storage_class=storage_class,
            )
        )
        try:
            await asyncio.shield(transfer)
        except asyncio.CancelledError:
            monitored.close()
            await asyncio.wait({transfer})
            if not transfer.cancelled() and transfer.exception() is None:
                logger.warning("Upload completed after cancellation", key=object_key)
            else:
                logger.warning(
                    "Upload cancelled", key=object_key, bytes_read=monitored.bytes_read
                )
            raise
        except _SizeLimitReached:
            logger.warning(
                "Upload aborted: size limit exceeded",
                key=object_key,
                bytes_read=monitored.bytes_read,
                limit=self.max_file_size,
            )
            raise FileSizeExceeded(self.max_file_size)
        except Exception as exc:
            if monitored.limit_reached:
                # The client may wrap the abort signal in its own error.
                raise FileSizeExceeded(self.max_file_size) from exc
            logger.error("Upload failed", key=object_key, error=str(exc))
            raise UploadFailed(exc) from exc
        finally:
            loop = asyncio.get_running_loop()
            try:
                discarded = await loop.run_in_executor(None, drain, content_stream)
            except (OSError, ValueError) as exc:
                # A broken source must not hide the upload outcome.
                logger.warning("Could not drain source stream", key=object_key, error=str(exc))
            else:
                if discarded:
                    logger.debug("Drained source stream", key=object_key, bytes=discarded)

        logger.info("Upload complete", key=object_key, size=monitored.bytes_read)
        return BoundedUploadResult(
            bytes_written=monitored.bytes_read,
            href=self.storage_repo.build_href(object_key),
        )
