"""Application constants and enums."""

from enum import Enum

MIB = 1024 * 1024

DEFAULT_MAX_FILE_SIZE = 50 * MIB
DEFAULT_SIGNED_URL_EXPIRE_TIME_SECONDS = 86400  # 24h
DEFAULT_SIGNED_URL_CACHE_EXPIRE_TIME_SECONDS = 82800  # 22h
DEFAULT_MINIMUM_MULTIPART_UPLOAD_SIZE = 5 * MIB
DEFAULT_MULTIPART_UPLOAD_SIZE = 10 * MIB

# Read size used when discarding what is left of a source stream.
DRAIN_CHUNK_SIZE = 64 * 1024

# Allowance for multipart form framing on top of the file itself.
MULTIPART_FORM_OVERHEAD = 64 * 1024


class StorageClass(str, Enum):
    """S3 storage classes accepted for new objects."""

    STANDARD = "STANDARD"
    REDUCED_REDUNDANCY = "REDUCED_REDUNDANCY"
    STANDARD_IA = "STANDARD_IA"
    ONEZONE_IA = "ONEZONE_IA"
    INTELLIGENT_TIERING = "INTELLIGENT_TIERING"
    GLACIER = "GLACIER"
    DEEP_ARCHIVE = "DEEP_ARCHIVE"
    GLACIER_IR = "GLACIER_IR"
