"""Rate limiting middleware using slowapi."""

from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from ..config import Settings, settings


def upload_rate_limit(config: Settings = settings) -> str:
    """Limit string for the streaming upload route."""
    return f"{config.upload_rate_limit_per_minute}/minute"


# Every other route falls back to the default limit
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.rate_limit_per_minute}/minute"],
)

rate_limit_exceeded_handler = _rate_limit_exceeded_handler
