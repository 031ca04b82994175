# /memora/utils/rate_limiter.py

from fastapi import Request
from slowapi import Limiter
from memora.utils.request_utils import get_remote_address
from memora.config.settings import settings

TURN_LIMIT = f"{settings.rate_limit_per_minute}/minute"


def conversation_key(request: Request) -> str:
    """Buckets message turns per client and per conversation."""
    conversation_id = request.path_params.get("conversation_id", "-")
    return f"{get_remote_address(request)}:{conversation_id}"


limiter = Limiter(key_func=get_remote_address, default_limits=[TURN_LIMIT])
