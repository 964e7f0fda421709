"""Shared FastAPI dependencies."""

import logging

from fastapi import HTTPException, Request

from rams import rate_limit

logger = logging.getLogger(__name__)


def client_key(request: Request) -> str:
    """Rate-limit key for the calling client."""
    if request.client and request.client.host:
        return request.client.host
    return "anonymous"


async def enforce_validate_rate_limit(request: Request) -> None:
    """Reject the request when the client is over its hourly quota.

    Usage in routes:
        @router.post("/something", dependencies=[Depends(enforce_validate_rate_limit)])
    """
    key = client_key(request)
    if not rate_limit.rate_limit_validate.check(key):
        logger.warning("Rate limit exceeded for %s", key)
        raise HTTPException(status_code=429, detail="Rate limit exceeded")


__all__ = ["client_key", "enforce_validate_rate_limit"]
