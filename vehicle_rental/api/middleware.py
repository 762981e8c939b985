"""Rate limiting and request logging."""

import logging
import time

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from vehicle_rental.config import settings

logger = logging.getLogger("vehicle_rental.access")

limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.rate_limit_enabled,
)


async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        "%s %s -> %d (%.1f ms)",
        request.method, request.url.path, response.status_code, elapsed_ms,
    )
    return response
