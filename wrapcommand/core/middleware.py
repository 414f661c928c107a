import time
from fastapi import Request
from wrapcommand.core.logger import get_logger

logger = get_logger("request_logger")

async def log_requests(request: Request, call_next):
    start_time = time.perf_counter()
    if request.method == "OPTIONS":
        logger.info(f"CORS preflight for {request.url.path}")
    else:
        logger.info(f"Started {request.method} {request.url.path}")
    try:
        response = await call_next(request)
    except Exception:
        duration = time.perf_counter() - start_time
        logger.exception(f"Unhandled error on {request.method} {request.url.path} after {duration:.3f}s")
        raise
    duration = time.perf_counter() - start_time
    logger.info(
        f"Completed {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration:.3f}s"
    )
    return response
