import time
from typing import Callable

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware

from config import settings
from db.init_db import init_db
from error_handler import StoreNotInitializedError
from logging_config import setup_logging, get_logger
from routers import shopping_list

# Setup logging on startup
setup_logging(
    log_level=settings.LOG_LEVEL,
    log_dir=settings.LOG_DIR,
    log_to_file=settings.LOG_TO_FILE,
)
logger = get_logger(__name__)

app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    redirect_slashes=False,
)

# Initialize database schema on startup
init_db()

logger.info(f"Enabling CORS for origins: {settings.allowed_origins_list}")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all requests and responses."""

    async def dispatch(self, request: Request, call_next: Callable) -> JSONResponse:
        """Log request details and measure response time."""
        start_time = time.time()
        request_id = request.headers.get("x-request-id", "unknown")

        logger.info(
            f"[{request_id}] {request.method} {request.url.path} - "
            f"Client: {request.client.host if request.client else 'unknown'}"
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.time() - start_time
            logger.error(
                f"[{request_id}] {request.method} {request.url.path} "
                f"failed after {duration:.3f}s: {str(e)}",
                exc_info=True,
            )
            raise

        duration = time.time() - start_time
        logger.info(
            f"[{request_id}] {request.method} {request.url.path} "
            f"completed with status {response.status_code} in {duration:.3f}s"
        )
        return response


app.add_middleware(LoggingMiddleware)


@app.exception_handler(StoreNotInitializedError)
async def store_not_initialized_handler(request: Request, exc: StoreNotInitializedError) -> JSONResponse:
    """A store used before load() is a bug, not bad input."""
    logger.error(f"{request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Shopping list store not initialized"})


app.include_router(shopping_list.router, prefix="/shopping-list")


@app.get("/")
def health_check() -> dict:
    """Health check endpoint."""
    logger.debug("Health check called")
    return {"status": "ok", "version": settings.API_VERSION}
