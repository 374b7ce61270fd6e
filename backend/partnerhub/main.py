# partnerhub/main.py
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from contextlib import asynccontextmanager
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

# --- Core Imports ---
from partnerhub.core.config import settings
from partnerhub.core.logging_setup import setup_logging, logger, trace_id_middleware
from partnerhub.core.exceptions import RepositoryError
from partnerhub.core.rate_limit import limiter
from partnerhub.db.mongo_client import connect_to_mongo, close_mongo_connection, get_database, ensure_indexes
from partnerhub.modules.orders.exceptions import (
    OrdersError, InvalidEnquiryIdError, EnquiryNotFoundError, CatalogNotFoundError,
    PartnerUserNotFoundError, PartnerProfileNotFoundError,
)
from partnerhub.modules.wallet.exceptions import (
    WalletError, PayableNotFoundError, ReceivableNotFoundError, WalletSummaryNotFoundError,
)
from partnerhub.api.v1.api import api_router

# --- Configure Logging ---
setup_logging()

# --- Exception Handlers ---
# Every error response is {"detail": ...} and carries the request's trace id
def _error_response(request: Request, status_code: int, detail, level: str, log_message: str) -> JSONResponse:
    trace_id = getattr(request.state, 'trace_id', "N/A")
    log = logger.bind(trace_id=trace_id, path=request.url.path, status_code=status_code)
    if level == "exception":
        log.exception(log_message)
    else:
        log.log(level.upper(), log_message)
    return JSONResponse(status_code=status_code, content={"detail": detail}, headers={"X-Trace-ID": trace_id})

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    response = _error_response(request, exc.status_code, exc.detail, "warning", f"HTTP error: {exc.detail}")
    if getattr(exc, "headers", None):
        response.headers.update(exc.headers)
    return response

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": list(e.get('loc', [])), "msg": e.get('msg', ''), "type": e.get('type', 'validation_error')}
        for e in exc.errors()
    ]
    return _error_response(request, status.HTTP_422_UNPROCESSABLE_ENTITY, errors, "warning", f"Invalid request body: {errors}")

NOT_FOUND_ERRORS = (
    EnquiryNotFoundError, CatalogNotFoundError, PartnerUserNotFoundError, PartnerProfileNotFoundError,
    PayableNotFoundError, ReceivableNotFoundError, WalletSummaryNotFoundError,
)

def _domain_status(exc: Exception) -> int:
    if isinstance(exc, NOT_FOUND_ERRORS):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, InvalidEnquiryIdError):
        return status.HTTP_400_BAD_REQUEST
    # Failed preconditions and state conflicts (insufficient balance, not pending, ...)
    return status.HTTP_409_CONFLICT

async def domain_exception_handler(request: Request, exc: Exception):
    return _error_response(request, _domain_status(exc), str(exc), "warning", f"{type(exc).__name__}: {exc}")

async def repository_error_handler(request: Request, exc: RepositoryError):
    return _error_response(request, status.HTTP_503_SERVICE_UNAVAILABLE, "Database operation failed.", "error", str(exc))

async def generic_unhandled_exception_handler(request: Request, exc: Exception):
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error", "exception", "Unhandled exception.")

# --- Application Lifespan ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handles startup (connection, index checks) and shutdown."""
    logger.info(f"Starting up {settings.APP_NAME}...")
    try:
        await connect_to_mongo()
        await ensure_indexes(get_database())
        logger.info("Startup sequence complete.")
    except Exception as e:
        logger.critical(f"Application startup failed: {e}")
        await close_mongo_connection()
        raise RuntimeError(f"Startup error: {e}") from e

    yield # Application runs

    logger.info(f"Shutting down {settings.APP_NAME}...")
    await close_mongo_connection()
    logger.info("Shutdown complete.")

# --- FastAPI App ---
app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    exception_handlers={
        # FastAPI/Starlette Built-ins
        StarletteHTTPException: http_exception_handler,
        RequestValidationError: validation_exception_handler,
        RateLimitExceeded: _rate_limit_exceeded_handler,
        # Domain/Service Errors
        OrdersError: domain_exception_handler,
        WalletError: domain_exception_handler,
        RepositoryError: repository_error_handler,
        # Catch-all
        Exception: generic_unhandled_exception_handler,
    }
)

# --- Apply Middlewares ---
# Order matters: the last one added runs first on the request.
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

if settings.ALLOWED_ORIGINS:
    logger.info(f"Configuring CORS for origins: {settings.ALLOWED_ORIGINS}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Trace-ID"],
    )

# Trace ID Middleware (outermost, sets trace_id early)
app.add_middleware(BaseHTTPMiddleware, dispatch=trace_id_middleware)

# --- Include API Routers ---
app.include_router(api_router, prefix=settings.API_V1_PREFIX)

# --- Root Health Check Endpoint ---
@app.get("/health", tags=["Health Check"])
async def health_check():
    return {"status": "healthy", "service": settings.APP_NAME}

# --- Main Execution Block (for local dev only) ---
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "partnerhub.main:app",
        host=settings.HOST, port=settings.PORT,
        reload=settings.RELOAD, log_level=settings.LOG_LEVEL.lower()
    )
