"""
FastAPI application for the glow persistence service.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .glow import router as glow_router, INVALID_DATA_MESSAGE, INTERNAL_ERROR_MESSAGE
from .schemas import HealthResponse
from ..core.config import VERSION, debug_enabled, get_cors_origins
from ..core.db import init_db, health_check
from ..util.logging import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create the table on startup; existing data is left untouched
    init_db()
    logger.info(f"Glow persistence API {VERSION} started")
    yield


# Initialize the FastAPI application
app = FastAPI(
    title="Glow Persistence API",
    version=VERSION,
    description="API for persisting per-object glow controller data",
    docs_url="/docs" if debug_enabled() else None,
    redoc_url="/redoc" if debug_enabled() else None,
    lifespan=lifespan
)

# In-world HTTP requests come from simulators, not browsers on a known origin
origins = get_cors_origins()
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials="*" not in origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(glow_router, prefix="/api/glow", tags=["glow"])


@app.get("/health", response_model=HealthResponse)
def health_check_endpoint():
    """Check system health, including the database."""
    db_health = health_check()
    return HealthResponse(
        status="healthy" if db_health else "unhealthy",
        version=VERSION,
        db_health=db_health
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """The only request body is the glow write; a malformed one is a data format error."""
    logger.warning(f"Rejected request body for {request.url.path}: {len(exc.errors())} validation error(s)")
    return JSONResponse(status_code=400, content={"error": INVALID_DATA_MESSAGE})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions without exposing internals."""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": INTERNAL_ERROR_MESSAGE},
    )
