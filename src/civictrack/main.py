"""FastAPI application for CivicTrack"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from civictrack import __version__
from civictrack.api.issues import router as issues_router
from civictrack.api.identity import router as identity_router
from civictrack.core.config import get_settings
from civictrack.core.logging import configure_logging, get_logger
from civictrack.errors import (
    AuthorizationError,
    IssueNotFoundError,
    StoreError,
    UploadError,
    ValidationError,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database and run migrations on startup"""
    from civictrack.storage.database import initialize_database
    await initialize_database()
    yield


settings = get_settings()
configure_logging(settings.log_level)

# Create FastAPI app
app = FastAPI(
    title="CivicTrack API",
    description="Civic issue reporting with admin triage",
    version=__version__,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan,
)

# CORS for a frontend dev server running on a different port
if settings.run_env == "development":
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:8080",
            "http://127.0.0.1:8080",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Service errors -> HTTP status codes
ERROR_STATUS = {
    ValidationError: 422,
    AuthorizationError: 403,
    IssueNotFoundError: 404,
    UploadError: 502,
    StoreError: 500,
}


def _error_handler(status_code: int):
    async def handler(request: Request, exc: Exception):
        if status_code >= 500:
            logger.error(f"[API] {request.method} {request.url.path} failed: {exc}")
        return JSONResponse(
            status_code=status_code,
            content={"error": type(exc).__name__, "detail": str(exc)},
        )
    return handler


for error_cls, status_code in ERROR_STATUS.items():
    app.add_exception_handler(error_cls, _error_handler(status_code))

# Include API routers
app.include_router(issues_router, prefix="/api/issues", tags=["issues"])
app.include_router(identity_router, prefix="/api", tags=["identity"])


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "civictrack-api"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8080)
