"""
Taskboard - FastAPI Backend
Category and task procedures for the personal task tracker
"""

import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.exceptions import HTTPException as StarletteHTTPException

from logging_config import setup_logging, get_logger

# Setup logging
setup_logging(os.getenv("LOG_LEVEL", "INFO"))
logger = get_logger(__name__)
DEBUG_ERRORS = os.getenv("DEBUG_ERRORS", "0") == "1"

from constants import APP_NAME, APP_VERSION, APP_DESCRIPTION, ErrorCodes
from db_pool import db_pool, DB_TYPE
from errors import register_error_handlers
from models import init_models
from rate_limiting import limiter
from routes import categories_router, tasks_router
from schemas.core import HealthCheck


# ============ App Lifecycle ============

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database on startup"""
    logger.info(f"Initializing {APP_NAME} backend...")

    await db_pool.initialize()
    logger.info(f"Database pool initialized using DB_TYPE={DB_TYPE}")

    await init_models()
    logger.info("Database tables verified/created")

    yield

    try:
        await db_pool.close()
        logger.info("Database pool closed")
    except Exception as e:
        logger.warning(f"Error closing database pool: {e}")
    logger.info(f"Shutting down {APP_NAME} backend...")


# ============ Create App ============

app = FastAPI(
    title=f"{APP_NAME} API",
    description=APP_DESCRIPTION,
    version=APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "System", "description": "System endpoints (health, etc.)"},
        {"name": "Categories", "description": "Category procedures"},
        {"name": "Tasks", "description": "Task procedures"},
    ]
)

# Register structured error handlers
register_error_handlers(app)

# Rate Limiting
app.state.limiter = limiter

# CORS for the web client
frontend_urls = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    os.getenv("FRONTEND_URL", "http://localhost:3000"),
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=frontend_urls,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=86400,
)

app.include_router(categories_router)  # /api/trpc/category.*
app.include_router(tasks_router)       # /api/trpc/task.*


@app.get("/health", response_model=HealthCheck, tags=["System"])
async def health_check():
    """Liveness probe"""
    return HealthCheck(status="ok", version=APP_VERSION, database=DB_TYPE)


# ============ Error Handlers ============

_CODES_BY_STATUS = {
    400: ErrorCodes.BAD_REQUEST,
    404: ErrorCodes.NOT_FOUND,
    405: ErrorCodes.BAD_REQUEST,
    409: ErrorCodes.CONFLICT,
    429: ErrorCodes.TOO_MANY_REQUESTS,
}


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Reduce noise: 404 errors are normal and shouldn't be Warnings
    if exc.status_code == 404:
        logger.info(
            f"HTTP 404 Not Found: {exc.detail}",
            extra={"extra_fields": {"path": request.url.path}}
        )
    else:
        logger.warning(
            f"HTTP {exc.status_code} error: {exc.detail}",
            extra={"extra_fields": {"path": request.url.path, "method": request.method}}
        )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "code": _CODES_BY_STATUS.get(exc.status_code, ErrorCodes.INTERNAL_SERVER_ERROR),
        }
    )


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    logger.warning(
        f"Rate limit exceeded for {get_remote_address(request)}",
        extra={"extra_fields": {"path": request.url.path, "ip": get_remote_address(request)}}
    )
    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "error": "Too many requests, please try again later",
            "code": ErrorCodes.TOO_MANY_REQUESTS,
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled exception: {exc}",
        exc_info=True,
        extra={"extra_fields": {"path": request.url.path, "method": request.method}}
    )
    payload = {
        "success": False,
        "error": "Internal server error",
        "code": ErrorCodes.INTERNAL_SERVER_ERROR,
    }
    # When DEBUG_ERRORS=1 (set via env variable), include debug info in response
    if DEBUG_ERRORS:
        payload["debug"] = {
            "type": type(exc).__name__,
            "message": str(exc),
        }
    return JSONResponse(status_code=500, content=payload)


# ============ Run Server ============

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "0") == "1"
    )
