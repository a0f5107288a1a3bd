"""
Storefront API - FastAPI Application
Seller subscriptions, payment review and product quota
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from storefront.api.routes import admin, auth, health, plans, seller
from storefront.config import settings
from storefront.core.exceptions import AppError
from storefront.core.logger import configure_logging
from storefront.database import Database

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    configure_logging(settings.log_level)
    logger.info("Starting Storefront API...")

    database = Database.from_settings(settings)
    app.state.database = database
    try:
        database.create_all()
        logger.info("Database initialized")
    except Exception as e:
        logger.error(f"Database initialization failed: {str(e)}")

    logger.info(f"API running on {settings.app_env} environment")
    yield
    # Shutdown
    database.dispose()
    logger.info("Shutting down Storefront API...")


app = FastAPI(
    title=settings.app_name,
    description="Backend API for the storefront platform",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    detail = errors[0].get("msg") if errors else "Invalid request body format"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": f"Invalid request body format: {detail}"},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": "Internal server error"},
    )


@app.get("/")
async def root() -> dict:
    return {
        "name": settings.app_name,
        "environment": settings.app_env,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


prefix = settings.api_v1_prefix
app.include_router(health.router, prefix=prefix, tags=["Health"])
app.include_router(auth.router, prefix=f"{prefix}/auth", tags=["Auth"])
app.include_router(plans.router, prefix=f"{prefix}/plans", tags=["Plans"])
app.include_router(seller.router, prefix=f"{prefix}/seller", tags=["Seller"])
app.include_router(admin.router, prefix=f"{prefix}/admin", tags=["Admin"])
