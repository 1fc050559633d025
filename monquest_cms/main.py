"""FastAPI main application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from monquest_cms.core.config import settings
from monquest_cms.core.middleware import setup_middleware
from monquest_cms.core.exceptions import MonquestError

from monquest_cms.api.auth import router as auth_router
from monquest_cms.api.users import router as users_router
from monquest_cms.api.roles import router as roles_router
from monquest_cms.api.content import router as content_router
from monquest_cms.api.api_keys import router as api_keys_router
from monquest_cms.api.settings import router as settings_router
from monquest_cms.api.notifications import router as notifications_router
from monquest_cms.api.admin import router as admin_router

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("monquest")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Starting %s API", settings.APP_NAME)
    logger.warning(
        "Requests are identified by the x-user-id header; "
        "a proxy in front of this service must prevent header spoofing"
    )

    from monquest_cms.services.cache_service import cache_service
    if cache_service.health_check():
        logger.info("Redis connected")
    else:
        logger.warning("Redis not available, public content will not be cached")

    yield

    logger.info("Shutting down %s API", settings.APP_NAME)


app = FastAPI(
    title="MonQuest CMS API",
    description="Landing page content and admin panel API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Middleware
setup_middleware(app)


@app.exception_handler(MonquestError)
async def monquest_exception_handler(request: Request, exc: MonquestError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message, **exc.extra},
    )


# Register routers
app.include_router(auth_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(roles_router, prefix="/api")
app.include_router(content_router, prefix="/api")
app.include_router(api_keys_router, prefix="/api")
app.include_router(settings_router, prefix="/api")
app.include_router(notifications_router, prefix="/api")
app.include_router(admin_router, prefix="/api")


@app.get("/")
async def root():
    return {
        "name": settings.APP_NAME,
        "version": "0.1.0",
        "docs": "/docs",
    }


@app.get("/api/health")
async def health():
    """Quick health check endpoint."""
    return {"status": "ok"}
