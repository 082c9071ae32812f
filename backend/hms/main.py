"""FastAPI main application."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool

from hms.config import get_settings
from hms.database import init_db
from hms.errors import register_exception_handlers
from hms.routers import (
    health_router,
    auth_router,
    users_router,
    roles_router,
    companies_router,
)

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format=f"%(asctime)s %(levelname)s [{settings.service_name}] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    await run_in_threadpool(init_db)
    logger.info(f"{settings.app_name} started ({settings.environment})")
    yield
    # Shutdown


app = FastAPI(
    title=settings.app_name,
    description="Multi-tenant hospital management administration API",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Mount routers under /api/v1
API_PREFIX = "/api/v1"

app.include_router(health_router, prefix=API_PREFIX)
app.include_router(auth_router, prefix=API_PREFIX)
app.include_router(users_router, prefix=API_PREFIX)
app.include_router(roles_router, prefix=API_PREFIX)
app.include_router(companies_router, prefix=API_PREFIX)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "app": settings.app_name,
        "docs": "/docs",
        "health": f"{API_PREFIX}/health"
    }
