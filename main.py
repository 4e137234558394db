from contextlib import asynccontextmanager

from fastapi import FastAPI

from alias_service.config import settings
from alias_service.logging_config import setup_logging
from alias_service.database.connection import engine, Base
from alias_service.errors import register_error_handlers
from alias_service.api.v1 import urls, redirect

# Import models to ensure they're registered with Base
from alias_service.models import URL, UsageEvent  # noqa: F401

setup_logging()


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Create database tables
    Base.metadata.create_all(bind=engine)
    yield


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Alias resolution and usage accounting service built with FastAPI",
    debug=settings.debug,
    lifespan=lifespan,
)

register_error_handlers(app)


@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "environment": settings.environment}


######## Include routers
app.include_router(urls.router, prefix="/api/v1")
app.include_router(redirect.router)
