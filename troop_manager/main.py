# troop_manager/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from loguru import logger

from .config.settings import settings, validate_settings
from .config.database import db_connection, ensure_indexes
from .config.logging_config import setup_logging
from .api.routes import auth, health, scouts, troops, users
from .core.error_handlers import register_exception_handlers
from .middleware.request_logging import RequestLoggingMiddleware
from .models.errors import ERROR_RESPONSES
from .services.scout_service import seed_merit_badges

setup_logging()

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    logger.info("Starting Scout Troop Management API...")

    # Validate configuration
    try:
        validate_settings()
        logger.info("Configuration validated successfully")
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        raise

    # Connect to MongoDB
    if not db_connection.connect():
        logger.error("Failed to connect to MongoDB")
        raise RuntimeError("Database connection failed")

    db = db_connection.get_database()
    ensure_indexes(db)
    seed_merit_badges(db)

    logger.info(f"Application startup complete ({settings.ENVIRONMENT.value}, prefix {settings.API_PREFIX})")

    yield

    # Shutdown
    logger.info("Shutting down Scout Troop Management API...")
    db_connection.disconnect()
    logger.info("Application shutdown complete")

# Create FastAPI application
app = FastAPI(**settings.set_backend_app_attributes, lifespan=lifespan)

# Add middleware
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
)

register_exception_handlers(app)

# Include routers
app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(auth.router, prefix=f"{settings.API_PREFIX}/auth", tags=["auth"], responses=ERROR_RESPONSES)
app.include_router(users.router, prefix=f"{settings.API_PREFIX}/users", tags=["users"], responses=ERROR_RESPONSES)
app.include_router(troops.router, prefix=f"{settings.API_PREFIX}/troops", tags=["troops"], responses=ERROR_RESPONSES)
app.include_router(scouts.router, prefix=f"{settings.API_PREFIX}/scouts", tags=["scouts"], responses=ERROR_RESPONSES)

@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "success": True,
        "message": settings.TITLE,
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT.value,
        "endpoints": {
            "health": "/health",
            "auth": f"{settings.API_PREFIX}/auth",
            "users": f"{settings.API_PREFIX}/users",
            "troops": f"{settings.API_PREFIX}/troops",
            "scouts": f"{settings.API_PREFIX}/scouts",
        },
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "troop_manager.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.DEBUG,
    )
