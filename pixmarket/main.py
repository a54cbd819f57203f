"""
Picture Token Market - REST backend for trading tokenized pictures.
"""
import logging

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config.settings import settings  # Use the centralized settings
from .core.errors import register_exception_handlers
from .core.lifespan import lifespan
from .routers import picture_router, user_router

logger = logging.getLogger(__name__)

# Create the main app instance with the lifespan manager
app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
    debug=settings.DEBUG
)

register_exception_handlers(app)

# CORS Configuration
if settings.CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
else:
    logger.warning("CORS_ORIGINS is not set. CORS will not be configured.")


# Root router for the API prefix from settings
api_router = APIRouter(prefix=settings.API_V1_STR)
api_router.include_router(user_router.router)
api_router.include_router(picture_router.router)

app.include_router(api_router)


# Root endpoint for basic health check or API info
@app.get("/", tags=["Root"])
async def read_root():
    """
    Root endpoint providing basic API information.
    """
    return {"message": f"Welcome to {settings.PROJECT_NAME}", "docs_url": "/docs", "redoc_url": "/redoc"}
