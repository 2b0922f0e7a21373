import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.api.v1.endpoints import auth
from app.schemas.response import ApiResponse
from app.core.config import settings
from app.core.constants import TokenStoreBackend
from app.core.database import db_manager
from app.core.handler import register_exception_handlers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    logger.info("Starting up application...")

    if settings.REFRESH_TOKEN_STORE == TokenStoreBackend.MEMORY:
        logger.warning("Using in-memory refresh token store; tokens are lost on restart")
    else:
        try:
            db_manager.init(
                database_url=settings.database_url_computed,
                echo=settings.DB_ECHO,
                pool_size=settings.DB_POOL_SIZE
            )
            if settings.DB_CREATE_TABLES:
                await db_manager.create_tables()
        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
            raise

    yield

    logger.info("Shutting down application...")
    await db_manager.close()


app = FastAPI(
    title="Refresh Token Service",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth.router, prefix="/api/v1/auth", tags=["Authentication"])


@app.get("/")
def health_check():
    """Root health check endpoint."""
    return ApiResponse(
        success=True,
        message="System operational",
        data={"status": "ok", "token_store": settings.REFRESH_TOKEN_STORE}
    )
