"""FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kitchly import __version__
from kitchly.actions import KitchenServices
from kitchly.config import get_settings
from kitchly.connectors import build_order_client
from kitchly.llm import build_inference
from kitchly.logging_config import configure_logging, get_logger
from kitchly.routers import conversations_router
from kitchly.state import KitchenContextStore, create_redis_client

# Configure logging on module load
configure_logging(get_settings().log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    # Startup
    logger.info("Starting Kitchly API")
    settings = get_settings()

    redis = create_redis_client(settings.redis_url)
    store = KitchenContextStore(redis)
    inference = build_inference(settings)
    order_client = build_order_client(settings)
    app.state.services = KitchenServices.create(
        store, inference=inference, order_client=order_client, settings=settings
    )
    logger.info(
        f"Kitchen services ready (generation={inference is not None}, "
        f"ordering={order_client is not None})"
    )

    yield

    # Shutdown
    logger.info("Shutting down Kitchly API")
    if order_client is not None:
        await order_client.close()
    if inference is not None:
        await inference.close()
    try:
        await redis.aclose()
    except Exception as e:
        logger.warning(f"Error closing Redis connection: {e}")


app = FastAPI(
    title="Kitchly API",
    description="Conversational recipes, meal plans and guided cooking",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().allowed_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(conversations_router)


@app.get("/health")
async def health_check() -> dict:
    """Basic health check endpoint."""
    return {"status": "ok", "service": "kitchly-api"}


@app.get("/")
async def root() -> dict:
    """Root endpoint with API information."""
    return {
        "name": "Kitchly API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }
