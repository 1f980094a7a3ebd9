"""
CryptoChart Backend - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cryptochart.core.config import settings
from cryptochart.api.v1 import router as api_v1_router

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    # Live trade prices (owned by the app, not a global)
    from cryptochart.services.websocket import PriceFeedSession
    if settings.enable_live_data:
        app.state.price_feed = PriceFeedSession(settings.symbols)
        await app.state.price_feed.open()
    else:
        app.state.price_feed = None
        logger.info("Live price feed disabled (enable_live_data=false)")

    yield

    # Shutdown
    logger.info("Shutting down...")
    if app.state.price_feed is not None:
        await app.state.price_feed.close()

    from cryptochart.services.data_ingestion import get_data_ingestion_service
    await get_data_ingestion_service().close()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    CryptoChart Dashboard API

    ## Architecture
    - **Data Ingestion**: Paginated candle history from Binance
    - **Indicator Engine**: Moving averages and the weekly bull market support band (NumPy)
    - **Risk Line**: Normalized long-horizon risk oscillator
    - **Live Feed**: Trade prices over the Binance WebSocket stream, pushed via SSE
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware - Vite dev server ports
cors_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
# Add any additional origins from settings
if settings.allowed_origins:
    cors_origins.extend([o for o in settings.allowed_origins if o not in cors_origins])

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "symbols": settings.symbols,
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "CryptoChart Backend API",
        "docs": "/docs",
        "health": "/health",
    }
