"""
API v1 Router

All API endpoints for the frontend.
"""

from fastapi import APIRouter

from cryptochart.api.v1.endpoints import market, indicators, stream

router = APIRouter()

# Include all endpoint routers
router.include_router(market.router, prefix="/market", tags=["Market Data"])
router.include_router(indicators.router, prefix="/indicators", tags=["Indicators"])
router.include_router(stream.router, prefix="/stream", tags=["Real-Time Streaming"])
