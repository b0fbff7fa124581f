from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.app import cache
from backend.app.config import get_settings
from backend.app.routers import series

settings = get_settings()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "Starting CaseTrend",
        env=settings.app_env,
        default_mode=settings.default_mode,
        average_window_days=settings.average_window_days,
    )
    yield
    cache.invalidate()
    logger.info("Shutting down CaseTrend")


app = FastAPI(
    title="CaseTrend API",
    version="1.0.0",
    description="Daily, weekly and cumulative case-count series for dashboards",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# API routers
app.include_router(series.router, prefix="/api")


@app.get("/api/health")
async def health_check():
    return {"status": "ok"}
