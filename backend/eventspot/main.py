"""
EventSpot API - Main Application Entry Point

Event ticketing backend:
- Browse events, venues, artists and categories
- Cookie sessions backed by a server-side session store
- Seat booking that cannot oversell, even under concurrent requests
- Structured logging with request correlation, Prometheus metrics
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from eventspot.core.config import get_settings
from eventspot.core.exceptions import register_exception_handlers
from eventspot.core.logging import setup_logging, get_logger
from eventspot.core.metrics import metrics_endpoint
from eventspot.api.router import api_router
from eventspot.api.middleware import RequestLoggingMiddleware
from eventspot.db.seed import init_db
from eventspot.db.session import engine, AsyncSessionLocal
from eventspot.infrastructure.redis_client import close_redis
from eventspot.services.cache_service import get_cache_stats
from eventspot.services.session_factory import get_session_store, reset_session_store

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        database=engine.url.render_as_string(hide_password=True),
    )

    await init_db(engine, AsyncSessionLocal, seed=settings.DB_SEED_ON_STARTUP)
    # Choose memory or Redis sessions up front rather than on the first login
    await get_session_store()

    yield

    await close_redis()
    reset_session_store()
    await engine.dispose()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Event ticketing API with concurrency-safe seat booking",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS (credentials are needed for the session cookie)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)

app.include_router(api_router)


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for Docker and load balancers."""
    cache_stats = await get_cache_stats()
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "cache": cache_stats,
    }


@app.get("/metrics", tags=["Health"], include_in_schema=False)
async def metrics():
    return metrics_endpoint()
