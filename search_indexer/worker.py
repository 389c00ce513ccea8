"""
ARQ Worker Configuration

Runs the search indexing job on a schedule. Each run rebuilds every
search document from the primary store and publishes them as a whole
to Meilisearch.

Run with:
    arq search_indexer.worker.WorkerSettings
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any

from arq import cron
from arq.connections import RedisSettings

from .config import settings
from .database import async_session_maker
from .services.exceptions import IndexingError, SearchPublishError
from .services.indexing_service import index_local
from .services.redis_service import redis_service
from .services.search_service import (
    check_search_health,
    close_meilisearch,
    init_meilisearch,
    publish_documents,
)

logger = logging.getLogger(__name__)

# Parse Redis URL into components for ARQ
# Format: redis://host:port/db or redis://:password@host:port/db
def parse_redis_url(url: str) -> RedisSettings:
    """Parse Redis URL into ARQ RedisSettings."""
    from urllib.parse import urlparse

    parsed = urlparse(url)
    return RedisSettings(
        host=parsed.hostname or "localhost",
        port=parsed.port or 6379,
        password=parsed.password,
        database=int(parsed.path.lstrip("/") or 0),
    )


# =============================================================================
# Indexing Job
# =============================================================================

async def run_search_indexing(ctx: dict[str, Any]) -> dict[str, Any]:
    """
    Rebuild and publish the search index.

    A failed run publishes nothing; the previous index stays live.

    Returns:
        dict with the run status and document count
    """
    logger.info("Running scheduled search indexing...")
    started = time.monotonic()
    run_at = datetime.now(timezone.utc).isoformat()

    cache = redis_service if redis_service.is_connected else None
    if cache is None:
        logger.warning("Redis not connected, indexing without record cache")

    try:
        documents = await index_local(async_session_maker, cache)
        await publish_documents(documents)
    except (IndexingError, SearchPublishError) as e:
        logger.error(f"Search indexing failed: {e}", exc_info=True)
        return {
            "status": "failed",
            "error": str(e),
            "run_at": run_at,
        }

    duration = time.monotonic() - started
    logger.info(f"Search indexing complete: {len(documents)} documents in {duration:.1f}s")

    return {
        "status": "completed",
        "documents": len(documents),
        "duration_seconds": round(duration, 3),
        "run_at": run_at,
    }


# =============================================================================
# Startup/Shutdown Hooks
# =============================================================================

async def startup(ctx: dict[str, Any]) -> None:
    """Initialize resources when worker starts."""
    logger.info("ARQ worker starting up...")

    # Connect to Redis (record cache)
    try:
        await redis_service.connect()
        logger.info("Redis connected for ARQ worker")
    except Exception as e:
        logger.warning(f"Redis connection failed in ARQ worker: {e}")

    redis_health = await redis_service.health_check()
    logger.info(f"Redis status: {redis_health['status']}")

    await init_meilisearch()
    health = await check_search_health()
    logger.info(f"Meilisearch status: {health['status']}")


async def shutdown(ctx: dict[str, Any]) -> None:
    """Cleanup resources when worker stops."""
    logger.info("ARQ worker shutting down...")

    await close_meilisearch()
    await redis_service.disconnect()
    logger.info("Redis disconnected")


# =============================================================================
# Schedule Parsing
# =============================================================================

def parse_schedule_set(value: str) -> set[int]:
    """
    Parse a comma-separated string of integers into a set.

    Examples:
        "0,12" -> {0, 12}
        "0,15,30,45" -> {0, 15, 30, 45}
    """
    return {int(x.strip()) for x in value.split(",") if x.strip()}


def get_indexing_hours() -> set[int] | None:
    """Get indexing job hours from settings. Returns None if using minutes instead."""
    if settings.arq_indexing_hours.strip():
        return parse_schedule_set(settings.arq_indexing_hours)
    return None


def get_indexing_minutes() -> set[int] | None:
    """Get indexing job minutes from settings. Returns None if using hours instead."""
    if settings.arq_indexing_minutes.strip():
        return parse_schedule_set(settings.arq_indexing_minutes)
    return None


def build_indexing_cron():
    """Build indexing cron job based on config (hours or minutes)."""
    hours = get_indexing_hours()
    minutes = get_indexing_minutes()

    if minutes:
        # Run at specific minutes (for testing, e.g., every 2 mins)
        return cron(run_search_indexing, minute=minutes, second=0, unique=True)
    elif hours:
        # Run at specific hours (production default)
        return cron(run_search_indexing, hour=hours, minute=0, second=0, unique=True)
    else:
        # Fallback: run at midnight
        return cron(run_search_indexing, hour={0}, minute=0, second=0, unique=True)


# =============================================================================
# Worker Settings
# =============================================================================

class WorkerSettings:
    """ARQ worker configuration."""

    # Redis connection
    redis_settings = parse_redis_url(settings.redis_url)

    # Job functions that can be called via arq.enqueue_job()
    functions = [
        run_search_indexing,
    ]

    # Scheduled cron jobs (configured via .env)
    # ARQ_INDEXING_HOURS: comma-separated hours (default "0,6,12,18")
    # ARQ_INDEXING_MINUTES: comma-separated minutes (used instead of hours when set)
    cron_jobs = [
        build_indexing_cron(),
    ]

    # Lifecycle hooks
    on_startup = startup
    on_shutdown = shutdown

    # Worker behavior
    max_jobs = 1  # Runs never overlap
    job_timeout = 3600  # 1 hour max per run
    keep_result = 3600  # Keep results for 1 hour

    # Health check
    health_check_interval = 30
