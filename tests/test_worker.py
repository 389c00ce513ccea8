"""Tests for the ARQ worker indexing job and schedule parsing."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from search_indexer.config import settings
from search_indexer.services.exceptions import IndexingError, SearchPublishError
from search_indexer.services.redis_service import RedisService
from search_indexer.worker import (
    WorkerSettings,
    build_indexing_cron,
    parse_redis_url,
    parse_schedule_set,
    run_search_indexing,
    startup,
)


# =============================================================================
# Configuration Parsing
# =============================================================================


class TestParsing:
    """Tests for URL and schedule parsing."""

    def test_parse_redis_url(self):
        redis_settings = parse_redis_url("redis://:secret@cache.internal:6380/2")

        assert redis_settings.host == "cache.internal"
        assert redis_settings.port == 6380
        assert redis_settings.password == "secret"
        assert redis_settings.database == 2

    def test_parse_redis_url_defaults(self):
        redis_settings = parse_redis_url("redis://")

        assert redis_settings.host == "localhost"
        assert redis_settings.port == 6379
        assert redis_settings.database == 0

    def test_parse_schedule_set(self):
        assert parse_schedule_set("0, 6,12 ,18") == {0, 6, 12, 18}
        assert parse_schedule_set("") == set()

    def test_cron_from_hours(self):
        with patch.object(settings, "arq_indexing_hours", "3,15"), \
                patch.object(settings, "arq_indexing_minutes", ""):
            job = build_indexing_cron()

        assert job.hour == {3, 15}
        assert job.minute == 0

    def test_cron_from_minutes(self):
        with patch.object(settings, "arq_indexing_hours", ""), \
                patch.object(settings, "arq_indexing_minutes", "0,30"):
            job = build_indexing_cron()

        assert job.minute == {0, 30}
        assert job.hour is None

    def test_cron_fallback_midnight(self):
        with patch.object(settings, "arq_indexing_hours", ""), \
                patch.object(settings, "arq_indexing_minutes", ""):
            job = build_indexing_cron()

        assert job.hour == {0}

    def test_worker_registers_indexing_job(self):
        assert run_search_indexing in WorkerSettings.functions
        assert len(WorkerSettings.cron_jobs) == 1
        assert WorkerSettings.max_jobs == 1


# =============================================================================
# Indexing Job
# =============================================================================


class TestRunSearchIndexing:
    """Tests for the scheduled indexing job."""

    @pytest.mark.asyncio
    async def test_successful_run(self):
        documents = [MagicMock(), MagicMock()]
        with patch("search_indexer.worker.index_local", AsyncMock(return_value=documents)), \
                patch("search_indexer.worker.publish_documents", AsyncMock()) as publish:
            result = await run_search_indexing({})

        publish.assert_awaited_once_with(documents)
        assert result["status"] == "completed"
        assert result["documents"] == 2
        assert "run_at" in result

    @pytest.mark.asyncio
    async def test_cache_passed_only_when_connected(self):
        index_local = AsyncMock(return_value=[])
        with patch("search_indexer.worker.index_local", index_local), \
                patch("search_indexer.worker.publish_documents", AsyncMock()), \
                patch("search_indexer.worker.redis_service") as redis_service:
            redis_service.is_connected = False
            await run_search_indexing({})

        assert index_local.await_args.args[1] is None

    @pytest.mark.asyncio
    async def test_store_failure_publishes_nothing(self):
        error = IndexingError("store unreachable")
        with patch("search_indexer.worker.index_local", AsyncMock(side_effect=error)), \
                patch("search_indexer.worker.publish_documents", AsyncMock()) as publish:
            result = await run_search_indexing({})

        publish.assert_not_awaited()
        assert result["status"] == "failed"
        assert result["error"] == "store unreachable"

    @pytest.mark.asyncio
    async def test_publish_failure_reported(self):
        error = SearchPublishError("swap failed")
        with patch("search_indexer.worker.index_local", AsyncMock(return_value=[])), \
                patch("search_indexer.worker.publish_documents", AsyncMock(side_effect=error)):
            result = await run_search_indexing({})

        assert result["status"] == "failed"


# =============================================================================
# Startup Health Checks
# =============================================================================


class TestStartup:
    """Tests for the worker startup hook."""

    @pytest.mark.asyncio
    async def test_startup_checks_redis_and_meilisearch(self):
        redis_service = MagicMock()
        redis_service.connect = AsyncMock()
        redis_service.health_check = AsyncMock(return_value={"status": "healthy"})
        search_health = AsyncMock(return_value={"status": "healthy"})

        with patch("search_indexer.worker.redis_service", redis_service), \
                patch("search_indexer.worker.init_meilisearch", AsyncMock()), \
                patch("search_indexer.worker.check_search_health", search_health):
            await startup({})

        redis_service.connect.assert_awaited_once()
        redis_service.health_check.assert_awaited_once()
        search_health.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_startup_survives_unreachable_redis(self):
        redis_service = RedisService()
        redis_service.connect = AsyncMock(side_effect=ConnectionError("refused"))

        with patch("search_indexer.worker.redis_service", redis_service), \
                patch("search_indexer.worker.init_meilisearch", AsyncMock()), \
                patch("search_indexer.worker.check_search_health",
                      AsyncMock(return_value={"status": "degraded"})):
            await startup({})

        assert redis_service.is_connected is False


class TestRedisHealthCheck:
    """Tests for RedisService.health_check."""

    @pytest.mark.asyncio
    async def test_disconnected(self):
        assert await RedisService().health_check() == {"status": "disconnected"}

    @pytest.mark.asyncio
    async def test_healthy(self):
        service = RedisService()
        service._redis = MagicMock()
        service._redis.info = AsyncMock(return_value={"used_memory_human": "1.2M"})

        result = await service.health_check()

        assert result == {"status": "healthy", "used_memory_human": "1.2M"}
        service._redis.info.assert_awaited_once_with("memory")

    @pytest.mark.asyncio
    async def test_error(self):
        service = RedisService()
        service._redis = MagicMock()
        service._redis.info = AsyncMock(side_effect=ConnectionError("reset"))

        result = await service.health_check()

        assert result["status"] == "error"
