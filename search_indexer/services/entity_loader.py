"""Batch loading of project and version records, cache first.

Records are looked up in Redis under ``projects:{id}`` / ``versions:{id}``.
Misses are hydrated from the primary store in chunks and written back to
the cache. An id that resolves nowhere (e.g. deleted mid-run) is simply
absent from the returned mapping.

Cache problems never fail a load: an unreachable cache or a corrupted
entry degrades to the store. Store failures raise IndexingError.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Iterable, Iterator, Optional, TypeVar

from pydantic import BaseModel, ValidationError
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..config import settings
from ..schemas.records import ProjectRecord, VersionRecord
from .exceptions import IndexingError
from .record_store import fetch_projects, fetch_versions
from .redis_service import RedisService

logger = logging.getLogger(__name__)

PROJECTS_NAMESPACE = "projects"
VERSIONS_NAMESPACE = "versions"

RecordT = TypeVar("RecordT", ProjectRecord, VersionRecord)
FetchFn = Callable[[AsyncSession, list[int]], Awaitable[list]]


def _chunked(ids: list[int], size: int) -> Iterator[list[int]]:
    for start in range(0, len(ids), size):
        yield ids[start:start + size]


def cache_key(namespace: str, record_id: int) -> str:
    return f"{namespace}:{record_id}"


class EntityBatchLoader:
    """
    Resolves project and version ids to hydrated records.

    The cache is injected and may be None, in which case every lookup
    goes to the store. Each store fetch opens its own session from the
    session factory so the project and version loads can run
    concurrently.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        cache: Optional[RedisService] = None,
        batch_size: Optional[int] = None,
        cache_ttl: Optional[int] = None,
    ) -> None:
        self._session_factory = session_factory
        self._cache = cache
        self._batch_size = batch_size or settings.indexing_batch_size
        self._cache_ttl = cache_ttl or settings.cache_expiry_seconds

    async def load(
        self,
        version_ids: Iterable[int],
        project_ids: Iterable[int],
    ) -> tuple[dict[int, VersionRecord], dict[int, ProjectRecord]]:
        """
        Load versions and projects concurrently.

        Returns:
            Tuple of (version_id -> VersionRecord, project_id -> ProjectRecord)

        Raises:
            IndexingError: If either store fetch fails
        """
        versions, projects = await asyncio.gather(
            self.get_versions(version_ids),
            self.get_projects(project_ids),
        )
        return versions, projects

    async def get_projects(self, project_ids: Iterable[int]) -> dict[int, ProjectRecord]:
        """Resolve project ids to records; unresolved ids are absent."""
        return await self._get_many(
            project_ids, PROJECTS_NAMESPACE, ProjectRecord, fetch_projects
        )

    async def get_versions(self, version_ids: Iterable[int]) -> dict[int, VersionRecord]:
        """Resolve version ids to records; unresolved ids are absent."""
        return await self._get_many(
            version_ids, VERSIONS_NAMESPACE, VersionRecord, fetch_versions
        )

    async def _get_many(
        self,
        ids: Iterable[int],
        namespace: str,
        model: type[RecordT],
        fetch: FetchFn,
    ) -> dict[int, RecordT]:
        unique_ids = list(dict.fromkeys(ids))
        if not unique_ids:
            return {}

        records = await self._read_cache(namespace, model, unique_ids)
        missing = [record_id for record_id in unique_ids if record_id not in records]

        if missing:
            fetched = await self._fetch_from_store(namespace, missing, fetch)
            records.update(fetched)
            await self._write_cache(namespace, fetched)

        logger.debug(
            "Resolved %d/%d %s (%d from cache)",
            len(records), len(unique_ids), namespace, len(unique_ids) - len(missing),
        )
        return records

    async def _read_cache(
        self,
        namespace: str,
        model: type[RecordT],
        ids: list[int],
    ) -> dict[int, RecordT]:
        if self._cache is None or not self._cache.is_connected:
            return {}

        try:
            values = await self._cache.get_many([cache_key(namespace, i) for i in ids])
        except RedisError as exc:
            logger.warning("Redis unavailable for %s cache, loading from store: %s", namespace, exc)
            return {}

        records: dict[int, RecordT] = {}
        for record_id, raw in zip(ids, values):
            if raw is None:
                continue
            try:
                records[record_id] = model.model_validate_json(raw)
            except ValidationError:
                logger.warning("Corrupted cache entry %s, reloading from store",
                               cache_key(namespace, record_id))
        return records

    async def _fetch_from_store(
        self,
        namespace: str,
        ids: list[int],
        fetch: FetchFn,
    ) -> dict:
        records = {}
        try:
            async with self._session_factory() as db:
                for chunk in _chunked(ids, self._batch_size):
                    for record in await fetch(db, chunk):
                        records[record.id] = record
        except SQLAlchemyError as exc:
            raise IndexingError(f"Failed to load {namespace} from store: {exc}") from exc
        return records

    async def _write_cache(self, namespace: str, records: dict[int, BaseModel]) -> None:
        if not records or self._cache is None or not self._cache.is_connected:
            return

        items = {
            cache_key(namespace, record_id): record.model_dump_json()
            for record_id, record in records.items()
        }
        try:
            await self._cache.set_many(items, ttl=self._cache_ttl)
        except RedisError as exc:
            logger.warning("Failed to cache %d %s: %s", len(items), namespace, exc)
