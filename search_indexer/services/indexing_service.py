"""One indexing run: select visible entities, load records, assemble documents.

Every run is a complete, independent snapshot of the store. Documents
only exist in memory until the caller publishes them; abandoning a run
discards them.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..schemas.search import SearchDocument
from .document_assembler import DocumentAssembler
from .entity_loader import EntityBatchLoader
from .license_service import LicenseClassifier
from .redis_service import RedisService
from .visibility_service import VisibleEntitySelector

logger = logging.getLogger(__name__)


async def index_local(
    session_factory: async_sessionmaker[AsyncSession],
    cache: Optional[RedisService] = None,
    classifier: Optional[LicenseClassifier] = None,
) -> list[SearchDocument]:
    """
    Build search documents for every visible version in the store.

    Args:
        session_factory: Factory for store sessions
        cache: Record cache consulted before the store (optional)
        classifier: License classifier (defaults to the SPDX registry)

    Returns:
        One document per visible (version, project) pair that resolved

    Raises:
        IndexingError: If a store query fails; no documents are returned
    """
    logger.info("Indexing local projects")

    async with session_factory() as db:
        visible = await VisibleEntitySelector(db).get_all_visible()

    project_ids = list(dict.fromkeys(entity.project_id for entity in visible))
    version_ids = list(dict.fromkeys(entity.version_id for entity in visible))

    loader = EntityBatchLoader(session_factory, cache)
    versions, projects = await loader.load(version_ids, project_ids)
    logger.info(
        "Fetched %d local projects and %d local versions", len(projects), len(versions)
    )

    documents = DocumentAssembler(classifier).assemble(visible, versions, projects)
    logger.info("Assembled %d search documents", len(documents))
    return documents
