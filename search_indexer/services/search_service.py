"""Publication of search documents to Meilisearch.

Provides:
- Meilisearch client management (init, close, get client)
- Index settings for the projects index
- Whole-run publication with atomic index swap
- Health check

A run is published as a unit: documents go into a temporary index which
is swapped with the live index only after every batch has been accepted.
If anything fails (or the run is cancelled) before the swap, the
temporary index is dropped and the live index keeps serving the previous
run.
"""

import asyncio
import logging

from meilisearch_python_sdk import AsyncClient
from meilisearch_python_sdk.index import AsyncIndex

from ..config import settings
from ..schemas.search import SearchDocument
from .exceptions import SearchPublishError

logger = logging.getLogger(__name__)

PRIMARY_KEY = "version_id"

# Index settings (configure BEFORE adding documents)
MEILISEARCH_INDEX_SETTINGS = {
    "searchableAttributes": [
        "name",
        "summary",
        "author",
        "slug",
    ],
    "filterableAttributes": [
        "categories",
        "license",
        "project_types",
        "project_id",
        "author",
        "open_source",
        "color",
        "loaders",
        "client_side",
        "server_side",
        "game_versions",
        "mrpack_loaders",
        "downloads",
        "follows",
        "date_created",
        "date_modified",
    ],
    "sortableAttributes": [
        "downloads",
        "follows",
        "date_created",
        "date_modified",
    ],
    # One hit per project even though each visible version is a document
    "distinctAttribute": "project_id",
}


# ---- Client Management ----

_meili_client: AsyncClient | None = None


async def init_meilisearch() -> None:
    """Initialize the Meilisearch client. Called during worker startup."""
    global _meili_client

    if not settings.meilisearch_api_key:
        logger.warning(
            "meilisearch_api_key is empty -- Meilisearch is unauthenticated. "
            "Set MEILISEARCH_API_KEY in production."
        )

    _meili_client = AsyncClient(
        url=settings.meilisearch_url,
        api_key=settings.meilisearch_api_key or None,
        timeout=settings.meilisearch_timeout,
    )
    logger.info("Meilisearch initialized: index=%s", settings.meilisearch_index_name)


async def close_meilisearch() -> None:
    """Close the Meilisearch client. Called during worker shutdown."""
    global _meili_client

    if _meili_client is not None:
        await _meili_client.aclose()
        _meili_client = None


def get_meili_client() -> AsyncClient:
    """Get the Meilisearch client instance."""
    if _meili_client is None:
        raise RuntimeError("Meilisearch not initialized")
    return _meili_client


# ---- Index Settings ----

async def _wait(client: AsyncClient, task_uid: int, timeout_in_ms: int | None = 5000) -> None:
    """Wait for a Meilisearch task and raise if it did not succeed."""
    result = await client.wait_for_task(task_uid, timeout_in_ms=timeout_in_ms)
    if result.status != "succeeded":
        raise SearchPublishError(f"Meilisearch task {task_uid} ended with status {result.status}")


async def configure_index(client: AsyncClient, index: AsyncIndex) -> None:
    """Apply MEILISEARCH_INDEX_SETTINGS to an index, waiting for each task."""
    task_info = await index.update_searchable_attributes(
        MEILISEARCH_INDEX_SETTINGS["searchableAttributes"]
    )
    await _wait(client, task_info.task_uid)

    task_info = await index.update_filterable_attributes(
        MEILISEARCH_INDEX_SETTINGS["filterableAttributes"]
    )
    await _wait(client, task_info.task_uid)

    task_info = await index.update_sortable_attributes(
        MEILISEARCH_INDEX_SETTINGS["sortableAttributes"]
    )
    await _wait(client, task_info.task_uid)

    task_info = await index.update_distinct_attribute(
        MEILISEARCH_INDEX_SETTINGS["distinctAttribute"]
    )
    await _wait(client, task_info.task_uid)


async def _ensure_index(client: AsyncClient, name: str) -> AsyncIndex:
    """Get an index, creating it if it doesn't exist (swaps need both sides)."""
    try:
        return await client.get_index(name)
    except Exception:
        return await client.create_index(name, primary_key=PRIMARY_KEY)


# ---- Publication ----

def build_payloads(documents: list[SearchDocument]) -> list[dict]:
    """
    Convert documents to Meilisearch payloads.

    Loader fields are flattened to top-level attributes so they can be
    filtered on directly; they never override a document attribute.
    """
    payloads = []
    for document in documents:
        payload = document.to_search_payload()
        for name, values in payload.get("loader_fields", {}).items():
            payload.setdefault(name, values)
        payloads.append(payload)
    return payloads


async def publish_documents(documents: list[SearchDocument]) -> dict:
    """Replace the live index with the given documents using index swap.

    Creates a temporary index, fills it batch by batch, then atomically
    swaps it with the live index and deletes the old one.

    Returns:
        Dict with the published document count

    Raises:
        SearchPublishError: If any step before the swap completes fails
    """
    client = get_meili_client()
    live_index_name = settings.meilisearch_index_name
    temp_index_name = f"{live_index_name}_rebuild"
    batch_size = settings.meilisearch_upload_batch_size
    payloads = build_payloads(documents)

    try:
        # 1. Create temporary index
        await client.delete_index_if_exists(temp_index_name)
        temp_index = await client.create_index(temp_index_name, primary_key=PRIMARY_KEY)

        # 2. Configure settings on temp index
        await configure_index(client, temp_index)

        # 3. Upload documents in batches
        for start in range(0, len(payloads), batch_size):
            task_info = await temp_index.add_documents(
                payloads[start:start + batch_size], primary_key=PRIMARY_KEY
            )
            await _wait(client, task_info.task_uid, timeout_in_ms=None)
            logger.debug("Uploaded documents %d-%d", start, start + batch_size)

        # 4. Atomic swap
        await _ensure_index(client, live_index_name)
        task_info = await client.swap_indexes([(live_index_name, temp_index_name)])
        await _wait(client, task_info.task_uid)
    except asyncio.CancelledError:
        logger.warning("Search publication cancelled, dropping %s", temp_index_name)
        await client.delete_index_if_exists(temp_index_name)
        raise
    except SearchPublishError:
        await client.delete_index_if_exists(temp_index_name)
        raise
    except Exception as exc:
        await client.delete_index_if_exists(temp_index_name)
        raise SearchPublishError(f"Failed to publish search documents: {exc}") from exc

    # 5. Delete old index (now named temp)
    await client.delete_index_if_exists(temp_index_name)

    logger.info("Search index rebuilt: %d documents", len(payloads))
    return {"status": "published", "document_count": len(payloads)}


# ---- Health Check ----

async def check_search_health() -> dict:
    """Check Meilisearch availability and return stats."""
    try:
        client = get_meili_client()
        await client.health()
        index = await client.get_index(settings.meilisearch_index_name)
        stats = await index.get_stats()
        return {
            "status": "healthy",
            "documents_indexed": stats.number_of_documents,
        }
    except Exception as e:
        logger.warning("Meilisearch health check failed: %s", e)
        return {
            "status": "degraded",
        }
