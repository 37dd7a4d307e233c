from dataclasses import dataclass

from infrastructure.concurrency import ImportGate
from infrastructure.config import Settings
from infrastructure.document_store import InMemoryDocumentStore, RedisDocumentStore
from infrastructure.http_client import AsyncHTTPClient
from infrastructure.leetcode_client import LeetCodeClient
from infrastructure.metadata_catalog import MetadataCatalog
from infrastructure.parsers.interfaces import DocumentStoreProtocol

from .collection import ProblemCollection
from .link_import import LinkImportService
from .metadata_sync import MetadataSyncService
from .problem import ProblemNotFoundError, ProblemService
from .problem_import import ProblemImportService


@dataclass
class Services:
    """Long-lived services shared by all requests."""

    http_client: AsyncHTTPClient
    store: DocumentStoreProtocol
    catalog: MetadataCatalog
    problem_service: ProblemService
    import_service: ProblemImportService
    link_import_service: LinkImportService
    metadata_sync_service: MetadataSyncService

    async def close(self) -> None:
        await self.http_client.close()
        if isinstance(self.store, RedisDocumentStore):
            await self.store.close()


def create_services(
    settings: Settings, store: DocumentStoreProtocol | None = None
) -> Services:
    """Factory function to create all services with their dependencies."""
    http_client = AsyncHTTPClient(timeout=settings.http_timeout)
    if store is None:
        store = (
            RedisDocumentStore(settings.redis_url)
            if settings.redis_url
            else InMemoryDocumentStore()
        )

    # One catalog per process, shared by import and sync
    catalog = MetadataCatalog(http_client, settings.metadata_csv_url)
    leetcode_client = LeetCodeClient(http_client, settings.leetcode_graphql_url)
    collection = ProblemCollection(store)
    host = settings.problem_site_host
    # Every service that rewrites a user's collection shares one gate
    gate = ImportGate()

    return Services(
        http_client=http_client,
        store=store,
        catalog=catalog,
        problem_service=ProblemService(collection),
        import_service=ProblemImportService(
            collection=collection, catalog=catalog, host=host, gate=gate
        ),
        link_import_service=LinkImportService(
            collection=collection, client=leetcode_client, host=host, gate=gate
        ),
        metadata_sync_service=MetadataSyncService(
            collection=collection,
            catalog=catalog,
            client=leetcode_client,
            batch_size=settings.lookup_batch_size,
            batch_delay=settings.lookup_batch_delay,
            gate=gate,
        ),
    )


__all__ = [
    "LinkImportService",
    "MetadataSyncService",
    "ProblemCollection",
    "ProblemImportService",
    "ProblemNotFoundError",
    "ProblemService",
    "Services",
    "create_services",
]
