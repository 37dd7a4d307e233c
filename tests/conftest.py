from unittest.mock import AsyncMock

import pytest

from infrastructure.document_store import InMemoryDocumentStore
from infrastructure.metadata_catalog import MetadataCatalog
from services.collection import ProblemCollection
from services.problem_import import ProblemImportService

CATALOG_URL = "https://example.com/catalog.csv"

CATALOG_CSV = """NeetCode 150,,,,,,
Updated weekly,,,,,,
#,Problem,Link,Video,Notes,Topic,Difficulty
1,Contains Duplicate,,,,Arrays & Hashing,Easy
2,Two Sum,,,,Arrays & Hashing,Easy
3,Group Anagrams,,,,Arrays & Hashing,Medium
4,LRU Cache,,,,Linked List,Medium
5,Word Ladder,,,,Graphs,Trivial
"""


@pytest.fixture
def http_client():
    client = AsyncMock()
    client.get_text.return_value = CATALOG_CSV
    return client


@pytest.fixture
def catalog(http_client):
    return MetadataCatalog(http_client, CATALOG_URL)


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def collection(store):
    return ProblemCollection(store)


@pytest.fixture
def import_service(collection, catalog):
    return ProblemImportService(collection=collection, catalog=catalog)


@pytest.fixture
def catalog_csv():
    return CATALOG_CSV
