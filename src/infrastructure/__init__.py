"""Infrastructure layer: external collaborators and file decoding."""

from .document_store import InMemoryDocumentStore, RedisDocumentStore
from .http_client import AsyncHTTPClient
from .leetcode_client import LeetCodeClient
from .metadata_catalog import MetadataCatalog

__all__ = [
    "AsyncHTTPClient",
    "InMemoryDocumentStore",
    "LeetCodeClient",
    "MetadataCatalog",
    "RedisDocumentStore",
]
