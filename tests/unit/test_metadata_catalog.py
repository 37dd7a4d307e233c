"""Unit tests for the load-once metadata catalog."""

import asyncio

import pytest

from domain.exceptions import MetadataLoadError
from domain.models import MetadataEntry
from infrastructure.errors import HTTPClientError
from infrastructure.metadata_catalog import parse_catalog_csv


def test_parse_registers_slug_and_lowercase_keys(catalog_csv):
    entries = parse_catalog_csv(catalog_csv)

    assert entries["two-sum"] == MetadataEntry(difficulty="Easy", topic="Arrays & Hashing")
    assert entries["two sum"] is entries["two-sum"]
    assert entries["lru-cache"].difficulty == "Medium"
    assert "#" not in entries and "problem" not in entries


def test_invalid_difficulty_is_stored_as_none(catalog_csv):
    entries = parse_catalog_csv(catalog_csv)

    assert entries["word-ladder"].difficulty is None
    assert entries["word-ladder"].topic == "Graphs"


def test_rows_without_title_are_skipped():
    text = "a\nb\nc\n1,,x,x,x,Topic,Hard\n2,Valid Anagram\n"

    entries = parse_catalog_csv(text)

    assert list(entries) == ["valid-anagram", "valid anagram"]
    assert entries["valid-anagram"] == MetadataEntry(difficulty=None, topic=None)


@pytest.mark.asyncio
async def test_load_fetches_once(catalog, http_client):
    await catalog.load()
    await catalog.load()

    assert catalog.loaded
    assert http_client.get_text.await_count == 1
    assert catalog.lookup("contains-duplicate").difficulty == "Easy"


@pytest.mark.asyncio
async def test_concurrent_loads_share_one_fetch(catalog, http_client):
    await asyncio.gather(catalog.load(), catalog.load(), catalog.load())

    assert http_client.get_text.await_count == 1


@pytest.mark.asyncio
async def test_failed_load_leaves_catalog_empty_and_retries(catalog, http_client, catalog_csv):
    http_client.get_text.side_effect = [HTTPClientError("boom", "url"), catalog_csv]

    with pytest.raises(MetadataLoadError):
        await catalog.load()
    assert not catalog.loaded
    assert len(catalog) == 0

    await catalog.load()
    assert catalog.loaded
    assert http_client.get_text.await_count == 2


@pytest.mark.asyncio
async def test_invalidate_forces_reload(catalog, http_client):
    await catalog.load()
    catalog.invalidate()

    assert catalog.lookup("two-sum") is None
    await catalog.load()
    assert http_client.get_text.await_count == 2
