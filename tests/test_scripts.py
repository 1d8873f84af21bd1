"""Tests for the seed and reset scripts."""
import pytest

from core.config import INVENTORY_COLLECTION
from db.database import async_session_maker
from db.document_store import DocumentStore
from scripts.reset_inventory import reset
from scripts.seed_inventory import parse_entry, seed


@pytest.mark.parametrize("entry,expected", [
    ("apple", ("apple", 1, "")),
    ("apple:3", ("apple", 3, "")),
    ("apple:3:fruit", ("apple", 3, "fruit")),
    ("apple:x:fruit", ("apple", 1, "fruit")),
    ("cable:2:tools:usb", ("cable", 2, "tools:usb")),
])
def test_parse_entry(entry, expected):
    assert parse_entry(entry) == expected


def test_parse_entry_requires_name():
    with pytest.raises(ValueError):
        parse_entry(":3:fruit")


async def _names():
    async with async_session_maker() as db:
        return [key for key, _ in await DocumentStore(db).list(INVENTORY_COLLECTION)]


async def test_seed_then_reset(db_engine):
    assert await seed(["apple:3:fruit", "banana:1", "apple:2:fruit"]) == 3
    assert await _names() == ["apple", "banana"]

    assert await reset() == 2
    assert await _names() == []


async def test_seed_dry_run_writes_nothing(db_engine):
    assert await seed(["apple:3:fruit"], dry_run=True) == 0
    assert await _names() == []
