"""Shared fixtures: a throwaway wiki database per test."""

import pytest

from pagewiki.services.attachments import AttachmentStore
from pagewiki.services.cache import ListingCache
from pagewiki.services.database import Database
from pagewiki.services.repository import PageRepository


@pytest.fixture
def database(tmp_path):
    db = Database(tmp_path / "wiki.db")
    db.create_schema()
    yield db
    db.dispose()


@pytest.fixture
def store(database):
    return AttachmentStore(database)


@pytest.fixture
def repository(database, store):
    return PageRepository(database, store, ListingCache())
