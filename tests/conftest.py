"""Shared fixtures: in-memory MongoDB and a fast, offline Codeforces client."""
import mongomock
import pytest

from config import settings
from db import client as db_client


@pytest.fixture(autouse=True)
def fast_codeforces(monkeypatch):
    monkeypatch.setattr(settings, "CF_MIN_INTERVAL", 0)
    monkeypatch.setattr(settings, "CF_RETRY_DELAY", 0)
    monkeypatch.setattr(settings, "CF_MAX_RETRIES", 2)


@pytest.fixture
def mongo_db(monkeypatch):
    monkeypatch.setattr(db_client, "_client", mongomock.MongoClient())
    return db_client.get_db()
