# services/storage/store_factory.py
from __future__ import annotations
import logging
from typing import Optional

from config import Settings, get_settings
from core.interfaces import TransitStore
from services.storage.memory_store import InMemoryStore

log = logging.getLogger(__name__)


def make_store(settings: Optional[Settings] = None) -> TransitStore:
    """MongoDB when MONGO_URI is configured, otherwise in-memory."""
    settings = settings or get_settings()
    if settings.MONGO_URI:
        # Late import so pymongo is only touched when a URI is configured
        from services.storage.mongo_store import MongoStore

        store = MongoStore(settings.MONGO_URI, settings.MONGO_DB)
        store.ping()
        log.info("Using MongoStore (db=%s)", settings.MONGO_DB)
        return store

    log.info("MONGO_URI not set; using InMemoryStore")
    return InMemoryStore()
