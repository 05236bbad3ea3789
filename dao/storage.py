# dao/storage.py
import logging
from flask import current_app
from dao.base import Storage
from dao.database import DatabaseStorage
from dao.memory import InMemoryStorage

logger = logging.getLogger(__name__)


def build_storage(config) -> Storage:
    limit = int(config.get("AUDIT_LOG_LIMIT", 1000))
    if config.get("SQLALCHEMY_DATABASE_URI"):
        return DatabaseStorage(audit_log_limit=limit)
    logger.warning(
        "DATABASE_URL is not set; using in-memory storage (data is lost on restart)"
    )
    return InMemoryStorage(audit_log_limit=limit)


def init_storage(app, storage: Storage | None = None) -> Storage:
    """Build the storage once for the app's lifetime and attach it."""
    storage = storage or build_storage(app.config)
    app.extensions["storage"] = storage
    logger.info("Storage backend: %s", storage.name)
    return storage


def get_storage() -> Storage:
    return current_app.extensions["storage"]
