"""SQLAlchemy models."""

from frontdesk.models.local_store import LocalStoreEntry

__all__ = ["LocalStoreEntry"]
