"""Key/value rows backing the durable local store."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from frontdesk.db.base import Base, TimestampMixin


class LocalStoreEntry(Base, TimestampMixin):
    """One JSON-serialized value stored under a namespaced key."""

    __tablename__ = "local_store"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
