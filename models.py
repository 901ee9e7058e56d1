from sqlalchemy import Column, String, Integer, DateTime, Float, Text, UniqueConstraint
from datetime import datetime
import time
import uuid

from database import Base


class CacheEntry(Base):
    __tablename__ = "cache_entries"

    key = Column(String(512), primary_key=True)
    value = Column(Text, nullable=True)  # JSON serialized; "null" marks a negative entry
    expires_at = Column(Float, nullable=False, index=True)  # Unix timestamp
    created_at = Column(Float, default=time.time)


class EntryMeta(Base):
    __tablename__ = "entry_meta"
    __table_args__ = (
        UniqueConstraint("entry_id", "meta_key", name="uq_entry_meta_entry_key"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    entry_id = Column(Integer, nullable=False, index=True)
    form_id = Column(Integer, nullable=True, index=True)
    meta_key = Column(String(255), nullable=False)
    meta_value = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
