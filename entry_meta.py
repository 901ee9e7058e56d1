"""
Entry Metadata Store
====================

Entry-scoped storage: values keyed by ``(entry_id, meta_key)`` and owned by
the form the entry was submitted to. Unlike the TTL cache, entries never
expire on their own; the host removes them in bulk with ``delete_for_form``.
"""

import logging
from typing import Callable, Dict, Optional, Tuple

from models import EntryMeta

logger = logging.getLogger(__name__)


class EntryMetaStore:
    """Interface for entry metadata backends."""

    def get(self, entry_id: int, key: str) -> Optional[str]:
        raise NotImplementedError("Subclasses must implement get")

    def set(self, entry_id: int, key: str, value: str, form_id: Optional[int] = None) -> None:
        raise NotImplementedError("Subclasses must implement set")

    def delete_for_form(self, form_id: int) -> int:
        raise NotImplementedError("Subclasses must implement delete_for_form")


class InMemoryEntryMetaStore(EntryMetaStore):

    def __init__(self):
        self._values: Dict[Tuple[int, str], Tuple[str, Optional[int]]] = {}

    def get(self, entry_id: int, key: str) -> Optional[str]:
        stored = self._values.get((int(entry_id), key))
        return stored[0] if stored else None

    def set(self, entry_id: int, key: str, value: str, form_id: Optional[int] = None) -> None:
        self._values[(int(entry_id), key)] = (value, form_id)

    def delete_for_form(self, form_id: int) -> int:
        doomed = [k for k, (_, owner) in self._values.items() if owner == form_id]
        for k in doomed:
            del self._values[k]
        return len(doomed)


class SQLAlchemyEntryMetaStore(EntryMetaStore):
    """Entry metadata stored in the ``entry_meta`` table."""

    def __init__(self, session_factory: Callable):
        self._session_factory = session_factory

    def get(self, entry_id: int, key: str) -> Optional[str]:
        db = self._session_factory()
        try:
            meta = db.query(EntryMeta).filter(
                EntryMeta.entry_id == int(entry_id),
                EntryMeta.meta_key == key
            ).first()
            return meta.meta_value if meta else None
        finally:
            db.close()

    def set(self, entry_id: int, key: str, value: str, form_id: Optional[int] = None) -> None:
        db = self._session_factory()
        try:
            meta = db.query(EntryMeta).filter(
                EntryMeta.entry_id == int(entry_id),
                EntryMeta.meta_key == key
            ).first()
            if meta:
                meta.meta_value = value
                meta.form_id = form_id
            else:
                db.add(EntryMeta(
                    entry_id=int(entry_id),
                    form_id=form_id,
                    meta_key=key,
                    meta_value=value
                ))
            db.commit()
        finally:
            db.close()

    def delete_for_form(self, form_id: int) -> int:
        db = self._session_factory()
        try:
            deleted = db.query(EntryMeta).filter(EntryMeta.form_id == form_id).delete()
            db.commit()
            logger.info(f"Deleted {deleted} entry meta rows for form {form_id}")
            return deleted
        finally:
            db.close()
