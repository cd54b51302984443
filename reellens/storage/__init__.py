"""
Record persistence.

Example:
    from reellens.storage import InMemoryReelStore

    store = InMemoryReelStore()
    await store.upsert(record)
"""

from reellens.storage.base import ReelStore
from reellens.storage.mapping import document_to_record, record_to_document
from reellens.storage.memory import InMemoryReelStore
from reellens.storage.supabase_store import SupabaseReelStore

__all__ = [
    "ReelStore",
    "InMemoryReelStore",
    "SupabaseReelStore",
    "document_to_record",
    "record_to_document",
]
