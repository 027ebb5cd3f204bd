# studyspace/core/services/recency.py
from datetime import datetime, timezone
from typing import List

from studyspace.core.state import DocumentDescriptor
from studyspace.core.storage import RecentDocumentEntry, StorageAdapter, StorageKey

RECENT_LIMIT = 5


class RecencyTracker:
    """Most-recent-first list of opened documents, deduplicated by title."""

    def __init__(self, storage: StorageAdapter, limit: int = RECENT_LIMIT):
        self.storage = storage
        self.limit = limit

    def recent(self) -> List[RecentDocumentEntry]:
        return self.storage.get(StorageKey.RECENT_DOCUMENTS) or []

    def record_opened(self, descriptor: DocumentDescriptor, last_page: int = 1) -> List[RecentDocumentEntry]:
        # Title is the identity: two different files with the same title share one slot.
        entries = [entry for entry in self.recent() if entry.title != descriptor.title]
        entries.insert(0, RecentDocumentEntry(
            kind=descriptor.kind,
            source=descriptor.storable_source,
            title=descriptor.title,
            timestamp=datetime.now(timezone.utc),
            last_page=max(1, last_page),
        ))
        entries = entries[:self.limit]
        self.storage.set(StorageKey.RECENT_DOCUMENTS, entries)
        return entries
