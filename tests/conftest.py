"""
Pytest fixtures:
- environment defaults so importing the API never needs real GCP settings
- an in-memory item store with the same surface as FirestoreItemStore
- a deterministic fake embedder
"""
import os

# Must be set before lostfound_ai settings are first read
os.environ.setdefault("FIREBASE_PROJECT_ID", "test-project")
os.environ.setdefault("LOG_FILE", "")

from typing import Any, Dict, List, Optional, Tuple

import pytest

from lostfound_ai.common.config import Settings


class InMemoryItemStore:
    """Dict-backed stand-in for FirestoreItemStore; preserves insertion order."""

    TIMESTAMP = "SERVER_TIMESTAMP"

    def __init__(self, items: Optional[Dict[str, Dict[str, Any]]] = None):
        self.records: Dict[str, Dict[str, Any]] = dict(items or {})
        self.queries: List[Tuple[Dict[str, Any], Optional[str], bool]] = []

    def get(self, item_id: str) -> Optional[Dict[str, Any]]:
        record = self.records.get(item_id)
        return dict(record) if record is not None else None

    def add(self, record: Dict[str, Any]) -> str:
        item_id = f"item_{len(self.records) + 1:03d}"
        self.records[item_id] = dict(record)
        return item_id

    def query(self, filters, order_by=None, descending=True):
        self.queries.append((dict(filters), order_by, descending))
        rows = [
            (item_id, dict(fields))
            for item_id, fields in self.records.items()
            if all(fields.get(key) == value for key, value in filters.items())
        ]
        if order_by:
            rows = [row for row in rows if order_by in row[1]]
            rows.sort(key=lambda row: row[1][order_by], reverse=descending)
        return rows

    def server_timestamp(self):
        return self.TIMESTAMP


class FakeEmbedder:
    """Returns a fixed vector per text; records every request."""

    def __init__(self, vectors: Optional[Dict[str, List[float]]] = None, default=None):
        self.vectors = vectors or {}
        self.default = default
        self.requests = []

    def generate(self, item):
        self.requests.append(item)
        return self.vectors.get(item.text, self.default)


def make_item(status: str, vector, approved: bool = True, resolved: bool = False, **extra):
    item = {
        "name": extra.pop("name", f"{status} thing"),
        "status": status,
        "category": extra.pop("category", "Misc"),
        "isApproved": approved,
        "isResolved": resolved,
        "textEmbedding": list(vector),
    }
    item.update(extra)
    return item


@pytest.fixture
def settings():
    return Settings(
        project_id="test-project",
        similarity_threshold=0.5,
        max_matches=5,
        max_upload_bytes=1024,
        poster_uid="test_uid",
        log_file="",
    )


@pytest.fixture
def store():
    return InMemoryItemStore()


@pytest.fixture
def fake_embedder():
    return FakeEmbedder(default=[0.1, 0.2, 0.3])
