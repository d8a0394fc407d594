"""
Lost & Found Models and Utilities
---------------------------------
Enums, value objects, errors and the pure vector helpers used for matching
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from math import isfinite, sqrt
from numbers import Real
from typing import Any, Dict, List, Optional, Sequence


# Firestore field names
EMBEDDING_FIELD = "textEmbedding"
CLIENT_FIELDS = ("name", "status", "category", "description", "lastSeenLocation", "whereToCollect")
REQUIRED_FIELDS = ("name", "status", "category")
PENDING_COLLECTION_POINT = "Pending location details"


class ItemStatus(Enum):
    LOST = "lost"
    FOUND = "found"

    @property
    def opposite(self) -> "ItemStatus":
        return ItemStatus.FOUND if self is ItemStatus.LOST else ItemStatus.LOST


class LostFoundError(Exception):
    """Base class for errors reported back to callers"""


class ItemValidationError(LostFoundError):
    pass


class ImageTooLargeError(ItemValidationError):
    pass


class ItemNotFoundError(LostFoundError):
    def __init__(self, item_id: str):
        super().__init__(f"Item not found: {item_id}")
        self.item_id = item_id


@dataclass(frozen=True)
class EmbeddingInput:
    text: Optional[str] = None
    image_uri: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.text and not self.image_uri


@dataclass(frozen=True)
class UploadedImage:
    signed_url: str  # time-limited, for display
    gcs_uri: str     # gs://bucket/path, for the embedding model


@dataclass(frozen=True)
class ImageUpload:
    data: bytes
    filename: str
    content_type: str = "application/octet-stream"


@dataclass
class ItemFilters:
    category: Optional[str] = None
    status: Optional[str] = None
    last_seen_location: Optional[str] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None


def target_status_for(status: Optional[str]) -> ItemStatus:
    """Lost items match found ones and vice versa; unknown statuses search lost."""
    if status == ItemStatus.LOST.value:
        return ItemStatus.FOUND
    return ItemStatus.LOST


def cosine_similarity(vec_a: Optional[Sequence[float]], vec_b: Optional[Sequence[float]]) -> float:
    """
    dot(A, B) / (|A| * |B|)

    Returns 0.0 when either vector is missing or empty, when lengths differ,
    when either magnitude is zero, or when the result is not finite
    (overflowing or NaN components).
    """
    if not vec_a or not vec_b or len(vec_a) != len(vec_b):
        return 0.0

    dot = mag_a = mag_b = 0.0
    for a, b in zip(vec_a, vec_b):
        dot += a * b
        mag_a += a * a
        mag_b += b * b

    if mag_a == 0 or mag_b == 0:
        return 0.0

    score = dot / (sqrt(mag_a) * sqrt(mag_b))
    return score if isfinite(score) else 0.0


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def find_numeric_array(root: Any, max_depth: int = 6) -> Optional[List[float]]:
    """
    Breadth-first search of a parsed JSON value for the first non-empty list
    made only of numbers. Nodes deeper than max_depth are not inspected.
    """
    queue = deque([(root, 0)])
    while queue:
        node, depth = queue.popleft()
        if depth > max_depth:
            continue

        if isinstance(node, list):
            if node and all(_is_number(el) for el in node):
                return [float(el) for el in node]
            queue.extend((el, depth + 1) for el in node if isinstance(el, (list, dict)))
        elif isinstance(node, dict):
            queue.extend((child, depth + 1) for child in node.values() if isinstance(child, (list, dict)))

    return None


def validate_item_fields(fields: Dict[str, Any]) -> ItemStatus:
    missing = [name for name in REQUIRED_FIELDS if not str(fields.get(name) or "").strip()]
    if missing:
        raise ItemValidationError(
            "Missing required item fields: name, status, or category."
        )
    try:
        return ItemStatus(fields["status"])
    except ValueError:
        raise ItemValidationError("Item status must be 'lost' or 'found'.") from None


def build_item_document(
        fields: Dict[str, Any],
        *,
        poster_uid: str,
        embedding: Optional[List[float]],
        image: Optional[UploadedImage],
        reported_at: Any,
) -> Dict[str, Any]:
    """
    Persisted record: allow-listed client fields first, then server-owned
    fields on top so a client can never set approval, resolution or vector.
    """
    document = {key: fields[key] for key in CLIENT_FIELDS if fields.get(key) is not None}

    if document["status"] == ItemStatus.FOUND.value:
        where_to_collect = fields.get("whereToCollect") or PENDING_COLLECTION_POINT
    else:
        where_to_collect = None

    document.update({
        "posterUid": poster_uid,
        "isApproved": False,
        "isResolved": False,
        "dateReported": reported_at,
        EMBEDDING_FIELD: list(embedding or []),
        "imageUrl": image.signed_url if image else None,
        "imageUri": image.gcs_uri if image else None,
        "whereToCollect": where_to_collect,
    })
    return document


def embedding_text(fields: Dict[str, Any]) -> Optional[str]:
    text = fields.get("description") or fields.get("name")
    if isinstance(text, str) and text.strip():
        return text.strip()
    return None
