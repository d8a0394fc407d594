"""
Lost & Found Core Functions
---------------------------
Item registration, public listing and semantic matching
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from google.cloud import firestore, storage

from ..common.config import Settings, get_settings
from .embeddings import EmbeddingGenerator
from .models import (
    EMBEDDING_FIELD, EmbeddingInput, ImageTooLargeError, ImageUpload,
    ItemFilters, ItemNotFoundError, ItemStatus, build_item_document,
    cosine_similarity, embedding_text, target_status_for, validate_item_fields
)
from .store import CloudImageStorage, FirestoreItemStore

logger = logging.getLogger(__name__)

# Lazy clients, created on first use so importing never touches the network
_store: FirestoreItemStore | None = None
_images: CloudImageStorage | None = None
_embedder: EmbeddingGenerator | None = None
_lock = threading.Lock()


def get_item_store() -> FirestoreItemStore:
    global _store
    with _lock:
        if _store is None:
            settings = get_settings()
            if settings.credentials_path:
                client = firestore.Client.from_service_account_json(
                    settings.credentials_path, project=settings.require_project()
                )
            else:
                client = firestore.Client(project=settings.require_project())
            _store = FirestoreItemStore(client, settings.items_collection)
        return _store


def get_image_storage() -> CloudImageStorage:
    global _images
    with _lock:
        if _images is None:
            settings = get_settings()
            if settings.credentials_path:
                client = storage.Client.from_service_account_json(
                    settings.credentials_path, project=settings.require_project()
                )
            else:
                client = storage.Client(project=settings.require_project())
            _images = CloudImageStorage(client.bucket(settings.bucket_name), settings.signed_url_minutes)
        return _images


def get_embedder() -> EmbeddingGenerator:
    global _embedder
    with _lock:
        if _embedder is None:
            _embedder = EmbeddingGenerator(get_settings())
        return _embedder


def present_item(item_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    """Public view of a stored record: raw vector dropped, document id attached."""
    item = {key: value for key, value in fields.items() if key != EMBEDDING_FIELD}
    item["id"] = item_id
    return item


def register_item(
        fields: Dict[str, Any],
        image: Optional[ImageUpload] = None,
        *,
        poster_uid: Optional[str] = None,
        store: Optional[FirestoreItemStore] = None,
        image_storage: Optional[Callable[[], CloudImageStorage]] = None,
        embedder: Optional[EmbeddingGenerator] = None,
        settings: Optional[Settings] = None,
) -> Dict[str, Any]:
    """
    Validate, upload the optional image, embed and persist a new item report.

    Args:
        fields: Client-supplied item fields (name, status, category, description, ...)
        image: Optional uploaded image
        poster_uid: Identity of the reporter; defaults to the configured placeholder
        image_storage: Returns the image storage; only called when an image is attached

    Returns:
        Dict with status, item_id and message

    Raises:
        ItemValidationError: required fields missing, bad status or image too large.
            Raised before any external call.
    """
    settings = settings or get_settings()
    status = validate_item_fields(fields)

    if image is not None and len(image.data) > settings.max_upload_bytes:
        raise ImageTooLargeError(
            f"Image exceeds the {settings.max_upload_bytes // (1024 * 1024)}MB upload limit."
        )

    store = store or get_item_store()

    uploaded = None
    if image is not None:
        images = (image_storage or get_image_storage)()
        uploaded = images.upload(image.data, image.filename, image.content_type)

    request = EmbeddingInput(
        text=embedding_text(fields),
        image_uri=uploaded.gcs_uri if uploaded else None,
    )

    vector = None
    if request.is_empty:
        logger.warning("Item lacks both description and name. Skipping vector generation.")
    else:
        logger.info("Generating %s vector for new %s item", "fused" if request.image_uri else "text", status.value)
        embedder = embedder or get_embedder()
        vector = embedder.generate(request)
        if not vector:
            logger.warning("Could not generate vector. Item posted without embedding.")

    document = build_item_document(
        fields,
        poster_uid=poster_uid or settings.poster_uid,
        embedding=vector,
        image=uploaded,
        reported_at=store.server_timestamp(),
    )
    item_id = store.add(document)

    return {
        "status": "success",
        "item_id": item_id,
        "message": f"{status.value} item successfully posted for approval.",
    }


def list_items(
        filters: Optional[ItemFilters] = None,
        *,
        store: Optional[FirestoreItemStore] = None,
) -> List[Dict[str, Any]]:
    """Approved, unresolved items with optional exact-match filters, newest first by default."""
    filters = filters or ItemFilters()
    store = store or get_item_store()

    query: Dict[str, Any] = {"isApproved": True, "isResolved": False}
    if filters.category:
        query["category"] = filters.category
    if filters.status in (ItemStatus.LOST.value, ItemStatus.FOUND.value):
        query["status"] = filters.status
    if filters.last_seen_location:
        query["lastSeenLocation"] = filters.last_seen_location

    rows = store.query(
        query,
        order_by=filters.sort_by or "dateReported",
        descending=filters.sort_order != "asc",
    )
    return [present_item(item_id, fields) for item_id, fields in rows]


def find_potential_matches(
        item_id: str,
        *,
        similarity_threshold: Optional[float] = None,
        max_results: Optional[int] = None,
        store: Optional[FirestoreItemStore] = None,
        settings: Optional[Settings] = None,
) -> Dict[str, Any]:
    """
    Rank eligible items of the opposite status by cosine similarity to item_id.

    Args:
        item_id: ID of the item to find matches for
        similarity_threshold: Minimum score to keep (default from settings)
        max_results: Maximum number of matches (default from settings)

    Returns:
        Dict with status, query_id, target_status and matches sorted by score.
        Equal scores keep the order in which the store returned candidates.

    Raises:
        ItemNotFoundError: the query item does not exist
    """
    settings = settings or get_settings()
    threshold = settings.similarity_threshold if similarity_threshold is None else similarity_threshold
    limit = settings.max_matches if max_results is None else max_results
    store = store or get_item_store()

    query_item = store.get(item_id)
    if query_item is None:
        raise ItemNotFoundError(item_id)

    query_vector = query_item.get(EMBEDDING_FIELD) or []
    if not query_vector:
        return {
            "status": "success",
            "query_id": item_id,
            "message": "No embedding found for this item. Cannot run matching.",
            "matches": [],
        }

    target_status = target_status_for(query_item.get("status"))

    candidates = store.query({
        "status": target_status.value,
        "isApproved": True,
        "isResolved": False,
    })

    scored = []
    for candidate_id, candidate in candidates:
        candidate_vector = candidate.get(EMBEDDING_FIELD) or []
        if candidate_id == item_id or not candidate_vector:
            continue

        score = cosine_similarity(query_vector, candidate_vector)
        logger.debug(f"Score: item {candidate_id} vs query {item_id}: {score}")

        if score >= threshold:
            scored.append((score, candidate_id, candidate))

    # sort() is stable: ties keep scan order
    scored.sort(key=lambda entry: entry[0], reverse=True)

    matches = []
    for score, candidate_id, candidate in scored[:max(limit, 0)]:
        match = present_item(candidate_id, candidate)
        match["score"] = round(score, 4)
        matches.append(match)

    logger.info(f"Found {len(matches)} {target_status.value} matches for {item_id}")
    return {
        "status": "success",
        "query_id": item_id,
        "target_status": target_status.value,
        "matches": matches,
    }
