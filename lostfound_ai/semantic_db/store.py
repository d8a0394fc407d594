"""
Lost & Found Storage Adapters
-----------------------------
Firestore for item records, Cloud Storage for uploaded images
"""

from __future__ import annotations

import datetime as dt
import logging
import time
from typing import Any, Dict, List, Optional, Tuple

from google.cloud import firestore, storage
from google.cloud.firestore_v1.base_query import FieldFilter

from .models import UploadedImage

logger = logging.getLogger(__name__)


class FirestoreItemStore:
    def __init__(self, client: firestore.Client, collection: str = "items"):
        self._db = client
        self._collection = collection

    @property
    def items(self):
        return self._db.collection(self._collection)

    def get(self, item_id: str) -> Optional[Dict[str, Any]]:
        doc = self.items.document(item_id).get()
        if not doc.exists:
            return None
        return doc.to_dict() or {}

    def add(self, record: Dict[str, Any]) -> str:
        _, doc_ref = self.items.add(record)
        logger.info(f"Saved to Firestore: {doc_ref.id}")
        return doc_ref.id

    def query(
            self,
            filters: Dict[str, Any],
            order_by: Optional[str] = None,
            descending: bool = True,
    ) -> List[Tuple[str, Dict[str, Any]]]:
        """Equality filters, optionally ordered; returns (id, fields) in store order."""
        query = self.items
        for field, value in filters.items():
            query = query.where(filter=FieldFilter(field, "==", value))
        if order_by:
            direction = firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
            query = query.order_by(order_by, direction=direction)
        return [(doc.id, doc.to_dict() or {}) for doc in query.stream()]

    @staticmethod
    def server_timestamp():
        return firestore.SERVER_TIMESTAMP


class CloudImageStorage:
    def __init__(self, bucket: storage.Bucket, signed_url_minutes: int = 30):
        self._bucket = bucket
        self._signed_url_minutes = signed_url_minutes

    @staticmethod
    def object_name(filename: str, timestamp_ms: Optional[int] = None) -> str:
        timestamp_ms = int(time.time() * 1000) if timestamp_ms is None else timestamp_ms
        return f"items/{timestamp_ms}_{filename.replace(' ', '_')}"

    def upload(self, data: bytes, filename: str, content_type: str) -> UploadedImage:
        name = self.object_name(filename)
        blob = self._bucket.blob(name)
        blob.upload_from_string(data, content_type=content_type)

        signed_url = blob.generate_signed_url(
            version="v4",
            expiration=dt.timedelta(minutes=self._signed_url_minutes),
            method="GET",
        )
        gcs_uri = f"gs://{self._bucket.name}/{name}"
        logger.info(f"Uploaded image to {gcs_uri}")
        return UploadedImage(signed_url=signed_url, gcs_uri=gcs_uri)
