"""
Lost & Found Settings
---------------------
Environment-driven configuration. Values are read once, after .env is loaded.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    project_id: Optional[str] = None
    credentials_path: Optional[str] = None
    region: str = "us-central1"

    # Vertex AI embedding models
    text_embedding_model: str = "text-embedding-004"
    multimodal_embedding_model: str = "multimodalembedding@001"
    embedding_timeout: float = 30.0
    embedding_search_depth: int = 6

    # Storage
    storage_bucket: Optional[str] = None
    items_collection: str = "items"
    signed_url_minutes: int = 30
    max_upload_bytes: int = 10 * 1024 * 1024

    # Matching policy
    similarity_threshold: float = 0.5
    max_matches: int = 5

    poster_uid: str = "anonymous"
    log_level: str = "INFO"
    log_file: str = "activity.log"

    @property
    def bucket_name(self) -> str:
        if self.storage_bucket:
            return self.storage_bucket
        return f"{self.require_project()}.firebasestorage.app"

    def require_project(self) -> str:
        if not self.project_id:
            raise RuntimeError("FIREBASE_PROJECT_ID (or PROJECT_ID) must be set in environment")
        return self.project_id

    def vertex_endpoint(self, model_id: str) -> str:
        project = self.require_project()
        return (
            f"https://{self.region}-aiplatform.googleapis.com/v1/projects/{project}"
            f"/locations/{self.region}/publishers/google/models/{model_id}:predict"
        )


def load_settings() -> Settings:
    """Build settings from the process environment."""
    load_dotenv()
    env = os.getenv
    return Settings(
        project_id=env("FIREBASE_PROJECT_ID") or env("PROJECT_ID"),
        credentials_path=env("FIREBASE_PRIVATE_KEY_PATH") or env("GOOGLE_APPLICATION_CREDENTIALS"),
        region=env("REGION", "us-central1"),
        text_embedding_model=env("TEXT_EMBEDDING_MODEL", "text-embedding-004"),
        multimodal_embedding_model=env("MULTIMODAL_EMBEDDING_MODEL", "multimodalembedding@001"),
        embedding_timeout=float(env("EMBEDDING_TIMEOUT", "30")),
        embedding_search_depth=int(env("EMBEDDING_SEARCH_DEPTH", "6")),
        storage_bucket=env("STORAGE_BUCKET") or None,
        items_collection=env("ITEMS_COLLECTION", "items"),
        signed_url_minutes=int(env("SIGNED_URL_MINUTES", "30")),
        max_upload_bytes=int(env("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024))),
        similarity_threshold=float(env("SIMILARITY_THRESHOLD", "0.5")),
        max_matches=int(env("MAX_MATCHES", "5")),
        poster_uid=env("POSTER_UID", "anonymous"),
        log_level=env("LOG_LEVEL", "INFO"),
        log_file=env("LOG_FILE", "activity.log"),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
