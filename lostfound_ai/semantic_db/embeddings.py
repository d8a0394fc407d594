"""
Lost & Found Embedding Generator
--------------------------------
Vertex AI REST client that turns an item's text and/or image into a vector.
A text-only request goes to the text embedding model; when an image URI is
present the multimodal model fuses both into a single vector.
"""

from __future__ import annotations

import json
import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple

import google.auth
import requests
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request as AuthRequest
from google.oauth2 import service_account

from ..common.config import Settings, get_settings
from .models import EmbeddingInput, find_numeric_array

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/cloud-platform"]

TokenProvider = Callable[[], str]


class GoogleTokenProvider:
    """Bearer tokens from a service-account key file, or application-default credentials."""

    def __init__(self, credentials_path: Optional[str] = None):
        self._credentials_path = credentials_path
        self._credentials = None
        self._lock = threading.Lock()

    def _load(self):
        if self._credentials_path:
            return service_account.Credentials.from_service_account_file(
                self._credentials_path, scopes=SCOPES
            )
        credentials, _ = google.auth.default(scopes=SCOPES)
        return credentials

    def __call__(self) -> str:
        with self._lock:
            if self._credentials is None:
                self._credentials = self._load()
            if not self._credentials.valid:
                self._credentials.refresh(AuthRequest())
            return self._credentials.token


class EmbeddingGenerator:
    def __init__(
            self,
            settings: Optional[Settings] = None,
            session: Optional[requests.Session] = None,
            token_provider: Optional[TokenProvider] = None,
    ):
        self.settings = settings or get_settings()
        self._session = session or requests.Session()
        self._token_provider = token_provider or GoogleTokenProvider(self.settings.credentials_path)

    def _request_for(self, item: EmbeddingInput) -> Tuple[str, Dict[str, Any]]:
        if item.image_uri:
            instance: Dict[str, Any] = {"image": {"gcsUri": item.image_uri}}
            if item.text:
                instance["text"] = item.text
            return self.settings.vertex_endpoint(self.settings.multimodal_embedding_model), {"instances": [instance]}

        return self.settings.vertex_endpoint(self.settings.text_embedding_model), {"instances": [{"content": item.text}]}

    def generate(self, item: EmbeddingInput) -> Optional[List[float]]:
        """
        Generate an embedding vector for the given input.

        Returns:
            The vector, or None when the provider call fails in any way
            (credentials, network, HTTP status, body shape).
        """
        if item.is_empty:
            logger.warning("Embedding requested without text or image; skipping")
            return None

        mode = "multimodal" if item.image_uri else "text"

        try:
            endpoint, payload = self._request_for(item)
            token = self._token_provider()
            response = self._session.post(
                endpoint,
                json=payload,
                headers={
                    "Authorization": f"Bearer {token}",
                    "Content-Type": "application/json",
                },
                timeout=self.settings.embedding_timeout,
            )
            response.raise_for_status()
            body = response.json()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else "N/A"
            detail = exc.response.text[:500] if exc.response is not None else ""
            logger.error("Vertex AI %s embedding failed (status %s): %s", mode, status, detail)
            return None
        except (requests.RequestException, GoogleAuthError, OSError, ValueError, RuntimeError) as exc:
            logger.error("Error during %s embedding generation: %s", mode, exc)
            return None

        logger.debug("Vertex response data: %s", json.dumps(body)[:2000])
        vector = self.extract_vector(body)
        if vector is None:
            logger.error("Could not find embedding vector in Vertex %s response", mode)
            return None

        logger.info("Generated %s embedding with %d dimensions", mode, len(vector))
        return vector

    def extract_vector(self, body: Any) -> Optional[List[float]]:
        """Known predictions array first, then the whole body."""
        depth = self.settings.embedding_search_depth
        predictions = body.get("predictions") if isinstance(body, dict) else None
        if isinstance(predictions, list) and predictions:
            vector = find_numeric_array(predictions[0], depth)
            if vector:
                return vector
        return find_numeric_array(body, depth)
