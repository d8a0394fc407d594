"""
Lost & Found DB with Semantic Matching
--------------------------------------
Public API:

    register_item(...)
    list_items(...)
    find_potential_matches(...)
"""

from .models import (ItemStatus, ItemFilters, ImageUpload, EmbeddingInput,
                     UploadedImage, LostFoundError, ItemValidationError,
                     ImageTooLargeError, ItemNotFoundError,
                     cosine_similarity, find_numeric_array)

from .embeddings import EmbeddingGenerator
from .store import FirestoreItemStore, CloudImageStorage
from .core import register_item, list_items, find_potential_matches   # noqa: F401  (re-export)
