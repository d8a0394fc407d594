from fastapi import Depends, FastAPI, File, Form, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from typing import Callable, List, Optional
import argparse
import logging

from lostfound_ai.common.config import Settings, get_settings
from lostfound_ai.common.schemas import CreateItemResponse, ErrorResponse, MatchResponse
from lostfound_ai.common.utils import setup_logging
from lostfound_ai.semantic_db import (
    CloudImageStorage, EmbeddingGenerator, FirestoreItemStore, ImageTooLargeError,
    ImageUpload, ItemFilters, ItemNotFoundError, ItemValidationError,
    find_potential_matches, list_items, register_item
)
from lostfound_ai.semantic_db.core import get_embedder, get_image_storage, get_item_store

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Lost & Found API", version="1.0.0")

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# Dependencies return factories; clients are built inside each route's error handling
def item_store() -> Callable[[], FirestoreItemStore]:
    return get_item_store


def image_storage() -> Callable[[], CloudImageStorage]:
    return get_image_storage


def embedder() -> Callable[[], EmbeddingGenerator]:
    return get_embedder


def poster_uid(settings: Settings = Depends(get_settings)) -> str:
    # Placeholder identity until authentication is wired in
    return settings.poster_uid


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(message=message).model_dump())


@app.get("/")
async def root():
    return {"message": "Lost & Found API is running"}


@app.post(
    "/api/items",
    status_code=201,
    response_model=CreateItemResponse,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def create_item(
        name: Optional[str] = Form(None),
        status: Optional[str] = Form(None),
        category: Optional[str] = Form(None),
        description: Optional[str] = Form(None),
        lastSeenLocation: Optional[str] = Form(None),
        whereToCollect: Optional[str] = Form(None),
        itemImage: Optional[UploadFile] = File(None),
        *,
        store: Callable[[], FirestoreItemStore] = Depends(item_store),
        images: Callable[[], CloudImageStorage] = Depends(image_storage),
        generator: Callable[[], EmbeddingGenerator] = Depends(embedder),
        uid: str = Depends(poster_uid),
        settings: Settings = Depends(get_settings),
):
    fields = {
        "name": name,
        "status": status,
        "category": category,
        "description": description,
        "lastSeenLocation": lastSeenLocation,
        "whereToCollect": whereToCollect,
    }

    upload = None
    if itemImage is not None and itemImage.filename:
        upload = ImageUpload(
            data=await itemImage.read(),
            filename=itemImage.filename,
            content_type=itemImage.content_type or "application/octet-stream",
        )

    try:
        result = await run_in_threadpool(
            register_item,
            fields,
            upload,
            poster_uid=uid,
            store=store(),
            image_storage=images,
            embedder=generator(),
            settings=settings,
        )
    except ImageTooLargeError as e:
        return error_response(413, str(e))
    except ItemValidationError as e:
        return error_response(400, str(e))
    except Exception:
        logger.exception("Error creating item")
        return error_response(500, "Internal Server Error during data processing.")

    return CreateItemResponse(success=True, message=result["message"], itemId=result["item_id"])


@app.get("/api/items", response_model=List[dict], responses={500: {"model": ErrorResponse}})
async def get_items(
        category: Optional[str] = None,
        status: Optional[str] = None,
        lastSeenLocation: Optional[str] = None,
        sortBy: Optional[str] = None,
        sortOrder: Optional[str] = None,
        *,
        store: Callable[[], FirestoreItemStore] = Depends(item_store),
):
    filters = ItemFilters(
        category=category,
        status=status,
        last_seen_location=lastSeenLocation,
        sort_by=sortBy,
        sort_order=sortOrder,
    )
    try:
        return await run_in_threadpool(list_items, filters, store=store())
    except Exception:
        logger.exception("Firestore error during GET /api/items")
        return error_response(500, "Failed to retrieve items.")


@app.get(
    "/api/items/{item_id}/matches",
    response_model=MatchResponse,
    response_model_exclude_none=True,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_matches(
        item_id: str,
        *,
        store: Callable[[], FirestoreItemStore] = Depends(item_store),
        settings: Settings = Depends(get_settings),
):
    try:
        result = await run_in_threadpool(find_potential_matches, item_id, store=store(), settings=settings)
    except ItemNotFoundError:
        return error_response(404, "Item not found.")
    except Exception:
        logger.exception(f"Matching error for item {item_id}")
        return error_response(500, "Failed to find matches.")

    return MatchResponse(
        success=True,
        queryId=result["query_id"],
        targetStatus=result.get("target_status"),
        message=result.get("message"),
        matches=result["matches"],
    )


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description='Lost & Found API Server')
    parser.add_argument('--port', type=int, default=8000, help='Port to run the server on')
    args = parser.parse_args()

    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=args.port)
