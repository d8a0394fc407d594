import datetime as dt
from unittest.mock import MagicMock

from google.cloud import firestore

from lostfound_ai.semantic_db.store import CloudImageStorage, FirestoreItemStore


def snapshot(doc_id, data, exists=True):
    doc = MagicMock()
    doc.id = doc_id
    doc.exists = exists
    doc.to_dict.return_value = data
    return doc


def test_get_returns_none_for_missing_document():
    client = MagicMock()
    client.collection.return_value.document.return_value.get.return_value = snapshot("x", None, exists=False)

    assert FirestoreItemStore(client).get("x") is None
    client.collection.assert_called_with("items")


def test_get_returns_document_fields():
    client = MagicMock()
    client.collection.return_value.document.return_value.get.return_value = snapshot("x", {"status": "lost"})

    assert FirestoreItemStore(client, "reports").get("x") == {"status": "lost"}
    client.collection.assert_called_with("reports")


def test_add_returns_generated_id():
    client = MagicMock()
    doc_ref = MagicMock(id="abc123")
    client.collection.return_value.add.return_value = (dt.datetime.now(), doc_ref)

    assert FirestoreItemStore(client).add({"name": "Keys"}) == "abc123"


def test_query_chains_equality_filters_and_order():
    client = MagicMock()
    collection = client.collection.return_value
    query = MagicMock()
    collection.where.return_value = query
    query.where.return_value = query
    query.order_by.return_value = query
    query.stream.return_value = [snapshot("a", {"name": "A"}), snapshot("b", {"name": "B"})]

    rows = FirestoreItemStore(client).query(
        {"isApproved": True, "status": "found"}, order_by="dateReported", descending=False
    )

    assert rows == [("a", {"name": "A"}), ("b", {"name": "B"})]
    first_filter = collection.where.call_args.kwargs["filter"]
    second_filter = query.where.call_args.kwargs["filter"]
    assert (first_filter.field_path, first_filter.op_string, first_filter.value) == ("isApproved", "==", True)
    assert (second_filter.field_path, second_filter.op_string, second_filter.value) == ("status", "==", "found")
    query.order_by.assert_called_once_with("dateReported", direction=firestore.Query.ASCENDING)


def test_query_without_order_skips_order_by():
    client = MagicMock()
    collection = client.collection.return_value
    collection.where.return_value.stream.return_value = []

    assert FirestoreItemStore(client).query({"status": "lost"}) == []
    collection.where.return_value.order_by.assert_not_called()


def test_object_name_replaces_spaces():
    assert CloudImageStorage.object_name("my red bag.jpg", 1700000000000) == "items/1700000000000_my_red_bag.jpg"


def test_upload_returns_signed_url_and_gcs_uri():
    bucket = MagicMock()
    bucket.name = "demo.firebasestorage.app"
    blob = bucket.blob.return_value
    blob.generate_signed_url.return_value = "https://signed.example/read"

    uploaded = CloudImageStorage(bucket, signed_url_minutes=30).upload(b"data", "bag photo.png", "image/png")

    object_name = bucket.blob.call_args.args[0]
    assert object_name.startswith("items/") and object_name.endswith("_bag_photo.png")
    blob.upload_from_string.assert_called_once_with(b"data", content_type="image/png")
    assert blob.generate_signed_url.call_args.kwargs["expiration"] == dt.timedelta(minutes=30)
    assert uploaded.signed_url == "https://signed.example/read"
    assert uploaded.gcs_uri == f"gs://demo.firebasestorage.app/{object_name}"
