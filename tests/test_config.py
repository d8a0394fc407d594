import pytest

from lostfound_ai.common.config import Settings, load_settings


def test_load_settings_reads_environment(monkeypatch):
    monkeypatch.setenv("FIREBASE_PROJECT_ID", "campus-lf")
    monkeypatch.setenv("SIMILARITY_THRESHOLD", "0.0001")
    monkeypatch.setenv("MAX_MATCHES", "10")
    monkeypatch.setenv("EMBEDDING_TIMEOUT", "12.5")
    monkeypatch.delenv("STORAGE_BUCKET", raising=False)

    settings = load_settings()

    assert settings.project_id == "campus-lf"
    assert settings.similarity_threshold == 0.0001
    assert settings.max_matches == 10
    assert settings.embedding_timeout == 12.5
    assert settings.bucket_name == "campus-lf.firebasestorage.app"


def test_project_id_falls_back_to_project_id_variable(monkeypatch):
    monkeypatch.delenv("FIREBASE_PROJECT_ID", raising=False)
    monkeypatch.setenv("PROJECT_ID", "legacy-project")

    assert load_settings().project_id == "legacy-project"


def test_missing_project_fails_only_when_needed():
    settings = Settings()

    with pytest.raises(RuntimeError):
        settings.require_project()
    with pytest.raises(RuntimeError):
        settings.vertex_endpoint("text-embedding-004")


def test_explicit_bucket_wins():
    assert Settings(storage_bucket="images-bucket").bucket_name == "images-bucket"


def test_vertex_endpoint_format():
    settings = Settings(project_id="p1", region="europe-west4")

    assert settings.vertex_endpoint("multimodalembedding@001") == (
        "https://europe-west4-aiplatform.googleapis.com/v1/projects/p1"
        "/locations/europe-west4/publishers/google/models/multimodalembedding@001:predict"
    )
