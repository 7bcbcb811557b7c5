# tests/test_api.py
"""API tests with FastAPI's TestClient."""

import pytest

pytest.importorskip("fastapi")

from fastapi.testclient import TestClient

from kbsync import __version__
from kbsync.api import create_app

SECRET = "s3cret"


@pytest.fixture
def client(make_service):
    app = create_app(service=make_service(), secret=SECRET)
    with TestClient(app) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "version": __version__, "sync_running": False}


def test_sync_requires_secret(client):
    assert client.post("/sync", json={"secret": "wrong"}).status_code == 401
    assert client.get("/sync").status_code == 401
    assert client.get("/sync", params={"secret": "wrong"}).json() == {"error": "Unauthorized"}


def test_post_sync_runs_a_pass(client, kb_dir):
    (kb_dir / "a.txt").write_text("hello", encoding="utf-8")

    response = client.post("/sync", json={"secret": SECRET})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["summary"]["processed"] == 1


def test_get_sync_full(client, kb_dir, vector_store):
    (kb_dir / "a.txt").write_text("hello", encoding="utf-8")

    response = client.get("/sync", params={"secret": SECRET, "full": "true"})

    assert response.status_code == 200
    assert response.json()["summary"]["full_resync"] is True
    assert vector_store.delete_all_calls == 1


def test_sync_failure_is_500(client, catalog_path):
    catalog_path.parent.mkdir(parents=True)
    catalog_path.write_text("{broken", encoding="utf-8")

    response = client.post("/sync", json={"secret": SECRET})

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Failed to update knowledge base"
    assert "not valid JSON" in body["details"]


def test_catalog_views_and_reset(client, kb_dir):
    (kb_dir / "blank.txt").write_text("", encoding="utf-8")
    (kb_dir / "a.txt").write_text("hello", encoding="utf-8")
    client.post("/sync", json={"secret": SECRET})

    catalog = client.get("/catalog").json()
    assert {r["name"] for r in catalog["files"].values()} == {"a.txt", "blank.txt"}

    errors = client.get("/catalog/errors").json()
    assert errors["count"] == 1
    failed = errors["files"][0]
    assert failed["name"] == "blank.txt"

    reset = client.post(f"/catalog/{failed['id']}/reset")
    assert reset.status_code == 200
    assert reset.json()["processingStatus"] == "pending"


def test_reset_unknown_record_is_404(client, store):
    store.load()

    response = client.post("/catalog/missing/reset")

    assert response.status_code == 404
    assert response.json()["error"] == "File not found"
