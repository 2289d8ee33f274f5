# tests/test_api.py
import pytest
from fastapi.testclient import TestClient

from main import app
from services.extraction.config_loader import ExtractionProfile
from services.scraper.batch_runner import BatchRunner
from tests.fakes import IMAGE, URLS, FakeProvider, numbered_pages


@pytest.fixture
def provider():
    return FakeProvider(numbered_pages(), failing={URLS[1]})


@pytest.fixture
def client(provider):
    # no lifespan: the runner is injected instead of launching a browser
    app.state.runner = BatchRunner(provider, profile=ExtractionProfile())
    yield TestClient(app)
    del app.state.runner


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert "timestamp" in body


def test_scrape_post(client):
    response = client.post("/scrape", json={"url": URLS[0]})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["url"] == URLS[0]
    assert body["data"] == {
        "text": "Post number 1",
        "images": [IMAGE],
        "videos": [],
    }
    assert "scraped_at" in body


def test_scrape_get_passes_cookie(client, provider):
    response = client.get("/scrape", params={"url": URLS[2], "li_at": "secret"})

    assert response.status_code == 200
    assert response.json()["data"]["text"] == "Post number 3"
    assert provider.cookies == ["secret"]


@pytest.mark.parametrize(
    "payload,message",
    [
        ({}, "Missing required parameter: url"),
        ({"url": "   "}, "Missing required parameter: url"),
        ({"url": "https://www.linkedin.com/feed/"}, "Invalid LinkedIn post URL"),
    ],
)
def test_scrape_rejects_bad_targets(client, provider, payload, message):
    response = client.post("/scrape", json=payload)

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == message
    assert body["code"] == "INVALID_TARGET"
    assert provider.calls == []


def test_acquisition_failure_is_bad_gateway(client):
    response = client.post("/scrape", json={"url": URLS[1]})

    assert response.status_code == 502
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "PAGE_ACQUISITION_FAILED"
    assert "ERR_TIMED_OUT" in body["error"]


def test_batch_envelope(client):
    response = client.post("/scrape/batch", json={"urls": URLS})

    assert response.status_code == 200
    body = response.json()
    assert body["total_urls"] == 3
    assert body["successful"] == 2
    assert body["failed"] == 1
    assert [r["url"] for r in body["results"]] == URLS
    assert [r["success"] for r in body["results"]] == [True, False, True]
    assert body["results"][1]["data"] is None


def test_batch_over_limit_is_rejected(client, provider):
    urls = [f"https://www.linkedin.com/posts/user_activity-{i}" for i in range(11)]
    response = client.post("/scrape/batch", json={"urls": urls})

    assert response.status_code == 400
    assert response.json()["code"] == "BATCH_LIMIT_EXCEEDED"
    assert provider.calls == []


def test_batch_requires_url_list(client):
    response = client.post("/scrape/batch", json={"li_at": "x"})

    assert response.status_code == 400
    assert response.json()["error"] == "Missing required parameter: urls (array)"


def test_malformed_body_is_a_validation_error(client):
    response = client.post("/scrape/batch", json={"urls": "not-a-list"})

    assert response.status_code == 422
    body = response.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert body["details"]
