# tests/test_api.py

import pytest
from unittest.mock import MagicMock
from elasticsearch import ConnectionTimeout
from fastapi.testclient import TestClient

from main import app, get_es_client


def _make_mock_es(count):
    es = MagicMock()
    es.ping.return_value = True
    es.search.return_value = {"hits": {"hits": [
        {"_source": {"title": f"Article {i}", "text": "The cat sat. The dog ran.",
                     "url": f"https://wiki/{i}"}}
        for i in range(count)
    ]}}
    return es


@pytest.fixture
def es():
    return _make_mock_es(3)


@pytest.fixture
def client(es):
    app.dependency_overrides[get_es_client] = lambda: es
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_health_reports_engine_down(client, es):
    es.ping.return_value = False
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "elasticsearch_down"


def test_search_returns_articles(client, es):
    response = client.post("/api/search", json={"query": "cat", "limit": 5, "page": 3})

    assert response.status_code == 200
    data = response.json()
    assert data["totalResults"] == 3
    assert data["results"][0] == {
        "title": "Article 0", "text": "The cat sat. The dog ran.", "url": "https://wiki/0"}

    body = es.search.call_args.kwargs["body"]
    assert body["from"] == 10
    assert body["size"] == 5


def test_search_defaults(client, es):
    client.post("/api/search", json={"query": "cat"})
    body = es.search.call_args.kwargs["body"]
    assert body["from"] == 0
    assert body["size"] == 10


def test_search_empty_query(client, es):
    response = client.post("/api/search", json={"query": "  "})
    assert response.json() == {"results": [], "totalResults": 0}
    es.search.assert_not_called()


def test_search_missing_query_matches_nothing(client, es):
    response = client.post("/api/search", json={})
    assert response.status_code == 200
    assert response.json() == {"results": [], "totalResults": 0}
    es.search.assert_not_called()


@pytest.mark.parametrize("payload", [{"query": "cat", "limit": 0}, {"query": "cat", "page": 0}])
def test_search_rejects_invalid_request(client, payload):
    assert client.post("/api/search", json=payload).status_code == 422


def test_search_engine_failure(client, es):
    es.search.side_effect = ConnectionTimeout("timed out")
    response = client.post("/api/search", json={"query": "cat"})
    assert response.status_code == 500
    assert response.json() == {"detail": "Search failed"}


def test_refined_search(client, es):
    es.search.return_value = _make_mock_es(25).search.return_value
    response = client.post("/api/search/refined",
                           json={"query": "cat", "page": 3, "page_length": 10})

    assert response.status_code == 200
    data = response.json()
    assert data["total_results"] == 25
    assert data["total_pages"] == 3
    assert data["page_labels"] == [1, 2, 3]
    assert [r["title"] for r in data["results"]] == [f"Article {i}" for i in range(20, 25)]
    assert data["results"][0]["sentences"] == ["The <mark>cat</mark> sat"]
    assert es.search.call_args.kwargs["body"]["size"] == 100


def test_refined_search_engine_failure(client, es):
    es.search.side_effect = ConnectionTimeout("timed out")
    response = client.post("/api/search/refined", json={"query": "cat"})
    assert response.status_code == 500


def test_search_malformed_hit(client, es):
    es.search.return_value = {"hits": {"hits": [{"_source": {"title": "No url", "text": "x"}}]}}
    response = client.post("/api/search", json={"query": "cat"})
    assert response.status_code == 500
    assert response.json() == {"detail": "Search failed"}


def test_refined_search_missing_query(client, es):
    response = client.post("/api/search/refined", json={})

    assert response.status_code == 200
    data = response.json()
    assert data["query"] == ""
    assert data["results"] == []
    assert data["total_pages"] == 0
    assert data["page_labels"] == [1]
    es.search.assert_not_called()


def test_refined_search_page_past_end(client, es):
    es.search.return_value = _make_mock_es(25).search.return_value
    response = client.post("/api/search/refined",
                           json={"query": "cat", "page": 5, "page_length": 10})

    data = response.json()
    assert data["results"] == []
    assert data["total_pages"] == 3
    assert data["page_labels"] == [1, 2, 3]
