import errno
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from histline.config import settings
from histline.services.dataset_search import DatasetSearchService, InMemoryDatasetSource
from main import create_app


@pytest.fixture
def client(make_service):
    with TestClient(create_app(search_service=make_service())) as test_client:
        yield test_client


def test_health_check(client):
    response = client.get("/api/")

    assert response.status_code == 200
    assert response.json() == {"message": "Histline API is running!"}


def test_search_returns_camel_case_timeline(client):
    response = client.get("/search", params={"q": "Rome"})

    assert response.status_code == 200
    body = response.json()
    assert body["source"] == "wikipedia + gemini"
    assert [e["date"] for e in body["timelineEvents"]] == ["753 BC", "476"]
    assert body["images"] == [
        {"src": "https://images.example/rome.jpg", "alt": "Colosseum"}
    ]

    cached = client.get("/search", params={"q": "rome"}).json()
    assert cached["source"] == "cache"


def test_search_passes_year_range(client):
    response = client.get(
        "/search", params={"q": "Rome", "startYear": "800 BC", "endYear": "1 BC"}
    )

    assert response.status_code == 200
    assert [e["summary"] for e in response.json()["timelineEvents"]] == ["Founded"]


def test_search_without_query_is_bad_request(client):
    response = client.get("/search")

    assert response.status_code == 400
    assert response.json() == {"detail": 'Query parameter "q" is required.'}


def test_search_provider_failure_is_server_error(make_service, failing_extract_provider):
    app = create_app(search_service=make_service(extract_provider=failing_extract_provider))

    with TestClient(app) as test_client:
        response = test_client.get("/search", params={"q": "Rome"})

    assert response.status_code == 500
    assert response.json()["detail"].startswith("Failed to process search request:")


def test_search_without_configured_service_is_unavailable():
    app = create_app()
    app.state.timeline_search_service = None

    # No context manager: the lifespan would build a real pipeline
    response = TestClient(app).get("/search", params={"q": "Rome"})

    assert response.status_code == 503


def _service_with_failing_store(make_service, error: Exception):
    failing_store = AsyncMock()
    failing_store.get.side_effect = error
    return make_service(store=failing_store)


def test_search_with_unreachable_database_is_unavailable(make_service):
    service = _service_with_failing_store(
        make_service, ConnectionRefusedError(errno.ECONNREFUSED, "Connection refused")
    )

    with TestClient(create_app(search_service=service)) as test_client:
        response = test_client.get("/search", params={"q": "Rome"})

    assert response.status_code == 503
    assert response.json() == {"detail": settings.db_unavailable_hint}


def test_search_with_other_os_error_is_server_error(make_service):
    service = _service_with_failing_store(
        make_service, OSError(errno.ENOSPC, "No space left on device")
    )

    with TestClient(create_app(search_service=service)) as test_client:
        response = test_client.get("/search", params={"q": "Rome"})

    assert response.status_code == 500
    assert response.json()["detail"].startswith("An unexpected OS error occurred")


@pytest.fixture
def dataset_client(make_service):
    dataset_service = DatasetSearchService(
        InMemoryDatasetSource(
            [
                {"Title": "Moon landing", "Country": "United States", "Year": 1969},
                {"Title": "Woodstock", "Country": "United States", "Year": 1969},
                {"Title": "Treaty of Rome", "Country": "Italy", "Year": 1957},
            ]
        )
    )
    app = create_app(search_service=make_service(), dataset_service=dataset_service)
    with TestClient(app) as test_client:
        yield test_client


def test_dataset_lookup_by_year(dataset_client):
    response = dataset_client.get("/api/dataset", params={"type": "Year", "topic": "1969"})

    assert response.status_code == 200
    assert [r["Title"] for r in response.json()] == ["Moon landing", "Woodstock"]


def test_dataset_lookup_by_text_field(dataset_client):
    response = dataset_client.get("/api/dataset", params={"type": "Country", "topic": "ital"})

    assert response.status_code == 200
    assert [r["Title"] for r in response.json()] == ["Treaty of Rome"]


def test_dataset_lookup_with_invalid_year_is_bad_request(dataset_client):
    response = dataset_client.get("/api/dataset", params={"type": "Year", "topic": "soon"})

    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid year"}


def test_dataset_lookup_without_type_is_bad_request(dataset_client):
    response = dataset_client.get("/api/dataset", params={"topic": "Rome"})

    assert response.status_code == 400
