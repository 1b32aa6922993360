import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock

from talent_search.main import app
from talent_search.dependencies import get_matching_service

AI_SEARCH_URL = "/functions/v1/ai-search"


def _assert_cors(response):
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.headers["access-control-allow-headers"] == "authorization, x-client-info, apikey, content-type"


def test_health_check(test_client: TestClient):
    """Test the health check endpoint."""
    response = test_client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_preflight_returns_empty_body_with_cors_headers(test_client: TestClient):
    response = test_client.options(AI_SEARCH_URL, headers={
        "Origin": "https://talent.example.com",
        "Access-Control-Request-Method": "POST",
    })

    assert response.status_code == 200
    assert response.content == b""
    _assert_cors(response)


def test_ai_search_returns_matching_profiles(test_client: TestClient, mock_openai_service):
    mock_openai_service.complete_json.return_value = '{"profileIds": ["5", "2"]}'

    response = test_client.post(AI_SEARCH_URL, json={"query": "python engineers"})

    assert response.status_code == 200
    _assert_cors(response)
    body = response.json()
    assert [profile["id"] for profile in body["profiles"]] == ["2", "5"]
    assert body["profiles"][0]["title"] == "Backend Engineer"
    assert body["profiles"][0]["about"] is None
    assert body["rawAiResponse"] == '{"profileIds": ["5", "2"]}'


def test_ai_search_profiles_carry_only_record_fields(test_client: TestClient, mock_openai_service):
    mock_openai_service.complete_json.return_value = '{"profileIds": ["2"]}'

    response = test_client.post(AI_SEARCH_URL, json={"query": "python"})

    assert set(response.json()["profiles"][0]) == {
        "id", "title", "location", "skills", "about", "experience", "education"
    }


@pytest.mark.parametrize("payload", [{"query": ""}, {"query": "   "}, {}, ["query"]])
def test_ai_search_requires_query(test_client: TestClient, mock_openai_service, payload):
    response = test_client.post(AI_SEARCH_URL, json=payload)

    assert response.status_code == 200
    assert response.json() == {"error": "Search query is required"}
    _assert_cors(response)
    mock_openai_service.complete_json.assert_not_called()


def test_ai_search_empty_body_requires_query(test_client: TestClient):
    response = test_client.post(AI_SEARCH_URL, content=b"")

    assert response.status_code == 200
    assert response.json() == {"error": "Search query is required"}


def test_ai_search_invalid_json_body(test_client: TestClient):
    response = test_client.post(AI_SEARCH_URL, content=b"{not json",
                                headers={"Content-Type": "application/json"})

    assert response.status_code == 200
    assert response.json()["error"].startswith("Invalid request body")


def test_ai_search_quota_error_is_in_band(test_client: TestClient, mock_openai_service):
    mock_openai_service.complete_json.side_effect = Exception("429 rate limit reached")

    response = test_client.post(AI_SEARCH_URL, json={"query": "designers"})

    assert response.status_code == 200
    assert response.json()["quotaExceeded"] is True
    _assert_cors(response)


def test_ai_search_unexpected_error_is_in_band(test_client: TestClient):
    failing = AsyncMock()
    failing.search.side_effect = RuntimeError("boom")
    app.dependency_overrides[get_matching_service] = lambda: failing

    response = test_client.post(AI_SEARCH_URL, json={"query": "designers"})

    assert response.status_code == 200
    assert response.json() == {"error": "boom"}
    _assert_cors(response)


def test_list_profiles_tags_sources(test_client: TestClient):
    response = test_client.get("/profiles")

    assert response.status_code == 200
    body = response.json()
    assert [profile["id"] for profile in body] == ["1", "2", "3", "4", "5", "6"]
    assert body[0]["source"] == "regular"
    assert body[3]["source"] == "analytics"


def test_list_profiles_filters_by_substring(test_client: TestClient):
    response = test_client.get("/profiles", params={"q": "berlin"})

    assert [profile["id"] for profile in response.json()] == ["1", "6"]


def test_list_profiles_read_failure(test_client: TestClient, fake_supabase):
    fake_supabase.errors["profiles"] = RuntimeError("connection refused")

    response = test_client.get("/profiles")

    assert response.status_code == 500
    assert "connection refused" in response.json()["detail"]


def test_list_profiles_tags_each_pool_separately(test_client: TestClient, fake_supabase):
    fake_supabase.tables["analytics_profiles"].append({"id": "2", "title": "Backend Engineer (live)"})

    body = test_client.get("/profiles").json()

    assert [(profile["id"], profile["source"]) for profile in body if profile["id"] == "2"] == [
        ("2", "regular"),
        ("2", "analytics"),
    ]
