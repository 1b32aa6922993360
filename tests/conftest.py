import pytest
from fastapi.testclient import TestClient
from typing import Dict, Any, Generator, List
from types import SimpleNamespace
from unittest.mock import Mock, AsyncMock

from talent_search.main import app
from talent_search.config.settings import Settings
from talent_search.dependencies import get_matching_service, get_profile_service
from talent_search.services.openai_service import OpenAIService
from talent_search.services.profile_service import ProfileService
from talent_search.services.matching_service import MatchingService
from talent_search.client.notifications import NotificationCenter
from talent_search.client.session import SessionProvider


class FakeQuery:
    """Chainable stand-in for a postgrest request builder."""

    def __init__(self, store: "FakeSupabase", table: str):
        self.store = store
        self.table = table
        self.operation = "select"
        self.payload = None
        self.filters: List[tuple] = []
        self.ordering = None

    def select(self, columns: str):
        self.columns = columns
        return self

    def order(self, column: str, desc: bool = False):
        self.ordering = (column, desc)
        return self

    def eq(self, column: str, value: Any):
        self.filters.append((column, value))
        return self

    def insert(self, payload: Dict[str, Any]):
        self.operation = "insert"
        self.payload = payload
        return self

    def delete(self):
        self.operation = "delete"
        return self

    def _matches(self, row: Dict[str, Any]) -> bool:
        return all(row.get(column) == value for column, value in self.filters)

    async def execute(self):
        self.store.executed.append((self.table, self.operation))
        if self.table in self.store.errors:
            raise self.store.errors[self.table]

        rows = self.store.tables.setdefault(self.table, [])
        if self.operation == "insert":
            rows.append(dict(self.payload))
            return SimpleNamespace(data=[dict(self.payload)])
        if self.operation == "delete":
            removed = [row for row in rows if self._matches(row)]
            self.store.tables[self.table] = [row for row in rows if not self._matches(row)]
            return SimpleNamespace(data=removed)
        return SimpleNamespace(data=[dict(row) for row in rows if self._matches(row)])


class FakeSupabase:
    def __init__(self, tables: Dict[str, List[Dict[str, Any]]] = None):
        self.tables = tables or {}
        self.errors: Dict[str, Exception] = {}
        self.executed: List[tuple] = []

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


def make_profile(profile_id: str, **fields) -> Dict[str, Any]:
    profile = {
        "id": profile_id,
        "title": None,
        "location": None,
        "skills": None,
        "about": None,
        "experience": None,
        "education": None,
        "created_at": f"2024-03-0{profile_id}T10:00:00+00:00",
    }
    profile.update(fields)
    return profile


@pytest.fixture
def test_settings() -> Settings:
    """Settings that ignore the local .env file."""
    return Settings(
        _env_file=None,
        environment="development",
        openai_api_key="fake_key",
        supabase_url="https://example.supabase.co",
        supabase_key="anon-key",
    )


@pytest.fixture
def regular_profiles() -> List[Dict[str, Any]]:
    return [
        make_profile("1", title="Frontend Developer", location="Berlin", skills="React, TypeScript"),
        make_profile("2", title="Backend Engineer", location="Remote", skills="Python, FastAPI, PostgreSQL",
                     experience="6 years building APIs"),
        make_profile("3", title="Product Designer", location="London", skills="Figma, UX research"),
    ]


@pytest.fixture
def analytics_profiles() -> List[Dict[str, Any]]:
    return [
        make_profile("4", title="Data Analyst", location="Paris", skills="SQL, Tableau"),
        make_profile("5", title="Machine Learning Engineer", location="Remote", skills="Python, PyTorch",
                     education="MSc Computer Science"),
        make_profile("6", title="DevOps Engineer", location="Berlin", skills="Kubernetes, Terraform"),
    ]


@pytest.fixture
def fake_supabase(regular_profiles, analytics_profiles) -> FakeSupabase:
    """A Supabase stand-in holding both candidate pools."""
    return FakeSupabase({
        "profiles": list(regular_profiles),
        "analytics_profiles": list(analytics_profiles),
        "saved_profiles": [],
    })


@pytest.fixture
def profile_service(test_settings, fake_supabase) -> ProfileService:
    return ProfileService(settings=test_settings, supabase_client=fake_supabase)


@pytest.fixture
def mock_openai_service():
    """An OpenAIService whose completion is an AsyncMock."""
    service = Mock(spec=OpenAIService)
    service.is_configured.return_value = True
    service.complete_json = AsyncMock(return_value='{"profileIds": []}')
    return service


@pytest.fixture
def matching_service(profile_service, mock_openai_service) -> MatchingService:
    return MatchingService(profile_service=profile_service, openai_service=mock_openai_service)


@pytest.fixture
def notifier() -> NotificationCenter:
    return NotificationCenter()


@pytest.fixture
def session() -> SessionProvider:
    return SessionProvider()


@pytest.fixture
def test_client(matching_service, profile_service) -> Generator:
    """Create a test client for FastAPI app with storage and OpenAI faked."""
    app.dependency_overrides[get_matching_service] = lambda: matching_service
    app.dependency_overrides[get_profile_service] = lambda: profile_service
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
