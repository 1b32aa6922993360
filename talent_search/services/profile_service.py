from typing import Awaitable, Callable, Dict, List, Optional
import logging

from supabase import AsyncClient

from talent_search.config.settings import Settings
from talent_search.config.utils import get_table_name
from talent_search.config.constants import (
    PROFILES_TABLE,
    ANALYTICS_PROFILES_TABLE,
    SAVED_PROFILES_TABLE,
    CANDIDATE_COLUMNS,
)
from talent_search.schemas.profile import CandidateRecord, ProfileCreate, ProfileSource

logger = logging.getLogger(__name__)

POOL_TABLES: Dict[ProfileSource, str] = {
    ProfileSource.REGULAR: PROFILES_TABLE,
    ProfileSource.ANALYTICS: ANALYTICS_PROFILES_TABLE,
}

# Used in error messages
POOL_LABELS: Dict[ProfileSource, str] = {
    ProfileSource.REGULAR: "profiles",
    ProfileSource.ANALYTICS: "analytics profiles",
}


class ProfileStoreError(Exception):
    """Base error for profile storage operations."""


class ProfileFetchError(ProfileStoreError):
    def __init__(self, pool: str, message: str):
        self.pool = pool
        self.message = message
        super().__init__(f"Error fetching {pool}: {message}")


class BookmarkError(ProfileStoreError):
    pass


class ProfileCreateError(ProfileStoreError):
    pass


def _error_message(error: Exception) -> str:
    # postgrest APIError carries the server message on .message
    return getattr(error, "message", None) or str(error)


def filter_profiles(profiles: List[CandidateRecord], query: str) -> List[CandidateRecord]:
    """Case-insensitive substring match over title, location and skills."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(profiles)
    return [
        profile for profile in profiles
        if any(needle in (value or "").lower() for value in (profile.title, profile.location, profile.skills))
    ]


class ProfileService:
    def __init__(self,
                 settings: Settings,
                 supabase_client: Optional[AsyncClient] = None,
                 client_provider: Optional[Callable[[], Awaitable[AsyncClient]]] = None):
        if supabase_client is None and client_provider is None:
            raise ValueError("ProfileService needs a Supabase client or a client provider")
        self.settings = settings
        self.supabase: Optional[AsyncClient] = supabase_client
        self._client_provider = client_provider
        self.saved_profiles_table = get_table_name(SAVED_PROFILES_TABLE, settings)

    async def _client(self) -> AsyncClient:
        # Created on first use so configuration errors surface per call
        if self.supabase is None:
            self.supabase = await self._client_provider()
        return self.supabase

    def table_for(self, source: ProfileSource) -> str:
        return get_table_name(POOL_TABLES[source], self.settings)

    async def fetch_pool(self, source: ProfileSource) -> List[CandidateRecord]:
        """Read every record of one candidate pool, newest first."""
        client = await self._client()
        table = self.table_for(source)
        try:
            response = await client.table(table) \
                .select(CANDIDATE_COLUMNS) \
                .order("created_at", desc=True) \
                .execute()
            return [CandidateRecord.model_validate(row) for row in (response.data or [])]
        except Exception as e:
            logger.error(f"Error fetching {table}: {_error_message(e)}")
            raise ProfileFetchError(POOL_LABELS[source], _error_message(e)) from e

    async def fetch_candidates(self) -> List[CandidateRecord]:
        """Merge both pools into one candidate set, regular profiles first."""
        regular = await self.fetch_pool(ProfileSource.REGULAR)
        analytics = await self.fetch_pool(ProfileSource.ANALYTICS)
        logger.info(f"Loaded {len(regular)} regular and {len(analytics)} analytics profiles")
        return regular + analytics

    async def list_bookmarks(self, user_id: str) -> List[str]:
        client = await self._client()
        try:
            response = await client.table(self.saved_profiles_table) \
                .select("profile_id") \
                .eq("user_id", user_id) \
                .execute()
        except Exception as e:
            logger.error(f"Error fetching bookmarks for user {user_id}: {_error_message(e)}")
            raise BookmarkError(f"Error fetching bookmarks: {_error_message(e)}") from e
        return [str(row["profile_id"]) for row in (response.data or []) if row.get("profile_id") is not None]

    async def add_bookmark(self, user_id: str, profile_id: str) -> None:
        client = await self._client()
        try:
            await client.table(self.saved_profiles_table) \
                .insert({"user_id": user_id, "profile_id": profile_id}) \
                .execute()
        except Exception as e:
            logger.error(f"Error adding bookmark {profile_id} for user {user_id}: {_error_message(e)}")
            raise BookmarkError(f"Error adding bookmark: {_error_message(e)}") from e

    async def remove_bookmark(self, user_id: str, profile_id: str) -> None:
        client = await self._client()
        try:
            await client.table(self.saved_profiles_table) \
                .delete() \
                .eq("user_id", user_id) \
                .eq("profile_id", profile_id) \
                .execute()
        except Exception as e:
            logger.error(f"Error removing bookmark {profile_id} for user {user_id}: {_error_message(e)}")
            raise BookmarkError(f"Error removing bookmark: {_error_message(e)}") from e

    async def create_profile(self, user_id: str, data: ProfileCreate) -> CandidateRecord:
        """Insert the user's own profile; its id is the user's id."""
        client = await self._client()
        row = {"id": user_id, **data.model_dump()}
        try:
            response = await client.table(self.table_for(ProfileSource.REGULAR)) \
                .insert(row) \
                .execute()
        except Exception as e:
            logger.error(f"Error creating profile for user {user_id}: {_error_message(e)}")
            raise ProfileCreateError(_error_message(e)) from e

        logger.info(f"Created profile for user {user_id}")
        return CandidateRecord.model_validate((response.data or [row])[0])
