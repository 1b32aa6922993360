from typing import List, Optional
import logging

from pydantic import ValidationError

from talent_search.config.supabase import MissingCredentialsError
from talent_search.client.notifications import NotificationCenter
from talent_search.client.session import SessionProvider
from talent_search.schemas.profile import CandidateRecord, ProfileSource
from talent_search.services.profile_service import ProfileService, ProfileStoreError, filter_profiles
from talent_search.services.realtime_service import (
    ProfileChangeEvent,
    ProfileChangeKind,
    ProfileChangeStream,
    RealtimeService,
)

logger = logging.getLogger(__name__)


def _tagged(record: dict, source: ProfileSource) -> CandidateRecord:
    return CandidateRecord.model_validate({**record, "source": source.value})


class ProfileDirectory:
    """Browsable list of profiles with bookmarks, kept in sync with the live pool."""

    def __init__(self,
                 profile_service: ProfileService,
                 session: SessionProvider,
                 notifier: Optional[NotificationCenter] = None):
        self.profile_service = profile_service
        self.session = session
        self.notifier = notifier or NotificationCenter()

        self.profiles: List[CandidateRecord] = []
        self.bookmarked: List[str] = []
        self.search_query = ""
        self.is_loading = False

    @property
    def filtered_profiles(self) -> List[CandidateRecord]:
        return filter_profiles(self.profiles, self.search_query)

    def is_bookmarked(self, profile_id: str) -> bool:
        return profile_id in self.bookmarked

    async def load(self) -> None:
        self.is_loading = True
        try:
            user_id = self.session.get_current_user()
            if user_id:
                self.bookmarked = await self.profile_service.list_bookmarks(user_id)

            regular = await self.profile_service.fetch_pool(ProfileSource.REGULAR)
            analytics = await self.profile_service.fetch_pool(ProfileSource.ANALYTICS)
            self.profiles = (
                [_tagged(p.model_dump(), ProfileSource.REGULAR) for p in regular]
                + [_tagged(p.model_dump(), ProfileSource.ANALYTICS) for p in analytics]
            )
        except (ProfileStoreError, MissingCredentialsError) as e:
            logger.error(f"Error fetching profiles: {e}")
            self.notifier.error("Error", "Failed to load profiles. Please try again later.")
        finally:
            self.is_loading = False

    async def toggle_bookmark(self, profile_id: str) -> None:
        user_id = self.session.get_current_user()
        if not user_id:
            self.notifier.notify("Authentication required", "Please sign in to bookmark profiles")
            return

        try:
            if profile_id in self.bookmarked:
                await self.profile_service.remove_bookmark(user_id, profile_id)
                self.bookmarked = [pid for pid in self.bookmarked if pid != profile_id]
            else:
                await self.profile_service.add_bookmark(user_id, profile_id)
                self.bookmarked = self.bookmarked + [profile_id]
        except ProfileStoreError as e:
            logger.error(f"Error toggling bookmark: {e}")
            self.notifier.error("Error", "Failed to update bookmark. Please try again later.")

    def apply_change(self, event: ProfileChangeEvent) -> None:
        """Apply one realtime change from the analytics pool to the list."""
        record_id = event.record.get("id")
        if record_id is None:
            logger.warning(f"Ignoring realtime {event.kind.value} without an id")
            return
        record_id = str(record_id)

        if event.kind == ProfileChangeKind.DELETE:
            self.profiles = [p for p in self.profiles if p.id != record_id]
            return

        try:
            record = _tagged(event.record, ProfileSource.ANALYTICS)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed realtime record {record_id}: {e}")
            return

        if event.kind == ProfileChangeKind.INSERT:
            self.profiles = self.profiles + [record]
            self.notifier.notify("New profile added", "A new talent profile has just been added.")
        else:
            self.profiles = [record if p.id == record_id else p for p in self.profiles]

    async def watch(self, realtime: RealtimeService) -> ProfileChangeStream:
        return await realtime.subscribe(self.profile_service.table_for(ProfileSource.ANALYTICS))

    async def follow(self, stream: ProfileChangeStream) -> None:
        """Apply events until the stream is closed."""
        async for event in stream:
            self.apply_change(event)
