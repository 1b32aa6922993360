from typing import Any, Dict, Optional, Union
import logging

from pydantic import ValidationError

from talent_search.config.supabase import MissingCredentialsError
from talent_search.client.notifications import NotificationCenter
from talent_search.client.session import SessionProvider
from talent_search.schemas.profile import CandidateRecord, ProfileCreate
from talent_search.services.profile_service import ProfileService, ProfileStoreError

logger = logging.getLogger(__name__)

CREATE_FAILED_TITLE = "Profile creation failed"
CREATE_FAILED_MESSAGE = "There was a problem creating your profile."


class ProfileCreator:
    """Submits the signed-in user's profile form."""

    def __init__(self,
                 profile_service: ProfileService,
                 session: SessionProvider,
                 notifier: Optional[NotificationCenter] = None):
        self.profile_service = profile_service
        self.session = session
        self.notifier = notifier or NotificationCenter()
        self.is_submitting = False

    async def submit(self, data: Union[ProfileCreate, Dict[str, Any]]) -> Optional[CandidateRecord]:
        user_id = self.session.get_current_user()
        if not user_id:
            self.notifier.error("Authentication required", "Please sign in to create a profile")
            return None

        if not isinstance(data, ProfileCreate):
            try:
                data = ProfileCreate.model_validate(data)
            except ValidationError as e:
                logger.warning(f"Rejected profile form: {e}")
                self.notifier.error(CREATE_FAILED_TITLE, e.errors()[0]["msg"])
                return None

        self.is_submitting = True
        try:
            profile = await self.profile_service.create_profile(user_id, data)
        except (ProfileStoreError, MissingCredentialsError) as e:
            self.notifier.error(CREATE_FAILED_TITLE, str(e) or CREATE_FAILED_MESSAGE)
            return None
        finally:
            self.is_submitting = False

        self.notifier.notify("Profile created!", "Your talent profile has been created successfully.")
        return profile
