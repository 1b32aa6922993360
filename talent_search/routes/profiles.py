import logging
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from talent_search.config.supabase import MissingCredentialsError
from talent_search.dependencies import get_profile_service
from talent_search.schemas.profile import ProfileSource
from talent_search.services.profile_service import ProfileService, ProfileStoreError, filter_profiles

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/profiles", tags=["Profiles"])
async def list_profiles(
    q: Optional[str] = Query(None, description="Substring filter over title, location and skills"),
    profile_service: ProfileService = Depends(get_profile_service)
) -> List[Dict[str, Any]]:
    """List profiles from both pools, tagged with their source."""
    try:
        regular = await profile_service.fetch_pool(ProfileSource.REGULAR)
        analytics = await profile_service.fetch_pool(ProfileSource.ANALYTICS)
    except (MissingCredentialsError, ProfileStoreError) as e:
        logger.error(f"Error listing profiles: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error listing profiles: {str(e)}")

    return [
        {**profile.model_dump(), "source": source.value}
        for source, pool in ((ProfileSource.REGULAR, regular), (ProfileSource.ANALYTICS, analytics))
        for profile in filter_profiles(pool, q or "")
    ]
