from functools import lru_cache, partial
from typing import Optional
from fastapi import Depends, Request

from talent_search.config.settings import Settings, get_settings
from talent_search.config.supabase import get_supabase_client
from talent_search.services.openai_service import OpenAIService
from talent_search.services.profile_service import ProfileService
from talent_search.services.matching_service import MatchingService

# Cached settings
@lru_cache()
def get_cached_settings() -> Settings:
    return get_settings()

def get_bearer_token(request: Request) -> Optional[str]:
    authorization = request.headers.get("Authorization") or ""
    if authorization.startswith("Bearer "):
        return authorization.split("Bearer ", 1)[1].strip() or None
    return None

# Provider for OpenAI Service
def get_openai_service(settings: Settings = Depends(get_cached_settings)) -> OpenAIService:
    return OpenAIService(settings=settings)

# Provider for Profile Service; the Supabase client is created on first use
def get_profile_service(
    request: Request,
    settings: Settings = Depends(get_cached_settings)
) -> ProfileService:
    return ProfileService(
        settings=settings,
        client_provider=partial(get_supabase_client, settings, get_bearer_token(request))
    )

# Provider for Matching Service
def get_matching_service(
    profile_service: ProfileService = Depends(get_profile_service),
    openai_service: OpenAIService = Depends(get_openai_service)
) -> MatchingService:
    return MatchingService(
        profile_service=profile_service,
        openai_service=openai_service
    )

__all__ = [
    'get_cached_settings',
    'get_bearer_token',
    'get_openai_service',
    'get_profile_service',
    'get_matching_service'
]
