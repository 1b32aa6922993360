from typing import Optional
from supabase import AsyncClient, acreate_client
from .settings import Settings, get_settings


class MissingCredentialsError(ValueError):
    """Raised when no Supabase URL or key is available."""

    def __init__(self, message: str = "Missing Supabase credentials"):
        super().__init__(message)


def resolve_supabase_key(settings: Settings, access_token: Optional[str] = None) -> Optional[str]:
    """Pick the key used to talk to Supabase.

    Prioritizes the service role key, then the configured (anon) key, then the
    caller's own bearer token.
    """
    return (
        settings.supabase_service_role_key
        or settings.supabase_key
        or settings.supabase_anon_key
        or access_token
    )


async def get_supabase_client(settings: Optional[Settings] = None,
                              access_token: Optional[str] = None) -> AsyncClient:
    """Get a configured async Supabase client instance."""
    settings = settings or get_settings()
    api_key = resolve_supabase_key(settings, access_token)

    if not settings.supabase_url or not api_key:
        raise MissingCredentialsError()

    return await acreate_client(settings.supabase_url, api_key)
