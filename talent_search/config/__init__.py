from .settings import get_settings
from .logging import setup_logging
from .supabase import get_supabase_client, MissingCredentialsError

__all__ = [
    'get_settings',
    'setup_logging',
    'get_supabase_client',
    'MissingCredentialsError'
]
