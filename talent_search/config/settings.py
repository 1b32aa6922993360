from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from functools import lru_cache
from pydantic import Field

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore'
    )

    # Environment
    environment: str = Field(default="development")
    log_level: str = "INFO"

    # OpenAI
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    openai_temperature: float = 0.2
    openai_timeout_seconds: float = 60.0

    # Supabase
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    supabase_service_role_key: Optional[str] = None
    supabase_anon_key: Optional[str] = None

    # Tables carry a _dev/_prod suffix only when this is enabled
    use_environment_table_suffix: bool = False

    # Edge functions base URL used by the client adapter
    functions_url: Optional[str] = None

    @property
    def resolved_functions_url(self) -> Optional[str]:
        """Base URL for deployed functions, derived from the Supabase URL when unset."""
        if self.functions_url:
            return self.functions_url.rstrip("/")
        if self.supabase_url:
            return f"{self.supabase_url.rstrip('/')}/functions/v1"
        return None

@lru_cache()
def get_settings() -> Settings:
    return Settings()
