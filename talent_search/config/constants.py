"""
Configuration constants for the application.
"""
from typing import Final, Dict, Tuple

# Tables
PROFILES_TABLE: Final[str] = "profiles"
ANALYTICS_PROFILES_TABLE: Final[str] = "analytics_profiles"
SAVED_PROFILES_TABLE: Final[str] = "saved_profiles"

# Columns read for matching (a subset of the stored profile row)
CANDIDATE_COLUMNS: Final[str] = "id, title, location, skills, about, experience, education, created_at"

# Rendered in the model context in place of a missing field
MISSING_FIELD_PLACEHOLDER: Final[str] = "N/A"

# Substrings of an OpenAI error message that indicate usage limits
QUOTA_ERROR_MARKERS: Final[Tuple[str, ...]] = ("429", "quota", "rate limit")

# Function responses
CORS_HEADERS: Final[Dict[str, str]] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}
AI_SEARCH_FUNCTION: Final[str] = "ai-search"

# Realtime
REALTIME_SUBSCRIBE_ATTEMPTS: Final[int] = 3  # Channel subscribe attempts before giving up
