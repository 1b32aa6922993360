"""
Natural-language matching of talent profiles.

The whole candidate set is rendered into a single prompt and the model is asked
which profile IDs match the query. Cost and latency grow linearly with the
number of profiles, and the corpus must fit in the model's context window;
larger corpora would need chunking or pre-filtering before this step.
"""
from typing import Any, List, Optional, Sequence
import json
import logging

import openai

from talent_search.config.constants import MISSING_FIELD_PLACEHOLDER, QUOTA_ERROR_MARKERS
from talent_search.config.supabase import MissingCredentialsError
from talent_search.schemas.profile import CandidateRecord
from talent_search.schemas.search import AISearchResponse
from talent_search.services.openai_service import OpenAIService
from talent_search.services.profile_service import ProfileService, ProfileStoreError

logger = logging.getLogger(__name__)

QUERY_REQUIRED_ERROR = "Search query is required"
OPENAI_KEY_MISSING_ERROR = "OpenAI API key is missing"
INVALID_FORMAT_ERROR = "Invalid response format from AI"
QUOTA_EXCEEDED_ERROR = "OpenAI API quota exceeded. Please try again later or contact support."
TIMEOUT_ERROR = "OpenAI API request timed out. Please try again later."

# Stands in for an empty completion
EMPTY_AI_RESPONSE = '{"profileIds": []}'

SYSTEM_PROMPT = """You are a talent search assistant. Given a user's search query and a database of talent profiles,
identify which profiles best match the search criteria. Consider all aspects of the profile including skills, experience,
education, location, and job title.
Respond ONLY with a JSON object of the form {"profileIds": ["profile-id-1", "profile-id-2"]} containing the IDs of the
matching profiles, with no explanations. If no profile matches, respond with {"profileIds": []}."""


class AIResponseFormatError(ValueError):
    """The model replied with valid JSON that lacks a profileIds array."""


def _field(value: Optional[str]) -> str:
    return value if value else MISSING_FIELD_PLACEHOLDER


def format_profile(profile: CandidateRecord, position: int) -> str:
    """Render one profile as the fixed-format block the model sees."""
    return (
        f"Profile {position}:\n"
        f"ID: {profile.id}\n"
        f"Title: {_field(profile.title)}\n"
        f"Location: {_field(profile.location)}\n"
        f"Skills: {_field(profile.skills)}\n"
        f"About: {_field(profile.about)}\n"
        f"Experience: {_field(profile.experience)}\n"
        f"Education: {_field(profile.education)}\n"
    )


def build_profiles_context(profiles: Sequence[CandidateRecord]) -> str:
    return "\n\n".join(format_profile(profile, index + 1) for index, profile in enumerate(profiles))


def build_user_prompt(query: str, profiles_context: str) -> str:
    return (
        f'Search Query: "{query}"\n\n'
        f"Available Profiles:\n{profiles_context}\n\n"
        'Return the IDs of matching profiles as a JSON object of the form {"profileIds": [...]}:'
    )


def parse_profile_ids(raw_response: str) -> List[str]:
    """
    Extract the matching IDs from the model reply.

    Raises json.JSONDecodeError when the reply is not JSON and
    AIResponseFormatError when it has no ``profileIds`` array.
    """
    parsed = json.loads(raw_response)
    if not isinstance(parsed, dict) or not isinstance(parsed.get("profileIds"), list):
        raise AIResponseFormatError(INVALID_FORMAT_ERROR)

    ids = []
    for value in parsed["profileIds"]:
        # Numeric ids are accepted in their string form
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            continue
        ids.append(str(value))
    return ids


def select_matches(candidates: Sequence[CandidateRecord], profile_ids: Sequence[str]) -> List[CandidateRecord]:
    """Keep candidates named by the model, in candidate-set order. Unknown ids are dropped."""
    wanted = set(profile_ids)
    return [candidate for candidate in candidates if candidate.id in wanted]


def is_quota_error(error: Exception) -> bool:
    if isinstance(error, openai.RateLimitError):
        return True
    message = str(error).lower()
    return any(marker in message for marker in QUOTA_ERROR_MARKERS)


def is_timeout_error(error: Exception) -> bool:
    return isinstance(error, openai.APITimeoutError)


def model_error_response(error: Exception) -> AISearchResponse:
    """Classify a failed completion call into an in-band error payload."""
    message = str(error)
    if is_quota_error(error):
        logger.warning(f"OpenAI quota or rate limit hit: {message}")
        return AISearchResponse(error=QUOTA_EXCEEDED_ERROR, quota_exceeded=True, openai_error=message)
    if is_timeout_error(error):
        logger.warning(f"OpenAI request timed out: {message}")
        return AISearchResponse(error=TIMEOUT_ERROR, timed_out=True, openai_error=message)
    logger.error(f"OpenAI API error: {message}")
    return AISearchResponse(error=f"OpenAI API error: {message}", openai_error=message)


class MatchingService:
    def __init__(self, profile_service: ProfileService, openai_service: OpenAIService):
        self.profile_service = profile_service
        self.openai_service = openai_service

    async def search(self, query: Any) -> AISearchResponse:
        """Return the profiles the query is about. Every failure is reported in-band."""
        query = query.strip() if isinstance(query, str) else ""
        if not query:
            return AISearchResponse(error=QUERY_REQUIRED_ERROR)

        logger.info(f"Processing search query: {query}")

        try:
            candidates = await self.profile_service.fetch_candidates()
        except MissingCredentialsError as e:
            logger.error("Missing Supabase credentials")
            return AISearchResponse(error=str(e))
        except ProfileStoreError as e:
            return AISearchResponse(error=str(e))

        # No completion call for an empty corpus
        if not candidates:
            return AISearchResponse(profiles=[])

        if not self.openai_service.is_configured():
            logger.error(OPENAI_KEY_MISSING_ERROR)
            return AISearchResponse(error=OPENAI_KEY_MISSING_ERROR)

        user_prompt = build_user_prompt(query, build_profiles_context(candidates))

        try:
            raw_response = await self.openai_service.complete_json(SYSTEM_PROMPT, user_prompt)
        except Exception as e:
            return model_error_response(e)

        raw_response = raw_response or EMPTY_AI_RESPONSE

        try:
            profile_ids = parse_profile_ids(raw_response)
        except AIResponseFormatError:
            logger.error(f"Invalid response format from OpenAI: {raw_response}")
            return AISearchResponse(error=INVALID_FORMAT_ERROR, profiles=[], raw_ai_response=raw_response)
        except json.JSONDecodeError as e:
            logger.error(f"Error parsing OpenAI response: {e}. Response: {raw_response}")
            return AISearchResponse(error=f"Error parsing OpenAI response: {e}", raw_response=raw_response)

        logger.info(f"Matched profile IDs: {profile_ids}")
        matches = select_matches(candidates, profile_ids)
        return AISearchResponse(profiles=matches, raw_ai_response=raw_response)
