from typing import Any, Dict, List, Optional
import logging

import httpx
from pydantic import ValidationError

from talent_search.config.constants import AI_SEARCH_FUNCTION
from talent_search.client.notifications import NotificationCenter
from talent_search.schemas.profile import CandidateRecord
from talent_search.schemas.search import AISearchRequest

logger = logging.getLogger(__name__)

SEARCH_ERROR_TITLE = "Search Error"
GENERIC_SEARCH_ERROR = "Failed to perform AI search. Please try again later."
QUOTA_SEARCH_ERROR = ("The AI matching service has reached its usage quota or rate limit. "
                      "Please try again in a few minutes.")
TIMEOUT_SEARCH_ERROR = "The AI matching service took too long to respond. Please try again."
NO_RESULTS_TITLE = "No Results"
NO_RESULTS_MESSAGE = "No profiles match your search criteria."


class SearchTransportError(Exception):
    """The search function could not be reached or did not return a JSON object."""


def coerce_profiles(value: Any) -> List[CandidateRecord]:
    """Turn the ``profiles`` field into records; anything that is not a list becomes []."""
    if not isinstance(value, list):
        return []
    profiles = []
    for item in value:
        if not isinstance(item, dict):
            continue
        try:
            profiles.append(CandidateRecord.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Dropping malformed profile in search response: {e}")
    return profiles


class AISearchClient:
    """
    Calls the ai-search function and keeps the result state a UI renders.

    Each search is numbered; a response that arrives after a newer search was
    issued is discarded, so the latest search always owns the state.
    """

    def __init__(self,
                 functions_url: str,
                 api_key: Optional[str] = None,
                 notifier: Optional[NotificationCenter] = None,
                 http_client: Optional[httpx.AsyncClient] = None,
                 timeout: float = 90.0):
        self.endpoint = f"{functions_url.rstrip('/')}/{AI_SEARCH_FUNCTION}"
        self.api_key = api_key
        self.notifier = notifier or NotificationCenter()
        self.client = http_client or httpx.AsyncClient(timeout=timeout)

        self.results: List[CandidateRecord] = []
        self.is_searching = False
        self.has_searched = False
        self._sequence = 0

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def _invoke(self, query: str) -> Dict[str, Any]:
        try:
            response = await self.client.post(
                self.endpoint,
                json=AISearchRequest(query=query).model_dump(),
                headers=self._headers()
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise SearchTransportError(str(e)) from e

        if not isinstance(data, dict):
            raise SearchTransportError(f"Unexpected response body: {data!r}")
        return data

    async def search(self, query: str) -> None:
        if not query or not query.strip():
            # Also invalidates any search still in flight
            self._sequence += 1
            self.results = []
            self.is_searching = False
            return

        self._sequence += 1
        sequence = self._sequence
        self.is_searching = True
        self.has_searched = True

        try:
            data = await self._invoke(query)
            if sequence != self._sequence:
                logger.info(f"Discarding stale AI search response for: {query}")
                return
            self._apply_response(data)
        except Exception as e:
            if sequence != self._sequence:
                return
            logger.error(f"Error invoking AI search function: {e}", exc_info=not isinstance(e, SearchTransportError))
            self.notifier.error(SEARCH_ERROR_TITLE, GENERIC_SEARCH_ERROR)
            self.results = []
        finally:
            if sequence == self._sequence:
                self.is_searching = False

    def _apply_response(self, data: Dict[str, Any]) -> None:
        if data.get("error"):
            logger.error(f"Error from AI search function: {data['error']}")
            if data.get("quotaExceeded") is True:
                description = QUOTA_SEARCH_ERROR
            elif data.get("timedOut") is True:
                description = TIMEOUT_SEARCH_ERROR
            else:
                description = GENERIC_SEARCH_ERROR
            self.notifier.error(SEARCH_ERROR_TITLE, description)
            self.results = []
            return

        self.results = coerce_profiles(data.get("profiles"))
        logger.info(f"AI search returned {len(self.results)} profiles")
        if not self.results:
            self.notifier.notify(NO_RESULTS_TITLE, NO_RESULTS_MESSAGE)

    async def aclose(self) -> None:
        await self.client.aclose()
