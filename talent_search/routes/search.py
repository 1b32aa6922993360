import json
import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from talent_search.config.constants import AI_SEARCH_FUNCTION, CORS_HEADERS
from talent_search.dependencies import get_matching_service
from talent_search.schemas.search import AISearchResponse
from talent_search.services.matching_service import MatchingService

logger = logging.getLogger(__name__)
router = APIRouter()


def _respond(result: AISearchResponse) -> JSONResponse:
    # In-band errors: the status is always 200
    return JSONResponse(content=result.to_payload(), status_code=200, headers=CORS_HEADERS)


@router.post(f"/functions/v1/{AI_SEARCH_FUNCTION}", tags=["Search"])
async def ai_search(
    request: Request,
    matching_service: MatchingService = Depends(get_matching_service)
):
    """
    Natural-language profile search.

    Pre-flight OPTIONS requests are answered by the CORS middleware in main.
    """
    try:
        raw_body = await request.body()
        try:
            body = json.loads(raw_body) if raw_body.strip() else None
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Invalid AI search request body: {e}")
            return _respond(AISearchResponse(error=f"Invalid request body: {e}"))

        query = body.get("query") if isinstance(body, dict) else None
        return _respond(await matching_service.search(query))

    except Exception as e:
        logger.exception(f"Error in AI search function: {str(e)}")
        return _respond(AISearchResponse(error=str(e) or "Unknown error occurred"))
