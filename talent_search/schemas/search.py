from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict, Any

from .profile import CandidateRecord

RESULT_FIELDS = set(CandidateRecord.model_fields)


class AISearchRequest(BaseModel):
    query: Optional[str] = Field(None, description="Natural-language search query")


class AISearchResponse(BaseModel):
    """Payload returned by the ai-search function.

    Errors are reported in-band through ``error`` and the accompanying flags;
    serialization drops unset fields so each outcome keeps its own shape.
    """
    model_config = ConfigDict(populate_by_name=True)

    profiles: Optional[List[CandidateRecord]] = None
    raw_ai_response: Optional[str] = Field(None, alias="rawAiResponse")
    error: Optional[str] = None
    quota_exceeded: Optional[bool] = Field(None, alias="quotaExceeded")
    timed_out: Optional[bool] = Field(None, alias="timedOut")
    openai_error: Optional[str] = Field(None, alias="openAIError")
    raw_response: Optional[str] = Field(None, alias="rawResponse")

    def to_payload(self) -> Dict[str, Any]:
        payload = self.model_dump(by_alias=True, exclude_none=True, exclude={"profiles"})
        if self.profiles is not None:
            # Declared record fields only, nulls kept; stored extras such as created_at stay out
            payload["profiles"] = [profile.model_dump(include=RESULT_FIELDS) for profile in self.profiles]
        return payload
