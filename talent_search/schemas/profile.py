from pydantic import AnyUrl, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator
from typing import Optional
from enum import Enum

_url_adapter = TypeAdapter(AnyUrl)


class ProfileSource(str, Enum):
    REGULAR = 'regular'
    ANALYTICS = 'analytics'


class CandidateRecord(BaseModel):
    """A talent profile as read for browsing and matching.

    Extra stored columns (``created_at``, ``source``...) are kept as-is.
    """
    model_config = ConfigDict(extra='allow')

    id: str = Field(..., description="Unique profile identifier")
    title: Optional[str] = Field(None, description="Job title or headline")
    location: Optional[str] = Field(None, description="Free-text location")
    skills: Optional[str] = Field(None, description="Comma-separated skills")
    about: Optional[str] = None
    experience: Optional[str] = None
    education: Optional[str] = None

    @field_validator('id', mode='before')
    @classmethod
    def coerce_id(cls, v):
        if v is None:
            raise ValueError("Profile id is required")
        return str(v)


class ProfileCreate(BaseModel):
    """Fields a signed-in user submits to create their own profile."""
    title: str = Field(..., min_length=2, description="Professional title")
    location: str = Field(..., min_length=2)
    about: str = Field(..., min_length=20, description="Short professional summary")
    skills: str = Field(..., min_length=2, description="Comma-separated skills")
    experience: Optional[str] = ""
    education: Optional[str] = ""
    portfolio: Optional[str] = ""
    github: Optional[str] = ""
    linkedin: Optional[str] = ""

    @field_validator('portfolio', 'github', 'linkedin')
    @classmethod
    def validate_link(cls, v):
        # Blank means "not provided"; anything else must parse as a URL
        if not v:
            return v
        try:
            _url_adapter.validate_python(v)
        except ValidationError:
            raise ValueError("Please enter a valid URL")
        return v
