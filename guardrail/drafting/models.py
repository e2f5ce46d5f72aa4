"""Shared data models for drafting assistance."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SupportCandidate(BaseModel):
    """A captured supporting quote that a draft paragraph may cite."""

    id: str
    quote: str


class CitationSuggestion(BaseModel):
    """A ranked quote suggestion for one paragraph; built fresh per call."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    support_id: str = Field(description="Id of the SupportCandidate; not owned")
    quote: str = Field(max_length=240)
    relevance: float = Field(ge=0.0, le=1.0)
    reason: Optional[str] = None
