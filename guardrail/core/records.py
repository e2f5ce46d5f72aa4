"""Review-tracking records: Pydantic models for field-level shape checks.

Cross-field invariants live in ``guardrail.core.validator`` and run only
after a record has passed the checks declared here.
"""

import re
from datetime import date
from typing import Annotated, Literal, Optional

from pydantic import (
    AfterValidator,
    AnyUrl,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StringConstraints,
    TypeAdapter,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from guardrail.core.sources import LiteratureSource

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_ANY_URL = TypeAdapter(AnyUrl)

DOI_PATTERN = r"^10\.\d{4,9}/[-._;()/:A-Za-z0-9]+$"


# ── Shared Field Types ───────────────────────────────────────────────


def _parse_iso_date(v: object) -> object:
    """Accept only ``YYYY-MM-DD`` strings (or dates) and narrow to ``date``."""
    if isinstance(v, date):
        return v
    if not isinstance(v, str) or not _ISO_DATE_RE.match(v):
        raise ValueError("must be an ISO date (YYYY-MM-DD)")
    try:
        return date.fromisoformat(v)
    except ValueError:
        raise ValueError(f"{v} is not a valid calendar date") from None


def _check_url(v: str) -> str:
    """Require an absolute URL of any scheme; the original text is kept."""
    try:
        _ANY_URL.validate_python(v)
    except PydanticValidationError:
        raise ValueError("must be a valid URL") from None
    return v


IsoDate = Annotated[date, BeforeValidator(_parse_iso_date)]
NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]
Url = Annotated[str, AfterValidator(_check_url)]


class RecordModel(BaseModel):
    """Base for boundary records: camelCase wire names, no silent coercion."""

    model_config = ConfigDict(
        strict=True,
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# ── Source Citation ──────────────────────────────────────────────────


class SourceCitation(RecordModel):
    """A scholarly work; needs at least one of doi, pmid or url."""

    doi: Optional[Annotated[str, StringConstraints(pattern=DOI_PATTERN)]] = None
    pmid: Optional[Annotated[str, StringConstraints(pattern=r"^\d+$")]] = None
    url: Optional[Url] = None
    open_access: bool
    license: Optional[str] = None
    title: NonEmptyStr
    journal: NonEmptyStr
    year: int = Field(ge=1900, le=2100)
    authors: list[NonEmptyStr] = Field(min_length=1)


# ── Evidence Decision Card ───────────────────────────────────────────


class EvidenceDecisionCard(RecordModel):
    """A screening decision bound to a source citation."""

    source_citation: SourceCitation
    decision: Literal["Keep", "Exclude", "Ask", "BetterOption"]
    rationale: str = Field(min_length=1, max_length=2000)
    journal_signal: int = Field(ge=0, le=3, description="Coarse journal-quality tier")
    study_type: Optional[str] = None
    outcomes: Optional[list[str]] = None
    bias_notes: Optional[str] = None
    strength_grade: Optional[str] = None
    next_action: Optional[str] = None


# ── PRISMA Record ────────────────────────────────────────────────────


class PrismaRecord(RecordModel):
    """Per-database search bookkeeping for the PRISMA flow diagram."""

    database: LiteratureSource
    query_string: NonEmptyStr
    hits: int = Field(ge=0)
    after_filters: int = Field(ge=0)
    included: int = Field(ge=0)
    excluded: int = Field(ge=0)
    excluded_reason_codes: Optional[list[str]] = None
    inclusion_reason: Optional[str] = None
    date_run: IsoDate
    notes: Optional[str] = None


# ── Search Plan ──────────────────────────────────────────────────────


class DateRange(RecordModel):
    start: IsoDate = Field(alias="from")
    end: IsoDate = Field(alias="to")


class SearchPlan(RecordModel):
    """A prospective search strategy across literature sources."""

    sources: list[LiteratureSource] = Field(min_length=1)
    queries: list[NonEmptyStr] = Field(min_length=1)
    date_range: DateRange
    inclusion_criteria: list[str]
    exclusion_criteria: list[str]


# ── Alignment Packet ─────────────────────────────────────────────────


class AlignmentPacket(RecordModel):
    """Structured summary of a literature-review scope."""

    research_question: Optional[str] = None
    mini_abstract: str = Field(min_length=1, max_length=1200)
    outline: list[str] = Field(min_length=1)
    top_anchors: list[str] = Field(min_length=1, max_length=5)
    inclusion_criteria: list[str]
    exclusion_criteria: list[str]
    oa_sources: list[LiteratureSource] = Field(min_length=1)
    search_plan_summary: str


# ── Model Routing ────────────────────────────────────────────────────


class ModelRouting(RecordModel):
    """Which model tier handled a request and whether to escalate."""

    chosen_model: Literal["general-small", "general-large", "domain-expert"]
    confidence: float = Field(ge=0.0, le=1.0)
    escalate: bool
    notes: Optional[str] = None
