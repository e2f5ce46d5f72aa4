"""Boundary validation for review-tracking records.

Each record kind is checked in two phases:

1. Field-level shape via the Pydantic models in ``guardrail.core.records``
   (types, lengths, patterns, ranges, enum membership). Every field error is
   collected.
2. Cross-field invariants, declared below as an ordered tuple of named
   ``Rule`` entries per model. These run only once phase 1 has passed, so a
   predicate can rely on every field being well-typed.

All violations come back as ``Violation(path, message)`` entries; nothing is
coerced or corrected.
"""

import logging
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from guardrail.core.records import (
    AlignmentPacket,
    EvidenceDecisionCard,
    ModelRouting,
    PrismaRecord,
    RecordModel,
    SearchPlan,
    SourceCitation,
)

logger = logging.getLogger(__name__)


# ── Violations ───────────────────────────────────────────────────────


class Violation(BaseModel):
    """One failed rule: a wire path ("" for the whole record) and a message."""

    path: str
    message: str
    rule: Optional[str] = None
    advisory: bool = False


class ValidationError(ValueError):
    """Raised by ``validate`` with every violation found in the record."""

    def __init__(self, kind: str, violations: list[Violation]):
        self.kind = kind
        self.violations = violations
        details = "; ".join(
            f"{v.path}: {v.message}" if v.path else v.message for v in violations
        )
        super().__init__(f"{kind} failed validation: {details}")


# ── Cross-Field Rules ────────────────────────────────────────────────


class Rule(BaseModel):
    """A named predicate over a field-valid record; True means it holds."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    message: str
    predicate: Callable[[Any], bool]
    advisory: bool = False


RULES: dict[type[RecordModel], tuple[Rule, ...]] = {
    SourceCitation: (
        Rule(
            name="has_identifier",
            path="",
            message="At least one of doi, pmid, or url is required",
            predicate=lambda c: bool(c.doi or c.pmid or c.url),
        ),
    ),
    PrismaRecord: (
        Rule(
            name="decisions_within_filtered",
            path="included",
            message="included + excluded must be <= afterFilters",
            predicate=lambda r: r.included + r.excluded <= r.after_filters,
        ),
        # Some importers report filtered counts above raw hits after merging.
        Rule(
            name="filtered_within_hits",
            path="afterFilters",
            message="afterFilters should be <= hits",
            predicate=lambda r: r.after_filters <= r.hits,
            advisory=True,
        ),
    ),
    SearchPlan: (
        Rule(
            name="unique_sources",
            path="sources",
            message="Sources must be unique.",
            predicate=lambda p: len(set(p.sources)) == len(p.sources),
        ),
        Rule(
            name="date_range_ordered",
            path="dateRange.from",
            message="dateRange.from must be <= dateRange.to",
            predicate=lambda p: p.date_range.start <= p.date_range.end,
        ),
    ),
}

RECORD_KINDS: dict[str, type[RecordModel]] = {
    cls.__name__: cls
    for cls in (
        SourceCitation,
        EvidenceDecisionCard,
        PrismaRecord,
        SearchPlan,
        AlignmentPacket,
        ModelRouting,
    )
}


def evaluate_rules(record: RecordModel, prefix: str = "") -> list[Violation]:
    """Run the cross-field rules for a field-valid record and its sub-records."""
    violations: list[Violation] = []

    for rule in RULES.get(type(record), ()):
        if not rule.predicate(record):
            violations.append(
                Violation(
                    path=_join(prefix, rule.path),
                    message=rule.message,
                    rule=rule.name,
                    advisory=rule.advisory,
                )
            )

    for name, field in type(record).model_fields.items():
        value = getattr(record, name)
        wire_name = field.alias or name
        if isinstance(value, RecordModel):
            violations.extend(evaluate_rules(value, _join(prefix, wire_name)))
        elif isinstance(value, list):
            for i, item in enumerate(value):
                if isinstance(item, RecordModel):
                    violations.extend(
                        evaluate_rules(item, f"{_join(prefix, wire_name)}[{i}]")
                    )

    return violations


# ── Public API ───────────────────────────────────────────────────────


def check(kind: str, record: Any) -> list[Violation]:
    """Return every violation in ``record``; an empty list means it is valid."""
    _, violations = _run(kind, record)
    return violations


def validate(kind: str, record: Any) -> RecordModel:
    """Return ``record`` narrowed to its typed model, or raise ValidationError."""
    parsed, violations = _run(kind, record)
    if violations:
        raise ValidationError(kind, violations)
    return parsed


def _run(kind: str, record: Any) -> tuple[Optional[RecordModel], list[Violation]]:
    try:
        model_cls = RECORD_KINDS[kind]
    except KeyError:
        raise KeyError(
            f"Unknown record kind: {kind!r} (valid: {', '.join(RECORD_KINDS)})"
        ) from None

    try:
        parsed = model_cls.model_validate(record)
    except PydanticValidationError as exc:
        violations = [_from_pydantic_error(err) for err in exc.errors()]
        logger.debug("%s: %d field-level violations", kind, len(violations))
        return None, violations

    violations = evaluate_rules(parsed)
    if violations:
        logger.debug(
            "%s: cross-field rules failed: %s",
            kind,
            ", ".join(v.rule or "?" for v in violations),
        )
    return parsed, violations


# ── Helpers ──────────────────────────────────────────────────────────


def _from_pydantic_error(err: dict) -> Violation:
    """Convert one Pydantic error dict into a Violation with a wire path."""
    path = ""
    for part in err["loc"]:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path = _join(path, str(part))

    message = err["msg"]
    if err["type"] == "value_error" and "error" in err.get("ctx", {}):
        message = str(err["ctx"]["error"])

    return Violation(path=path, message=message)


def _join(prefix: str, path: str) -> str:
    if not prefix:
        return path
    if not path:
        return prefix
    return f"{prefix}.{path}"
