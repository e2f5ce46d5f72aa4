#!/usr/bin/env python3
"""Drafting assistance CLI: validate records, rank supports, tighten prose."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

import yaml

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from guardrail.core.config import load_config
from guardrail.core.validator import RECORD_KINDS, check
from guardrail.drafting.scorer import score_supports
from guardrail.drafting.tighten import tighten_text

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("draft_assist")


# ── Commands ─────────────────────────────────────────────────────────


def cmd_validate(args: argparse.Namespace) -> int:
    record = _load_document(args.file)
    violations = check(args.kind, record)

    if not violations:
        logger.info("%s: valid", args.kind)
        return 0

    blocking = 0
    for v in violations:
        where = v.path or "<record>"
        if v.advisory and args.warn_advisory:
            logger.warning("%s: %s (advisory)", where, v.message)
        else:
            logger.error("%s: %s", where, v.message)
            blocking += 1

    logger.info(
        "%s: %d violations (%d blocking)", args.kind, len(violations), blocking
    )
    return 1 if blocking else 0


def cmd_score(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    doc = _load_document(args.file) or {}

    suggestions = score_supports(
        doc.get("paragraph", ""),
        doc.get("candidates"),
        max_suggestions=config.scoring.max_suggestions,
        noise_threshold=config.scoring.noise_threshold,
    )
    print(json.dumps([s.model_dump(by_alias=True) for s in suggestions], indent=2))
    logger.info("%d suggestions", len(suggestions))
    return 0


def cmd_tighten(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    if args.file == "-":
        text = sys.stdin.read()
    else:
        text = Path(args.file).read_text()

    out = asyncio.run(tighten_text(text, use_smart_rewrite=args.smart, config=config))
    print(out)
    logger.info("Tightened %d → %d chars", len(text), len(out))
    return 0


# ── Helpers ──────────────────────────────────────────────────────────


def _load_document(path: str):
    """Read a YAML or JSON document (JSON is valid YAML)."""
    with open(path) as f:
        return yaml.safe_load(f)


# ── CLI ──────────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Evidence guardrail and drafting assistance")
    parser.add_argument("--config", default=None, help="Path to guardrail settings YAML")
    sub = parser.add_subparsers(dest="command", required=True)

    p_validate = sub.add_parser("validate", help="Validate a review-tracking record")
    p_validate.add_argument("kind", choices=sorted(RECORD_KINDS), help="Record kind")
    p_validate.add_argument("file", help="YAML or JSON record file")
    p_validate.add_argument(
        "--warn-advisory",
        action="store_true",
        help="Report advisory violations as warnings instead of failing",
    )
    p_validate.set_defaults(func=cmd_validate)

    p_score = sub.add_parser("score", help="Rank supporting quotes for a paragraph")
    p_score.add_argument("file", help="YAML with 'paragraph' and 'candidates'")
    p_score.set_defaults(func=cmd_score)

    p_tighten = sub.add_parser("tighten", help="Tighten prose, keeping citation markers")
    p_tighten.add_argument("file", help="Text file, or - for stdin")
    p_tighten.add_argument(
        "--smart", action="store_true", help="Try the Ollama rewrite before the heuristic"
    )
    p_tighten.set_defaults(func=cmd_tighten)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
