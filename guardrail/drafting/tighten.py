"""Prose tightening that keeps citation markers verbatim.

Markers are protected before any rewrite and restored afterwards. The smart
rewrite is best-effort: any provider failure, or a response that loses or
invents placeholders, falls back to the deterministic heuristic. Tightening
never blocks saving a draft, so ``tighten_text`` never raises.
"""

import logging
import re

from guardrail.core.config import GuardrailConfig, load_config
from guardrail.drafting.markers import ProtectedText, protect, restore
from guardrail.drafting.rewriter import OllamaRewriter, RewriteProvider

logger = logging.getLogger(__name__)

# Applied in order; each pattern matches a whole phrase, any case.
WORDY_PHRASES: tuple[tuple[re.Pattern, str], ...] = (
    (re.compile(r"\b(in order to)\b", re.IGNORECASE), "to"),
    (re.compile(r"\b(due to the fact that)\b", re.IGNORECASE), "because"),
    (re.compile(r"\b(at this point in time)\b", re.IGNORECASE), "now"),
)

_MULTI_WS_RE = re.compile(r"\s{2,}")


def heuristic_tighten(text: str) -> str:
    """Deterministic phrase simplification and whitespace collapse."""
    for pattern, replacement in WORDY_PHRASES:
        text = pattern.sub(replacement, text)
    return _MULTI_WS_RE.sub(" ", text).strip()


async def tighten_text(
    text: str,
    use_smart_rewrite: bool = False,
    provider: RewriteProvider | None = None,
    config: GuardrailConfig | None = None,
) -> str:
    """Tighten ``text``; every ``[SUPPORT:<id>]`` marker survives unchanged.

    With ``use_smart_rewrite`` the provider (or the configured Ollama
    default) is awaited once. Without it no provider is built or called.
    """
    protected = protect(text)

    if use_smart_rewrite:
        out = await _smart_rewrite(protected, provider, config)
    else:
        out = heuristic_tighten(protected.text)

    return restore(out, protected.markers)


async def _smart_rewrite(
    protected: ProtectedText,
    provider: RewriteProvider | None,
    config: GuardrailConfig | None,
) -> str:
    owned: OllamaRewriter | None = None
    try:
        if provider is None:
            provider = owned = _default_provider(config)
        if provider is None:
            logger.info("Smart rewrite disabled — using heuristic tightening")
            return heuristic_tighten(protected.text)

        result = await provider.rewrite(protected.text)
    except Exception as exc:
        logger.warning("Smart rewrite failed (%s) — using heuristic tightening", exc)
        return heuristic_tighten(protected.text)
    finally:
        if owned is not None:
            await _close(owned)

    if not isinstance(result, str) or not result.strip():
        logger.warning("Smart rewrite returned no text — using heuristic tightening")
        return heuristic_tighten(protected.text)

    if not protected.placeholders_intact(result):
        logger.warning(
            "Smart rewrite dropped or altered citation placeholders "
            "(%d expected) — using heuristic tightening",
            len(protected.markers),
        )
        return heuristic_tighten(protected.text)

    return result.strip()


def _default_provider(config: GuardrailConfig | None) -> OllamaRewriter | None:
    """Build the configured provider, or None if smart rewrite is switched off."""
    settings = (config or load_config()).rewrite
    if not settings.enabled:
        return None
    return OllamaRewriter.from_settings(settings)


async def _close(provider: OllamaRewriter) -> None:
    """Release a provider built here; closing errors are logged, not raised."""
    try:
        await provider.aclose()
    except Exception as exc:
        logger.warning("Closing rewrite provider failed: %s", exc)
