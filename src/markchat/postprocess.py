"""Light textual transforms applied to raw completion replies."""

from __future__ import annotations

import json
import re
from typing import Any

WARNING_GLYPH = "\N{POLICE CARS REVOLVING LIGHT}"
CELEBRATION_GLYPH = "\N{PARTY POPPER}"

WARNING_TERMS: tuple[str, ...] = ("error", "failed", "issue", "problem")
CELEBRATION_TERMS: tuple[str, ...] = ("success", "great", "awesome", "perfect")


def _annotation_pattern(terms: tuple[str, ...], glyph: str) -> re.Pattern[str]:
    # Skip words that already carry the glyph so repeated passes are stable.
    alternatives = "|".join(re.escape(term) for term in terms)
    return re.compile(
        rf"(?<!{re.escape(glyph)} )\b({alternatives})\b",
        re.IGNORECASE | re.ASCII,
    )


_ANNOTATIONS: tuple[tuple[re.Pattern[str], str], ...] = (
    (_annotation_pattern(WARNING_TERMS, WARNING_GLYPH), WARNING_GLYPH),
    (_annotation_pattern(CELEBRATION_TERMS, CELEBRATION_GLYPH), CELEBRATION_GLYPH),
)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant {name!r}")


def format_json_reply(raw_text: str) -> str | None:
    """Return a fenced, pretty-printed JSON block, or ``None`` if not JSON."""
    try:
        value = json.loads(raw_text, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return None
    pretty = json.dumps(value, indent=2, ensure_ascii=False)
    return f"```json\n{pretty}\n```"


def annotate(text: str) -> str:
    """Prefix warning and celebration keywords with their glyphs."""
    for pattern, glyph in _ANNOTATIONS:
        text = pattern.sub(lambda match: f"{glyph} {match.group(1)}", text)
    return text


def process(raw_text: str) -> str:
    """Turn a raw completion reply into display text.

    JSON documents are pretty-printed inside a ``json`` fence; anything else
    passes through unchanged. Keyword annotation runs on the result either
    way.
    """
    formatted = format_json_reply(raw_text)
    return annotate(formatted if formatted is not None else raw_text)
