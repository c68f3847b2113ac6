# FILE: lexdiff/markup.py
"""
Locating analysis excerpts in the current document.

The document is never modified: the result is a segmentation of it into
highlighted and plain spans, which can be rendered as CriticMarkup {==...==}.
"""

import re
from typing import Iterable, List, Optional

import structlog

from lexdiff.models import HighlightSpan

logger = structlog.get_logger(__name__)

DEFAULT_EXCERPT_LIMIT = 500

# Inline emphasis markers that the analysis may echo back but the match should ignore.
_EMPHASIS_MARKERS = ("**", "`", "_")


def _strip_emphasis(text: str) -> str:
    for marker in _EMPHASIS_MARKERS:
        text = text.replace(marker, "")
    return text


def _make_excerpt_regex(excerpt: str, limit: int = DEFAULT_EXCERPT_LIMIT) -> Optional[str]:
    """
    Builds a case-sensitive pattern for an excerpt.
    Literal text is escaped; each whitespace run matches any run of whitespace
    (including newlines), so re-wrapped text still matches.
    Returns None when nothing is left to match.
    """
    raw = excerpt.strip()[:limit]
    stripped = _strip_emphasis(raw)
    tokens = stripped.split()
    if not tokens:
        return None
    return r"\s+".join(re.escape(token) for token in tokens)


def apply_highlights(
    doc: str,
    excerpts: Iterable[str],
    limit: int = DEFAULT_EXCERPT_LIMIT,
) -> List[HighlightSpan]:
    """
    Segments `doc` into spans, flagging every occurrence of each excerpt.

    Args:
        doc: The current document.
        excerpts: Substrings returned by an analysis, in priority order.
        limit: Only the first `limit` characters of each excerpt are matched.

    Returns:
        Spans in document order whose texts join back to `doc` exactly.
        Excerpts only split spans that are not highlighted yet.
    """
    spans: List[HighlightSpan] = [HighlightSpan(text=doc, is_highlight=False)]

    for excerpt in excerpts:
        if not excerpt or not excerpt.strip():
            continue

        pattern = _make_excerpt_regex(excerpt, limit)
        if pattern is None:
            continue
        try:
            regex = re.compile(pattern)
        except re.error as e:
            logger.debug("Skipping excerpt with unusable pattern", error=str(e))
            continue

        next_spans: List[HighlightSpan] = []
        matched = 0
        for span in spans:
            if span.is_highlight:
                next_spans.append(span)
                continue
            pieces = _split_span(span.text, regex)
            matched += sum(1 for piece in pieces if piece.is_highlight)
            next_spans.extend(pieces)
        spans = next_spans

        if not matched:
            logger.debug(f"Excerpt not found in document: '{excerpt[:20]}...'")

    return spans


def _split_span(text: str, regex: re.Pattern) -> List[HighlightSpan]:
    pieces: List[HighlightSpan] = []
    last_idx = 0
    for match in regex.finditer(text):
        if match.start() == match.end():
            continue
        if match.start() > last_idx:
            pieces.append(HighlightSpan(text=text[last_idx : match.start()], is_highlight=False))
        pieces.append(HighlightSpan(text=match.group(0), is_highlight=True))
        last_idx = match.end()

    if last_idx < len(text) or not pieces:
        pieces.append(HighlightSpan(text=text[last_idx:], is_highlight=False))
    return pieces


def highlighted_texts(spans: Iterable[HighlightSpan]) -> List[str]:
    return [span.text for span in spans if span.is_highlight]


def render_highlight_markup(spans: Iterable[HighlightSpan]) -> str:
    """Renders spans as text with CriticMarkup highlights: {==matched==}."""
    parts = []
    for span in spans:
        if span.is_highlight:
            parts.append(f"{{=={span.text}==}}")
        else:
            parts.append(span.text)
    return "".join(parts)
