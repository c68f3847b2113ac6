"""
Conversion between the Markdown document and its rendered HTML form.

The round trip is lossy: `to_markup(to_rendered(x))` may differ from `x` in
whitespace, list markers and heading spacing. Callers keep the authoritative
Markdown (the baseline) instead of relying on the round trip.
"""

import html
import re

import markdown
import structlog
from lxml import etree
from lxml import html as lxml_html
from markdownify import markdownify

logger = structlog.get_logger(__name__)

MARKDOWN_EXTENSIONS = ["tables", "sane_lists"]

# Elements dropped together with their content before converting back to Markdown.
_UNSAFE_TAGS = ("script", "style", "iframe", "object", "embed")


def to_rendered(doc: str) -> str:
    """
    Renders Markdown to an HTML fragment.
    Never raises: malformed input falls back to an escaped paragraph.
    """
    if not doc:
        return ""
    try:
        return markdown.markdown(doc, extensions=MARKDOWN_EXTENSIONS)
    except Exception as e:
        logger.warning(f"Markdown rendering failed, using escaped fallback: {e}")
        return f"<p>{html.escape(doc)}</p>"


def to_markup(fragment: str) -> str:
    """
    Converts an HTML fragment back to Markdown.
    Redline markup is resolved first: insertions are kept as plain content,
    deletions disappear entirely.
    """
    if not fragment:
        return ""
    clean = _clean_fragment(fragment, drop_unsafe=True)
    try:
        result = markdownify(clean, heading_style="ATX", bullets="-")
    except Exception as e:
        logger.warning(f"HTML to Markdown conversion failed: {e}")
        return clean.strip()
    return _squash_blank_lines(result).strip()


def strip_redline(fragment: str) -> str:
    """Unwraps <ins> elements and removes <del> elements with their content."""
    if not fragment:
        return ""
    return _clean_fragment(fragment, drop_unsafe=False)


def _clean_fragment(fragment: str, drop_unsafe: bool) -> str:
    if not fragment.strip():
        return ""
    try:
        root = lxml_html.fragment_fromstring(fragment, create_parent="div")
    except (etree.ParserError, ValueError) as e:
        logger.warning(f"Could not parse HTML fragment: {e}")
        return fragment

    doomed = ["del"]
    if drop_unsafe:
        doomed.extend(_UNSAFE_TAGS)
    for tag in doomed:
        for el in list(root.iter(tag)):
            el.drop_tree()
    for el in list(root.iter("ins")):
        el.drop_tag()

    return _serialize_children(root)


def _serialize_children(root) -> str:
    parts = [html.escape(root.text, quote=False) if root.text else ""]
    for child in root:
        parts.append(etree.tostring(child, encoding="unicode", method="html"))
    return "".join(parts)


def _squash_blank_lines(text: str) -> str:
    return re.sub(r"\n{3,}", "\n\n", text)


def normalize_markup(doc: str) -> str:
    """
    Canonicalizes imported Markdown: line endings, trailing whitespace,
    bullet and ordered-list markers, and heading spacing.
    """
    if not doc:
        return ""
    s = doc.replace("\r\n", "\n")
    s = re.sub(r"[\t ]+$", "", s, flags=re.M)
    s = re.sub(r"\n{3,}", "\n\n", s)
    s = re.sub(r"^[ \t]*[•·][ \t]+", "- ", s, flags=re.M)
    s = re.sub(r"^[ \t]*\*[ \t]+", "- ", s, flags=re.M)
    s = re.sub(r"^[ \t]*(\d+)[).][ \t]+", r"\1. ", s, flags=re.M)
    s = re.sub(r"^(#+)(?=[^\s#])", r"\1 ", s, flags=re.M)
    return s.strip()
