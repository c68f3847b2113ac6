"""
Helpers for the export collaborator: wrapping rendered fragments in an HTML
container that word processors open as a document, and naming the file.
"""

import html
import re

WORD_DOCUMENT_STYLES = """
    body { font-family: 'Times New Roman', serif; font-size: 12pt; line-height: 1.5; }
    h1, h2, h3 { font-family: 'Arial', sans-serif; color: #000; }
    p { margin-bottom: 1em; }
    ul, ol { margin-bottom: 1em; }
    del { color: red; text-decoration: line-through; }
    ins { color: #004085; text-decoration: none; background-color: #cce5ff; border-left: 3px solid #3399ff; padding: 2px; display: block; }
"""


def wrap_word_document(fragment: str, title: str = "Contract Export") -> str:
    """
    Wraps an HTML fragment in the Office HTML namespaces so that Word
    opens it (saved as .doc) with formatting and tracked-change styling.
    """
    return (
        "<html xmlns:o='urn:schemas-microsoft-com:office:office' "
        "xmlns:w='urn:schemas-microsoft-com:office:word' "
        "xmlns='http://www.w3.org/TR/REC-html40'>\n"
        "<head>\n"
        "<meta charset='utf-8'>\n"
        f"<title>{html.escape(title)}</title>\n"
        f"<style>{WORD_DOCUMENT_STYLES}</style>\n"
        "</head>\n"
        "<body>\n"
        f"{fragment}\n"
        "</body>\n"
        "</html>\n"
    )


def contract_title(doc: str) -> str:
    """First level-one heading, else the first non-blank line (max 80 chars), else 'Contract'."""
    if not doc:
        return "Contract"
    lines = doc.split("\n")
    for line in lines:
        m = re.match(r"^\s*#(?!#)\s*(.+)$", line)
        if m:
            return m.group(1).strip()
    first = next((line for line in lines if line.strip()), "Contract")
    return first.strip()[:80]


def filename_base(title: str) -> str:
    base = re.sub(r"[^\w\-. ]+", "", title or "Contract").strip()
    base = re.sub(r"\s+", "_", base)
    return base or "Contract"
