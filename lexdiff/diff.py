"""
Bounded-lookahead alignment of two document versions.

Lines are compared byte-for-byte; blocks are compared after collapsing whitespace,
so the rendered view tolerates wrapping noise while the text view stays literal.
"""

import re
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import structlog
from diff_match_patch import diff_match_patch

from lexdiff.models import ChangeKind, ChangeRecord

logger = structlog.get_logger(__name__)

DEFAULT_LINE_WINDOW = 10
DEFAULT_BLOCK_WINDOW = 5

_WHITESPACE_RE = re.compile(r"\s+")
_ATX_HEADING_RE = re.compile(r"^\s{0,3}#{1,6}(\s|$)")
_RENDERED_BLOCK_END_RE = re.compile(r"(?<=</p>)|(?<=</h\d>)|(?<=</ul>)|(?<=</ol>)|(?<=<br>)")


def split_lines(doc: str) -> List[str]:
    """An empty document has no lines at all, not a single empty one."""
    if not doc:
        return []
    return doc.split("\n")


def _collapse(value: str) -> str:
    return _WHITESPACE_RE.sub(" ", value).strip()


def _find_ahead(items: Sequence[str], start: int, window: int, wanted: str, key: Callable[[str], str]) -> int:
    """
    Index of the first item equal to `wanted` in items[start+1 : start+window].
    The window counts the cursor position itself. Returns -1 when nothing matches.
    """
    wanted_key = key(wanted)
    for k in range(start + 1, min(start + window, len(items))):
        if key(items[k]) == wanted_key:
            return k
    return -1


def _align(
    old_items: Sequence[str],
    new_items: Sequence[str],
    window: int,
    key: Callable[[str], str],
) -> List[ChangeRecord]:
    if window < 1:
        raise ValueError(f"window must be at least 1, got {window}")

    records: List[ChangeRecord] = []
    i = 0
    j = 0

    while i < len(old_items) or j < len(new_items):
        old_item: Optional[str] = old_items[i] if i < len(old_items) else None
        new_item: Optional[str] = new_items[j] if j < len(new_items) else None

        if old_item is not None and new_item is not None and key(old_item) == key(new_item):
            records.append(ChangeRecord(kind=ChangeKind.UNCHANGED, value=old_item))
            i += 1
            j += 1
            continue

        found_in_new = -1
        if old_item is not None and new_item is not None:
            found_in_new = _find_ahead(new_items, j, window, old_item, key)

        found_in_old = -1
        if new_item is not None and old_item is not None:
            found_in_old = _find_ahead(old_items, i, window, new_item, key)

        # Additions are preferred over deletions when both explain the mismatch.
        if found_in_new != -1:
            while j < found_in_new:
                records.append(ChangeRecord(kind=ChangeKind.ADDED, value=new_items[j]))
                j += 1
        elif found_in_old != -1:
            while i < found_in_old:
                records.append(ChangeRecord(kind=ChangeKind.REMOVED, value=old_items[i]))
                i += 1
        else:
            if old_item is not None:
                records.append(ChangeRecord(kind=ChangeKind.REMOVED, value=old_item))
                i += 1
            if new_item is not None:
                records.append(ChangeRecord(kind=ChangeKind.ADDED, value=new_item))
                j += 1

    return records


def align_lines(old_doc: str, new_doc: str, window: int = DEFAULT_LINE_WINDOW) -> List[ChangeRecord]:
    """
    Aligns two Markdown documents line by line.

    Args:
        old_doc: The base document.
        new_doc: The document compared against the base.
        window: Lookahead window (in lines) used to recognise insertions and deletions.
                Moves farther than this come out as a removed/added pair.

    Returns:
        Ordered change records, one per line consumed from either side.
    """
    records = _align(split_lines(old_doc), split_lines(new_doc), window, key=lambda line: line)
    logger.debug("Aligned lines", records=len(records), window=window)
    return records


def align_blocks(
    old_blocks: Sequence[str],
    new_blocks: Sequence[str],
    window: int = DEFAULT_BLOCK_WINDOW,
) -> List[ChangeRecord]:
    """
    Aligns two sequences of blocks with the same lookahead policy as `align_lines`,
    treating blocks that differ only in whitespace as unchanged.
    """
    records = _align(list(old_blocks), list(new_blocks), window, key=_collapse)
    logger.debug("Aligned blocks", records=len(records), window=window)
    return records


def split_markup_blocks(doc: str) -> List[str]:
    """
    Splits Markdown into paragraph-like blocks.
    Blank lines end a block and an ATX heading always stands alone,
    so "## 1. Term" directly followed by body text yields two blocks.
    """
    blocks: List[str] = []
    current: List[str] = []

    def flush():
        if current:
            blocks.append("\n".join(current))
            current.clear()

    for line in split_lines(doc.replace("\r\n", "\n")):
        if not line.strip():
            flush()
        elif _ATX_HEADING_RE.match(line):
            flush()
            blocks.append(line)
        else:
            current.append(line)
    flush()
    return blocks


def split_rendered_blocks(fragment: str) -> List[str]:
    """Splits an HTML fragment after each closing block element or <br>."""
    if not fragment:
        return []
    pieces = _RENDERED_BLOCK_END_RE.split(fragment.replace("\n", ""))
    return [piece.strip() for piece in pieces if piece and piece.strip()]


def align_markup_blocks(old_doc: str, new_doc: str, window: int = DEFAULT_BLOCK_WINDOW) -> List[ChangeRecord]:
    return align_blocks(split_markup_blocks(old_doc), split_markup_blocks(new_doc), window)


def align_rendered(old_fragment: str, new_fragment: str, window: int = DEFAULT_BLOCK_WINDOW) -> List[ChangeRecord]:
    return align_blocks(split_rendered_blocks(old_fragment), split_rendered_blocks(new_fragment), window)


def diff_words(original_text: str, modified_text: str) -> List[Tuple[int, str]]:
    """
    Word-level diff of two strings.
    Returns diff-match-patch tuples: (-1, deleted), (0, equal), (1, inserted).
    """
    dmp = diff_match_patch()

    # 1. Word-Level Tokenization & Encoding
    chars1, chars2, token_array = _words_to_chars(original_text, modified_text)

    # 2. Compute Diff on the Encoded Strings
    diffs = dmp.diff_main(chars1, chars2, False)

    # 3. Semantic Cleanup
    dmp.diff_cleanupSemantic(diffs)

    # 4. Decode back to Text
    dmp.diff_charsToLines(diffs, token_array)
    return [(op, text) for op, text in diffs if text]


def _words_to_chars(text1: str, text2: str) -> Tuple[str, str, List[str]]:
    """
    Splits text into words/tokens and encodes them as unique Unicode characters.
    """
    token_array: List[str] = []
    token_hash: Dict[str, int] = {}
    split_pattern = r"(\s+|\w+|[^\w\s])"

    def encode_text(text: str) -> str:
        tokens = [t for t in re.split(split_pattern, text) if t]
        encoded_chars = []
        for token in tokens:
            if token not in token_hash:
                token_hash[token] = len(token_array)
                token_array.append(token)
            encoded_chars.append(chr(token_hash[token]))
        return "".join(encoded_chars)

    chars1 = encode_text(text1)
    chars2 = encode_text(text2)
    return chars1, chars2, token_array
