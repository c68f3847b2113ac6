"""
Turns alignment results into redline views:
- a text view (change records for a styled text surface, or CriticMarkup text),
- a document view (one HTML fragment with <ins>/<del> tracked-change markup).
"""

import html
from typing import List, Optional

import structlog

from lexdiff.diff import align_blocks, align_lines, diff_words, split_markup_blocks
from lexdiff.models import (
    AlignmentConfig,
    BaselineDriftSource,
    ChangeKind,
    ChangeRecord,
    ComparisonSource,
    DiffSource,
    ProposalSource,
)
from lexdiff.render import to_rendered

logger = structlog.get_logger(__name__)

INS_CLASS = "lexdiff-ins"
DEL_CLASS = "lexdiff-del"

EMPTY_DELETION = "{----}"
EMPTY_INSERTION = "{++++}"

# Inline styles travel with the fragment so word processors show the redline without a stylesheet.
INS_STYLE = "background-color:#cce5ff;color:#004085;border-left:3px solid #3399ff;padding:2px;display:block;"
DEL_STYLE = "color:red;text-decoration:line-through;"


def compose_text_view(old_doc: str, new_doc: str, config: Optional[AlignmentConfig] = None) -> List[ChangeRecord]:
    """Line-level change records, consumed verbatim by a text surface."""
    config = config or AlignmentConfig()
    return align_lines(old_doc, new_doc, window=config.line_window)


def compose_document_view(old_doc: str, new_doc: str, config: Optional[AlignmentConfig] = None) -> str:
    """
    Renders the whole document as a single HTML fragment with inline change annotations.

    Unchanged and added blocks are rendered from Markdown; added ones are wrapped in <ins>.
    Removed blocks keep their raw Markdown text inside <del>: re-rendering removed
    structure (a deleted heading, a half list) could corrupt the surrounding layout.
    """
    config = config or AlignmentConfig()
    records = align_blocks(split_markup_blocks(old_doc), split_markup_blocks(new_doc), window=config.block_window)

    parts = []
    for record in records:
        if record.kind is ChangeKind.UNCHANGED:
            parts.append(to_rendered(record.value))
        elif record.kind is ChangeKind.ADDED:
            parts.append(_wrap_insertion(to_rendered(record.value)))
        else:
            parts.append(_wrap_deletion(record.value))

    logger.debug(
        "Composed document view",
        blocks=len(records),
        added=sum(1 for r in records if r.kind is ChangeKind.ADDED),
        removed=sum(1 for r in records if r.kind is ChangeKind.REMOVED),
    )
    return "".join(parts)


def _wrap_insertion(rendered: str) -> str:
    return f'<ins class="{INS_CLASS}" style="{INS_STYLE}">{rendered}</ins>'


def _wrap_deletion(raw_markup: str) -> str:
    escaped = html.escape(raw_markup, quote=False).replace("\n", "<br>")
    return f'<del class="{DEL_CLASS}" style="{DEL_STYLE}">{escaped}</del>'


def compose_critic_markup(old_doc: str, new_doc: str, config: Optional[AlignmentConfig] = None) -> str:
    """
    Plain annotated text view in CriticMarkup.

    - Unchanged lines are copied as-is.
    - A removed line directly followed by an added line is a modification and is
      refined word by word: "The {--seller--}{++buyer++} shall".
    - Other removals become {--line--}, other insertions {++line++}.
    - A removed or added blank line is marked as {----} or {++++}, so blank-line
      changes stay visible.
    """
    records = compose_text_view(old_doc, new_doc, config)
    lines: List[str] = []
    i = 0
    while i < len(records):
        record = records[i]
        following = records[i + 1] if i + 1 < len(records) else None

        if record.kind is ChangeKind.UNCHANGED:
            lines.append(record.value)
        elif record.kind is ChangeKind.REMOVED and following is not None and following.kind is ChangeKind.ADDED:
            lines.append(_build_inline_modification(record.value, following.value))
            i += 1
        elif record.kind is ChangeKind.REMOVED:
            lines.append(_build_critic_markup(record.value, "") if record.value else EMPTY_DELETION)
        else:
            lines.append(_build_critic_markup("", record.value) if record.value else EMPTY_INSERTION)
        i += 1

    return "\n".join(lines)


def _build_critic_markup(target_text: str, new_text: str) -> str:
    has_target = bool(target_text)
    has_new = bool(new_text)

    if has_target and not has_new:
        return f"{{--{target_text}--}}"
    if has_new and not has_target:
        return f"{{++{new_text}++}}"
    if has_target and has_new:
        return f"{{--{target_text}--}}{{++{new_text}++}}"
    return ""


def _build_inline_modification(old_line: str, new_line: str) -> str:
    parts = []
    pending_delete = ""
    for op, text in diff_words(old_line, new_line):
        if op == -1:
            pending_delete += text
        elif op == 1:
            parts.append(_build_critic_markup(pending_delete, text))
            pending_delete = ""
        else:
            if pending_delete:
                parts.append(_build_critic_markup(pending_delete, ""))
                pending_delete = ""
            parts.append(text)
    if pending_delete:
        parts.append(_build_critic_markup(pending_delete, ""))
    return "".join(parts)


def select_diff_source(
    current: str,
    proposed: Optional[str] = None,
    comparison_original: Optional[str] = None,
    baseline: Optional[str] = None,
) -> Optional[DiffSource]:
    """
    Picks the single active diff base: live proposal, then external comparison,
    then drift since the baseline. Returns None when there is nothing to compare.
    """
    if proposed is not None:
        return ProposalSource(current=current, proposed=proposed)
    if comparison_original is not None:
        return ComparisonSource(original=comparison_original, revised=current)
    if baseline is not None and baseline != current:
        return BaselineDriftSource(baseline=baseline, current=current)
    return None


def compose_for_source(source: DiffSource, config: Optional[AlignmentConfig] = None) -> str:
    logger.debug("Composing redline", source=source.kind)
    return compose_document_view(source.base, source.target, config)
