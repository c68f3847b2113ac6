"""
Editing session: the single owner of the authoritative document and of the
auxiliary documents (proposal, comparison original, baselines) used for redlines.

Documents are always replaced by value, never mutated in place.
"""

import re
from typing import List, Optional

import structlog

from lexdiff.history import EditHistory
from lexdiff.markup import apply_highlights
from lexdiff.models import AIIntent, AIResult, AlignmentConfig, ChangeRecord, DiffSource, HighlightSpan
from lexdiff.redline.composer import (
    compose_document_view,
    compose_for_source,
    compose_text_view,
    select_diff_source,
)
from lexdiff.render import normalize_markup, to_markup, to_rendered

logger = structlog.get_logger(__name__)


def _collapse(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


class EditingSession:
    def __init__(self, document: str = "", config: Optional[AlignmentConfig] = None):
        self.config = config or AlignmentConfig()
        self.current = document
        self.proposed: Optional[str] = None
        self.comparison_original: Optional[str] = None
        self.baseline: Optional[str] = document
        self.initial_baseline: Optional[str] = document
        self.highlights: List[str] = []
        self.history = EditHistory(document)

    # --- Lifecycle ---

    def new_document(self):
        self._install("", comparison_original=None)
        logger.info("Started new document")

    def import_document(self, text: str, normalize: bool = True):
        """Installs an imported document as current and as the clean baseline."""
        document = normalize_markup(text) if normalize else text
        self._install(document, comparison_original=None)
        logger.info("Imported document", length=len(document))

    def start_comparison(self, original: str, revised: str):
        """Compares two uploaded documents; the revision becomes the working document."""
        self._install(revised, comparison_original=original)
        logger.info("Started comparison", original_length=len(original), revised_length=len(revised))

    def end_comparison(self):
        self.comparison_original = None

    def _install(self, document: str, comparison_original: Optional[str]):
        self.current = document
        self.proposed = None
        self.comparison_original = comparison_original
        self.baseline = document
        self.initial_baseline = document
        self.highlights = []
        # Imports and comparisons stay on the undo timeline.
        self.history.push(document)

    # --- AI results ---

    def apply_ai_result(self, result: AIResult) -> bool:
        """
        Routes an AI result. Analysis results with excerpts replace the highlights
        (an analysis without excerpts leaves them as they are); modifications clear
        them and become a pending proposal, or the document itself when the
        workspace is blank.
        Returns True when the document or the proposal changed.
        """
        if result.intent is AIIntent.ANALYSIS:
            highlights = [h for h in result.highlights if h and h.strip()]
            if highlights:
                self.highlights = highlights
            logger.info("Applied analysis", highlights=len(highlights))
            return False

        self.highlights = []

        new_doc = result.content
        if not self.current.strip():
            self.current = new_doc
            self.baseline = new_doc
            self.initial_baseline = new_doc
            self.proposed = None
            self.history.push(new_doc)
            logger.info("Installed generated document", length=len(new_doc))
            return True

        if _collapse(new_doc) == _collapse(self.current):
            logger.info("Modification identical to current document, ignoring")
            return False

        self.proposed = new_doc
        logger.info("Stored proposal", length=len(new_doc))
        return True

    def accept_proposal(self) -> bool:
        if self.proposed is None:
            return False
        self.current = self.proposed
        self.baseline = self.proposed
        self.proposed = None
        self.history.push(self.current)
        logger.info("Accepted proposal")
        return True

    def reject_proposal(self) -> bool:
        if self.proposed is None:
            return False
        self.proposed = None
        logger.info("Rejected proposal")
        return True

    # --- User edits ---

    @property
    def diff_active(self) -> bool:
        return self.proposed is not None or self.comparison_original is not None

    def edit(self, document: str):
        """A direct user edit. Highlights no longer line up with the text, so they are cleared."""
        self.current = document
        self.highlights = []
        self.history.push(document)

    def apply_rendered_edit(self, fragment: str):
        """An edit made in the rendered view; redline markup in the fragment is resolved first."""
        self.edit(to_markup(fragment))

    def undo(self) -> Optional[str]:
        if self.diff_active:
            return None
        return self._replay(self.history.undo())

    def redo(self) -> Optional[str]:
        if self.diff_active:
            return None
        return self._replay(self.history.redo())

    def _replay(self, document: Optional[str]) -> Optional[str]:
        # Replayed snapshots are not pushed again.
        if document is None:
            return None
        self.current = document
        self.highlights = []
        return document

    # --- Views ---

    def diff_source(self) -> Optional[DiffSource]:
        # An empty baseline (fresh workspace) is not worth a redline.
        drift_base = self.baseline or None
        if self.initial_baseline and self.initial_baseline != self.current:
            drift_base = self.initial_baseline
        return select_diff_source(
            self.current,
            proposed=self.proposed,
            comparison_original=self.comparison_original,
            baseline=drift_base,
        )

    def text_view(self) -> List[ChangeRecord]:
        source = self.diff_source()
        if source is None:
            return compose_text_view(self.current, self.current, self.config)
        return compose_text_view(source.base, source.target, self.config)

    def document_view(self) -> str:
        source = self.diff_source()
        if source is None:
            return to_rendered(self.current)
        return compose_for_source(source, self.config)

    def highlight_spans(self) -> List[HighlightSpan]:
        return apply_highlights(self.current, self.highlights, limit=self.config.excerpt_limit)

    # --- Export ---

    def export_clean(self) -> str:
        """Rendered current document without any redline markup."""
        return to_rendered(self.current)

    def export_redline(self) -> str:
        """Tracked-changes fragment of the current document against its oldest known base."""
        base = self.initial_baseline or self.comparison_original or self.current
        return compose_document_view(base, self.current, self.config)
