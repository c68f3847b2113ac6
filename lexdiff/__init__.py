from importlib.metadata import PackageNotFoundError, version

from lexdiff.diff import align_blocks, align_lines, align_markup_blocks, align_rendered
from lexdiff.history import EditHistory
from lexdiff.markup import apply_highlights
from lexdiff.models import AIResult, AlignmentConfig, ChangeKind, ChangeRecord, HighlightSpan
from lexdiff.redline.composer import compose_critic_markup, compose_document_view, compose_text_view
from lexdiff.render import to_markup, to_rendered
from lexdiff.session import EditingSession

try:
    __version__ = version("lexdiff")
except PackageNotFoundError:
    # Running from a source checkout without installed metadata.
    __version__ = "0.0.0-dev"

__all__ = [
    "align_lines",
    "align_blocks",
    "align_markup_blocks",
    "align_rendered",
    "apply_highlights",
    "compose_text_view",
    "compose_document_view",
    "compose_critic_markup",
    "to_rendered",
    "to_markup",
    "EditHistory",
    "EditingSession",
    "AIResult",
    "AlignmentConfig",
    "ChangeKind",
    "ChangeRecord",
    "HighlightSpan",
    "__version__",
]
