from enum import Enum
from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class ChangeKind(str, Enum):
    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"


class ChangeRecord(BaseModel):
    """
    A single aligned unit (line or block) and how it changed.
    Dropping REMOVED records and joining the rest reproduces the new document;
    dropping ADDED records reproduces the old one.
    """

    model_config = ConfigDict(frozen=True)

    kind: ChangeKind
    value: str


class HighlightSpan(BaseModel):
    """A slice of the document, flagged when it matched an analysis excerpt."""

    model_config = ConfigDict(frozen=True)

    text: str
    is_highlight: bool = False


class AIIntent(str, Enum):
    MODIFICATION = "MODIFICATION"
    ANALYSIS = "ANALYSIS"


class AIResult(BaseModel):
    """
    Result handed over by the AI request collaborator.
    For MODIFICATION the content is the full proposed document;
    for ANALYSIS it is the answer text and `highlights` lists excerpts to emphasize.
    """

    intent: AIIntent
    content: str = ""
    highlights: List[str] = Field(default_factory=list)


class AlignmentConfig(BaseModel):
    """
    Tunable constants for alignment and highlighting.
    The window sizes are empirical; they bound the lookahead, not the result quality.
    """

    model_config = ConfigDict(frozen=True)

    line_window: int = Field(10, ge=1, description="Lookahead window for line alignment.")
    block_window: int = Field(5, ge=1, description="Lookahead window for block alignment.")
    excerpt_limit: int = Field(500, ge=1, description="Characters of each excerpt used for matching.")


# --- Diff sources ---
# Exactly one of these is active per render, chosen by precedence
# proposal > comparison > baseline drift.


class ProposalSource(BaseModel):
    """AI-proposed edit compared against the current document."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["proposal"] = "proposal"
    current: str
    proposed: str

    @property
    def base(self) -> str:
        return self.current

    @property
    def target(self) -> str:
        return self.proposed


class ComparisonSource(BaseModel):
    """Two externally supplied documents: uploaded original vs. uploaded revision."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["comparison"] = "comparison"
    original: str
    revised: str

    @property
    def base(self) -> str:
        return self.original

    @property
    def target(self) -> str:
        return self.revised


class BaselineDriftSource(BaseModel):
    """Drift of the current document since the last accepted baseline."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["baseline"] = "baseline"
    baseline: str
    current: str

    @property
    def base(self) -> str:
        return self.baseline

    @property
    def target(self) -> str:
        return self.current


DiffSource = Annotated[
    Union[ProposalSource, ComparisonSource, BaselineDriftSource],
    Field(discriminator="kind"),
]
