"""
Tests for the redline views and diff-source selection.
"""

from lexdiff.models import (
    AlignmentConfig,
    BaselineDriftSource,
    ChangeKind,
    ComparisonSource,
    ProposalSource,
)
from lexdiff.redline.composer import (
    DEL_CLASS,
    INS_CLASS,
    compose_critic_markup,
    compose_document_view,
    compose_for_source,
    compose_text_view,
    select_diff_source,
)
from lexdiff.render import to_markup

OLD_CONTRACT = "# Title\n\n## Old Heading\n\nBody"
NEW_CONTRACT = "# Title\n\nBody\n\nNew para"


class TestDocumentView:
    def test_insertions_and_deletions(self):
        fragment = compose_document_view(OLD_CONTRACT, NEW_CONTRACT)

        assert fragment.startswith("<h1>Title</h1>")
        assert f'<del class="{DEL_CLASS}"' in fragment
        assert f'<ins class="{INS_CLASS}"' in fragment
        assert "<p>Body</p>" in fragment
        assert "<p>New para</p></ins>" in fragment

    def test_removed_heading_stays_raw(self):
        fragment = compose_document_view(OLD_CONTRACT, NEW_CONTRACT)

        assert "## Old Heading</del>" in fragment
        assert "<h2>" not in fragment

    def test_removed_text_is_escaped(self):
        fragment = compose_document_view("a\n\nx < y & z\nnext", "a")

        assert "x &lt; y &amp; z<br>next</del>" in fragment
        assert "<p>a</p>" in fragment

    def test_identical_documents_have_no_markup(self):
        fragment = compose_document_view(NEW_CONTRACT, NEW_CONTRACT)

        assert "<ins" not in fragment
        assert "<del" not in fragment

    def test_resolving_the_redline_keeps_only_new_content(self):
        result = to_markup(compose_document_view(OLD_CONTRACT, NEW_CONTRACT))

        assert "Old Heading" not in result
        assert "# Title" in result
        assert "New para" in result

    def test_block_window_is_configurable(self):
        old = "Moved.\n\nP1\n\nP2"
        new = "P1\n\nP2\n\nMoved."

        narrow = compose_document_view(old, new, AlignmentConfig(block_window=1))
        assert narrow.count("<del") == 3
        assert narrow.count("<ins") == 3


class TestTextView:
    def test_records_come_from_line_alignment(self):
        records = compose_text_view("a\nb", "a\nc")

        assert [r.kind for r in records] == [ChangeKind.UNCHANGED, ChangeKind.REMOVED, ChangeKind.ADDED]

    def test_critic_markup_for_modified_and_trailing_lines(self):
        old = "# Title\nLine1\nLine2"
        new = "# Title\nLine1 modified\nLine2\nLine3"

        assert compose_critic_markup(old, new) == "# Title\nLine1{++ modified++}\nLine2\n{++Line3++}"

    def test_critic_markup_for_removed_line(self):
        assert compose_critic_markup("a\nb\nc", "a\nc") == "a\n{--b--}\nc"

    def test_critic_markup_refines_words(self):
        old = "The seller shall deliver the goods"
        new = "The buyer shall deliver the goods"

        assert compose_critic_markup(old, new) == "The {--seller--}{++buyer++} shall deliver the goods"

    def test_critic_markup_marks_blank_line_changes(self):
        assert compose_critic_markup("a\n\nb", "a\nb") == "a\n{----}\nb"
        assert compose_critic_markup("a\nb", "a\n\nb") == "a\n{++++}\nb"

    def test_critic_markup_identical(self):
        assert compose_critic_markup("x\ny", "x\ny") == "x\ny"


class TestDiffSourceSelection:
    def test_nothing_to_compare(self):
        assert select_diff_source("doc") is None
        assert select_diff_source("doc", baseline="doc") is None

    def test_proposal_wins(self):
        source = select_diff_source("cur", proposed="prop", comparison_original="orig", baseline="base")

        assert isinstance(source, ProposalSource)
        assert (source.base, source.target) == ("cur", "prop")

    def test_comparison_before_drift(self):
        source = select_diff_source("cur", comparison_original="orig", baseline="base")

        assert isinstance(source, ComparisonSource)
        assert (source.base, source.target) == ("orig", "cur")

    def test_baseline_drift(self):
        source = select_diff_source("cur", baseline="base")

        assert isinstance(source, BaselineDriftSource)
        assert (source.base, source.target) == ("base", "cur")

    def test_compose_for_source(self):
        fragment = compose_for_source(ComparisonSource(original="a", revised="b"))

        assert fragment.startswith(f'<del class="{DEL_CLASS}"')
        assert "<p>b</p></ins>" in fragment
