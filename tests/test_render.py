"""
Tests for Markdown <-> HTML conversion and redline stripping.
"""

from lexdiff import render
from lexdiff.render import normalize_markup, strip_redline, to_markup, to_rendered


class TestToRendered:
    def test_heading_and_paragraph(self):
        assert to_rendered("# Title") == "<h1>Title</h1>"
        assert to_rendered("Hello **world**") == "<p>Hello <strong>world</strong></p>"

    def test_empty_document(self):
        assert to_rendered("") == ""

    def test_deterministic(self):
        doc = "# A\n\n| x | y |\n|---|---|\n| 1 | 2 |\n\n1. one\n2. two"
        assert to_rendered(doc) == to_rendered(doc)
        assert "<table>" in to_rendered(doc)

    def test_failure_falls_back_to_escaped_text(self, monkeypatch):
        def boom(*args, **kwargs):
            raise RuntimeError("parser exploded")

        monkeypatch.setattr(render.markdown, "markdown", boom)

        assert to_rendered("<b> & co") == "<p>&lt;b&gt; &amp; co</p>"


class TestStripRedline:
    def test_insertions_kept_deletions_dropped(self):
        assert strip_redline("<p>a <ins>b</ins> <del>c</del>d</p>") == "<p>a b d</p>"

    def test_nested_block_content(self):
        fragment = '<h1>T</h1><del class="x">## Old</del><ins class="y"><p>New</p></ins>'
        result = strip_redline(fragment)

        assert "Old" not in result
        assert "<p>New</p>" in result
        assert "<ins" not in result

    def test_empty(self):
        assert strip_redline("") == ""
        assert strip_redline("   ") == ""


class TestToMarkup:
    def test_resolves_redline(self):
        assert to_markup("<p>Keep <ins>this</ins><del>that</del></p>") == "Keep this"

    def test_drops_scripts(self):
        result = to_markup("<p>x</p><script>alert(1)</script>")

        assert result == "x"

    def test_headings_and_lists(self):
        result = to_markup("<h2>Heading</h2><ul><li>one</li><li>two</li></ul>")

        assert "## Heading" in result
        assert "- one" in result
        assert "- two" in result

    def test_round_trip_is_lossy(self):
        # List markers are normalized; this is expected, not an error.
        assert to_markup(to_rendered("* item")) == "- item"

    def test_empty(self):
        assert to_markup("") == ""


class TestNormalizeMarkup:
    def test_normalizes_markers_and_spacing(self):
        raw = "#Title\r\n\r\n\r\n\r\n* one\n• two\n1) three   "

        assert normalize_markup(raw) == "# Title\n\n- one\n- two\n1. three"

    def test_keeps_bold_lines(self):
        assert normalize_markup("**Client:** Acme") == "**Client:** Acme"

    def test_empty(self):
        assert normalize_markup("") == ""
