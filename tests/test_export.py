from lexdiff.export import contract_title, filename_base, wrap_word_document


class TestWrapWordDocument:
    def test_office_container(self):
        doc = wrap_word_document("<p>Body</p>", title="A & B")

        assert "xmlns:w='urn:schemas-microsoft-com:office:word'" in doc
        assert "<title>A &amp; B</title>" in doc
        assert "<body>\n<p>Body</p>\n</body>" in doc
        assert "del { color: red;" in doc


class TestContractTitle:
    def test_first_level_one_heading(self):
        assert contract_title("Intro\n## Sub\n# Master Services Agreement\n") == "Master Services Agreement"

    def test_first_non_blank_line(self):
        assert contract_title("\n\n  Letter of intent  \nbody") == "Letter of intent"

    def test_long_line_is_truncated(self):
        assert contract_title("x" * 200) == "x" * 80

    def test_empty(self):
        assert contract_title("") == "Contract"
        assert contract_title("\n \n") == "Contract"


class TestFilenameBase:
    def test_sanitizes(self):
        assert filename_base("Master: Services / Agreement") == "Master_Services_Agreement"

    def test_fallback(self):
        assert filename_base("???") == "Contract"
        assert filename_base("") == "Contract"
