"""
Footnote relocator tests

Tests definition extraction and placement at the end of the referencing
section.
"""

from tex2lia.lib.footnotes import footnotes_extract, footnotes_relocate


class TestExtraction:
    """Test removal of footnote definitions"""

    def test_single_line_definition(self):
        cleaned, footnotes = footnotes_extract("Text[^1]\n\n[^1]: Note.\n")
        assert cleaned == "Text[^1]\n"
        assert [(f.id, f.text) for f in footnotes] == [("1", "Note.")]

    def test_indented_continuation(self):
        _, footnotes = footnotes_extract("A[^1]\n\n[^1]: First line\n    second line\n")
        assert footnotes[0].text == "First line\nsecond line"

    def test_blank_line_inside_definition(self):
        """A blank line belongs to the definition when an indented line follows"""
        cleaned, footnotes = footnotes_extract("A[^1]\n\n[^1]: Para one\n\n    Para two\n\nAfter\n")
        assert footnotes[0].text == "Para one\n\nPara two"
        assert cleaned == "A[^1]\n\nAfter\n"

    def test_consecutive_definitions(self):
        _, footnotes = footnotes_extract("[^1]: One.\n[^2]: Two.\n")
        assert [f.id for f in footnotes] == ["1", "2"]


class TestRelocation:
    """Test placement of definitions"""

    def test_no_footnotes_idempotent(self):
        markdown = "# A\n\nText\n"
        assert footnotes_relocate(markdown) == markdown

    def test_definition_moves_before_next_heading(self):
        markdown = "# A\n\nText[^1]\n\n# B\n\nMore\n\n[^1]: Note\n"
        assert footnotes_relocate(markdown) == "# A\n\nText[^1]\n\n[^1]: Note\n\n# B\n\nMore\n"

    def test_repeated_reference_in_two_sections(self):
        """Each reference gets its own copy at the end of its section"""
        markdown = (
            "# One\n\nIntro\n\n"
            "## Two\n\nSee[^1].\n\n"
            "## Three\n\nAgain[^1].\n\n"
            "[^1]: Note.\n"
        )
        assert footnotes_relocate(markdown) == (
            "# One\n\nIntro\n\n"
            "## Two\n\nSee[^1].\n\n[^1]: Note.\n\n"
            "## Three\n\nAgain[^1].\n\n[^1]: Note.\n"
        )

    def test_ordering_by_numeric_id(self):
        """Definitions before the same heading are ordered by id"""
        markdown = "Text[^2] and[^1].\n\n# Next\n\n[^1]: One.\n[^2]: Two.\n"
        result = footnotes_relocate(markdown)
        assert result == "Text[^2] and[^1].\n\n[^1]: One.\n\n[^2]: Two.\n\n# Next\n"

    def test_multiline_definition_reindented(self):
        markdown = "Text[^1]\n\n[^1]: First line\n    second line\n"
        assert footnotes_relocate(markdown) == "Text[^1]\n\n[^1]: First line\n    second line\n"

    def test_unreferenced_definition_dropped(self):
        assert footnotes_relocate("Text\n\n[^1]: Orphan\n") == "Text\n"

    def test_exactly_one_trailing_newline(self):
        assert footnotes_relocate("Text[^1]\n\n\n\n[^1]: N\n\n\n").endswith("[^1]: N\n")
