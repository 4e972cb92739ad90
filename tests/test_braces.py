"""
Brace scanner tests

Tests balanced group extraction, escapes and all-or-nothing parameter
extraction.
"""

import pytest

from tex2lia.lib.braces import brace_extract, parameters_extract
from tex2lia.lib.errors import ExtractionError, MissingParameterError, UnbalancedBraceError


class TestBraceExtract:
    """Test single balanced group extraction"""

    def test_flat_group(self):
        """Content up to the first closing brace at depth 0"""
        result = brace_extract("{abc} tail", 1)
        assert result.content == "abc"
        assert result.end == 5

    def test_nested_group(self):
        """Nested braces are kept in the content"""
        result = brace_extract("{a {b} c} rest", 1)
        assert result.content == "a {b} c"
        assert result.end == 9

    def test_deeply_nested(self):
        """Depth tracking over several levels"""
        result = brace_extract("{{{x}}}", 1)
        assert result.content == "{{x}}"
        assert result.end == 7

    def test_escaped_brace_not_counted(self):
        """\\} does not close the group"""
        text = r"{a \} b}"
        result = brace_extract(text, 1)
        assert result.content == r"a \} b"
        assert result.end == len(text)

    def test_escaped_opening_brace(self):
        """\\{ does not open a group"""
        result = brace_extract(r"{\{x} y", 1)
        assert result.content == r"\{x"

    def test_unbalanced_raises(self):
        """End of text before depth 0"""
        with pytest.raises(UnbalancedBraceError) as exc_info:
            brace_extract("{never closed", 1)
        assert isinstance(exc_info.value, ExtractionError)
        assert exc_info.value.position == 1


class TestParametersExtract:
    """Test extraction of consecutive parameter groups"""

    def test_two_parameters_trimmed(self):
        """Parameters are stripped of surrounding whitespace"""
        result = parameters_extract(r"\box{ A }{B} tail", 4, 2)
        assert result.params == ["A", "B"]
        assert result.end == 12

    def test_whitespace_between_groups(self):
        """Newlines and spaces between groups are skipped"""
        result = parameters_extract("{a}\n   {b}", 0, 2)
        assert result.params == ["a", "b"]

    def test_nested_parameter(self):
        """Nested braces inside a parameter"""
        text = r"\sttpUniversalkasten{Title}{Body {nested}}"
        result = parameters_extract(text, 20, 2)
        assert result.params == ["Title", "Body {nested}"]
        assert result.end == len(text)

    def test_missing_parameter(self):
        """Fewer groups than requested fails as a whole"""
        with pytest.raises(MissingParameterError) as exc_info:
            parameters_extract("{a} x", 0, 2)
        assert exc_info.value.found == 1
        assert exc_info.value.expected == 2

    def test_missing_at_end_of_text(self):
        """Text ending before the next group"""
        with pytest.raises(MissingParameterError):
            parameters_extract("{a}", 0, 2)

    def test_unbalanced_parameter(self):
        """An unclosed group propagates UnbalancedBraceError"""
        with pytest.raises(UnbalancedBraceError):
            parameters_extract("{a}{b", 0, 2)

    def test_zero_parameters(self):
        """Requesting no parameters consumes nothing"""
        result = parameters_extract("{a}", 0, 0)
        assert result.params == []
        assert result.end == 0
