"""
Math normalizer tests
"""

from tex2lia.lib.mathfix import inlineMath_unquote, math_normalize, mathBlocks_convert, mathSpacing_fix


class TestMathBlocks:
    """Test display math conversion"""

    def test_fenced_math_block(self):
        assert mathBlocks_convert("```math\nx^2 + y^2\n```") == "$$\nx^2 + y^2\n$$"

    def test_fence_with_space(self):
        assert mathBlocks_convert("``` math\na\n```") == "$$\na\n$$"

    def test_content_preserved(self):
        """Multi-line content survives unchanged between the delimiters"""
        content = "\\begin{aligned}\na &= b \\\\\nc &= d\n\\end{aligned}"
        result = mathBlocks_convert(f"Before\n\n```math\n{content}\n```\n\nAfter")
        assert f"$$\n{content}\n$$" in result
        assert result.startswith("Before\n\n")
        assert result.endswith("\n\nAfter")

    def test_other_code_blocks_untouched(self):
        text = "```go\nx := 1\n```"
        assert mathBlocks_convert(text) == text


class TestInlineMath:
    """Test inline math and spacing fixes"""

    def test_backticks_removed(self):
        assert inlineMath_unquote("a $`x^2`$ b") == "a $x^2$ b"

    def test_space_before_formula(self):
        assert mathSpacing_fix("`IF NOT `$b$") == "`IF NOT` $b$"

    def test_space_after_formula(self):
        assert mathSpacing_fix("$b$` THEN`") == "$b$ `THEN`"

    def test_full_normalization(self):
        assert math_normalize("Let $`a`$ be\n\n```math\na\n```") == "Let $a$ be\n\n$$\na\n$$"
