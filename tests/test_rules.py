"""
Rule table tests

Tests the default table, lookups and the rendering of rule variants.
"""

import pytest

from tex2lia.lib.rules import RuleTable, rule_name, simpleMacro_make, textMacro_make
from tex2lia.models.rules import (
    EnvironmentSpec,
    FormatType,
    MacroCategory,
    MultiParamSpec,
    SpecialSpec,
    format_apply,
)


class TestFormatApply:
    """Test parameter formatting"""

    def test_bold_italic(self):
        assert format_apply(FormatType.BOLD_ITALIC, "T") == "\\textbf{\\emph{T}}"

    def test_code(self):
        assert format_apply(FormatType.CODE, "x") == "\\texttt{x}"

    def test_math_inline_single_dollar(self):
        """Inline math uses single dollars"""
        assert format_apply(FormatType.MATH_INLINE, "a+b") == "$a+b$"

    def test_remove(self):
        assert format_apply(FormatType.REMOVE, "gone") == ""


class TestRuleTable:
    """Test the default table and its registry operations"""

    def test_default_categories(self):
        """Every category is populated in declaration order"""
        table = RuleTable.default()
        simple = [rule_name(r) for r in table.rules_byCategory(MacroCategory.SIMPLE)]
        assert simple == ["ffc", "fftt", "ausgabeInline"]
        assert len(table.rules_byCategory(MacroCategory.ENVIRONMENT)) == 4
        assert len(table.rules_byCategory(MacroCategory.BOX)) == 3
        assert len(table.rules_byCategory(MacroCategory.TEXT)) == 6
        assert len(table) == 20

    def test_rule_get(self):
        table = RuleTable.default()
        spec = table.rule_get("ntpimd")
        assert isinstance(spec, MultiParamSpec)
        assert spec.param_count == 2

    def test_rule_get_missing(self):
        with pytest.raises(KeyError):
            RuleTable.default().rule_get("doesNotExist")

    def test_extend_is_non_destructive(self):
        """rules_extend returns a new table"""
        table = RuleTable.default()
        extended = table.rules_extend(simpleMacro_make("kbd", FormatType.BOLD))
        assert len(extended) == len(table) + 1
        assert extended.rule_get("kbd").name == "kbd"
        with pytest.raises(KeyError):
            table.rule_get("kbd")


class TestRuleVariants:
    """Test rendering of the individual rule variants"""

    def test_simple_rule_template(self):
        rule = simpleMacro_make("ffc", FormatType.CODE)
        assert rule.action == "\\texttt{\\1}"
        assert rule.group_count == 1

    def test_text_rule_word_boundary(self):
        rule = textMacro_make("sog", "sog. ")
        assert rule.matcher.search("\\sog\\emph{x}")
        assert not rule.matcher.search("\\sogar")

    def test_macro_name_escaped(self):
        """Regex metacharacters in macro names are matched literally"""
        rule = simpleMacro_make("c++", FormatType.CODE)
        assert rule.matcher.search("\\c++{x}")
        assert not rule.matcher.search("\\cc{x}")
        text_rule = textMacro_make("a.b", "AB")
        assert text_rule.matcher.search("\\a.b here")
        assert not text_rule.matcher.search("\\axb here")

    def test_multi_param_render(self):
        spec = MultiParamSpec(
            macro="pair",
            param_count=2,
            param_formats=(FormatType.BOLD, FormatType.ITALIC),
            separators=(" - ",),
            wrapper=("(", ")"),
        )
        assert spec.render(["a", "b"]) == "(\\textbf{a} - \\emph{b})"

    def test_multi_param_missing_format_keeps_content(self):
        spec = MultiParamSpec(macro="m", param_count=2, param_formats=(FormatType.REMOVE,))
        assert spec.render(["a", "b"]) == "b"

    def test_macro_matcher_exact_name(self):
        """\\ntpimd does not match \\ntpimde"""
        spec = RuleTable.default().rule_get("ntpimd")
        assert spec.matcher.search("\\ntpimd{a}{b}")
        assert not spec.matcher.search("\\ntpimde{a}{b}")

    def test_environment_render(self):
        spec = EnvironmentSpec(env_name="hinweis")
        rendered = spec.render("Achtung")
        assert rendered.startswith("\\begin{hinweis}\n\\textbf{\\emph{Achtung}}")
        assert rendered.endswith("\\\\\\\\")

    def test_environment_target_name(self):
        spec = EnvironmentSpec(env_name="tipp", target_env_name="hinweis")
        assert spec.render("T").startswith("\\begin{hinweis}\n")

    def test_special_cleanup(self):
        """Wrapper macros are stripped until nothing changes"""
        spec = SpecialSpec(
            name="mm", opener=r"\\mm\{", mode="cleanup",
            strip_macros=("textbf", "textsf"), wrapper="\\texttt{%s}",
        )
        assert spec.render("\\textbf{\\textsf{a}} b") == "\\texttt{a b}"
