r"""
Macro pattern table for tex2lia

The RuleTable is the single source of truth for which LaTeX constructs the
rewrite engine recognizes. It is an immutable, ordered collection of tagged
rule variants (see models.rules); insertion order defines application order
within a category.

New macros are added by extending the DEFAULT_* tuples below or by building
a custom table:

    table = RuleTable.default().rules_extend(
        RewriteRule("kbd", MacroCategory.SIMPLE, r"\\kbd\{([^}]*)\}", r"\texttt{\1}")
    )
"""

import re
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..models.rules import (
    BoxSpec,
    EnvironmentSpec,
    FormatType,
    MacroCategory,
    MultiParamSpec,
    RewriteRule,
    SpecialSpec,
    TableRule,
    format_apply,
)


def simpleMacro_make(macro: str, target_format: FormatType, description: str = "") -> RewriteRule:
    """
    Build a SIMPLE rule: \\macro{x} → x rendered with target_format

    The single argument is matched flat ([^}]*), so nested braces are not
    supported for these macros.
    """
    template = format_apply(target_format, "\\1") if target_format != FormatType.REMOVE else ""
    return RewriteRule(
        name=macro,
        category=MacroCategory.SIMPLE,
        pattern=r"\\" + re.escape(macro) + r"\{([^}]*)\}",
        action=template,
        description=description or f"Replaces \\{macro}{{}} with {target_format.value}",
    )


def textMacro_make(macro: str, replacement: str, description: str = "") -> RewriteRule:
    """
    Build a TEXT rule: bare \\macro (word boundary) → literal replacement
    """
    return RewriteRule(
        name=macro,
        category=MacroCategory.TEXT,
        pattern=r"\\" + re.escape(macro) + r"\b",
        action=replacement,
        description=description or f"Replaces \\{macro} with '{replacement}'",
    )


# ============================================================================
# Content builders for box macros
# ============================================================================

def definitionBox_build(params: Sequence[str]) -> str:
    """scale (ignored), term, definition, explanation"""
    content = f"\\textbf{{\\emph{{{params[1]}}}}}\n\n"
    if params[2].strip():
        content += f"\\emph{{{params[2]}}}\n\n"
    content += f"{params[3]}\n"
    return content


def universalBox_build(params: Sequence[str]) -> str:
    """heading, body"""
    return f"\\textbf{{\\emph{{{params[0]}}}}}\n\n{params[1]}\n"


def authorBox_build(params: Sequence[str]) -> str:
    """
    name, birth year, death year, text, image file, capture year, image source

    Lifespan is rendered as (birth--death) when both years are given and as
    (*birth) when only the birth year is known.
    """
    name, born, died, text, image, captured, source = params[:7]
    content = f"\\includegraphics[width=2.5cm]{{{image}}}\n\n"
    content += f"\\textbf{{{name}}}"
    if born.strip():
        if died.strip():
            content += f" \\textbf{{({born}--{died})}}"
        else:
            content += f" \\textbf{{(*{born})}}"
    content += f"\n\n{text}\n\n"
    content += f"\\textit{{\\small Bildquelle: {source} ({captured})}}\n"
    return content


# ============================================================================
# Default tables
# ============================================================================

DEFAULT_SPECIAL: Tuple[SpecialSpec, ...] = (
    SpecialSpec(
        name="textrm",
        opener=r"\\textrm\{",
        mode="unwrap",
        description="Removes \\textrm{}, keeps its content",
    ),
    SpecialSpec(
        name="sttpMindMapText",
        opener=r"\\sttpMindMapText(?:\[[^\]]*\])?\{",
        mode="cleanup",
        strip_macros=("textbf", "textsf"),
        wrapper="\\texttt{%s}",
        description="Mind-map text as inline code without bold/sans wrappers",
    ),
)

DEFAULT_SIMPLE: Tuple[RewriteRule, ...] = (
    simpleMacro_make("ffc", FormatType.CODE, "Character highlighting"),
    simpleMacro_make("fftt", FormatType.CODE, "Character highlighting"),
    simpleMacro_make("ausgabeInline", FormatType.CODE, "Inline program output"),
)

DEFAULT_MULTI_PARAM: Tuple[MultiParamSpec, ...] = (
    MultiParamSpec(
        macro="ntpimde",
        param_count=2,
        param_formats=(FormatType.REMOVE, FormatType.REMOVE),
        description="Removes margin note",
    ),
    MultiParamSpec(
        macro="ntpimd",
        param_count=2,
        param_formats=(FormatType.REMOVE, FormatType.REMOVE),
        description="Removes margin note",
    ),
)

DEFAULT_TEXT: Tuple[RewriteRule, ...] = (
    textMacro_make("notOp", "$\\text{NOT}$"),
    textMacro_make("andOp", "$\\text{AND}$"),
    textMacro_make("orOp", "$\\text{OR}$"),
    textMacro_make("xorOp", "$\\text{XOR}$"),
    textMacro_make("andnotOp", "$\\text{AND NOT}$"),
    # \sog mostly precedes \emph{...}; the trailing space keeps them apart
    textMacro_make("sog", "sog. "),
)

DEFAULT_ENVIRONMENTS: Tuple[EnvironmentSpec, ...] = (
    EnvironmentSpec(env_name="hinweis", description="Note box with optional title"),
    EnvironmentSpec(env_name="sprachvgl", description="Language comparison box with optional title"),
    EnvironmentSpec(env_name="experten", description="Expert knowledge box with optional title"),
    EnvironmentSpec(env_name="exkurs", description="Digression box with optional title"),
)

DEFAULT_BOXES: Tuple[BoxSpec, ...] = (
    BoxSpec(
        macro="sttpDefinitionskasten",
        target_env="Definitionskasten",
        param_count=4,
        content_builder=definitionBox_build,
        description="Definition box with term, definition and text",
    ),
    BoxSpec(
        macro="sttpUniversalkasten",
        target_env="Universalkasten",
        param_count=2,
        content_builder=universalBox_build,
        description="Generic box with heading and content",
    ),
    BoxSpec(
        macro="sttpAutorenkasten",
        target_env="Autorenkasten",
        param_count=7,
        content_builder=authorBox_build,
        description="Author box with image and lifespan",
    ),
)


@dataclass(frozen=True)
class RuleTable:
    """
    Immutable, ordered registry of rewrite rules

    Passed to MacroRewriter at construction time, so several engines with
    different rule sets can coexist (e.g. in tests).

    Attributes:
        rules: All rules in declaration order
    """
    rules: Tuple[TableRule, ...] = ()

    @classmethod
    def default(cls) -> "RuleTable":
        """Table with the built-in course macros"""
        return cls(
            rules=(
                *DEFAULT_SPECIAL,
                *DEFAULT_SIMPLE,
                *DEFAULT_MULTI_PARAM,
                *DEFAULT_TEXT,
                *DEFAULT_ENVIRONMENTS,
                *DEFAULT_BOXES,
            )
        )

    def rules_byCategory(self, category: MacroCategory) -> List[TableRule]:
        """Get all rules of a category in declaration order"""
        return [rule for rule in self.rules if rule.category == category]

    def rules_extend(self, *rules: TableRule) -> "RuleTable":
        """Return a new table with additional rules appended"""
        return RuleTable(rules=self.rules + tuple(rules))

    def rule_get(self, name: str) -> TableRule:
        """
        Look up a rule by name (macro or environment name for the structured variants)

        Raises:
            KeyError: If no rule has that name
        """
        for rule in self.rules:
            if rule_name(rule) == name:
                return rule
        raise KeyError(name)

    def __len__(self) -> int:
        return len(self.rules)


def rule_name(rule: TableRule) -> str:
    """Identifier of any rule variant"""
    if isinstance(rule, (MultiParamSpec, BoxSpec)):
        return rule.macro
    if isinstance(rule, EnvironmentSpec):
        return rule.env_name
    return rule.name
