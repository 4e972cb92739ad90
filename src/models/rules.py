"""
Rewrite rule specification models

Defines the tagged rule variants that make up the macro pattern table:
flat regex rules, multi-parameter macros, environments with an optional
title, content-builder boxes and brace-counted special macros. Each variant
carries its MacroCategory so a single interpreter (MacroRewriter) can
dispatch on it.
"""

import re
from enum import Enum
from dataclasses import dataclass, field
from functools import cached_property
from typing import Callable, List, Optional, Pattern, Sequence, Tuple, Union


class FormatType(Enum):
    """
    Formatting applied to an extracted macro parameter

    The rendering is LaTeX, since rewritten macros are handed to pandoc
    afterwards (see FORMAT_TEMPLATES).
    """
    BOLD = "bold"                  # \textbf{...}        → **...**
    ITALIC = "italic"              # \emph{...}          → *...*
    BOLD_ITALIC = "bold_italic"    # \textbf{\emph{...}} → ***...***
    CODE = "code"                  # \texttt{...}        → `...`
    MATH_INLINE = "math_inline"    # $...$
    REMOVE = "remove"              # parameter dropped
    CONTENT = "content"            # parameter kept verbatim


FORMAT_TEMPLATES = {
    FormatType.BOLD: "\\textbf{%s}",
    FormatType.ITALIC: "\\emph{%s}",
    FormatType.BOLD_ITALIC: "\\textbf{\\emph{%s}}",
    FormatType.CODE: "\\texttt{%s}",
    FormatType.MATH_INLINE: "$%s$",
    FormatType.REMOVE: "",
    FormatType.CONTENT: "%s",
}


def format_apply(format_type: FormatType, text: str) -> str:
    """
    Render a parameter according to its FormatType

    Example:
        >>> format_apply(FormatType.BOLD_ITALIC, "Title")
        '\\\\textbf{\\\\emph{Title}}'
    """
    template = FORMAT_TEMPLATES[format_type]
    if "%s" not in template:
        return template
    return template.replace("%s", text)


def macroMatcher_make(macro: str) -> Pattern[str]:
    r"""
    Pattern for \\macro that does not match longer names (\\ntpimd vs \\ntpimde)
    """
    return re.compile(r"\\" + re.escape(macro) + r"(?![A-Za-z@])")


class MacroCategory(Enum):
    """
    Categories of rewrite rules

    Determines how a rule's action is invoked and at which step of the
    rewrite sequence it runs.
    """
    SIMPLE = "simple"              # \ffc{x} → \texttt{x}
    MULTI_PARAM = "multi_param"    # \ntpimd{a}{b} → formatted/joined params
    TEXT = "text"                  # \notOp → $\text{NOT}$
    ENVIRONMENT = "environment"    # \begin{hinweis}[Title]
    BOX = "box"                    # \sttpUniversalkasten{h}{b}
    SPECIAL = "special"            # brace-counted unwrap / cleanup


RuleAction = Union[str, Callable[..., str]]


@dataclass(frozen=True)
class RewriteRule:
    r"""
    Flat regex rewrite rule

    Attributes:
        name: Rule identifier (usually the macro name)
        category: SIMPLE or TEXT for table rules; hard-coded engine rules use
                  SPECIAL
        pattern: Regular expression source
        action: Replacement template (\1-style group references) or a
                builder called with the captured groups
        description: Human-readable description
        flags: re module flags used to compile the pattern

    Example:
        RewriteRule(name="ffc", category=MacroCategory.SIMPLE,
                    pattern=r"\\ffc\{([^}]*)\}", action=r"\texttt{\1}")
    """
    name: str
    category: MacroCategory
    pattern: str
    action: RuleAction
    description: str = ""
    flags: int = 0

    @cached_property
    def matcher(self) -> Pattern[str]:
        """Compiled pattern (compiled once per rule)"""
        return re.compile(self.pattern, self.flags)

    @property
    def group_count(self) -> int:
        """Number of capture groups the matcher defines"""
        return self.matcher.groups


@dataclass(frozen=True)
class MultiParamSpec:
    """
    Macro with several brace parameters, each formatted individually

    Attributes:
        macro: Macro name without backslash
        param_count: Number of {...} groups to extract
        param_formats: FormatType per parameter (missing entries → CONTENT)
        separators: separators[i] is emitted after parameter i
        wrapper: Optional (before, after) pair around the joined result
        description: Human-readable description
    """
    macro: str
    param_count: int
    param_formats: Tuple[FormatType, ...]
    separators: Tuple[str, ...] = ()
    wrapper: Optional[Tuple[str, str]] = None
    description: str = ""
    category: MacroCategory = field(default=MacroCategory.MULTI_PARAM, init=False)

    @cached_property
    def matcher(self) -> Pattern[str]:
        """Macro name, not followed by further letters"""
        return macroMatcher_make(self.macro)

    def render(self, params: Sequence[str]) -> str:
        """
        Format and join extracted parameters

        Args:
            params: Exactly param_count trimmed parameters

        Returns:
            Replacement text for the whole macro call
        """
        parts: List[str] = []
        for index, param in enumerate(params):
            fmt = self.param_formats[index] if index < len(self.param_formats) else FormatType.CONTENT
            parts.append(format_apply(fmt, param))
            if index < len(self.separators):
                parts.append(self.separators[index])
        result = "".join(parts)
        if self.wrapper:
            result = self.wrapper[0] + result + self.wrapper[1]
        return result


@dataclass(frozen=True)
class EnvironmentSpec:
    r"""
    Environment whose optional [Title] argument is moved into its body

    \begin{hinweis}[Achtung] becomes
    \begin{hinweis}
    \textbf{\emph{Achtung}}\\\\
    """
    env_name: str
    target_env_name: Optional[str] = None
    title_format: FormatType = FormatType.BOLD_ITALIC
    separator: str = "\\\\\\\\"
    description: str = ""
    category: MacroCategory = field(default=MacroCategory.ENVIRONMENT, init=False)

    @cached_property
    def matcher(self) -> Pattern[str]:
        return re.compile(r"\\begin\{" + re.escape(self.env_name) + r"\}\[([^\]]+)\]")

    def render(self, title: str) -> str:
        target = self.target_env_name or self.env_name
        return f"\\begin{{{target}}}\n{format_apply(self.title_format, title)}{self.separator}"


@dataclass(frozen=True)
class BoxSpec:
    """
    Complex box macro turned into a \\begin{Env}...\\end{Env} container

    Attributes:
        macro: Macro name without backslash
        target_env: Environment name emitted (later recognized as a div type)
        param_count: Number of {...} groups to extract
        content_builder: Builds the container body from the parameters
        description: Human-readable description
    """
    macro: str
    target_env: str
    param_count: int
    content_builder: Callable[[Sequence[str]], str]
    description: str = ""
    category: MacroCategory = field(default=MacroCategory.BOX, init=False)

    @cached_property
    def matcher(self) -> Pattern[str]:
        return macroMatcher_make(self.macro)

    def render(self, params: Sequence[str]) -> str:
        content = self.content_builder(params)
        return f"\\begin{{{self.target_env}}}\n\n{content}\\end{{{self.target_env}}}"


@dataclass(frozen=True)
class SpecialSpec:
    r"""
    Brace-counted macro that cannot be expressed as a flat regex

    Modes:
        unwrap:  \textrm{a {b} c} → a {b} c
        cleanup: \sttpMindMapText[x]{\textbf{a}} → \texttt{a}; the macros in
                 strip_macros are removed from the content until nothing
                 changes any more, then the result is put into wrapper

    Attributes:
        name: Rule identifier
        opener: Regex matching the macro up to and including its opening brace
        mode: "unwrap" or "cleanup"
        strip_macros: Macros stripped (content kept) in cleanup mode
        wrapper: Template for the cleaned content (%s placeholder)
    """
    name: str
    opener: str
    mode: str = "unwrap"
    strip_macros: Tuple[str, ...] = ()
    wrapper: str = "%s"
    description: str = ""
    category: MacroCategory = field(default=MacroCategory.SPECIAL, init=False)

    @cached_property
    def matcher(self) -> Pattern[str]:
        return re.compile(self.opener)

    def render(self, content: str) -> str:
        if self.mode == "cleanup":
            content = self.content_clean(content)
        return self.wrapper.replace("%s", content)

    def content_clean(self, content: str) -> str:
        """Strip wrapper macros repeatedly until a fixpoint is reached"""
        strippers = [re.compile(r"\\" + re.escape(macro) + r"\{(.+?)\}") for macro in self.strip_macros]
        previous = None
        while previous != content:
            previous = content
            for stripper in strippers:
                content = stripper.sub(lambda m: m.group(1), content)
        return content


TableRule = Union[RewriteRule, MultiParamSpec, EnvironmentSpec, BoxSpec, SpecialSpec]
