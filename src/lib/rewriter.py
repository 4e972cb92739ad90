"""
Macro rewrite engine for tex2lia

Interprets a RuleTable over a LaTeX document and replaces project-specific
macros with standard LaTeX that pandoc understands. The rewrite runs as a
fixed sequence of steps; later steps see the output of earlier ones:

     1. special unwrap rules        (\\textrm{...})
     2. simple rules                (\\ffc{x} → \\texttt{x})
     3. multi-parameter macros      (\\ntpimd{a}{b})
     4. text rules                  (\\notOp → $\\text{NOT}$)
     5. \\adjincludegraphics and \\liwr
     6. environments with title     (\\begin{hinweis}[Title])
     7. special cleanup rules       (\\sttpMindMapText{...})
     8. bibliography items          (\\sttpKommLitItem...)
     9. boxes                       (\\sttpUniversalkasten{h}{b})
    10. citations                   (\\cite[...]{key}, \\cite{key})
    11. \\minisec

Brace-counted steps scan explicitly: after a successful rewrite the search
resumes at the start of the substitution, so a macro nested in a parameter
of another macro is picked up as well. A malformed call is logged with its
position and left untouched.

Example:
    >>> rewriter = MacroRewriter()
    >>> rewriter.text_rewrite(r"\\ffc{x} \\notOp").text
    '\\\\texttt{x} $\\\\text{NOT}$'
"""

import re
from typing import Callable, List, Match, Optional, Pattern, Sequence, Tuple

from ..models.extraction import RewriteResult
from ..models.rules import (
    BoxSpec,
    EnvironmentSpec,
    MacroCategory,
    MultiParamSpec,
    RewriteRule,
    SpecialSpec,
    macroMatcher_make,
)
from .braces import brace_extract, parameters_extract
from .errors import ExtractionError, MissingParameterError
from .log import LOG, WARN
from .rules import RuleTable


StepOutcome = Tuple[str, int]

# Handler of a brace-counted match: returns (replacement, end of the call)
ScanHandler = Callable[[str, Match], Tuple[str, int]]

GROUP_REFERENCE = re.compile(r"\\(\d)")


def template_expand(template: str, match: Match) -> str:
    r"""
    Fill \1..\9 references of a replacement template

    Backslashes other than group references are kept literally, so a
    template such as \texttt{\1} keeps its \t. Unmatched groups expand to
    the empty string.
    """
    return GROUP_REFERENCE.sub(lambda ref: match.group(int(ref.group(1))) or "", template)


def includeGraphics_build(options: Optional[str], filename: str) -> str:
    """\\adjincludegraphics[opts]{file} → \\includegraphics[opts]{file}"""
    if options:
        return f"\\includegraphics[{options}]{{{filename}}}"
    return f"\\includegraphics{{{filename}}}"


def bibItem_render(params: Sequence[str], with_footnote: bool) -> str:
    """
    Bibliography entry as a KommLitItem container

    Parameters are author, year, title, cite key, two unused slots and the
    description; the footnote variant carries the footnote text last.
    """
    author, year, title, cite = params[0], params[1], params[2], params[3]
    description = params[6]
    header = f"\\emph{{{author}}} \\emph{{{year}}}. \\emph{{{title}}} [\\textbf{{{cite}}}]"
    if with_footnote:
        header += f"\\footnote{{{params[7]}}}"
    return (
        "\\begin{KommLitItem}\n\n"
        f"{header}\n\n"
        f"{description}\n\n"
        "\\end{KommLitItem}\n\n"
    )


# ============================================================================
# Hard-coded structural rules
# ============================================================================

ADJINCLUDEGRAPHICS = RewriteRule(
    name="adjincludegraphics",
    category=MacroCategory.SPECIAL,
    pattern=r"\\adjincludegraphics(\[([^\]]*)\])?\{([^}]+)\}",
    action=lambda match: includeGraphics_build(match.group(2), match.group(3)),
    description="Replaces \\adjincludegraphics with \\includegraphics",
)

LIWR_OPTIONAL = RewriteRule(
    name="liwrOptional",
    category=MacroCategory.SPECIAL,
    pattern=r"\\liwr\[([^\]]*)\]\{([^}]*)\}",
    action=r"\texttt{\2}",
    description="Inline listing with options as inline code",
)

LIWR = RewriteRule(
    name="liwr",
    category=MacroCategory.SPECIAL,
    pattern=r"\\liwr\{([^}]*)\}",
    action=r"\texttt{\1}",
    description="Inline listing as inline code",
)

CITE_OPTIONAL = RewriteRule(
    name="citeOptional",
    category=MacroCategory.SPECIAL,
    pattern=r"\\cite\[([^\]]+)\]\{([^}]+)\}",
    action=r"[\textbf{\2}]",
    description="Citation with page reference as bold key",
)

CITE = RewriteRule(
    name="cite",
    category=MacroCategory.SPECIAL,
    pattern=r"\\cite\{([^}]+)\}",
    action=r"[\textbf{\1}]",
    description="Citation as bold key",
)

MINISEC = RewriteRule(
    name="minisec",
    category=MacroCategory.SPECIAL,
    pattern=r"\\minisec\{([^}]*)\}",
    action="\\textbf{\\emph{\\1}}\\hfill\\break\n",
    description="Mini section heading as bold italic line",
)

# (macro, parameter count, carries footnote)
BIB_ITEMS: Tuple[Tuple[str, int, bool], ...] = (
    ("sttpKommLitItem", 7, False),
    ("sttpKommLitItemMitFussnote", 8, True),
)


class MacroRewriter:
    """
    Rewrites project macros according to a RuleTable

    The engine holds no state besides its (immutable) table, so one
    instance can be reused for any number of documents.

    Attributes:
        rules: Rule table interpreted by this engine
    """

    def __init__(self, rules: Optional[RuleTable] = None) -> None:
        self.rules = rules if rules is not None else RuleTable.default()
        self._bibMatchers: List[Tuple[str, Pattern[str], int, bool]] = [
            (macro, macroMatcher_make(macro), count, footnote) for macro, count, footnote in BIB_ITEMS
        ]

    def text_rewrite(self, text: str) -> RewriteResult:
        """
        Run all rewrite steps over a document

        Args:
            text: LaTeX source

        Returns:
            RewriteResult with the rewritten text and the number of
            substitutions that changed it
        """
        steps: List[Callable[[str], StepOutcome]] = [
            lambda t: self.specials_apply(t, "unwrap"),
            lambda t: self.flatRules_apply(t, self.rules.rules_byCategory(MacroCategory.SIMPLE)),
            self.multiParams_apply,
            lambda t: self.flatRules_apply(t, self.rules.rules_byCategory(MacroCategory.TEXT)),
            lambda t: self.flatRules_apply(t, [ADJINCLUDEGRAPHICS, LIWR_OPTIONAL, LIWR]),
            self.environments_apply,
            lambda t: self.specials_apply(t, "cleanup"),
            self.bibItems_apply,
            self.boxes_apply,
            lambda t: self.flatRules_apply(t, [CITE_OPTIONAL, CITE]),
            lambda t: self.flatRules_apply(t, [MINISEC]),
        ]

        total = 0
        for step in steps:
            text, count = step(text)
            total += count

        LOG(f"Macro rewrite: {total} replacement(s)", level=2)
        return RewriteResult(text=text, replacements=total)

    # ------------------------------------------------------------------
    # Flat regex rules
    # ------------------------------------------------------------------

    def flatRules_apply(self, text: str, rules: Sequence[RewriteRule]) -> StepOutcome:
        """Apply flat regex rules in order, counting effective substitutions"""
        total = 0
        for rule in rules:
            text, count = self.flatRule_apply(text, rule)
            total += count
        return text, total

    def flatRule_apply(self, text: str, rule: RewriteRule) -> StepOutcome:
        count = 0

        def replacement_build(match: Match) -> str:
            nonlocal count
            if callable(rule.action):
                replacement = rule.action(match)
            else:
                replacement = template_expand(rule.action, match)
            if replacement != match.group(0):
                count += 1
            return replacement

        text = rule.matcher.sub(replacement_build, text)
        if count:
            LOG(f"Rule {rule.name}: {count} replacement(s)", level=3)
        return text, count

    # ------------------------------------------------------------------
    # Brace-counted rules
    # ------------------------------------------------------------------

    def scan_apply(self, text: str, matcher: Pattern[str], handler: ScanHandler, label: str) -> StepOutcome:
        """
        Generic brace-counted scan loop

        Args:
            text: Document text
            matcher: Pattern locating the start of a call
            handler: Builds (replacement, end) for one match; may raise
                     ExtractionError
            label: Macro name used in warnings

        Returns:
            Rewritten text and number of effective substitutions
        """
        count = 0
        pos = 0
        while True:
            match = matcher.search(text, pos)
            if not match:
                break
            try:
                replacement, end = handler(text, match)
            except MissingParameterError as e:
                WARN(
                    f"Incomplete \\{label} at position {match.start()}: "
                    f"found {e.found} of {e.expected} parameters"
                )
                pos = match.end()
                continue
            except ExtractionError as e:
                WARN(f"Malformed \\{label} at position {match.start()}: {e}")
                pos = match.end()
                continue

            original = text[match.start():end]
            text = text[:match.start()] + replacement + text[end:]
            if replacement != original:
                count += 1
            # Resume at the substitution unless it reproduces a call that is no shorter
            if replacement == original or (
                len(replacement) >= len(original) and matcher.match(text, match.start())
            ):
                pos = match.start() + len(replacement)
            else:
                pos = match.start()
        return text, count

    def specials_apply(self, text: str, mode: str) -> StepOutcome:
        """Unwrap or clean up brace-counted special macros of one mode"""
        total = 0
        for spec in self.rules.rules_byCategory(MacroCategory.SPECIAL):
            if not isinstance(spec, SpecialSpec) or spec.mode != mode:
                continue

            def handler(source: str, match: Match, spec: SpecialSpec = spec) -> Tuple[str, int]:
                extraction = brace_extract(source, match.end())
                return spec.render(extraction.content), extraction.end

            text, count = self.scan_apply(text, spec.matcher, handler, spec.name)
            total += count
        return text, total

    def multiParams_apply(self, text: str) -> StepOutcome:
        total = 0
        for spec in self.rules.rules_byCategory(MacroCategory.MULTI_PARAM):
            if not isinstance(spec, MultiParamSpec):
                continue

            def handler(source: str, match: Match, spec: MultiParamSpec = spec) -> Tuple[str, int]:
                extraction = parameters_extract(source, match.end(), spec.param_count)
                return spec.render(extraction.params), extraction.end

            text, count = self.scan_apply(text, spec.matcher, handler, spec.macro)
            total += count
        return text, total

    def boxes_apply(self, text: str) -> StepOutcome:
        total = 0
        for spec in self.rules.rules_byCategory(MacroCategory.BOX):
            if not isinstance(spec, BoxSpec):
                continue

            def handler(source: str, match: Match, spec: BoxSpec = spec) -> Tuple[str, int]:
                extraction = parameters_extract(source, match.end(), spec.param_count)
                return spec.render(extraction.params), extraction.end

            text, count = self.scan_apply(text, spec.matcher, handler, spec.macro)
            total += count
        return text, total

    def bibItems_apply(self, text: str) -> StepOutcome:
        total = 0
        for macro, matcher, param_count, with_footnote in self._bibMatchers:

            def handler(
                source: str, match: Match, param_count: int = param_count, with_footnote: bool = with_footnote
            ) -> Tuple[str, int]:
                extraction = parameters_extract(source, match.end(), param_count)
                return bibItem_render(extraction.params, with_footnote), extraction.end

            text, count = self.scan_apply(text, matcher, handler, macro)
            total += count
        return text, total

    # ------------------------------------------------------------------
    # Environments
    # ------------------------------------------------------------------

    def environments_apply(self, text: str) -> StepOutcome:
        """Move the optional [Title] of known environments into their body"""
        total = 0
        for spec in self.rules.rules_byCategory(MacroCategory.ENVIRONMENT):
            if not isinstance(spec, EnvironmentSpec):
                continue
            text, count = spec.matcher.subn(lambda match, spec=spec: spec.render(match.group(1)), text)
            total += count
        return text, total
