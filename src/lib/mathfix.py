"""
Math normalizer

Rewrites the math notation pandoc's gfm writer produces into the dollar
notation LiaScript renders with KaTeX.
"""

import re

from .log import LOG


MATH_BLOCK = re.compile(r"^[ \t]*``` ?math\s*\n(.*?)\s*```", re.MULTILINE | re.DOTALL)
INLINE_MATH = re.compile(r"\$`([^`]+)`\$")
SPACE_BEFORE_MATH = re.compile(r"`([^`]+) `(\$[^$]+\$)")
SPACE_AFTER_MATH = re.compile(r"(\$[^$]+\$)` ([^`]+)`")


def mathBlocks_convert(text: str) -> str:
    """```math fences → $$ display math"""
    return MATH_BLOCK.sub(lambda match: f"$$\n{match.group(1)}\n$$", text)


def inlineMath_unquote(text: str) -> str:
    """$`x`$ → $x$"""
    return INLINE_MATH.sub(lambda match: f"${match.group(1)}$", text)


def mathSpacing_fix(text: str) -> str:
    """
    Move spaces between inline code and a formula outside the backticks

    Occurs for formulas inside \\texttt{...}:
        `IF NOT `$b$   →  `IF NOT` $b$
        $b$` THEN`     →  $b$ `THEN`
    """
    text = SPACE_BEFORE_MATH.sub(lambda match: f"`{match.group(1)}` {match.group(2)}", text)
    return SPACE_AFTER_MATH.sub(lambda match: f"{match.group(1)} `{match.group(2)}`", text)


def math_normalize(text: str) -> str:
    """Apply all math fixes in order"""
    result = mathBlocks_convert(text)
    result = inlineMath_unquote(result)
    result = mathSpacing_fix(result)
    if result != text:
        LOG("Normalized math notation", level=2)
    return result
