"""
Extraction and rewrite result models

Type-safe structures returned by the brace scanner and the macro rewriter.
"""

from dataclasses import dataclass
from typing import List


@dataclass
class BraceExtraction:
    r"""
    Result of scanning a balanced {...} group

    Returned by brace_extract() after the matching closing brace was found.

    Attributes:
        content: Text between the braces (closing brace excluded, escapes
                 such as \{ kept verbatim)
        end: Position just past the matching closing brace

    Example:
        For text "{a {b} c} rest" scanned from position 1:
        BraceExtraction(content="a {b} c", end=9)
    """
    content: str
    end: int


@dataclass
class ParameterExtraction:
    """
    Result of extracting N consecutive {...} parameter groups

    Returned by parameters_extract() only when every requested group was
    found; partial results are never returned.

    Attributes:
        params: Trimmed parameter strings, positional (params[0] is #1)
        end: Position just past the last closing brace

    Example:
        For "\\box{ A }{B} tail" scanned from position 4 with count=2:
        ParameterExtraction(params=["A", "B"], end=12)
    """
    params: List[str]
    end: int


@dataclass
class RewriteResult:
    """
    Result of running the macro rewrite engine over a document

    Attributes:
        text: Rewritten LaTeX source
        replacements: Number of substitutions that changed the text
    """
    text: str
    replacements: int
