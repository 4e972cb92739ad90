"""
Brace-aware argument scanning

Leaf primitives used by every macro rewrite that cannot be expressed as a
flat regular expression:

- brace_extract(): content of one balanced {...} group
- parameters_extract(): N consecutive {...} groups following a macro name

Both scan character by character while tracking nesting depth. A backslash
escapes the following character, so \\{ and \\} never change the depth.

Example:
    >>> text = r"\\sttpUniversalkasten{Title}{Body {nested}}"
    >>> parameters_extract(text, 20, 2).params
    ['Title', 'Body {nested}']
"""

from typing import List

from ..models.extraction import BraceExtraction, ParameterExtraction
from .errors import MissingParameterError, UnbalancedBraceError


def brace_extract(text: str, start: int) -> BraceExtraction:
    """
    Extract a balanced brace group

    Scans forward from the position just after an opening brace, tracking
    depth. Increments on '{', decrements on '}', stops as soon as depth
    reaches 0. Escaped characters are copied verbatim together with their
    backslash and never counted.

    Args:
        text: Source text
        start: Position immediately after the opening '{'

    Returns:
        BraceExtraction with the content (closing brace excluded) and the
        position just past the closing brace

    Raises:
        UnbalancedBraceError: If end of text is reached before depth is 0

    Example:
        For text "{a \\} {b}} tail" scanned from 1:
        Depth tracking: {1 a \\} {2 b }1 }0
        Returns BraceExtraction(content="a \\} {b}", end=10)
    """
    depth = 1
    pos = start
    length = len(text)
    parts: List[str] = []

    while pos < length:
        char = text[pos]
        if char == '\\' and pos + 1 < length:
            parts.append(text[pos:pos + 2])
            pos += 2
            continue
        if char == '{':
            depth += 1
        elif char == '}':
            depth -= 1
            if depth == 0:
                return BraceExtraction(content=''.join(parts), end=pos + 1)
        parts.append(char)
        pos += 1

    raise UnbalancedBraceError(
        f"Unmatched brace opened before position {start}", position=start
    )


def parameters_extract(text: str, start: int, count: int) -> ParameterExtraction:
    """
    Extract exactly `count` consecutive {...} parameters

    Whitespace (including newlines) between the groups is skipped. The
    extraction is all-or-nothing: a missing group fails the whole call.

    Args:
        text: Source text
        start: Position just after the macro name
        count: Number of parameter groups required

    Returns:
        ParameterExtraction with the trimmed parameters and the position
        past the last closing brace

    Raises:
        MissingParameterError: If fewer than `count` groups follow
        UnbalancedBraceError: If a group is never closed
    """
    params: List[str] = []
    pos = start
    length = len(text)

    for _ in range(count):
        while pos < length and text[pos].isspace():
            pos += 1

        if pos >= length or text[pos] != '{':
            raise MissingParameterError(
                f"Expected {count} parameters, found {len(params)} at position {pos}",
                position=pos,
                found=len(params),
                expected=count,
            )

        extraction = brace_extract(text, pos + 1)
        params.append(extraction.content.strip())
        pos = extraction.end

    return ParameterExtraction(params=params, end=pos)
