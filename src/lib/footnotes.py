"""
Footnote relocator

Pandoc collects all footnote definitions at the end of the document. In a
LiaScript course every section becomes a slide, so definitions far away
from their references are never visible. The relocator moves each
definition to the end of the section that references it, i.e. right before
the next heading after the reference.

Two passes:
    1. footnotes_extract(): remove all definitions (with their indented
       continuation lines) from the document
    2. footnotes_relocate(): insert a definition after every reference,
       before the following heading or at the end of the document

Example:
    >>> md = "# A\\n\\nText[^1]\\n\\n# B\\n\\n[^1]: Note\\n"
    >>> print(footnotes_relocate(md))
    # A
    <BLANKLINE>
    Text[^1]
    <BLANKLINE>
    [^1]: Note
    <BLANKLINE>
    # B
    <BLANKLINE>
"""

import re
from typing import List, Set, Tuple

from ..models.blocks import Footnote, Insertion
from .log import LOG


DEFINITION_START = re.compile(r"^\[\^(\d+)\]:\s*(.*)$")
DEFINITION_ANY = re.compile(r"^\[\^\d+\]:")
CONTINUATION = re.compile(r"^( {2,}|\t)")
HEADING = re.compile(r"^#{1,6}[ \t].+$", re.MULTILINE)
EXCESS_NEWLINES = re.compile(r"\n{3,}")


def continuation_follows(lines: List[str], index: int) -> bool:
    """Check whether an indented line follows a run of blank lines"""
    while index < len(lines) and not lines[index].strip():
        index += 1
    return index < len(lines) and bool(CONTINUATION.match(lines[index])) and not DEFINITION_ANY.match(lines[index])


def footnotes_extract(markdown: str) -> Tuple[str, List[Footnote]]:
    """
    Remove all footnote definitions from a document

    A definition starts with "[^<digits>]: text". Following lines indented
    by two or more spaces (or a tab) belong to it and are dedented. Blank
    lines belong to it only if another indented line follows.

    Args:
        markdown: Markdown text

    Returns:
        (cleaned document, footnotes in document order); the cleaned
        document has no runs of more than one blank line and ends with
        exactly one newline
    """
    lines = re.split(r"\r?\n", markdown)
    footnotes: List[Footnote] = []
    removed: Set[int] = set()

    i = 0
    while i < len(lines):
        line = lines[i]
        start = DEFINITION_START.match(line) if line else None
        if not start:
            i += 1
            continue

        buffer = [start.group(2)]
        removed.add(i)
        j = i + 1
        while j < len(lines):
            following = lines[j]
            if DEFINITION_ANY.match(following):
                break
            if not following.strip():
                if not continuation_follows(lines, j):
                    break
                buffer.append("")
            elif CONTINUATION.match(following):
                buffer.append(CONTINUATION.sub("", following, count=1))
            else:
                break
            removed.add(j)
            j += 1

        footnotes.append(Footnote(id=start.group(1), text="\n".join(buffer).rstrip()))
        i = j

    cleaned = "\n".join(line for index, line in enumerate(lines) if index not in removed)
    cleaned = EXCESS_NEWLINES.sub("\n\n", cleaned).rstrip() + "\n"
    LOG(f"Extracted {len(footnotes)} footnote definition(s)", level=2)
    return cleaned, footnotes


def insertions_plan(text: str, footnotes: List[Footnote]) -> List[Insertion]:
    """
    One insertion per reference of each footnote

    Repeated references to the same footnote produce repeated insertions.
    The result is sorted by position, then by numeric footnote id.
    """
    insertions: List[Insertion] = []
    for footnote in footnotes:
        marker = f"[^{footnote.id}]"
        block = f"\n[^{footnote.id}]: " + footnote.text.replace("\n", "\n    ") + "\n\n"
        ref_index = text.find(marker)
        while ref_index != -1:
            heading = HEADING.search(text, ref_index)
            position = heading.start() if heading else len(text)
            insertions.append(Insertion(pos=position, id_num=int(footnote.id), block=block))
            ref_index = text.find(marker, ref_index + len(marker))
    insertions.sort(key=lambda insertion: (insertion.pos, insertion.id_num))
    return insertions


def footnotes_relocate(markdown: str) -> str:
    """
    Move every footnote definition to the end of its referencing section

    Args:
        markdown: Markdown text with definitions anywhere

    Returns:
        Markdown with definitions placed before the heading that follows
        each reference, or at the end of the document
    """
    text, footnotes = footnotes_extract(markdown)
    insertions = insertions_plan(text, footnotes)

    for insertion in reversed(insertions):
        left = re.sub(r"\n+$", "\n", text[:insertion.pos])
        right = re.sub(r"^\n+", "\n", text[insertion.pos:])
        text = left + insertion.block + right

    LOG(f"Inserted {len(insertions)} footnote definition(s)", level=2)
    text = EXCESS_NEWLINES.sub("\n\n", text)
    return text.rstrip() + "\n"
