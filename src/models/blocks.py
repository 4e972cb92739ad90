"""
Markdown post-processing models

Data structures shared by the div-block restructurer and the footnote
relocator.
"""

from enum import Enum
from dataclasses import dataclass


class DivStyle(Enum):
    """
    Markdown rendering of a recognized div container type
    """
    CODE = "code"              # fenced code block
    QUOTE = "quote"            # block quote without label
    DEFINITION = "definition"  # label + double-indented first line
    LABELED = "labeled"        # label + block quote
    FALLBACK = "fallback"      # quoted or plain depending on conversion mode


@dataclass
class DivBlock:
    """
    Top-level <div class="..."> block found in converted Markdown

    Nested blocks stay inside content as raw lines until the content itself
    is restructured.

    Attributes:
        type: Value of the class attribute as written
        content: Lines between the opening and the matching closing tag
        start_index: Offset of the opening tag line
        end_index: Offset just past the closing tag line (half-open range)
    """
    type: str
    content: str
    start_index: int
    end_index: int


@dataclass
class Footnote:
    """
    Footnote definition extracted from a Markdown document

    Attributes:
        id: Numeric footnote identifier as text (duplicates are allowed)
        text: Definition text, continuation lines dedented
    """
    id: str
    text: str


@dataclass
class Insertion:
    """
    Planned re-insertion of a footnote definition

    Attributes:
        pos: Target offset in the cleaned document
        id_num: Numeric footnote id, tie-break for equal positions
        block: Text inserted at pos
    """
    pos: int
    id_num: int
    block: str
