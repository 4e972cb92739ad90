"""
Div-block restructurer

Pandoc keeps LaTeX environments it does not know as raw
<div class="Env"> ... </div> blocks in GitHub-flavoured Markdown. This
module turns the known container types into Markdown constructs LiaScript
renders (fenced code, block quotes with a label) and leaves everything else
as it is.

Blocks are handled inside-out: the content of a known block is
restructured first, then the block itself is converted. Unknown types are
left verbatim, including their content.
"""

import re
from typing import Dict, List, Optional

from ..config import appsettings
from ..models.blocks import DivBlock, DivStyle
from .log import LOG, WARN


DIV_OPEN = re.compile(r'<div\s+class="([^"]+)"[^>]*>', re.IGNORECASE)
DIV_CLOSE = "</div>"
KOMMLITITEM_OPEN = re.compile(r'<div\s+class="KommLitItem">')
KOMMLITITEM_SPACED = '<div class="KommLitItem" style="margin: 1.5em 0;">'
SPAN_END = re.compile(r"</span>\s*\n")

DIV_STYLES: Dict[str, DivStyle] = {
    "codekurz": DivStyle.CODE,
    "ausgabe": DivStyle.CODE,
    "eingabe": DivStyle.CODE,
    "synkurz": DivStyle.CODE,
    "universalkasten": DivStyle.QUOTE,
    "tcolorbox": DivStyle.QUOTE,
    "autorenkasten": DivStyle.QUOTE,
    "picture": DivStyle.QUOTE,
    "hinweis": DivStyle.LABELED,
    "sprachvgl": DivStyle.LABELED,
    "experten": DivStyle.LABELED,
    "exkurs": DivStyle.LABELED,
    "definitionskasten": DivStyle.DEFINITION,
}

DIV_LABELS: Dict[str, str] = {
    "hinweis": "Hinweis ⚠️",
    "sprachvgl": "Sprachvergleich 🗣️",
    "experten": "Expertenwissen 🧠",
    "exkurs": "Exkurs ⛕",
    "definitionskasten": "Definition 📓",
}


def divBlocks_findTopLevel(markdown: str) -> List[DivBlock]:
    """
    Find the outermost <div class="..."> blocks of a document

    Scans line by line with a depth counter. Opening tags are searched in
    the stripped line; a closing tag must be the only content of its line.
    Nested tags become part of the enclosing block's content.

    Args:
        markdown: Markdown text

    Returns:
        Top-level blocks in document order; an unclosed block at the end
        of the text is not reported
    """
    blocks: List[DivBlock] = []
    depth = 0
    char_index = 0
    block_type = ""
    block_start = 0
    content_lines: List[str] = []

    for line in markdown.split("\n"):
        stripped = line.strip()
        opening = DIV_OPEN.search(stripped)

        if opening:
            depth += 1
            if depth == 1:
                block_type = opening.group(1).strip() or "text"
                block_start = char_index
                content_lines = []
            else:
                content_lines.append(line)
        elif stripped == DIV_CLOSE and depth > 0:
            depth -= 1
            if depth == 0:
                blocks.append(
                    DivBlock(
                        type=block_type,
                        content="\n".join(content_lines),
                        start_index=block_start,
                        end_index=char_index + len(line) + 1,
                    )
                )
            else:
                content_lines.append(line)
        elif depth > 0:
            content_lines.append(line)

        char_index += len(line) + 1

    return blocks


def lines_quote(text: str) -> str:
    """Prefix every line with '> '; blank lines become '>'"""
    return "\n".join(">" if not line.strip() else f"> {line}" for line in text.split("\n"))


class DivRestructurer:
    """
    Converts known div containers into Markdown

    Attributes:
        mode: Rendering of FALLBACK types, "blockquote" or "plain"
        max_depth: Maximum nesting depth that is restructured
        styles: Lower-case div type → DivStyle
        labels: Lower-case div type → label shown above labeled blocks
    """

    def __init__(
        self,
        mode: Optional[str] = None,
        max_depth: Optional[int] = None,
        styles: Optional[Dict[str, DivStyle]] = None,
        labels: Optional[Dict[str, str]] = None,
    ) -> None:
        self.mode = mode or appsettings.div_conversion_mode
        self.max_depth = max_depth or appsettings.div_max_depth
        self.styles = styles if styles is not None else DIV_STYLES
        self.labels = labels if labels is not None else DIV_LABELS

    def markdown_restructure(self, markdown: str, depth: int = 0) -> str:
        """
        Rewrite all known top-level div blocks, innermost first

        Args:
            markdown: Markdown text
            depth: Current nesting depth (0 for a whole document)

        Returns:
            Markdown with known div blocks converted
        """
        markdown = KOMMLITITEM_OPEN.sub(KOMMLITITEM_SPACED, markdown)
        blocks = divBlocks_findTopLevel(markdown)
        if not blocks:
            return markdown

        result = markdown
        for block in reversed(blocks):
            style = self.styles.get(block.type.lower())
            if style is None:
                LOG(f"Leaving unknown div type '{block.type}' untouched", level=3)
                continue

            if depth + 1 >= self.max_depth:
                WARN(
                    f"Div nesting deeper than {self.max_depth} levels at offset "
                    f"{block.start_index}; inner blocks left verbatim"
                )
                content = block.content
            else:
                content = self.markdown_restructure(block.content, depth + 1)

            converted = self.block_convert(block.type, content, style)
            result = result[:block.start_index] + converted + result[block.end_index:]

        return result

    def block_convert(self, block_type: str, content: str, style: DivStyle) -> str:
        """Render one (already restructured) block body in its style"""
        key = block_type.lower()
        trimmed = content.strip()

        if style in (DivStyle.LABELED, DivStyle.DEFINITION):
            trimmed = SPAN_END.sub("</span>\n\n", trimmed)

        if style == DivStyle.CODE:
            return f"```\n{trimmed}\n```\n"

        if style == DivStyle.QUOTE:
            return f"{lines_quote(trimmed)}\n\n"

        if style == DivStyle.DEFINITION:
            label = self.labels.get(key, key)
            quoted: List[str] = []
            first_found = False
            for line in trimmed.split("\n"):
                if not line.strip():
                    quoted.append(">")
                elif not first_found:
                    first_found = True
                    quoted.append(f">> {line}")
                else:
                    quoted.append(f"> {line}")
            body = "\n".join(quoted)
            return f"> **{label}**\n>\n{body}\n\n"

        if style == DivStyle.LABELED:
            label = self.labels.get(key, key)
            return f"> **{label}**\n>\n{lines_quote(trimmed)}\n\n"

        if self.mode == "blockquote":
            return f"{lines_quote(trimmed)}\n\n"
        return f"{trimmed}\n\n"


def divs_fix(markdown: str, mode: Optional[str] = None) -> str:
    """Convenience wrapper: restructure a document with default tables"""
    return DivRestructurer(mode=mode).markdown_restructure(markdown)
