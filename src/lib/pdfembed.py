"""
PDF embed rewriter

Pandoc turns \\includegraphics{file.pdf} into an image reference, which
browsers cannot render. Such references are replaced by an embedded PDF
viewer inside a <figure>.
"""

import re
from pathlib import PurePosixPath
from typing import Match, Optional

from ..config import appsettings
from .log import LOG


PDF_IMAGE = re.compile(r"!\[([^\]]*)\]\(([^)]+\.pdf)\)", re.IGNORECASE)


def caption_make(alt: str, pdf_path: str) -> str:
    """
    Caption from the alt text, or from the file name when the alt text is
    empty or pandoc's placeholder "image"
    """
    alt = alt.strip()
    if alt and alt.lower() != "image":
        return alt
    stem = PurePosixPath(pdf_path).name
    if stem.lower().endswith(".pdf"):
        stem = stem[:-4]
    return re.sub(r"[_-]+", " ", stem)


def pdfEmbeds_rewrite(markdown: str, height: Optional[str] = None) -> str:
    """
    Replace every ![alt](file.pdf) with an <embed> figure

    Args:
        markdown: Markdown text
        height: Height attribute of the embed (default from settings)
    """
    height = height or appsettings.pdf_embed_height

    def figure_build(match: Match) -> str:
        pdf_path = match.group(2)
        caption = caption_make(match.group(1), pdf_path)
        return (
            "\n<figure>\n"
            f'  <embed src="{pdf_path}"\n'
            '         type="application/pdf"\n'
            '         width="100%"\n'
            f'         height="{height}" />\n'
            f"  <figcaption>{caption}</figcaption>\n"
            "</figure>"
        )

    result, count = PDF_IMAGE.subn(figure_build, markdown)
    if count:
        LOG(f"Embedded {count} PDF figure(s)", level=2)
    return result
