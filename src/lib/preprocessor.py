"""
File-level LaTeX preprocessor

Walks a source tree, runs the macro rewrite engine over every LaTeX file
and applies a few whole-file substitutions that only make sense at file
level (listing frames, listing configuration includes). Files are written
back only when their content changed.

Usage:
    preprocessor = TexPreprocessor()
    stats = preprocessor.directory_process(Path("scratch/kurs"))
    print(stats.files_processed, stats.replacements)
"""

import re
from pathlib import Path
from typing import List, Optional, Tuple

from ..config import appsettings
from ..models.pipeline import ProcessingStats
from .braces import brace_extract
from .errors import ExtractionError
from .exclusions import ExclusionPolicy
from .log import LOG, WARN
from .rewriter import MacroRewriter


CODE_FRAME = re.compile(r"\\codeRahmenDateiName\[label=([^\]]+)\]\{([^}]+)\}\s*\{")
LISTINGS_CONFIG_INPUT = re.compile(r"\\input\{config_listings\}")
LISTINGS_CONFIG_STUB = "% config_listings.tex not found - skipped by preprocessor"


class TexPreprocessor:
    """
    Rewrites all LaTeX files below a directory

    Attributes:
        rewriter: Macro rewrite engine applied to each file
        exclusions: Policy deciding which files are never touched
        extension: File extension of the sources to process
        listing_language: Language written into generated \\lstinputlisting
    """

    def __init__(
        self,
        rewriter: Optional[MacroRewriter] = None,
        exclusions: Optional[ExclusionPolicy] = None,
        extension: Optional[str] = None,
        listing_language: Optional[str] = None,
    ) -> None:
        self.rewriter = rewriter or MacroRewriter()
        self.exclusions = exclusions or ExclusionPolicy()
        self.extension = extension or appsettings.source_extension
        self.listing_language = listing_language or appsettings.listing_language

    def sources_find(self, directory: Path) -> List[Path]:
        """All source files below directory, sorted"""
        return sorted(path for path in directory.rglob(f"*{self.extension}") if path.is_file())

    def directory_process(self, directory: Path) -> ProcessingStats:
        """
        Preprocess every non-excluded source file below a directory

        A failure in one file is recorded in the returned statistics and
        does not stop the walk.

        Args:
            directory: Root of the source tree (modified in place)

        Returns:
            ProcessingStats for the walk
        """
        stats = ProcessingStats()
        for path in self.sources_find(directory):
            if self.exclusions.path_isExcluded(path):
                LOG(f"Skipping excluded file {path}", level=2)
                stats.files_skipped += 1
                continue
            try:
                stats.replacements += self.file_rewrite(path)
                stats.files_processed += 1
            except Exception as e:
                WARN(f"Preprocessing failed for {path}: {e}")
                stats.errors.append(f"{path}: {e}")

        LOG(
            f"Preprocessed {stats.files_processed} file(s), skipped {stats.files_skipped}, "
            f"{stats.replacements} replacement(s), {len(stats.errors)} error(s)",
            level=1,
        )
        return stats

    def file_process(self, path: Path) -> ProcessingStats:
        """
        Preprocess a single file, honouring the exclusion policy
        """
        stats = ProcessingStats()
        if self.exclusions.path_isExcluded(path):
            stats.files_skipped = 1
            return stats
        try:
            stats.replacements = self.file_rewrite(path)
            stats.files_processed = 1
        except Exception as e:
            WARN(f"Preprocessing failed for {path}: {e}")
            stats.errors.append(f"{path}: {e}")
        return stats

    def file_rewrite(self, path: Path) -> int:
        """
        Rewrite one file in place

        Returns:
            Number of substitutions that changed the file
        """
        original = path.read_text(encoding="utf-8")
        text, count = self.text_preprocess(original)
        if text != original:
            path.write_text(text, encoding="utf-8")
            LOG(f"{path.name}: {count} replacement(s)", level=2)
        return count

    def text_preprocess(self, text: str) -> Tuple[str, int]:
        """
        Run the macro rewrite and the file-level substitutions over a text

        Returns:
            Rewritten text and number of substitutions
        """
        result = self.rewriter.text_rewrite(text)
        text, frames = self.codeFrames_rewrite(result.text)
        text, stubs = LISTINGS_CONFIG_INPUT.subn(LISTINGS_CONFIG_STUB, text)
        return text, result.replacements + frames + stubs

    def codeFrames_rewrite(self, text: str) -> Tuple[str, int]:
        r"""
        \codeRahmenDateiName[label=L]{file}{caption} → \lstinputlisting

        The caption may contain nested braces and is brace-counted; ~ in the
        caption becomes a plain space.
        """
        count = 0
        pos = 0
        while True:
            match = CODE_FRAME.search(text, pos)
            if not match:
                break
            try:
                caption = brace_extract(text, match.end())
            except ExtractionError as e:
                WARN(f"Malformed \\codeRahmenDateiName at position {match.start()}: {e}")
                pos = match.end()
                continue

            label, filename = match.group(1), match.group(2)
            caption_text = caption.content.replace("~", " ")
            replacement = (
                f"\\lstinputlisting[language={self.listing_language}, "
                f"caption={{{caption_text}}}, label={label}]{{{filename}}}"
            )
            text = text[:match.start()] + replacement + text[caption.end:]
            pos = match.start() + len(replacement)
            count += 1
        return text, count
