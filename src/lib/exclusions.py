"""
File exclusion policy for the preprocessor

Macro definition files must never be rewritten: expanding the macros inside
their own definitions would break the LaTeX sources.
"""

import re
from pathlib import Path
from dataclasses import dataclass
from functools import cached_property
from typing import List, Pattern, Tuple, Union


DEFAULT_EXCLUDED_FILES: Tuple[str, ...] = ("macros.tex", "makros.tex")


@dataclass(frozen=True)
class ExclusionPolicy:
    """
    Immutable set of rules deciding which source files are left alone

    A file is excluded if its name is in `filenames`, if its name matches
    any of `filename_patterns`, or if its full path matches any of
    `path_patterns`.

    Attributes:
        filenames: Exact file names (compared against the last path component)
        filename_patterns: Regular expressions searched in the file name
        path_patterns: Regular expressions searched in the full path

    Example:
        >>> policy = ExclusionPolicy(filename_patterns=(r"^draft_",))
        >>> policy.path_isExcluded(Path("kapitel/draft_intro.tex"))
        True
    """
    filenames: Tuple[str, ...] = DEFAULT_EXCLUDED_FILES
    filename_patterns: Tuple[str, ...] = ()
    path_patterns: Tuple[str, ...] = ()

    @cached_property
    def _filenameMatchers(self) -> List[Pattern[str]]:
        return [re.compile(pattern) for pattern in self.filename_patterns]

    @cached_property
    def _pathMatchers(self) -> List[Pattern[str]]:
        return [re.compile(pattern) for pattern in self.path_patterns]

    def path_isExcluded(self, path: Union[str, Path]) -> bool:
        """Check a path against every rule; any match excludes"""
        path = Path(path)
        name = path.name
        if name in self.filenames:
            return True
        if any(matcher.search(name) for matcher in self._filenameMatchers):
            return True
        full = path.as_posix()
        return any(matcher.search(full) for matcher in self._pathMatchers)
