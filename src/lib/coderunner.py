"""
Code-runner annotator

LiaScript executes code blocks when the line after the closing fence holds
a runner macro such as @LIA.python. This module appends the matching macro
to every fenced block whose language tag is known.

Language tags missing from LANGUAGE_TO_MACRO are resolved through the
aliases of the corresponding Pygments lexer, so "py3" or "golang" style
variants find their runner as well.
"""

import re
from typing import Dict, List, Optional, Tuple

from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from .log import LOG


LANGUAGE_TO_MACRO: Dict[str, str] = {
    # A
    "ada": "@LIA.ada",
    "algol": "@LIA.algol",
    "apl": "@LIA.apl",
    "awk": "@LIA.awk",
    # B
    "basic": "@LIA.basic",
    "bas": "@LIA.basic",
    "bash": "@LIA.bash",
    # C
    "c": "@LIA.c",
    "clojure": "@LIA.clojure",
    "clj": "@LIA.clojure",
    "cpp": "@LIA.cpp",
    "c++": "@LIA.cpp",
    "cxx": "@LIA.cpp",
    "cobol": "@LIA.cobol",
    "cob": "@LIA.cobol",
    "coq": "@LIA.coq",
    "csharp": "@LIA.dotnet",
    "cs": "@LIA.dotnet",
    "c#": "@LIA.dotnet",
    # D
    "d": "@LIA.d",
    # E
    "elixir": "@LIA.elixir",
    "exs": "@LIA.elixir",
    "erlang": "@LIA.erlang",
    "erl": "@LIA.erlang",
    # F
    "forth": "@LIA.forth",
    "fs": "@LIA.forth",
    "fortran": "@LIA.fortran",
    "f90": "@LIA.fortran",
    "fsharp": "@LIA.fsharp",
    "f#": "@LIA.fsharp",
    # G
    "go": "@LIA.go",
    "golang": "@LIA.go",
    "groovy": "@LIA.groovy",
    # H
    "haskell": "@LIA.haskell",
    "hs": "@LIA.haskell",
    "haxe": "@LIA.haxe",
    "hx": "@LIA.haxe",
    # I
    "inform": "@LIA.inform",
    "io": "@LIA.io",
    # J
    "java": "@LIA.java",
    "javascript": "@LIA.nodejs",
    "js": "@LIA.nodejs",
    "julia": "@LIA.julia",
    "jl": "@LIA.julia",
    # K
    "kotlin": "@LIA.kotlin",
    "kt": "@LIA.kotlin",
    # L
    "lua": "@LIA.lua",
    # M
    "mono": "@LIA.mono",
    # N
    "nasm": "@LIA.nasm",
    "asm": "@LIA.nasm",
    "nim": "@LIA.nim",
    "nodejs": "@LIA.nodejs",
    "node": "@LIA.nodejs",
    # O
    "ocaml": "@LIA.ocaml",
    "ml": "@LIA.ocaml",
    # P
    "perl": "@LIA.perl",
    "pl": "@LIA.perl",
    "php": "@LIA.php",
    "postscript": "@LIA.postscript",
    "ps": "@LIA.postscript",
    "prolog": "@LIA.prolog",
    "python": "@LIA.python",
    "py": "@LIA.python",
    "python2": "@LIA.python2",
    "python3": "@LIA.python3",
    # Q
    "qsharp": "@LIA.qsharp",
    "qs": "@LIA.qsharp",
    # R
    "r": "@LIA.r",
    "racket": "@LIA.racket",
    "rkt": "@LIA.racket",
    "ruby": "@LIA.ruby",
    "rb": "@LIA.ruby",
    "rust": "@LIA.rust",
    "rs": "@LIA.rust",
    # S
    "scala": "@LIA.scala",
    "scheme": "@LIA.scheme",
    "scm": "@LIA.scheme",
    "selectscript": "@LIA.selectscript",
    "s2": "@LIA.selectscript",
    "shell": "@LIA.bash",
    "sh": "@LIA.bash",
    "smalltalk": "@LIA.smalltalk",
    "st": "@LIA.smalltalk",
    # T
    "tcl": "@LIA.tcl",
    "typescript": "@LIA.nodejs",
    "ts": "@LIA.nodejs",
    # V
    "v": "@LIA.v",
    "vlang": "@LIA.v",
    "verilog": "@LIA.verilog",
    "vhdl": "@LIA.vhdl",
    # Z
    "zig": "@LIA.zig",
}

# Opening fence with a language tag, body, closing fence
FENCED_BLOCK = re.compile(
    r"^(```[ \t]*([A-Za-z0-9_+#-]+)[ \t]*\n)(.*?)(^```)", re.MULTILINE | re.DOTALL
)


def runnerMacro_resolve(language: str) -> Optional[str]:
    """
    Runner macro for a fence language tag

    Args:
        language: Tag as written after the opening fence

    Returns:
        "@LIA.*" macro, or None for languages without a runner
    """
    key = language.strip().lower()
    if key in LANGUAGE_TO_MACRO:
        return LANGUAGE_TO_MACRO[key]
    try:
        lexer = get_lexer_by_name(key)
    except ClassNotFound:
        return None
    # Only the lexer's primary name maps to a runner
    primary = lexer.aliases[0] if lexer.aliases else ""
    if primary in LANGUAGE_TO_MACRO:
        LOG(f"Resolved language '{language}' via lexer '{primary}'", level=3)
        return LANGUAGE_TO_MACRO[primary]
    return None


def runnerMacros_add(markdown: str) -> str:
    """
    Append runner macros after the closing fence of known code blocks

    All blocks are located in one scan of the original text; the
    substitutions are applied back to front so offsets stay valid.

    Example:
        ```python         ```python
        print(1)    →     print(1)
        ```               ```
                          @LIA.python
    """
    replacements: List[Tuple[int, int, str]] = []
    for match in FENCED_BLOCK.finditer(markdown):
        macro = runnerMacro_resolve(match.group(2))
        if macro:
            replacements.append((match.start(), match.end(), f"{match.group(0)}\n{macro}"))

    result = markdown
    for start, end, replacement in reversed(replacements):
        result = result[:start] + replacement + result[end:]

    if replacements:
        LOG(f"Added {len(replacements)} code runner macro(s)", level=2)
    return result
