"""
Pandoc invocation

Thin wrapper around the pandoc executable. Conversion happens in the
directory of the input file so relative \\input and \\includegraphics paths
resolve the way LaTeX resolves them.
"""

import shutil
import subprocess
from pathlib import Path
from typing import List, Optional

from ..config import appsettings
from .errors import PandocError
from .log import LOG, WARN


FILTERED_TEMP_NAME = "filtered_temp.tex"


def pandoc_locate(executable: Optional[str] = None) -> Optional[str]:
    """Full path of the pandoc executable, or None if it is not installed"""
    return shutil.which(executable or appsettings.pandoc_executable)


class PandocConverter:
    """
    LaTeX to Markdown converter backed by pandoc

    Instances are callables with the converter signature expected by
    PipelineRunner: converter(input_path, output_path).

    Attributes:
        executable: Name or path of the pandoc binary
        target: Output format of the main conversion
        wrap: Value of pandoc's --wrap option
    """

    def __init__(
        self,
        executable: Optional[str] = None,
        target: Optional[str] = None,
        wrap: Optional[str] = None,
    ) -> None:
        self.executable = executable or appsettings.pandoc_executable
        self.target = target or appsettings.pandoc_target
        self.wrap = wrap or appsettings.pandoc_wrap

    def __call__(self, input_path: Path, output_path: Path) -> None:
        self.convert(input_path, output_path)

    def command_run(self, args: List[str], cwd: Path, stage: str) -> None:
        """
        Run pandoc with the given arguments

        Raises:
            PandocError: If pandoc cannot be started or exits non-zero
        """
        command = [self.executable, *args]
        LOG(f"Running: {' '.join(command)}", level=3)
        try:
            proc = subprocess.run(command, cwd=str(cwd), capture_output=True, text=True, check=False)
        except OSError as e:
            raise PandocError(f"Could not run {self.executable}: {e}") from e

        if proc.returncode != 0:
            raise PandocError(
                f"pandoc failed during {stage} (exit {proc.returncode}): {proc.stderr.strip()}"
            )
        if proc.stderr.strip():
            WARN(f"pandoc ({stage}): {proc.stderr.strip()}")

    def convert(self, input_path: Path, output_path: Path) -> None:
        """
        Convert a LaTeX file to Markdown

        Args:
            input_path: Entry .tex file
            output_path: Markdown file to write

        Raises:
            PandocError: On a non-zero exit status (message carries stderr)
        """
        input_path = Path(input_path).resolve()
        output_path = Path(output_path).resolve()
        self.command_run(
            [
                "-s",
                "-f", "latex",
                "-t", self.target,
                f"--wrap={self.wrap}",
                "--verbose",
                "-o", str(output_path),
                str(input_path),
            ],
            cwd=input_path.parent,
            stage="conversion",
        )
        LOG(f"Converted {input_path.name} → {output_path.name}", level=2)

    def convert_withFilter(self, input_path: Path, output_path: Path, lua_filter: Path) -> None:
        """
        Convert with a Lua filter applied on the LaTeX level first

        Runs LaTeX → LaTeX with the filter into a temporary file next to the
        input, then converts that file to pandoc Markdown with listings and
        MathJax math. The temporary file is removed in every case.
        """
        input_path = Path(input_path).resolve()
        output_path = Path(output_path).resolve()
        workdir = input_path.parent
        temp_tex = workdir / FILTERED_TEMP_NAME

        try:
            self.command_run(
                [
                    "-s",
                    "-f", "latex",
                    "-t", "latex",
                    f"--lua-filter={Path(lua_filter).resolve()}",
                    "-o", str(temp_tex),
                    str(input_path),
                ],
                cwd=workdir,
                stage="lua filter",
            )
            self.command_run(
                [
                    "-s",
                    "-f", "latex",
                    "-t", "markdown",
                    "--listings",
                    "--mathjax",
                    "-o", str(output_path),
                    str(temp_tex),
                ],
                cwd=workdir,
                stage="filtered conversion",
            )
        finally:
            if temp_tex.exists():
                temp_tex.unlink()
