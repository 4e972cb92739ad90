"""
Course exporters

An exporter is any callable (ExportRequest, ExportMetadata) -> Path that
produces one artifact and returns its path. Two implementations exist:

    markdown_export  copies the final Markdown file
    LiaExporter      packages the course with the LiaScript exporter CLI
                     (IMS, SCORM 1.2, SCORM 2004, web)
"""

import shutil
import subprocess
from pathlib import Path
from typing import Callable, List, Optional

from ..config import appsettings
from ..models.pipeline import ExportMetadata, ExportRequest
from .errors import ExportError
from .log import LOG, WARN


Exporter = Callable[[ExportRequest, ExportMetadata], Path]


def markdown_export(request: ExportRequest, metadata: ExportMetadata) -> Path:
    """
    Copy the final Markdown to request.output

    Raises:
        ExportError: If the copy fails
    """
    target = Path(request.output)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(request.input, target)
    except OSError as e:
        raise ExportError(f"Markdown export to {target} failed: {e}") from e
    LOG(f"Markdown exported to {target}", level=2)
    return target


class LiaExporter:
    """
    Packaged export through the LiaScript exporter command line tool

    Attributes:
        executable: Name or path of the exporter CLI
    """

    def __init__(self, executable: Optional[str] = None) -> None:
        self.executable = executable or appsettings.exporter_executable

    def command_build(self, request: ExportRequest) -> List[str]:
        command = [
            self.executable,
            "--input", str(request.input),
            "--readme", request.readme,
            "--output", str(request.output),
            "--format", request.format,
            "--path", str(request.base_path),
        ]
        for option, value in request.options.items():
            if value is True:
                command.append(f"--{option}")
            elif value not in (None, False):
                command.extend([f"--{option}", str(value)])
        return command

    def __call__(self, request: ExportRequest, metadata: ExportMetadata) -> Path:
        """
        Run one export

        Returns:
            Path of the produced archive (<output>.zip)

        Raises:
            ExportError: If the exporter cannot be started, fails, or
                         produces no archive
        """
        # Metadata is already merged into the Markdown header of request.input
        LOG(f"Export metadata: {metadata.lia_dict()}", level=3)

        command = self.command_build(request)
        LOG(f"Running: {' '.join(command)}", level=3)
        try:
            proc = subprocess.run(
                command, cwd=str(request.base_path), capture_output=True, text=True, check=False
            )
        except OSError as e:
            raise ExportError(f"Could not run {self.executable}: {e}") from e

        if proc.returncode != 0:
            raise ExportError(
                f"{request.format} export failed (exit {proc.returncode}): {proc.stderr.strip()}"
            )
        if proc.stderr.strip():
            WARN(f"{self.executable} ({request.format}): {proc.stderr.strip()}")

        archive = Path(request.output).with_suffix(".zip")
        if not archive.exists():
            raise ExportError(f"{request.format} export produced no archive at {archive}")
        LOG(f"{request.format} package written to {archive}", level=2)
        return archive
