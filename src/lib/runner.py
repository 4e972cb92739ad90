"""
Conversion pipeline orchestrator

Runs the complete LaTeX → LiaScript conversion for one course:

     1. copy the source tree into a scratch workspace
     2. preprocess all LaTeX files in the workspace
     3. pandoc conversion                       → document.md
     4. PDF embeds                              → document_pdffixed.md
     5. math notation                           → document_math.md
     6. div blocks                              → markdown_divfixed.md
     7. code runner macros                      → markdown_transformed.md
     8. footnote relocation                     → <entry stem>.md
     9. prepend the course header and metadata
    10. export

The original source tree is never modified. Every failure is reported
through the returned PipelineResult, and the scratch workspace is removed
in all cases.

Usage:
    runner = PipelineRunner(config, progress=print)
    result = runner.run()
    if not result.success:
        print(result.message)
"""

import shutil
import tempfile
from pathlib import Path
from typing import Callable, Dict, List, Optional

from ..config import appsettings
from ..models.pipeline import (
    EXPORT_TARGETS,
    ExportFormat,
    ExportRequest,
    PipelineConfig,
    PipelineProgress,
    PipelineResult,
    PipelineStep,
)
from .coderunner import runnerMacros_add
from .divblocks import DivRestructurer
from .errors import ExportError
from .exporters import Exporter, LiaExporter, markdown_export
from .footnotes import footnotes_relocate
from .log import LOG, WARN
from .mathfix import math_normalize
from .metadata import metadataHeader_merge
from .pandoc import PandocConverter
from .pdfembed import pdfEmbeds_rewrite
from .preprocessor import TexPreprocessor


Converter = Callable[[Path, Path], None]
ProgressCallback = Callable[[PipelineProgress], None]

RAW_MARKDOWN = "document.md"
PDF_MARKDOWN = "document_pdffixed.md"
MATH_MARKDOWN = "document_math.md"
DIV_MARKDOWN = "markdown_divfixed.md"
RUNNER_MARKDOWN = "markdown_transformed.md"


def exporters_default() -> Dict[ExportFormat, Exporter]:
    """Markdown copy plus the LiaScript exporter for all packaged formats"""
    lia = LiaExporter()
    exporters: Dict[ExportFormat, Exporter] = {ExportFormat.MARKDOWN: markdown_export}
    for export_format in EXPORT_TARGETS:
        exporters[export_format] = lia
    return exporters


class PipelineRunner:
    """
    Executes one conversion run

    Attributes:
        config: Immutable run configuration
        converter: LaTeX → Markdown converter, callable(input, output)
        exporters: Exporter per ExportFormat
        progress: Optional callback receiving one PipelineProgress per stage
        preprocessor: File-level LaTeX preprocessor
        restructurer: Div-block restructurer
    """

    def __init__(
        self,
        config: PipelineConfig,
        converter: Optional[Converter] = None,
        exporters: Optional[Dict[ExportFormat, Exporter]] = None,
        progress: Optional[ProgressCallback] = None,
        preprocessor: Optional[TexPreprocessor] = None,
        restructurer: Optional[DivRestructurer] = None,
    ) -> None:
        self.config = config
        self.converter = converter or PandocConverter()
        self.exporters = exporters if exporters is not None else exporters_default()
        self.progress = progress
        self.preprocessor = preprocessor or TexPreprocessor()
        self.restructurer = restructurer or DivRestructurer()
        self.total_steps = appsettings.total_steps

    def progress_report(self, step: int, message: str, details: Optional[str] = None) -> None:
        LOG(f"[{step}/{self.total_steps}] {message}" + (f" ({details})" if details else ""), level=1)
        if self.progress:
            self.progress(PipelineProgress(step, self.total_steps, message, details))

    def run(self) -> PipelineResult:
        """
        Run the whole pipeline

        Returns:
            PipelineResult; success=False carries the error message of the
            failing step. Artifacts already copied to the output directory
            are kept in that case.
        """
        scratch: Optional[Path] = None
        outputs: List[Path] = []

        try:
            self.progress_report(1, "Creating scratch workspace")
            scratch = Path(tempfile.mkdtemp(prefix=appsettings.scratch_prefix))
            shutil.copytree(self.config.source_dir, scratch, dirs_exist_ok=True)
            LOG(f"Scratch workspace: {scratch}", level=2)

            self.preprocess_run(scratch)

            self.progress_report(3, "Converting LaTeX to Markdown")
            entry = scratch / self.config.main_file
            raw = scratch / RAW_MARKDOWN
            self.converter(entry, raw)
            self.step_persist(raw)

            current = self.transform_run(
                4, "Embedding PDF figures", PipelineStep.PDF_EMBED, pdfEmbeds_rewrite, raw, scratch / PDF_MARKDOWN
            )
            current = self.transform_run(
                5, "Normalizing math", PipelineStep.MATH, math_normalize, current, scratch / MATH_MARKDOWN
            )
            current = self.transform_run(
                6, "Restructuring div blocks", PipelineStep.DIVS,
                self.restructurer.markdown_restructure, current, scratch / DIV_MARKDOWN,
            )
            current = self.transform_run(
                7, "Adding code runner macros", PipelineStep.CODE_RUNNER,
                runnerMacros_add, current, scratch / RUNNER_MARKDOWN,
            )
            final = self.transform_run(
                8, "Relocating footnotes", PipelineStep.FOOTNOTES,
                footnotes_relocate, current, scratch / f"{Path(self.config.main_file).stem}.md",
            )

            self.header_prepend(final)

            self.progress_report(10, "Exporting")
            outputs = self.exports_run(final, scratch)

            return PipelineResult(success=True, message="Pipeline completed successfully", outputs=outputs)

        except Exception as e:
            WARN(f"Pipeline failed: {e}")
            return PipelineResult(success=False, message=f"Error: {e}", outputs=outputs)

        finally:
            if scratch is not None and scratch.exists():
                try:
                    shutil.rmtree(scratch)
                except OSError as e:
                    WARN(f"Could not remove scratch workspace {scratch}: {e}")

    def preprocess_run(self, scratch: Path) -> None:
        if self.config.step_isSkipped(PipelineStep.PREPROCESS):
            self.progress_report(2, "Preprocessing LaTeX", "skipped")
            return
        self.progress_report(2, "Preprocessing LaTeX")
        stats = self.preprocessor.directory_process(scratch)
        if stats.errors:
            WARN(f"{len(stats.errors)} file(s) could not be preprocessed")

    def transform_run(
        self,
        step: int,
        message: str,
        pipeline_step: PipelineStep,
        transform: Callable[[str], str],
        source: Path,
        target: Path,
    ) -> Path:
        """
        Apply a text transform from one intermediate file to the next

        A skipped step copies its input unchanged.
        """
        if self.config.step_isSkipped(pipeline_step):
            self.progress_report(step, message, "skipped")
            shutil.copyfile(source, target)
            return target

        self.progress_report(step, message)
        text = source.read_text(encoding="utf-8")
        target.write_text(transform(text), encoding="utf-8")
        self.step_persist(target)
        return target

    def step_persist(self, path: Path) -> None:
        """Copy an intermediate artifact to the output directory if requested"""
        if not self.config.output_steps:
            return
        self.config.output_dir.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(path, self.config.output_dir / path.name)
        LOG(f"Saved intermediate {path.name}", level=2)

    def header_prepend(self, final: Path) -> None:
        """
        Put the course header file and the export metadata in front of the
        final document
        """
        self.progress_report(9, "Prepending course header")
        header = ""
        header_file = self.config.prepend_file
        if header_file is not None and Path(header_file).is_file():
            header = Path(header_file).read_text(encoding="utf-8")
        elif header_file is not None:
            LOG(f"Course header {header_file} not found", level=2)

        header = metadataHeader_merge(header, self.config.metadata)
        if not header:
            LOG("No course header to prepend", level=2)
            return
        content = final.read_text(encoding="utf-8")
        final.write_text(header + "\n\n" + content, encoding="utf-8")

    def exports_run(self, final: Path, scratch: Path) -> List[Path]:
        """
        Produce every enabled export

        Raises:
            ExportError: If an enabled format has no exporter or its
                         exporter fails
        """
        self.config.output_dir.mkdir(parents=True, exist_ok=True)
        outputs: List[Path] = []

        for export_format in ExportFormat:
            if not self.config.format_isEnabled(export_format):
                continue
            exporter = self.exporters.get(export_format)
            if exporter is None:
                raise ExportError(f"No exporter configured for {export_format.name}")

            if export_format == ExportFormat.MARKDOWN:
                request = ExportRequest(
                    input=final,
                    readme=final.name,
                    output=self.config.output_dir / final.name,
                    format="markdown",
                    base_path=scratch,
                )
            else:
                tag, base_name = EXPORT_TARGETS[export_format]
                request = ExportRequest(
                    input=final,
                    readme=final.name,
                    output=self.config.output_dir / base_name,
                    format=tag,
                    base_path=scratch,
                    options={"web-zip": True} if export_format == ExportFormat.WEB else {},
                )

            LOG(f"Exporting {export_format.name}", level=2)
            outputs.append(exporter(request, self.config.metadata))

        return outputs
