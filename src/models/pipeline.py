"""
Pipeline configuration, progress and result models

Defines the immutable input of a conversion run, the structures reported
back to the caller and the statistics gathered by the preprocessor.
"""

from enum import IntEnum
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple


class PipelineStep(IntEnum):
    """
    Index of each skippable step in PipelineConfig.skip_steps
    """
    PREPROCESS = 0
    PDF_EMBED = 1
    MATH = 2
    DIVS = 3
    CODE_RUNNER = 4
    FOOTNOTES = 5


class ExportFormat(IntEnum):
    """
    Index of each export target in PipelineConfig.export_formats
    """
    MARKDOWN = 0
    IMS = 1
    SCORM12 = 2
    SCORM2004 = 3
    WEB = 4


# Format tag and archive base name per packaged export target
EXPORT_TARGETS: Dict[ExportFormat, Tuple[str, str]] = {
    ExportFormat.IMS: ("ims", "course-ims"),
    ExportFormat.SCORM12: ("scorm1.2", "course-scorm12"),
    ExportFormat.SCORM2004: ("scorm2004", "course-scorm2004"),
    ExportFormat.WEB: ("web", "course-web"),
}


@dataclass(frozen=True)
class ExportMetadata:
    """
    Course metadata handed to the exporters

    Attributes:
        title: Course title
        comment: Short course description (LiaScript "comment" macro)
        logo: Logo URL
    """
    title: str = ""
    comment: str = ""
    logo: str = ""

    def header_fields(self) -> List[Tuple[str, str]]:
        """Non-empty LiaScript header entries (key, single-line value)"""
        fields = [("comment", self.comment), ("logo", self.logo)]
        return [(key, " ".join(value.split())) for key, value in fields if value.strip()]

    def lia_dict(self) -> Dict[str, Any]:
        """
        Nested structure expected by the LiaScript exporter

        Example:
            >>> ExportMetadata("Go", "Intro", "logo.png").lia_dict()
            {'lia': {'str_title': 'Go', 'definition': {'macro': {'comment': 'Intro'}, 'logo': 'logo.png'}}}
        """
        return {
            "lia": {
                "str_title": self.title,
                "definition": {
                    "macro": {"comment": self.comment},
                    "logo": self.logo,
                },
            }
        }


@dataclass(frozen=True)
class PipelineConfig:
    """
    Immutable input of one pipeline run

    Attributes:
        source_dir: Directory holding the LaTeX course sources
        main_file: Entry file relative to source_dir (e.g. "kurs.tex")
        output_dir: Directory receiving exports and persisted intermediates
        prepend_file: Optional Markdown header placed in front of the result
        output_steps: Persist every intermediate artifact in output_dir
        skip_steps: Skip flags indexed by PipelineStep (missing → not skipped)
        export_formats: Export flags indexed by ExportFormat (missing → off)
        metadata: Course metadata passed to the exporters
    """
    source_dir: Path
    main_file: str
    output_dir: Path
    prepend_file: Optional[Path] = None
    output_steps: bool = False
    skip_steps: Tuple[bool, ...] = ()
    export_formats: Tuple[bool, ...] = (True,)
    metadata: ExportMetadata = field(default_factory=ExportMetadata)

    def step_isSkipped(self, step: PipelineStep) -> bool:
        """Check whether a step is flagged as skipped"""
        return step < len(self.skip_steps) and bool(self.skip_steps[step])

    def format_isEnabled(self, export_format: ExportFormat) -> bool:
        """Check whether an export format is requested"""
        return export_format < len(self.export_formats) and bool(self.export_formats[export_format])

    @staticmethod
    def flags_fromNames(names: Sequence[str], enum_type: Any) -> Tuple[bool, ...]:
        """
        Build a flag tuple from enum member names

        Example:
            >>> PipelineConfig.flags_fromNames(["math"], PipelineStep)
            (False, False, True, False, False, False)
        """
        wanted = {name.upper() for name in names}
        return tuple(member.name in wanted for member in enum_type)


@dataclass(frozen=True)
class PipelineProgress:
    """
    Progress notification, one per pipeline stage

    Attributes:
        step: Stage number, strictly increasing within a run
        total_steps: Number of stages in a run
        message: Stage description
        details: Optional extra information (e.g. "skipped")
    """
    step: int
    total_steps: int
    message: str
    details: Optional[str] = None


@dataclass
class PipelineResult:
    """
    Terminal report of a pipeline run

    Attributes:
        success: Whether every step completed
        message: Human-readable summary or error message
        outputs: Paths of the produced export artifacts
    """
    success: bool
    message: str
    outputs: List[Path] = field(default_factory=list)


@dataclass
class ProcessingStats:
    """
    Statistics of one preprocessing directory walk

    Attributes:
        files_processed: Files successfully rewritten (or left unchanged)
        files_skipped: Files excluded by the exclusion policy
        replacements: Total substitutions across all files
        errors: "path: message" entries for files that failed
    """
    files_processed: int = 0
    files_skipped: int = 0
    replacements: int = 0
    errors: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ExportRequest:
    """
    Arguments of one exporter invocation

    Attributes:
        input: Final Markdown file
        readme: Name of the Markdown file inside the package
        output: Output path without archive extension
        format: Format tag ("markdown", "ims", "scorm1.2", "scorm2004", "web")
        base_path: Directory the package resources are resolved from
        options: Format-specific options (e.g. {"web-zip": True})
    """
    input: Path
    readme: str
    output: Path
    format: str
    base_path: Path
    options: Dict[str, Any] = field(default_factory=dict)
