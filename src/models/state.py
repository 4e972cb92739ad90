"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional CLI pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Callable
from dataclasses import dataclass, field

from .pipeline import ExportMetadata, PipelineConfig, PipelineResult


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the CLI pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as the conversion progresses.

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, prependFile,
          outputSteps, skip, export, metadataFile, title
        - env_check: inputSourceFile, envOK
        - metadata_resolve: exportMetadata
        - conversion_run: pipelineConfig, pipelineResult
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing the LaTeX course sources
        outputdir: Directory receiving the converted course
        verbosity: Logging verbosity level (1-3)
        inputFile: Entry .tex file (relative to inputdir)
        prependFile: Optional Markdown header file
        outputSteps: Persist intermediate artifacts
        skip: Names of skipped steps (PipelineStep member names)
        export: Names of export formats (ExportFormat member names)
        metadataFile: Optional YAML file with course metadata
        title: Course title overriding the metadata file
        envOK: Environment validation passed
        inputSourceFile: Resolved entry file
        exportMetadata: Metadata handed to the exporters
        pipelineConfig: Configuration of the conversion run
        pipelineResult: Result of the conversion run
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    prependFile: Optional[str] = field(default=None)
    outputSteps: bool = field(default=False)
    skip: List[str] = field(default_factory=list)
    export: List[str] = field(default_factory=list)
    metadataFile: Optional[str] = field(default=None)
    title: Optional[str] = field(default=None)

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    exportMetadata: Optional[ExportMetadata] = field(default=None)
    pipelineConfig: Optional[PipelineConfig] = field(default=None)
    pipelineResult: Optional[PipelineResult] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments (inputFile, skip, export, etc.)
            inputdir: Directory containing source files
            outputdir: Directory for conversion output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Drop argparse entries that are not state fields, and unset list options
        filtered_options = {
            k: v for k, v in options_dict.items() if k in valid_fields and v is not None
        }

        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}

        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            metadata_resolve,
            conversion_run,
            results_report
        )

    This is equivalent to:
        results_report(conversion_run(metadata_resolve(env_check(initial_state))))
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
