#!/usr/bin/env python3
"""
tex2lia - LaTeX course to LiaScript converter

Converts a LaTeX course that uses project-specific macros (boxes, margin
notes, listing frames, bibliography items) into LiaScript Markdown, and
optionally packages the result as IMS, SCORM 1.2, SCORM 2004 or web
archive.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Pipeline:
    - Preprocess: rewrite course macros to standard LaTeX (scratch copy)
    - Convert: pandoc LaTeX → GitHub-flavoured Markdown
    - Fix up: PDF embeds, math notation, div containers, code runners,
      footnote placement
    - Export: Markdown and/or LiaScript packages

Usage:
    tex2lia inputdir/ outputdir/ --inputFile kurs.tex

Examples:
    # Markdown only
    tex2lia course/ out/ --inputFile kurs.tex

    # Course header, intermediates and a SCORM package
    tex2lia course/ out/ --inputFile kurs.tex --prependFile header.md \\
        --outputSteps --export markdown --export scorm2004

    # Leave footnotes where pandoc put them
    tex2lia course/ out/ --inputFile kurs.tex --skip footnotes -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .lib import PipelineRunner, __version__, LOG, WARN, state_connectToLogger
from .lib.errors import MetadataError
from .lib.metadata import metadata_resolve as metadata_fromSources
from .lib.pandoc import pandoc_locate
from .models import ExportFormat, PipelineConfig, PipelineProgress, PipelineStep, ProgramState, pipeline


DISPLAY_TITLE = r"""
  _            ____  _ _
 | |_ _____  _|___ \| (_) __ _
 | __/ _ \ \/ / __) | | |/ _` |
 | ||  __/>  < / __/| | | (_| |
  \__\___/_/\_\_____|_|_|\__,_|

  LaTeX course to LiaScript converter
"""

# Define CLI arguments
parser = ArgumentParser(
    description="tex2lia - convert LaTeX courses to LiaScript Markdown and packages",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Entry LaTeX (.tex) file (relative to inputdir)"
)

parser.add_argument(
    "--prependFile",
    default=None,
    type=str,
    help="Markdown file (course header, runner macros) placed in front of the result",
)

parser.add_argument(
    "--outputSteps",
    default=False,
    action="store_true",
    help="Also write every intermediate Markdown file to outputdir",
)

parser.add_argument(
    "--skip",
    default=None,
    action="append",
    type=str.lower,
    choices=[step.name.lower() for step in PipelineStep],
    help="Skip a processing step (can be repeated)",
)

parser.add_argument(
    "--export",
    default=None,
    action="append",
    type=str.lower,
    choices=[fmt.name.lower() for fmt in ExportFormat],
    help="Export format (can be repeated); markdown if none given",
)

parser.add_argument(
    "--metadataFile",
    default=None,
    type=str,
    help="YAML file with course metadata (title, comment, logo)",
)

parser.add_argument("--title", default=None, type=str, help="Course title, overrides the metadata file")

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate the environment before anything is converted.

    Checks that the entry file exists and that pandoc is installed, then
    creates the output directory.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the entry .tex file
            - envOK: True if environment is valid

    Exits:
        1 if the entry file or pandoc is missing
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile
    if not input_file.is_file():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    pandoc = pandoc_locate()
    if pandoc is None:
        print("Error: pandoc is not installed or not on PATH", file=sys.stderr)
        state.envOK = False
        sys.exit(1)
    LOG(f"Using pandoc at {pandoc}", level=2)

    if state.prependFile and not (state.inputdir / state.prependFile).is_file():
        WARN(f"Header file {state.prependFile} not found; nothing will be prepended")

    state.outputdir.mkdir(parents=True, exist_ok=True)
    LOG(f"Output directory: {state.outputdir}", level=2)

    state.envOK = True
    return state


def metadata_resolve(inputstate: ProgramState) -> ProgramState:
    """
    Load course metadata for the exporters.

    Returns:
        ProgramState with added field:
            - exportMetadata: ExportMetadata from --metadataFile and --title

    Exits:
        1 if the metadata file is invalid
    """
    state = inputstate.copy()

    metadata_path = state.inputdir / state.metadataFile if state.metadataFile else None
    try:
        state.exportMetadata = metadata_fromSources(metadata_path, state.title)
    except MetadataError as e:
        print(f"Metadata error: {e}", file=sys.stderr)
        sys.exit(1)

    LOG(f"Course title: {state.exportMetadata.title or '(none)'}", level=2)
    return state


def progress_log(progress: PipelineProgress) -> None:
    LOG(f"Stage {progress.step}/{progress.total_steps} done: {progress.message}", level=3)


def conversion_run(inputstate: ProgramState) -> ProgramState:
    """
    Run the conversion pipeline.

    Returns:
        ProgramState with added fields:
            - pipelineConfig: PipelineConfig built from the CLI options
            - pipelineResult: PipelineResult of the run
    """
    state = inputstate.copy()

    exports = state.export or ["markdown"]
    state.pipelineConfig = PipelineConfig(
        source_dir=state.inputdir,
        main_file=state.inputFile,
        output_dir=state.outputdir,
        prepend_file=state.inputdir / state.prependFile if state.prependFile else None,
        output_steps=state.outputSteps,
        skip_steps=PipelineConfig.flags_fromNames(state.skip, PipelineStep),
        export_formats=PipelineConfig.flags_fromNames(exports, ExportFormat),
        metadata=state.exportMetadata,
    )

    LOG("Converting course...", level=1)
    runner = PipelineRunner(state.pipelineConfig, progress=progress_log)
    state.pipelineResult = runner.run()
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display the conversion result.

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if the conversion failed
    """
    state: ProgramState = inputstate.copy()
    result = state.pipelineResult
    if result is None or not result.success:
        message = result.message if result else "no result"
        print(f"Error: Conversion failed: {message}", file=sys.stderr)
        sys.exit(1)

    LOG(f"\n✓ {result.message}", level=1)
    for output in result.outputs:
        LOG(f"  Output: {output}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="tex2lia - LaTeX course to LiaScript converter",
    category="Utility",
    min_memory_limit="200Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - convert a LaTeX course to LiaScript.

    Orchestrates the CLI pipeline:
        1. env_check: Validate entry file and pandoc
        2. metadata_resolve: Load course metadata
        3. conversion_run: Run the conversion pipeline
        4. results_report: Display results to user

    Args:
        options: CLI arguments from argparse
        inputdir: Directory containing the LaTeX course
        outputdir: Directory receiving the converted course

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, metadata_resolve, conversion_run, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
