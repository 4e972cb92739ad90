"""
Models package for tex2lia

Contains data structures and type definitions for the conversion pipeline.
"""

from .state import ProgramState, pipeline
from .rules import (
    FormatType,
    MacroCategory,
    RewriteRule,
    MultiParamSpec,
    EnvironmentSpec,
    BoxSpec,
    SpecialSpec,
    format_apply,
)
from .extraction import BraceExtraction, ParameterExtraction, RewriteResult
from .blocks import DivBlock, DivStyle, Footnote, Insertion
from .pipeline import (
    PipelineStep,
    ExportFormat,
    ExportMetadata,
    ExportRequest,
    PipelineConfig,
    PipelineProgress,
    PipelineResult,
    ProcessingStats,
)

__all__ = [
    "ProgramState",
    "pipeline",
    "FormatType",
    "MacroCategory",
    "RewriteRule",
    "MultiParamSpec",
    "EnvironmentSpec",
    "BoxSpec",
    "SpecialSpec",
    "format_apply",
    "BraceExtraction",
    "ParameterExtraction",
    "RewriteResult",
    "DivBlock",
    "DivStyle",
    "Footnote",
    "Insertion",
    "PipelineStep",
    "ExportFormat",
    "ExportMetadata",
    "ExportRequest",
    "PipelineConfig",
    "PipelineProgress",
    "PipelineResult",
    "ProcessingStats",
]
