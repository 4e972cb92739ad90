"""
tex2lia - LaTeX course to LiaScript converter

Library modules of the conversion pipeline: macro rewriting, pandoc
invocation, Markdown post-processing and export.
"""

__version__ = "1.0.0"

from .braces import brace_extract, parameters_extract
from .rules import RuleTable
from .rewriter import MacroRewriter
from .exclusions import ExclusionPolicy
from .preprocessor import TexPreprocessor
from .divblocks import DivRestructurer
from .footnotes import footnotes_relocate
from .mathfix import math_normalize
from .coderunner import runnerMacros_add
from .pdfembed import pdfEmbeds_rewrite
from .pandoc import PandocConverter, pandoc_locate
from .exporters import LiaExporter, markdown_export
from .metadata import metadata_load, metadata_resolve, metadataHeader_merge
from .runner import PipelineRunner
from .log import LOG, WARN, state_connectToLogger

__all__ = [
    "brace_extract",
    "parameters_extract",
    "RuleTable",
    "MacroRewriter",
    "ExclusionPolicy",
    "TexPreprocessor",
    "DivRestructurer",
    "footnotes_relocate",
    "math_normalize",
    "runnerMacros_add",
    "pdfEmbeds_rewrite",
    "PandocConverter",
    "pandoc_locate",
    "LiaExporter",
    "markdown_export",
    "metadata_load",
    "metadata_resolve",
    "metadataHeader_merge",
    "PipelineRunner",
    "LOG",
    "WARN",
    "state_connectToLogger",
    "__version__",
]
