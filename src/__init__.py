"""
tex2lia - LaTeX course to LiaScript converter

Turns a LaTeX course written with project-specific macros into LiaScript
Markdown and, optionally, into IMS, SCORM and web packages.
"""

__version__ = "1.0.0"

from .lib import MacroRewriter, PipelineRunner, RuleTable, LOG, WARN, state_connectToLogger

__all__ = ["MacroRewriter", "PipelineRunner", "RuleTable", "LOG", "WARN", "state_connectToLogger", "__version__"]
