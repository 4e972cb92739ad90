"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use TEX2LIA_ prefix (e.g., TEX2LIA_DIV_CONVERSION_MODE=blockquote).

Settings can also be loaded from a .env file in the project root.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use TEX2LIA_ prefix.

    Examples:
        TEX2LIA_PANDOC_EXECUTABLE=/opt/pandoc/bin/pandoc
        TEX2LIA_DIV_CONVERSION_MODE=blockquote
        TEX2LIA_DIV_MAX_DEPTH=16
    """

    model_config = SettingsConfigDict(
        env_prefix="TEX2LIA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Preprocessing configuration
    source_extension: str = Field(
        default=".tex",
        description="File extension of LaTeX sources picked up by the preprocessor",
    )

    listing_language: str = Field(
        default="Go",
        description="Language passed to \\lstinputlisting when rewriting \\codeRahmenDateiName",
    )

    # Div-block restructuring
    div_conversion_mode: Literal["blockquote", "plain"] = Field(
        default="plain",
        description="Rendering of known div types without a dedicated style",
    )

    div_max_depth: int = Field(
        default=32,
        ge=1,
        description="Maximum nesting depth restructured; deeper content is left verbatim",
    )

    # External converter
    pandoc_executable: str = Field(
        default="pandoc",
        description="Name or path of the pandoc executable",
    )

    pandoc_target: str = Field(
        default="gfm",
        description="Pandoc output format for the LaTeX to Markdown conversion",
    )

    pandoc_wrap: str = Field(
        default="preserve",
        description="Value for pandoc's --wrap option",
    )

    # Export
    exporter_executable: str = Field(
        default="liaex",
        description="Name or path of the LiaScript exporter CLI used for packaged formats",
    )

    pdf_embed_height: str = Field(
        default="460px",
        description="Height attribute of embedded PDF objects",
    )

    # Pipeline
    scratch_prefix: str = Field(
        default="latex-pipeline-",
        description="Prefix of the temporary scratch workspace directory",
    )

    total_steps: int = Field(
        default=10,
        description="Number of progress stages reported by the pipeline",
    )


# Singleton instance - import this in your code
appsettings = AppSettings()
