"""
Export metadata loader

Course metadata (title, description, logo) can be kept in a small YAML
file next to the course sources:

    title: Einführung in Go
    comment: Grundlagen der Programmierung mit Go
    logo: https://example.org/logo.png
"""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..models.pipeline import ExportMetadata
from .errors import MetadataError


METADATA_FIELDS = ("title", "comment", "logo")


def metadata_load(path: Path) -> ExportMetadata:
    """
    Load export metadata from a YAML file

    Missing keys default to the empty string; an empty file yields empty
    metadata.

    Raises:
        MetadataError: If the file is missing, unparsable, not a mapping,
                       or holds unknown keys or non-scalar values
    """
    path = Path(path)
    if not path.exists():
        raise MetadataError(f"Metadata file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise MetadataError(f"Failed to parse {path.name}: {e}")
    except OSError as e:
        raise MetadataError(f"Failed to load {path.name}: {e}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise MetadataError(f"{path.name} must contain a mapping, got {type(data).__name__}")
    return metadata_fromDict(data)


def metadata_fromDict(data: Dict[str, Any]) -> ExportMetadata:
    """Validate a plain mapping and turn it into ExportMetadata"""
    unknown = set(data) - set(METADATA_FIELDS)
    if unknown:
        raise MetadataError(f"Unknown metadata key(s): {', '.join(sorted(unknown))}")

    values: Dict[str, str] = {}
    for key in METADATA_FIELDS:
        value = data.get(key)
        if value is None:
            values[key] = ""
        elif isinstance(value, (str, int, float)):
            values[key] = str(value)
        else:
            raise MetadataError(f"Metadata '{key}' must be a string")
    return ExportMetadata(**values)


def metadataHeader_merge(header: str, metadata: ExportMetadata) -> str:
    """
    Put course metadata into a LiaScript course header

    LiaScript reads course settings from the first HTML comment of the
    document and the course title from its first heading. comment and logo
    are added to the header comment (a new one is created when the header
    does not start with one); the title follows as a level-1 heading.

    Args:
        header: Course header text, possibly empty
        metadata: Metadata to merge in

    Returns:
        Header text; unchanged if the metadata is empty

    Example:
        >>> metadataHeader_merge("<!-- author: Team -->", ExportMetadata(title="Go", comment="Intro"))
        '<!-- author: Team\\ncomment: Intro\\n-->\\n\\n# Go'
    """
    entries = "\n".join(f"{key}: {value}" for key, value in metadata.header_fields())
    title = " ".join(metadata.title.split())
    if not entries and not title:
        return header
    header = header.strip("\n")

    if entries:
        close = header.find("-->")
        if header.lstrip().startswith("<!--") and close != -1:
            header = header[:close].rstrip() + "\n" + entries + "\n" + header[close:]
        else:
            header = f"<!--\n{entries}\n-->" + (f"\n\n{header}" if header else "")

    if title:
        header = (header + "\n\n" if header else "") + f"# {title}"
    return header


def metadata_resolve(path: Optional[Path] = None, title: Optional[str] = None) -> ExportMetadata:
    """
    Metadata from an optional file, with an optional title override
    """
    metadata = metadata_load(path) if path else ExportMetadata()
    if title:
        metadata = ExportMetadata(title=title, comment=metadata.comment, logo=metadata.logo)
    return metadata
