"""
Export metadata loader tests
"""

import pytest

from tex2lia.lib.errors import MetadataError
from tex2lia.lib.metadata import metadata_load, metadata_resolve, metadataHeader_merge
from tex2lia.models import ExportMetadata


class TestMetadataLoad:
    """Test YAML loading and validation"""

    def test_full_file(self, tmp_path):
        path = tmp_path / "meta.yaml"
        path.write_text("title: Go\ncomment: Grundlagen\nlogo: logo.png\n", encoding="utf-8")
        metadata = metadata_load(path)
        assert (metadata.title, metadata.comment, metadata.logo) == ("Go", "Grundlagen", "logo.png")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "meta.yaml"
        path.write_text("", encoding="utf-8")
        assert metadata_load(path).title == ""

    def test_missing_file(self, tmp_path):
        with pytest.raises(MetadataError):
            metadata_load(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "meta.yaml"
        path.write_text("title: [unclosed\n", encoding="utf-8")
        with pytest.raises(MetadataError):
            metadata_load(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "meta.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(MetadataError):
            metadata_load(path)

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "meta.yaml"
        path.write_text("titel: Go\n", encoding="utf-8")
        with pytest.raises(MetadataError) as exc_info:
            metadata_load(path)
        assert "titel" in str(exc_info.value)


class TestMetadataResolve:
    """Test combining file and title override"""

    def test_title_override(self, tmp_path):
        path = tmp_path / "meta.yaml"
        path.write_text("title: Old\ncomment: C\n", encoding="utf-8")
        metadata = metadata_resolve(path, "New")
        assert metadata.title == "New"
        assert metadata.comment == "C"

    def test_no_file(self):
        assert metadata_resolve(None, "Only title").title == "Only title"


class TestHeaderMerge:
    """Test merging metadata into the LiaScript course header"""

    def test_empty_metadata_keeps_header(self):
        header = "<!-- author: Team -->\n"
        assert metadataHeader_merge(header, ExportMetadata()) == header

    def test_new_header_comment(self):
        metadata = ExportMetadata(title="Go", comment="Intro", logo="logo.png")
        assert metadataHeader_merge("", metadata) == "<!--\ncomment: Intro\nlogo: logo.png\n-->\n\n# Go"

    def test_merged_into_existing_comment(self):
        header = "<!--\nauthor: Team\n-->\n\n@import macros.md"
        merged = metadataHeader_merge(header, ExportMetadata(comment="Intro"))
        assert merged == "<!--\nauthor: Team\ncomment: Intro\n-->\n\n@import macros.md"

    def test_header_without_comment(self):
        merged = metadataHeader_merge("Welcome", ExportMetadata(logo="logo.png"))
        assert merged == "<!--\nlogo: logo.png\n-->\n\nWelcome"

    def test_title_only(self):
        assert metadataHeader_merge("", ExportMetadata(title="Einführung in Go")) == "# Einführung in Go"

    def test_multiline_comment_flattened(self):
        merged = metadataHeader_merge("", ExportMetadata(comment="Zeile eins\nZeile zwei"))
        assert "comment: Zeile eins Zeile zwei" in merged
