"""
Exporter tests
"""

import subprocess
from pathlib import Path

import pytest

from tex2lia.lib import exporters as exporters_module
from tex2lia.lib.errors import ExportError
from tex2lia.lib.exporters import LiaExporter, markdown_export
from tex2lia.models import ExportMetadata, ExportRequest


@pytest.fixture
def final_markdown(tmp_path):
    md = tmp_path / "scratch" / "kurs.md"
    md.parent.mkdir()
    md.write_text("# Kurs\n", encoding="utf-8")
    return md


class TestMarkdownExport:
    """Test the plain Markdown copy"""

    def test_copy(self, tmp_path, final_markdown):
        request = ExportRequest(
            input=final_markdown, readme="kurs.md", output=tmp_path / "out" / "kurs.md",
            format="markdown", base_path=final_markdown.parent,
        )
        target = markdown_export(request, ExportMetadata())
        assert target == tmp_path / "out" / "kurs.md"
        assert target.read_text(encoding="utf-8") == "# Kurs\n"


class TestLiaExporter:
    """Test the LiaScript exporter CLI wrapper"""

    def request(self, tmp_path, final_markdown, **options):
        return ExportRequest(
            input=final_markdown, readme="kurs.md", output=tmp_path / "course-web",
            format="web", base_path=final_markdown.parent, options=options,
        )

    def test_command_with_flag_option(self, tmp_path, final_markdown):
        command = LiaExporter("liaex").command_build(self.request(tmp_path, final_markdown, **{"web-zip": True}))
        assert command[:3] == ["liaex", "--input", str(final_markdown)]
        assert command[command.index("--format") + 1] == "web"
        assert command[-1] == "--web-zip"

    def test_successful_export(self, monkeypatch, tmp_path, final_markdown):
        def fake_run(command, cwd=None, capture_output=False, text=False, check=False):
            output = Path(command[command.index("--output") + 1])
            output.with_suffix(".zip").write_bytes(b"PK")
            return subprocess.CompletedProcess(command, 0, "", "")

        monkeypatch.setattr(exporters_module.subprocess, "run", fake_run)
        archive = LiaExporter()(self.request(tmp_path, final_markdown), ExportMetadata(title="Go"))
        assert archive == tmp_path / "course-web.zip"

    def test_failed_export(self, monkeypatch, tmp_path, final_markdown):
        def fake_run(command, **kwargs):
            return subprocess.CompletedProcess(command, 1, "", "no such format")

        monkeypatch.setattr(exporters_module.subprocess, "run", fake_run)
        with pytest.raises(ExportError) as exc_info:
            LiaExporter()(self.request(tmp_path, final_markdown), ExportMetadata())
        assert "no such format" in str(exc_info.value)

    def test_missing_archive(self, monkeypatch, tmp_path, final_markdown):
        monkeypatch.setattr(
            exporters_module.subprocess, "run",
            lambda command, **kwargs: subprocess.CompletedProcess(command, 0, "", ""),
        )
        with pytest.raises(ExportError):
            LiaExporter()(self.request(tmp_path, final_markdown), ExportMetadata())


class TestExportMetadata:
    """Test the LiaScript metadata structure"""

    def test_lia_dict(self):
        data = ExportMetadata("Go", "Intro", "logo.png").lia_dict()
        assert data["lia"]["str_title"] == "Go"
        assert data["lia"]["definition"]["macro"]["comment"] == "Intro"
        assert data["lia"]["definition"]["logo"] == "logo.png"
