"""
Pandoc wrapper tests

subprocess.run is replaced with a recorder, so pandoc itself is not needed.
"""

import subprocess
from pathlib import Path

import pytest

from tex2lia.lib import pandoc as pandoc_module
from tex2lia.lib.errors import PandocError
from tex2lia.lib.pandoc import FILTERED_TEMP_NAME, PandocConverter


class RunRecorder:
    """Stand-in for subprocess.run returning scripted results"""

    def __init__(self, results=None):
        self.calls = []
        self.results = list(results or [])

    def __call__(self, command, cwd=None, capture_output=False, text=False, check=False):
        self.calls.append({"command": command, "cwd": cwd})
        returncode, stderr = self.results.pop(0) if self.results else (0, "")
        if returncode == 0 and "-o" in command:
            Path(command[command.index("-o") + 1]).write_text("output", encoding="utf-8")
        return subprocess.CompletedProcess(command, returncode, "", stderr)


@pytest.fixture
def source(tmp_path):
    tex = tmp_path / "kurs.tex"
    tex.write_text("\\section{A}", encoding="utf-8")
    return tex


class TestConvert:
    """Test the main LaTeX → Markdown conversion"""

    def test_command_line(self, monkeypatch, source):
        recorder = RunRecorder()
        monkeypatch.setattr(pandoc_module.subprocess, "run", recorder)

        output = source.parent / "document.md"
        PandocConverter(executable="pandoc", target="gfm", wrap="preserve").convert(source, output)

        call = recorder.calls[0]
        assert call["command"] == [
            "pandoc", "-s", "-f", "latex", "-t", "gfm", "--wrap=preserve", "--verbose",
            "-o", str(output.resolve()), str(source.resolve()),
        ]
        assert call["cwd"] == str(source.parent.resolve())

    def test_non_zero_exit_raises(self, monkeypatch, source):
        monkeypatch.setattr(pandoc_module.subprocess, "run", RunRecorder([(1, "boom")]))
        with pytest.raises(PandocError) as exc_info:
            PandocConverter().convert(source, source.parent / "out.md")
        assert "boom" in str(exc_info.value)

    def test_missing_executable_raises(self, monkeypatch, source):
        def missing(*args, **kwargs):
            raise FileNotFoundError("pandoc")

        monkeypatch.setattr(pandoc_module.subprocess, "run", missing)
        with pytest.raises(PandocError):
            PandocConverter().convert(source, source.parent / "out.md")

    def test_callable_interface(self, monkeypatch, source):
        recorder = RunRecorder()
        monkeypatch.setattr(pandoc_module.subprocess, "run", recorder)
        converter = PandocConverter()
        converter(source, source.parent / "out.md")
        assert len(recorder.calls) == 1


class TestConvertWithFilter:
    """Test the two-stage conversion with a Lua filter"""

    def test_two_stages_and_cleanup(self, monkeypatch, source):
        recorder = RunRecorder()
        monkeypatch.setattr(pandoc_module.subprocess, "run", recorder)
        lua = source.parent / "filter.lua"
        lua.write_text("return {}", encoding="utf-8")

        PandocConverter().convert_withFilter(source, source.parent / "out.md", lua)

        first, second = recorder.calls[0]["command"], recorder.calls[1]["command"]
        assert "-t" in first and first[first.index("-t") + 1] == "latex"
        assert f"--lua-filter={lua.resolve()}" in first
        assert "--listings" in second and "--mathjax" in second
        assert not (source.parent / FILTERED_TEMP_NAME).exists()

    def test_temp_file_removed_on_failure(self, monkeypatch, source):
        monkeypatch.setattr(pandoc_module.subprocess, "run", RunRecorder([(0, ""), (2, "bad")]))
        with pytest.raises(PandocError):
            PandocConverter().convert_withFilter(source, source.parent / "out.md", source.parent / "f.lua")
        assert not (source.parent / FILTERED_TEMP_NAME).exists()
