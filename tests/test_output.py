"""Tests for the CLI output manager."""

from __future__ import annotations

import json

import pytest

from gatehouse.output import (
    OutputFormat,
    OutputManager,
    get_output,
    reset_output,
    set_output,
)


class TestFormatResolution:
    def test_auto_is_plain_when_not_a_tty(self) -> None:
        assert OutputManager().format == OutputFormat.PLAIN

    def test_explicit_format_is_kept(self) -> None:
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON

    def test_no_color_env_disables_rich(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NO_COLOR", "1")
        assert OutputManager().format == OutputFormat.PLAIN


class TestDataOutput:
    def test_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(format=OutputFormat.JSON).format_response({"a": 1})
        assert json.loads(capsys.readouterr().out) == {"a": 1}

    def test_plain_dict(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(format=OutputFormat.PLAIN).format_response({"a": 1, "b": "x"})
        assert capsys.readouterr().out == "a\t1\nb\tx\n"

    def test_plain_table(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(format=OutputFormat.PLAIN).print_table(["Name"], [["oauth"], ["other"]])
        assert capsys.readouterr().out == "oauth\nother\n"

    def test_json_table(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(format=OutputFormat.JSON).print_table(["Name"], [["oauth"]])
        assert json.loads(capsys.readouterr().out) == [{"Name": "oauth"}]


class TestDiagnostics:
    def test_errors_go_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(no_color=True).error("boom")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "Error: boom\n"

    def test_debug_requires_verbose(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(no_color=True).debug("hidden")
        OutputManager(no_color=True, verbose=True).debug("shown")
        assert capsys.readouterr().err == "[debug] shown\n"


class TestGlobalInstance:
    def test_set_and_reset(self) -> None:
        manager = OutputManager(format=OutputFormat.JSON)
        set_output(manager)
        assert get_output() is manager
        reset_output()
        assert get_output() is not manager
