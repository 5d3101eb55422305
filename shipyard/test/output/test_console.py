"""Tests for shipyard.output.console module."""

from __future__ import annotations

from datetime import datetime

import pytest

from shipyard.output.console import (
    ConsoleProtocol,
    MockConsole,
    OutputRecord,
    RichConsole,
    Style,
)


def _fixed_clock() -> datetime:
    return datetime(2026, 3, 14, 9, 26, 53)


class TestStyle:
    def test_str_conversion(self) -> None:
        assert str(Style.SUCCESS) == "success"
        assert str(Style.DIM) == "dim"

    def test_all_styles_exist(self) -> None:
        expected = {"DEFAULT", "SUCCESS", "ERROR", "WARNING", "INFO", "DIM", "BOLD", "HEADER"}
        assert {s.name for s in Style} == expected


class TestMockConsole:
    def test_levels_are_labelled(self) -> None:
        console = MockConsole()
        console.info("fetching")
        console.success("pushed")
        console.warning("tag exists")
        console.error("build failed")

        assert console.messages == [
            "info: fetching",
            "OK pushed",
            "warning: tag exists",
            "error: build failed",
        ]
        assert console.has_warning()
        assert console.has_error()

    def test_print_keeps_style(self) -> None:
        console = MockConsole()
        console.print("git push origin main", Style.DIM)
        assert console.outputs == [OutputRecord("git push origin main", Style.DIM)]

    def test_find_and_text(self) -> None:
        console = MockConsole()
        console.header("Release")
        console.newline()
        console.print("docker pull acme/web:v1")
        assert [o.message for o in console.find("docker")] == ["docker pull acme/web:v1"]
        assert console.text == "Release\n\ndocker pull acme/web:v1"

    def test_no_error_by_default(self) -> None:
        console = MockConsole()
        console.print("plain")
        assert not console.has_error()
        assert not console.has_warning()


class TestRichConsole:
    def test_leveled_lines_are_timestamped(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole(clock=_fixed_clock)
        console.info("validating")
        console.warning("no tags")

        out = capsys.readouterr().out.splitlines()
        assert out == [
            "[2026-03-14 09:26:53] info: validating",
            "[2026-03-14 09:26:53] warning: no tags",
        ]

    def test_markup_in_messages_is_literal(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole(clock=_fixed_clock)
        console.error("bad [red]tag[/red]")
        console.print("[bold]raw[/bold]")

        out = capsys.readouterr().out
        assert "bad [red]tag[/red]" in out
        assert "[bold]raw[/bold]" in out

    def test_plain_print_has_no_timestamp(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole(clock=_fixed_clock).print("docker pull acme/web:v1")
        assert capsys.readouterr().out == "docker pull acme/web:v1\n"


def test_implementations_satisfy_protocol() -> None:
    consoles: list[ConsoleProtocol] = [MockConsole(), RichConsole()]
    assert len(consoles) == 2
