"""Tests for the command line entry point."""

from __future__ import annotations

import sys

import pytest

from mcp_zoekt_search import __version__
from mcp_zoekt_search.__main__ import main


def test_version(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(sys, "argv", ["zoekt-mcp", "--version"])
    main()
    assert capsys.readouterr().out == f"{__version__}\n"


def test_help(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(sys, "argv", ["zoekt-mcp", "-h"])
    main()
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Usage: zoekt-mcp" in captured.err
    assert "ZOEKT_URL" in captured.err
