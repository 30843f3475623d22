"""Tests for perch.cli: entrypoint, app resolution and route listing."""

import sys
import types

import pytest

from perch.app import App
from perch.cli import main
from perch.cli._resolve import resolve_app
from perch.cli._routes import format_routes
from perch.config import AppConfig
from perch.document.memory import InMemoryDocumentClient


@pytest.fixture
def app_module(monkeypatch: pytest.MonkeyPatch) -> types.ModuleType:
    """An importable ``perch_cli_app`` module exposing several app flavours."""
    module = types.ModuleType("perch_cli_app")
    module.app = App(client=InMemoryDocumentClient())
    module.create_app = lambda: App(client=InMemoryDocumentClient())
    module.broken = App(AppConfig(major_version=9), client=InMemoryDocumentClient())
    module.not_an_app = 42
    monkeypatch.setitem(sys.modules, "perch_cli_app", module)
    return module


class TestCLIHelp:
    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "routes" in capsys.readouterr().out

    def test_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0

    def test_routes_missing_app(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes"])
        assert exc_info.value.code == 2

    def test_run_missing_app(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["run"])
        assert exc_info.value.code == 2


class TestResolveApp:
    def test_default_attribute(self, app_module: types.ModuleType) -> None:
        assert resolve_app("perch_cli_app") is app_module.app

    def test_factory(self, app_module: types.ModuleType) -> None:
        assert isinstance(resolve_app("perch_cli_app:create_app"), App)

    def test_not_an_app(self, app_module: types.ModuleType) -> None:
        with pytest.raises(TypeError, match="not a perch.App"):
            resolve_app("perch_cli_app:not_an_app")

    def test_missing_attribute(self, app_module: types.ModuleType) -> None:
        with pytest.raises(AttributeError):
            resolve_app("perch_cli_app:nope")


class TestRoutesCommand:
    def test_lists_canonical_and_legacy(self, app_module: types.ModuleType, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", "perch_cli_app:app"])
        out = capsys.readouterr().out
        lines = out.splitlines()

        assert lines[0].split() == ["METHOD", "PATH", "HANDLER", "COMPAT"]
        legacy = next(line for line in lines if "document_index_action_v7" in line)
        assert "/{index}/{type}/{id}" in legacy
        assert legacy.rstrip().endswith("yes")
        canonical = next(line for line in lines if line.split()[-1] == "document_index_action")
        assert "/{index}/_doc/{id}" in canonical

    def test_configuration_error(self, app_module: types.ModuleType, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", "perch_cli_app:broken"])
        assert exc_info.value.code == 1
        assert "Configuration error" in capsys.readouterr().err

    def test_unresolvable(self, app_module: types.ModuleType, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", "perch_cli_app:not_an_app"])
        assert exc_info.value.code == 1
        assert "Error" in capsys.readouterr().err


class TestFormatRoutes:
    def test_columns_aligned(self) -> None:
        text = format_routes([("PUT", "/a", "h", ""), ("POST, PUT", "/{index}/{type}/{id}", "long_name", "yes")])
        lines = text.splitlines()
        assert lines[2].index("/a") == lines[3].index("/{index}")
        assert lines[1].startswith("---")
