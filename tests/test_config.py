"""Tests for TOML config file loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from yarer.cli import build_parser, load_config, main, resolve_options


class TestLoadConfig:
    def test_missing_config_returns_empty(self, tmp_path: Path) -> None:
        assert load_config(None, tmp_path) == {}

    def test_explicit_path(self, tmp_path: Path) -> None:
        cfg = tmp_path / "custom.toml"
        cfg.write_text("[session]\nprecision = 12\n")
        result = load_config(cfg, tmp_path)
        assert result["session"] == {"precision": 12}

    def test_auto_discover_yarer_toml(self, tmp_path: Path) -> None:
        cfg = tmp_path / "yarer.toml"
        cfg.write_text("[variables]\nrate = 0.25\n")
        result = load_config(None, tmp_path)
        assert result["variables"] == {"rate": 0.25}


class TestConfigMerge:
    def test_config_precision(self, tmp_path: Path) -> None:
        (tmp_path / "yarer.toml").write_text("[session]\nprecision = 12\n")
        opts = resolve_options(build_parser().parse_args([]), tmp_path)
        assert opts.precision == 12

    def test_cli_overrides_config_precision(self, tmp_path: Path) -> None:
        (tmp_path / "yarer.toml").write_text("[session]\nprecision = 12\n")
        opts = resolve_options(build_parser().parse_args(["--precision", "6"]), tmp_path)
        assert opts.precision == 6

    def test_config_variables_merged(self, tmp_path: Path) -> None:
        (tmp_path / "yarer.toml").write_text('[variables]\nx = 2\ny = "1.5"\n')
        opts = resolve_options(build_parser().parse_args(["-D", "z=3"]), tmp_path)
        assert opts.variables == {"x": 2, "y": "1.5", "z": "3"}

    def test_cli_overrides_config_variable(self, tmp_path: Path) -> None:
        (tmp_path / "yarer.toml").write_text("[variables]\nx = 2\n")
        opts = resolve_options(build_parser().parse_args(["-D", "x=9"]), tmp_path)
        assert opts.variables["x"] == "9"

    def test_shell_section(self, tmp_path: Path) -> None:
        (tmp_path / "yarer.toml").write_text('[shell]\nquiet = true\nprompt = "calc> "\n')
        opts = resolve_options(build_parser().parse_args([]), tmp_path)
        assert opts.quiet is True
        assert opts.prompt == "calc> "

    def test_cli_prompt_overrides_config(self, tmp_path: Path) -> None:
        (tmp_path / "yarer.toml").write_text('[shell]\nprompt = "calc> "\n')
        opts = resolve_options(build_parser().parse_args(["--prompt", "$ "]), tmp_path)
        assert opts.prompt == "$ "

    def test_wrongly_typed_entries_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "yarer.toml").write_text('session = "loose"\n[shell]\nprompt = 3\n')
        opts = resolve_options(build_parser().parse_args([]), tmp_path)
        assert opts.precision == 28
        assert opts.prompt == "> "


class TestConfigFlag:
    def test_explicit_config_file(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        cfg = tmp_path / "other.toml"
        cfg.write_text("[variables]\nwidth = 3\nheight = 0.5\n")
        assert main(["--config", str(cfg), "-e", "width * height"]) == 0
        assert capsys.readouterr().out == "1.5\n"

    def test_config_float_variable(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        cfg = tmp_path / "other.toml"
        cfg.write_text("[variables]\nhalf = 0.5\n")
        assert main(["--config", str(cfg), "-e", "half * 4"]) == 0
        assert capsys.readouterr().out == "2.0\n"
