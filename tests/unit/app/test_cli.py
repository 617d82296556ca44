"""Tests for the command-line interface."""

from __future__ import annotations

import io
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from used_space.__main__ import (
    EXIT_CONFIG_ERROR,
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    apply_overrides,
    load_config,
    main,
    parse_arguments,
    write_report,
)
from used_space.core.config import ConfigurationError, MainConfig, ReportConfig
from used_space.core.session import UsedSpaceSession


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run each test from an empty directory and restore root logging afterwards."""
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _run(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    code = exc_info.value.code
    assert isinstance(code, int)
    return code


@pytest.mark.unit
class TestParseArguments:
    """Test argument parsing."""

    def test_defaults(self) -> None:
        """Test no arguments leaves every override unset."""
        args = parse_arguments([])

        assert args.path is None
        assert args.config is None
        assert args.workers is None
        assert args.no_syslog is False

    def test_all_options(self) -> None:
        """Test every option is parsed."""
        args = parse_arguments(
            [
                "/var/log",
                "-c",
                "cfg.yaml",
                "--log-level",
                "DEBUG",
                "--workers",
                "4",
                "--top",
                "3",
                "--depth",
                "2",
                "--no-syslog",
            ]
        )

        assert args.path == "/var/log"
        assert args.config == Path("cfg.yaml")
        assert args.log_level == "DEBUG"
        assert args.workers == 4
        assert args.top == 3
        assert args.depth == 2
        assert args.no_syslog is True

    def test_invalid_log_level(self) -> None:
        """Test argparse rejects unknown levels."""
        with pytest.raises(SystemExit):
            _ = parse_arguments(["--log-level", "LOUD"])


@pytest.mark.unit
class TestConfigOverrides:
    """Test configuration loading and command-line overrides."""

    def test_load_config_defaults_without_file(self) -> None:
        """Test defaults are used when no file exists."""
        assert load_config(None) == MainConfig()

    def test_load_config_picks_up_default_file(self) -> None:
        """Test the default file in the working directory is read."""
        _ = Path("used-space.yaml").write_text("report:\n  top: 7\n")

        assert load_config(None).report.top == 7

    def test_overrides_applied(self) -> None:
        """Test command-line values replace configured ones."""
        args = parse_arguments(["--workers", "3", "--top", "2", "--depth", "4", "--log-level", "INFO"])

        config = apply_overrides(MainConfig(), args)

        assert config.scan.max_workers == 3
        assert config.report == ReportConfig(top=2, depth=4)
        assert config.application.log_level == "INFO"

    def test_no_syslog_override(self) -> None:
        """Test --no-syslog disables syslog even when configured."""
        config = MainConfig.model_validate({"application": {"syslog_enabled": True}})

        assert apply_overrides(config, parse_arguments(["--no-syslog"])).application.syslog_enabled is False

    def test_invalid_override(self) -> None:
        """Test invalid overrides raise ConfigurationError."""
        with pytest.raises(ConfigurationError, match="Invalid command-line override"):
            _ = apply_overrides(MainConfig(), parse_arguments(["--workers", "0"]))


@pytest.mark.integration
class TestWriteReport:
    """Test report rendering."""

    def test_reference_tree(self, sample_tree: Path) -> None:
        """Test the root total and ranked children are printed."""
        session = UsedSpaceSession(str(sample_tree))
        _ = session.wait(timeout=10)
        out = io.StringIO()

        write_report(session, MainConfig(), out)

        lines = out.getvalue().splitlines()
        assert lines[0] == f"{'150 Bytes':>12}  {sample_tree}"
        assert lines[1] == f"{'100 Bytes':>12}    a"
        assert lines[2] == f"{'50 Bytes':>12}    b/"
        assert "2 directories, 2 files, 0 skipped" in out.getvalue()

    def test_depth_and_top(self, nested_tree: Path) -> None:
        """Test nested levels are expanded and surplus children summarised."""
        session = UsedSpaceSession(str(nested_tree))
        _ = session.wait(timeout=10)
        config = MainConfig.model_validate({"report": {"top": 1, "depth": 2}})
        out = io.StringIO()

        write_report(session, config, out)

        text = out.getvalue()
        assert "  logs/" in text
        assert "    2025/" in text
        assert "... 3 more" in text
        assert "... 1 more" in text
        assert "README" not in text


@pytest.mark.integration
class TestMain:
    """Test the main entry point end to end."""

    def test_success(self, sample_tree: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test a scan prints the report and exits 0."""
        code = _run([str(sample_tree), "--no-syslog"])

        captured = capsys.readouterr()
        assert code == EXIT_SUCCESS
        assert str(sample_tree) in captured.out
        assert "150 Bytes" in captured.out

    def test_missing_root(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test an unreadable root exits 1 with a message."""
        code = _run([str(tmp_path / "missing")])

        assert code == EXIT_RUNTIME_ERROR
        assert "Cannot read scan root" in capsys.readouterr().err

    def test_file_root(self, sample_tree: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test a file root exits 1."""
        code = _run([str(sample_tree / "a")])

        assert code == EXIT_RUNTIME_ERROR
        assert "not a directory" in capsys.readouterr().err

    def test_missing_config_file(self, sample_tree: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test an explicit but missing config file exits 1."""
        code = _run([str(sample_tree), "--config", "absent.yaml"])

        assert code == EXIT_CONFIG_ERROR
        assert "Configuration error" in capsys.readouterr().err

    def test_invalid_config_file(self, sample_tree: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test a config file failing validation exits 1."""
        config_file = Path("bad.yaml")
        _ = config_file.write_text("scan:\n  max_workers: -2\n")

        code = _run([str(sample_tree), "-c", str(config_file)])

        assert code == EXIT_CONFIG_ERROR
        assert "max_workers" in capsys.readouterr().err
