"""Unit tests for configuration loading."""

from pathlib import Path
from textwrap import dedent

import pytest

from ticketctl.config import (
    ConfigError,
    Settings,
    find_config,
    load_config_file,
    load_settings,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate tests from the caller's environment and working directory."""
    for name in ("TICKET_ROOT", "TICKET_USER", "TICKETCTL_LOG_DIR", "TICKETCTL_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("USER", "shell-user")
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Create a project config file."""
    path = tmp_path / ".ticketctl.yaml"
    path.write_text(
        dedent("""
            root: work/tickets
            reporter: file-user
            log_level: info
        """).strip()
    )
    return path


@pytest.mark.unit
class TestLoadSettings:
    """Tests for load_settings precedence."""

    def test_defaults(self) -> None:
        """Without env or config, root is ./tickets and reporter is $USER."""
        settings = load_settings()

        assert settings == Settings(
            root=Path.cwd() / "tickets",
            reporter="shell-user",
            log_dir=None,
            log_level="WARNING",
        )

    def test_env_root(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("TICKET_ROOT", str(tmp_path / "elsewhere"))

        assert load_settings().root == tmp_path / "elsewhere"

    def test_explicit_root_beats_env(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("TICKET_ROOT", str(tmp_path / "env"))

        assert load_settings(root=tmp_path / "cli").root == tmp_path / "cli"

    def test_config_file_values(self, config_file: Path, tmp_path: Path) -> None:
        """Auto-detected config file supplies root, reporter and log level."""
        settings = load_settings()

        assert settings.root == tmp_path.resolve() / "work" / "tickets"
        assert settings.reporter == "file-user"
        assert settings.log_level == "INFO"

    def test_env_beats_config_file(
        self, config_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("TICKET_USER", "env-user")
        monkeypatch.setenv("TICKETCTL_LOG_LEVEL", "debug")

        settings = load_settings()

        assert settings.reporter == "env-user"
        assert settings.log_level == "DEBUG"

    def test_reporter_falls_back_to_unknown(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("USER", raising=False)

        assert load_settings().reporter == "unknown"

    def test_log_dir_from_env(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("TICKETCTL_LOG_DIR", str(tmp_path / "logs"))

        assert load_settings().log_dir == tmp_path / "logs"

    def test_unknown_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TICKETCTL_LOG_LEVEL", "verbose")

        with pytest.raises(ConfigError, match="Invalid log level 'VERBOSE'"):
            load_settings()


@pytest.mark.unit
class TestLoadConfigFile:
    """Tests for load_config_file."""

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config_file(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / ".ticketctl.yaml"
        path.write_text("root: [unclosed")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config_file(path)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / ".ticketctl.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigError, match="mapping"):
            load_config_file(path)

    def test_unknown_keys(self, tmp_path: Path) -> None:
        path = tmp_path / ".ticketctl.yaml"
        path.write_text("root: t\ncolour: blue\n")

        with pytest.raises(ConfigError, match="colour"):
            load_config_file(path)

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / ".ticketctl.yaml"
        path.write_text("")

        assert load_config_file(path) == {}


@pytest.mark.unit
class TestFindConfig:
    """Tests for find_config."""

    def test_finds_in_parent(self, config_file: Path, tmp_path: Path) -> None:
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_config(nested) == config_file.resolve()

    def test_returns_none_when_absent(self, tmp_path: Path) -> None:
        nested = tmp_path / "empty"
        nested.mkdir()

        # Parents of tmp_path are outside the test's control; only assert the
        # nearest hit is not inside this tree
        found = find_config(nested)
        assert found is None or tmp_path.resolve() not in found.parents
