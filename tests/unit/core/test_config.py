"""
Unit Tests for Configuration Management.

Black box tests against the public interface of config.py. Every test runs
from an empty working directory with an empty HOME (see the root conftest),
so config files are created explicitly with tmp_path.
"""

from pathlib import Path

import pytest

from synse_cli.core.config import (
    LOCAL_HOST_ADDRESS,
    LOCAL_HOST_NAME,
    CliOverrides,
    HostConfig,
    find_config_file,
    load_config_file,
    load_env_settings,
    resolve_config,
)
from synse_cli.core.config_schema import DEFAULT_TIMEOUT, DEFAULT_WORKERS
from synse_cli.core.exceptions import ConfigError

LAB_CONFIG = """\
debug: false
active_host: lab
timeout: 5
workers: 4
hosts:
  - name: lab
    address: 10.1.2.3:5000
  - name: prod
    address: https://synse.example.com
"""


def _write(directory: Path, content: str, filename: str = ".synse.yaml") -> Path:
    path = directory / filename
    path.write_text(content, encoding="utf-8")
    return path


class TestDefaults:
    """Resolution with no config file, no environment and no flags."""

    def test_single_local_host_is_active(self):
        """Should configure exactly the built-in local host and select it."""
        config = resolve_config()

        assert config.hosts == (HostConfig(LOCAL_HOST_NAME, LOCAL_HOST_ADDRESS),)
        assert config.active_host == HostConfig("local", "localhost:5000")

    def test_default_values(self):
        """Should fall back to the built-in defaults."""
        config = resolve_config()

        assert config.debug is False
        assert config.timeout == DEFAULT_TIMEOUT
        assert config.workers == DEFAULT_WORKERS
        assert config.config_file is None

    def test_empty_file_behaves_like_no_file(self, _isolate_environment: Path):
        """Should accept an empty config file."""
        path = _write(_isolate_environment, "")

        config = resolve_config()

        assert config.config_file == path
        assert config.active_host.name == LOCAL_HOST_NAME


class TestConfigFile:
    """Tests for locating and loading .synse.yaml."""

    def test_file_values_are_used(self, _isolate_environment: Path):
        """Should take hosts, active host, timeout and workers from the file."""
        _write(_isolate_environment, LAB_CONFIG)

        config = resolve_config()

        assert config.active_host == HostConfig("lab", "10.1.2.3:5000")
        assert [h.name for h in config.hosts] == ["lab", "prod", "local"]
        assert config.timeout == 5.0
        assert config.workers == 4

    def test_file_defining_local_is_not_duplicated(self, _isolate_environment: Path):
        """Should keep a file-defined local host instead of adding another."""
        _write(_isolate_environment, "hosts:\n  - name: local\n    address: 127.0.0.1:6000\n")

        config = resolve_config()

        assert config.hosts == (HostConfig("local", "127.0.0.1:6000"),)
        assert config.active_host.address == "127.0.0.1:6000"

    def test_file_without_active_host_selects_local(self, _isolate_environment: Path):
        """Should fall back to local when the file lists hosts but selects none."""
        _write(_isolate_environment, "hosts:\n  - name: lab\n    address: 10.1.2.3:5000\n")

        config = resolve_config()

        assert config.active_host.name == LOCAL_HOST_NAME

    def test_yml_extension_is_found(self, _isolate_environment: Path):
        """Should find .synse.yml when there is no .synse.yaml."""
        path = _write(_isolate_environment, "workers: 2\n", filename=".synse.yml")

        assert find_config_file() == path

    def test_yaml_preferred_over_yml(self, _isolate_environment: Path):
        """Should prefer .synse.yaml when both exist in one directory."""
        preferred = _write(_isolate_environment, "workers: 2\n")
        _write(_isolate_environment, "workers: 3\n", filename=".synse.yml")

        assert find_config_file() == preferred
        assert resolve_config().workers == 2

    def test_cwd_preferred_over_home(self, _isolate_environment: Path):
        """Should prefer the working directory file over the home directory file."""
        home = Path.home()
        _write(home, "workers: 3\n")
        cwd_file = _write(_isolate_environment, "workers: 2\n")

        config = resolve_config()

        assert config.config_file == cwd_file
        assert config.workers == 2

    def test_home_used_when_cwd_has_none(self):
        """Should fall back to the home directory."""
        home_file = _write(Path.home(), "workers: 3\n")

        config = resolve_config()

        assert config.config_file == home_file
        assert config.workers == 3

    def test_explicit_search_paths(self, tmp_path: Path):
        """Should only search the directories given."""
        other = tmp_path / "other"
        other.mkdir()
        path = _write(other, "workers: 6\n")

        assert resolve_config(search_paths=[other]).workers == 6
        assert find_config_file([other]) == path
        assert find_config_file([tmp_path / "work"]) is None


class TestInvalidConfigFile:
    """A file that exists but cannot be used is a ConfigError."""

    def test_invalid_yaml(self, _isolate_environment: Path):
        """Should reject a file that is not YAML."""
        path = _write(_isolate_environment, "hosts: [unclosed\n")

        with pytest.raises(ConfigError) as exc_info:
            load_config_file(path)

        assert exc_info.value.code == "CFG_INVALID"
        assert str(path) in exc_info.value.message

    def test_top_level_must_be_mapping(self, _isolate_environment: Path):
        """Should reject a file whose top level is a list."""
        _write(_isolate_environment, "- lab\n- prod\n")

        with pytest.raises(ConfigError, match="must contain a mapping"):
            resolve_config()

    def test_unknown_key_rejected(self, _isolate_environment: Path):
        """Should reject keys the schema does not define."""
        _write(_isolate_environment, "hostz: []\n")

        with pytest.raises(ConfigError, match="hostz"):
            resolve_config()

    def test_wrong_type_rejected(self, _isolate_environment: Path):
        """Should reject a non-numeric timeout."""
        _write(_isolate_environment, "timeout: soon\n")

        with pytest.raises(ConfigError, match="timeout"):
            resolve_config()

    def test_non_positive_workers_rejected(self, _isolate_environment: Path):
        """Should reject workers below 1."""
        _write(_isolate_environment, "workers: 0\n")

        with pytest.raises(ConfigError, match="workers"):
            resolve_config()

    def test_duplicate_host_names_rejected(self, _isolate_environment: Path):
        """Should reject two hosts with the same name."""
        _write(
            _isolate_environment,
            "hosts:\n"
            "  - name: lab\n    address: a:5000\n"
            "  - name: lab\n    address: b:5000\n",
        )

        with pytest.raises(ConfigError, match="duplicate host names: lab"):
            resolve_config()

    def test_unknown_active_host(self, _isolate_environment: Path):
        """Should reject an active host that is not configured."""
        _write(_isolate_environment, "active_host: nowhere\n")

        with pytest.raises(ConfigError) as exc_info:
            resolve_config()

        assert "nowhere" in exc_info.value.message
        assert "local" in exc_info.value.message


class TestPrecedence:
    """CLI flags > environment > config file > defaults."""

    @pytest.fixture(autouse=True)
    def _lab_file(self, _isolate_environment: Path):
        _write(_isolate_environment, LAB_CONFIG)

    def test_file_over_defaults(self):
        """Should use file values when nothing else is set."""
        config = resolve_config()

        assert config.timeout == 5.0
        assert config.active_host.name == "lab"

    def test_env_over_file(self, monkeypatch: pytest.MonkeyPatch):
        """Should let SYNSE_* variables override the file."""
        monkeypatch.setenv("SYNSE_HOST", "prod")
        monkeypatch.setenv("SYNSE_TIMEOUT", "2.5")
        monkeypatch.setenv("SYNSE_WORKERS", "16")
        monkeypatch.setenv("SYNSE_DEBUG", "true")

        config = resolve_config()

        assert config.active_host.name == "prod"
        assert config.timeout == 2.5
        assert config.workers == 16
        assert config.debug is True

    def test_cli_over_env(self, monkeypatch: pytest.MonkeyPatch):
        """Should let flags override the environment."""
        monkeypatch.setenv("SYNSE_HOST", "prod")
        monkeypatch.setenv("SYNSE_TIMEOUT", "2.5")

        config = resolve_config(CliOverrides(host="local", timeout=1.0, workers=1))

        assert config.active_host.name == "local"
        assert config.timeout == 1.0
        assert config.workers == 1

    def test_unset_flags_defer_to_lower_layers(self, monkeypatch: pytest.MonkeyPatch):
        """Should treat None overrides as not given."""
        monkeypatch.setenv("SYNSE_WORKERS", "16")

        config = resolve_config(CliOverrides(timeout=None, workers=None))

        assert config.workers == 16
        assert config.timeout == 5.0

    def test_empty_env_host_is_ignored(self, monkeypatch: pytest.MonkeyPatch):
        """Should ignore SYNSE_HOST set to an empty string."""
        monkeypatch.setenv("SYNSE_HOST", "")

        assert resolve_config().active_host.name == "lab"

    def test_cli_unknown_host(self):
        """Should reject a flag naming an unconfigured host."""
        with pytest.raises(ConfigError, match="'staging' is not configured"):
            resolve_config(CliOverrides(host="staging"))


class TestEnvSettings:
    """Tests for SYNSE_* environment parsing."""

    def test_no_variables(self):
        """Should leave every field unset."""
        env = load_env_settings()

        assert env.debug is None
        assert env.host is None
        assert env.timeout is None
        assert env.workers is None

    def test_bad_type_is_config_error(self, monkeypatch: pytest.MonkeyPatch):
        """Should report a wrongly typed variable as a ConfigError."""
        monkeypatch.setenv("SYNSE_WORKERS", "many")

        with pytest.raises(ConfigError, match="SYNSE_"):
            load_env_settings()

    def test_get_host(self):
        """Should look up configured hosts by name."""
        config = resolve_config()

        assert config.get_host("local") == config.active_host
        assert config.get_host("missing") is None
