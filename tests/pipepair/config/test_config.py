"""
Tests for Config: defaults, YAML files, environment overrides and references.
"""

import os
from pathlib import Path

import pytest

from pipepair.config import DEFAULTS, Config, find_config_file
from pipepair.exceptions import ConfigError

REPO_CONFIG = Path(__file__).resolve().parents[3] / "etc" / "pipepair.yaml"


def _write(path: Path, text: str) -> Path:
    path.write_text(text)
    return path


@pytest.mark.unit
class TestDefaults:
    """Test configuration without a file."""

    def test_builtin_defaults(self):
        """Test defaults are available with no file."""
        config = Config()
        assert config.to_dict() == DEFAULTS
        assert config.source_file() is None

    def test_attribute_and_path_access(self):
        """Test values read by attribute and by dotted path."""
        config = Config()
        assert config.pairs.span == 5
        assert config.get("basic.pacing.producer") == 0.03
        assert config.get("pairs.missing", "fallback") == "fallback"
        assert config.has("logging.level")


@pytest.mark.unit
class TestYamlFile:
    """Test loading YAML over the defaults."""

    def test_file_overrides_defaults(self, temp_dir):
        """Test values in the file replace defaults, others stay."""
        fname = _write(temp_dir / "pipepair.yaml", "pairs:\n  count: 4\n")
        config = Config(fname)

        assert config.pairs.count == 4
        assert config.pairs.span == 5
        assert config.source_file() == fname.resolve()

    def test_repository_config(self):
        """Test the shipped etc/pipepair.yaml loads and resolves references."""
        config = Config(REPO_CONFIG)
        assert config.pairs.pacing.consumer == "0.02"
        assert config.basic.hi == 6

    def test_empty_file(self, temp_dir):
        """Test an empty file leaves the defaults."""
        config = Config(_write(temp_dir / "empty.yaml", ""))
        assert config.to_dict() == DEFAULTS

    def test_missing_file(self, temp_dir):
        """Test an unreadable file is a ConfigError."""
        with pytest.raises(ConfigError, match="cannot read config file"):
            Config(temp_dir / "absent.yaml")

    def test_invalid_yaml(self, temp_dir):
        """Test a syntax error is a ConfigError."""
        with pytest.raises(ConfigError, match="invalid YAML"):
            Config(_write(temp_dir / "bad.yaml", "pairs: [unclosed\n"))

    def test_non_mapping_root(self, temp_dir):
        """Test the top level must be a mapping."""
        with pytest.raises(ConfigError, match="must be a mapping"):
            Config(_write(temp_dir / "list.yaml", "- 1\n- 2\n"))

    def test_reload(self, temp_dir):
        """Test reload picks up file changes."""
        fname = _write(temp_dir / "pipepair.yaml", "basic:\n  hi: 8\n")
        config = Config(fname)
        _write(fname, "basic:\n  hi: 9\n")
        assert config.reload().basic.hi == 9


@pytest.mark.unit
class TestReferences:
    """Test ${path} substitution."""

    def test_reference_resolved(self, temp_dir):
        """Test a reference is replaced by the referenced value."""
        fname = _write(temp_dir / "p.yaml", "pairs:\n  span: ${basic.hi}\n")
        assert Config(fname).pairs.span == "6"

    def test_undefined_reference(self, temp_dir):
        """Test a reference to a missing path is a ConfigError."""
        fname = _write(temp_dir / "p.yaml", "pairs:\n  span: ${nowhere.at.all}\n")
        with pytest.raises(ConfigError) as exc_info:
            Config(fname)
        assert exc_info.value.context["path"] == "nowhere.at.all"


@pytest.mark.unit
class TestEnvOverrides:
    """Test PIPEPAIR_<SECTION>_<KEY> overrides."""

    def test_int_override(self, monkeypatch):
        """Test numeric values are converted."""
        monkeypatch.setenv("PIPEPAIR_PAIRS_COUNT", "7")
        assert Config().pairs.count == 7

    def test_nested_override(self, monkeypatch):
        """Test underscores map to nested keys."""
        monkeypatch.setenv("PIPEPAIR_BASIC_PACING_PRODUCER", "0")
        assert Config().basic.pacing.producer == 0

    def test_env_beats_file(self, monkeypatch, temp_dir):
        """Test the environment takes precedence over the file."""
        fname = _write(temp_dir / "p.yaml", "logging:\n  level: warning\n")
        monkeypatch.setenv("PIPEPAIR_LOGGING_LEVEL", "debug")
        assert Config(fname).logging.level == "debug"

    def test_disabled(self, monkeypatch):
        """Test overrides can be switched off."""
        monkeypatch.setenv("PIPEPAIR_PAIRS_COUNT", "7")
        config = Config(enable_env_overrides=False)
        assert config.pairs.count == 2
        assert config.get_env_overrides() == {}

    def test_get_env_overrides(self, monkeypatch):
        """Test applied overrides are reported by dotted path."""
        monkeypatch.setenv("PIPEPAIR_LOGGING_COLORS", "false")
        assert Config().get_env_overrides() == {"logging.colors": False}

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("null", None),
            ("true", True),
            ("FALSE", False),
            ("12", 12),
            ("0.5", 0.5),
            ("a,b", ["a", "b"]),
            ("text", "text"),
        ],
    )
    def test_value_conversion(self, raw, expected):
        """Test environment strings are converted like YAML scalars."""
        assert Config(enable_env_overrides=False)._convert_env_value(raw) == expected


@pytest.mark.unit
class TestFindConfigFile:
    """Test locating etc/pipepair.yaml."""

    def test_in_etc_dir(self, temp_dir):
        """Test an explicit etc directory is searched."""
        fname = _write(temp_dir / "pipepair.yaml", "")
        assert find_config_file(temp_dir) == fname

    def test_missing_in_etc_dir(self, temp_dir):
        """Test None when the etc directory has no config."""
        assert find_config_file(temp_dir) is None

    def test_search_parents(self, temp_dir, monkeypatch):
        """Test etc/ in a parent of the working directory is found."""
        (temp_dir / "etc").mkdir()
        fname = _write(temp_dir / "etc" / "pipepair.yaml", "")
        nested = temp_dir / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        assert find_config_file() == fname.resolve()

    def test_custom_filename(self, temp_dir):
        """Test a different filename can be searched for."""
        fname = _write(temp_dir / "other.yaml", "")
        assert find_config_file(temp_dir, "other.yaml") == fname
        assert os.path.basename(fname) == "other.yaml"
