"""Unit tests for mdfmt CLI configuration management.

This module tests the configuration system including file discovery, loading,
environment variables and priority handling.
"""

import json
from unittest.mock import patch

import pytest

from mdfmt.cli.config import (
    discover_config_file,
    find_config_in_parents,
    load_config_file,
    load_config_with_priority,
    load_env_config,
    merge_configs,
    normalize_config,
    normalize_key,
)
from mdfmt.exceptions import ConfigError


@pytest.mark.unit
@pytest.mark.cli
class TestKeyNormalization:
    """Test config key normalization and validation."""

    @pytest.mark.parametrize("key", ["ordered_list", "ordered-list", "orderedList", " Ordered-List "])
    def test_spellings(self, key):
        assert normalize_key(key) == "ordered_list"

    def test_unknown_key_rejected(self):
        with pytest.raises(ConfigError, match="Unknown configuration key 'colour'") as exc_info:
            normalize_config({"colour": "blue"}, "test.toml")
        assert exc_info.value.parameter_name == "colour"

    def test_exclude_string_is_split(self):
        assert normalize_config({"exclude": "a, b,,c"}) == {"exclude": ["a", "b", "c"]}

    def test_exclude_must_be_list_or_string(self):
        with pytest.raises(ConfigError, match="Invalid exclude"):
            normalize_config({"exclude": 5})


@pytest.mark.unit
@pytest.mark.cli
class TestConfigLoading:
    """Test loading each supported file format."""

    def test_toml(self, tmp_path):
        path = tmp_path / ".mdfmt.toml"
        path.write_text('width = 100\nwrap = "always"\nordered-list = "one"\nexclude = ["drafts"]\n')
        assert load_config_file(path) == {
            "width": 100,
            "wrap": "always",
            "ordered_list": "one",
            "exclude": ["drafts"],
        }

    def test_yaml(self, tmp_path):
        path = tmp_path / ".mdfmt.yaml"
        path.write_text("width: 72\nwrap: never\n")
        assert load_config_file(path) == {"width": 72, "wrap": "never"}

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / ".mdfmt.yml"
        path.write_text("")
        assert load_config_file(path) == {}

    def test_json(self, tmp_path):
        path = tmp_path / ".mdfmt.json"
        path.write_text(json.dumps({"orderedList": "one", "defaultExcludes": False}))
        assert load_config_file(path) == {"ordered_list": "one", "default_excludes": False}

    def test_pyproject_section(self, tmp_path):
        path = tmp_path / "pyproject.toml"
        path.write_text('[project]\nname = "x"\n\n[tool.mdfmt]\nwidth = 60\n')
        assert load_config_file(path) == {"width": 60}

    def test_pyproject_without_section(self, tmp_path):
        path = tmp_path / "pyproject.toml"
        path.write_text('[project]\nname = "x"\n')
        assert load_config_file(path) == {}

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / ".mdfmt.toml"
        path.write_text("width = = 3")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config_file(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / ".mdfmt.yaml"
        path.write_text("width: [unclosed")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config_file(path)

    def test_json_must_be_object(self, tmp_path):
        path = tmp_path / ".mdfmt.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigError, match="must contain an object"):
            load_config_file(path)

    def test_unknown_key_in_file(self, tmp_path):
        path = tmp_path / ".mdfmt.toml"
        path.write_text("line_length = 80\n")
        with pytest.raises(ConfigError, match="line_length"):
            load_config_file(path)

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "config.ini"
        path.write_text("[x]")
        with pytest.raises(ConfigError, match="Unsupported config file format"):
            load_config_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="does not exist"):
            load_config_file(tmp_path / "nope.toml")

    def test_directory_is_not_a_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not a file"):
            load_config_file(tmp_path)


@pytest.mark.unit
@pytest.mark.cli
class TestConfigDiscovery:
    """Test configuration file discovery functionality."""

    def test_found_in_parent_directory(self, tmp_path):
        config = tmp_path / ".mdfmt.toml"
        config.write_text("width = 90\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_in_parents(nested) == config.resolve()

    def test_dedicated_file_beats_pyproject(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text("[tool.mdfmt]\nwidth = 60\n")
        dedicated = tmp_path / ".mdfmt.yaml"
        dedicated.write_text("width: 70\n")
        assert find_config_in_parents(tmp_path) == dedicated.resolve()

    def test_pyproject_without_section_is_skipped(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n')
        nested = tmp_path / "pkg"
        nested.mkdir()
        (nested / "pyproject.toml").write_text("[tool.mdfmt]\nwrap = \"never\"\n")
        assert find_config_in_parents(nested) == (nested / "pyproject.toml").resolve()

    def test_home_directory_fallback(self, tmp_path):
        home = tmp_path / "home"
        work = tmp_path / "work"
        home.mkdir()
        work.mkdir()
        config = home / ".mdfmt.json"
        config.write_text('{"width": 50}')
        with patch("mdfmt.cli.config.find_config_in_parents", return_value=None):
            with patch("pathlib.Path.home", return_value=home):
                assert discover_config_file(work) == config


@pytest.mark.unit
@pytest.mark.cli
class TestEnvironmentAndPriority:
    """Test environment variables, merging and priority handling."""

    def test_env_config(self):
        environ = {
            "MDFMT_WIDTH": "100",
            "MDFMT_WRAP": "always",
            "MDFMT_ORDERED_LIST": "one",
            "MDFMT_EXCLUDE": "drafts, tmp",
            "OTHER": "x",
        }
        assert load_env_config(environ) == {
            "width": "100",
            "wrap": "always",
            "ordered_list": "one",
            "exclude": ["drafts", "tmp"],
        }

    def test_empty_env_values_are_ignored(self):
        assert load_env_config({"MDFMT_WIDTH": "", "MDFMT_WRAP": "  "}) == {}

    def test_merge_configs(self):
        assert merge_configs({"width": 80, "wrap": "never"}, {"width": 100}) == {"width": 100, "wrap": "never"}

    def test_explicit_path_wins(self, tmp_path):
        explicit = tmp_path / "explicit.toml"
        explicit.write_text("width = 10\n")
        env_path = tmp_path / "env.toml"
        env_path.write_text("width = 20\n")
        assert load_config_with_priority(str(explicit), str(env_path)) == {"width": 10}
        assert load_config_with_priority(None, str(env_path)) == {"width": 20}

    def test_discovery_can_be_disabled(self, tmp_path):
        with patch("mdfmt.cli.config.discover_config_file") as discover:
            assert load_config_with_priority(discover=False) == {}
            discover.assert_not_called()

    def test_discovered_file(self, tmp_path):
        config = tmp_path / ".mdfmt.toml"
        config.write_text('wrap = "never"\n')
        with patch("mdfmt.cli.config.discover_config_file", return_value=config):
            assert load_config_with_priority() == {"wrap": "never"}

