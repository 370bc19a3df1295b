"""Unit tests for the mdfmt command line entry point."""

import io
import logging
import sys
from argparse import Namespace

import pytest

from mdfmt import __version__
from mdfmt.api import FileResult
from mdfmt.cli import main
from mdfmt.cli.builder import EXIT_CHECK_FAILED, EXIT_ERROR, EXIT_SUCCESS, EXIT_USAGE_ERROR
from mdfmt.cli.output import format_summary, should_use_rich_output

MESSY = "# Title\nSome   text.\n* one\n* two\n"
CLEAN = "# Title\n\nSome text.\n\n- one\n- two\n"


def set_stdin(monkeypatch, text):
    monkeypatch.setattr(sys, "stdin", io.StringIO(text))


@pytest.mark.unit
@pytest.mark.cli
class TestStdinMode:
    """Test filter mode."""

    def test_stdin_flag(self, isolated_cwd, monkeypatch, capsys):
        set_stdin(monkeypatch, MESSY)
        assert main(["--stdin"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == CLEAN

    def test_dash_path(self, isolated_cwd, monkeypatch, capsys):
        set_stdin(monkeypatch, MESSY)
        assert main(["-"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == CLEAN

    def test_stdin_with_options(self, isolated_cwd, monkeypatch, capsys):
        set_stdin(monkeypatch, "1. a\n2. b\n\none\ntwo\n")
        assert main(["--stdin", "--ordered-list", "one", "--wrap", "never"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "1. a\n1. b\n\none two\n"

    def test_stdin_check(self, isolated_cwd, monkeypatch, capsys):
        set_stdin(monkeypatch, MESSY)
        assert main(["--stdin", "--check"]) == EXIT_CHECK_FAILED
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Would reformat: <stdin>" in captured.err

        set_stdin(monkeypatch, CLEAN)
        assert main(["--stdin", "--check"]) == EXIT_SUCCESS

    def test_stdin_with_paths_is_usage_error(self, isolated_cwd, capsys):
        assert main(["--stdin", "a.md"]) == EXIT_USAGE_ERROR
        assert "cannot be combined" in capsys.readouterr().err

    def test_stdin_with_write_is_usage_error(self, isolated_cwd, monkeypatch):
        set_stdin(monkeypatch, MESSY)
        assert main(["--stdin", "--write"]) == EXIT_USAGE_ERROR


@pytest.mark.unit
@pytest.mark.cli
class TestFileModes:
    """Test print, write and check modes."""

    def test_print_mode_leaves_file_alone(self, isolated_cwd, capsys):
        doc = isolated_cwd / "doc.md"
        doc.write_text(MESSY, encoding="utf-8")
        assert main(["doc.md"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == CLEAN
        assert doc.read_text(encoding="utf-8") == MESSY

    def test_write_mode(self, isolated_cwd, capsys):
        doc = isolated_cwd / "doc.md"
        doc.write_text(MESSY, encoding="utf-8")
        assert main(["--write", "doc.md"]) == EXIT_SUCCESS
        assert doc.read_text(encoding="utf-8") == CLEAN
        err = capsys.readouterr().err
        assert "Formatted: doc.md" in err
        assert "1 file reformatted, 0 files already formatted" in err

    def test_write_mode_skips_clean_files(self, isolated_cwd, capsys):
        doc = isolated_cwd / "doc.md"
        doc.write_text(CLEAN, encoding="utf-8")
        assert main(["-w", "doc.md"]) == EXIT_SUCCESS
        err = capsys.readouterr().err
        assert "Formatted:" not in err
        assert "0 files reformatted, 1 file already formatted" in err

    def test_check_mode(self, isolated_cwd, capsys):
        (isolated_cwd / "messy.md").write_text(MESSY, encoding="utf-8")
        (isolated_cwd / "clean.md").write_text(CLEAN, encoding="utf-8")
        assert main(["--check", "."]) == EXIT_CHECK_FAILED
        err = capsys.readouterr().err
        assert "Would reformat: messy.md" in err
        assert "clean.md" not in err
        assert "1 file would be reformatted, 1 file already formatted" in err
        assert (isolated_cwd / "messy.md").read_text(encoding="utf-8") == MESSY

    def test_check_mode_passes_on_clean_tree(self, isolated_cwd):
        (isolated_cwd / "clean.md").write_text(CLEAN, encoding="utf-8")
        assert main(["-c", "."]) == EXIT_SUCCESS

    def test_excluded_directory(self, isolated_cwd):
        (isolated_cwd / "node_modules").mkdir()
        (isolated_cwd / "node_modules" / "x.md").write_text(MESSY, encoding="utf-8")
        (isolated_cwd / "drafts").mkdir()
        (isolated_cwd / "drafts" / "y.md").write_text(MESSY, encoding="utf-8")
        assert main(["--check", ".", "--exclude", "drafts"]) == EXIT_SUCCESS
        assert main(["--check", ".", "--no-default-excludes", "--exclude", "drafts"]) == EXIT_CHECK_FAILED

    def test_no_files_found(self, isolated_cwd, capsys):
        assert main(["--check", "."]) == EXIT_SUCCESS
        assert "No Markdown files found" in capsys.readouterr().err

    def test_unreadable_file(self, isolated_cwd, capsys):
        (isolated_cwd / "bad.md").write_bytes(b"\xff\xfe\xfa")
        (isolated_cwd / "good.md").write_text(MESSY, encoding="utf-8")
        assert main(["--write", "."]) == EXIT_ERROR
        err = capsys.readouterr().err
        assert "Error: Failed to read" in err
        assert (isolated_cwd / "good.md").read_text(encoding="utf-8") == CLEAN

    def test_unreadable_file_in_print_mode(self, isolated_cwd, capsys):
        (isolated_cwd / "bad.md").write_bytes(b"\xff\xfe\xfa")
        assert main(["bad.md"]) == EXIT_ERROR
        assert "Error: Failed to read" in capsys.readouterr().err


@pytest.mark.unit
@pytest.mark.cli
class TestConfiguration:
    """Test layering of config file, environment and flags."""

    def test_config_file_is_discovered(self, isolated_cwd, monkeypatch, capsys):
        (isolated_cwd / ".mdfmt.toml").write_text('wrap = "never"\n')
        set_stdin(monkeypatch, "a\nb\n")
        assert main(["--stdin"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "a b\n"

    def test_flag_overrides_environment_and_file(self, isolated_cwd, monkeypatch, capsys):
        (isolated_cwd / ".mdfmt.toml").write_text('wrap = "never"\n')
        monkeypatch.setenv("MDFMT_WRAP", "always")
        set_stdin(monkeypatch, "aaa bbb\nccc\n")
        assert main(["--stdin", "--width", "7"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "aaa bbb\nccc\n"

        set_stdin(monkeypatch, "aaa bbb\nccc\n")
        assert main(["--stdin", "--wrap", "preserve"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "aaa bbb\nccc\n"

    def test_environment_overrides_file(self, isolated_cwd, monkeypatch, capsys):
        (isolated_cwd / ".mdfmt.toml").write_text('ordered_list = "one"\n')
        monkeypatch.setenv("MDFMT_ORDERED_LIST", "ascending")
        set_stdin(monkeypatch, "1. a\n1. b\n")
        assert main(["--stdin"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "1. a\n2. b\n"

    def test_no_config(self, isolated_cwd, monkeypatch, capsys):
        (isolated_cwd / ".mdfmt.toml").write_text('wrap = "never"\n')
        set_stdin(monkeypatch, "a\nb\n")
        assert main(["--stdin", "--no-config"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "a\nb\n"

    def test_explicit_config(self, isolated_cwd, monkeypatch, capsys):
        config = isolated_cwd / "custom.yaml"
        config.write_text("ordered_list: one\n")
        set_stdin(monkeypatch, "1. a\n2. b\n")
        assert main(["--stdin", "--config", str(config)]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "1. a\n1. b\n"

    def test_config_excludes(self, isolated_cwd):
        (isolated_cwd / ".mdfmt.toml").write_text('exclude = ["drafts"]\n')
        (isolated_cwd / "drafts").mkdir()
        (isolated_cwd / "drafts" / "y.md").write_text(MESSY, encoding="utf-8")
        assert main(["--check", "."]) == EXIT_SUCCESS

    def test_unknown_config_key(self, isolated_cwd, capsys):
        (isolated_cwd / ".mdfmt.toml").write_text("colour = 1\n")
        (isolated_cwd / "a.md").write_text(CLEAN, encoding="utf-8")
        assert main(["a.md"]) == EXIT_USAGE_ERROR
        assert "Unknown configuration key" in capsys.readouterr().err

    def test_invalid_environment_value(self, isolated_cwd, monkeypatch, capsys):
        monkeypatch.setenv("MDFMT_WRAP", "sideways")
        set_stdin(monkeypatch, "a\n")
        assert main(["--stdin"]) == EXIT_USAGE_ERROR
        assert "Invalid wrap mode" in capsys.readouterr().err

    def test_invalid_width_in_file(self, isolated_cwd, monkeypatch, capsys):
        (isolated_cwd / ".mdfmt.toml").write_text("width = 0\n")
        set_stdin(monkeypatch, "a\n")
        assert main(["--stdin"]) == EXIT_USAGE_ERROR
        assert "Invalid width" in capsys.readouterr().err


@pytest.mark.unit
@pytest.mark.cli
class TestArguments:
    """Test argument validation."""

    def test_no_paths(self, isolated_cwd, capsys):
        assert main([]) == EXIT_USAGE_ERROR
        assert "no input paths" in capsys.readouterr().err

    @pytest.mark.parametrize("width", ["0", "-3", "wide"])
    def test_invalid_width_flag(self, isolated_cwd, width):
        with pytest.raises(SystemExit) as exc_info:
            main(["--stdin", "--width", width])
        assert exc_info.value.code == EXIT_USAGE_ERROR

    def test_invalid_wrap_flag(self, isolated_cwd):
        with pytest.raises(SystemExit) as exc_info:
            main(["--stdin", "--wrap", "sometimes"])
        assert exc_info.value.code == EXIT_USAGE_ERROR

    def test_write_and_check_are_exclusive(self, isolated_cwd):
        with pytest.raises(SystemExit) as exc_info:
            main(["--write", "--check", "a.md"])
        assert exc_info.value.code == EXIT_USAGE_ERROR

    def test_wrap_flag_is_case_insensitive(self, isolated_cwd, monkeypatch, capsys):
        set_stdin(monkeypatch, "a\nb\n")
        assert main(["--stdin", "--wrap", "NEVER"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "a b\n"

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_log_file(self, isolated_cwd, monkeypatch):
        set_stdin(monkeypatch, "a\n")
        log_file = isolated_cwd / "mdfmt.log"
        assert main(["--stdin", "--verbose", "--log-file", str(log_file)]) == EXIT_SUCCESS
        for handler in logging.getLogger("mdfmt").handlers:
            handler.flush()
        assert "Parsed" in log_file.read_text(encoding="utf-8")


@pytest.mark.unit
@pytest.mark.cli
class TestOutputHelpers:
    """Test summary formatting and rich detection."""

    def test_summary_counts(self, tmp_path):
        results = [
            FileResult(tmp_path / "a.md", changed=True),
            FileResult(tmp_path / "b.md", changed=False),
            FileResult(tmp_path / "c.md", changed=False, error="boom"),
        ]
        assert format_summary(results, check=True) == (
            "1 file would be reformatted, 1 file already formatted, 1 file failed"
        )
        assert format_summary(results, check=False).startswith("1 file reformatted")

    def test_rich_requires_flag(self):
        assert not should_use_rich_output(Namespace(rich=False))

    def test_rich_requires_terminal(self):
        assert not should_use_rich_output(Namespace(rich=True), io.StringIO())

    def test_rich_on_terminal(self):
        pytest.importorskip("rich")

        class Terminal(io.StringIO):
            def isatty(self):
                return True

        assert should_use_rich_output(Namespace(rich=True), Terminal())

    def test_rich_flag_off_terminal_prints_plain_summary(self, isolated_cwd, capsys):
        (isolated_cwd / "messy.md").write_text(MESSY, encoding="utf-8")
        assert main(["--check", "--rich", "."]) == EXIT_CHECK_FAILED
        assert "Would reformat: messy.md" in capsys.readouterr().err
