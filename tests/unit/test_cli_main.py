"""Tests for CLI main module."""

import json
from collections.abc import Callable
from pathlib import Path

import pytest
from typer.testing import CliRunner

from ec_lint.cli.context import ExitCode, get_exit_code
from ec_lint.cli.main import app

runner = CliRunner()

MakeFile = Callable[[str, bytes], Path]


class TestVersion:
    """Tests for version option."""

    def test_version_option(self) -> None:
        """Test --version shows version."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "ec-lint 0.1.0" in result.output

    def test_version_short_option(self) -> None:
        """Test -V shows version."""
        result = runner.invoke(app, ["-V"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestHelp:
    """Tests for help output."""

    def test_help_option(self) -> None:
        """Test --help shows help."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Validate, fix and infer EditorConfig settings" in result.output

    def test_check_help(self) -> None:
        """Test check --help shows options."""
        result = runner.invoke(app, ["check", "--help"])
        assert result.exit_code == 0
        assert "--format" in result.output
        assert "--end-of-line" in result.output

    def test_fix_help(self) -> None:
        """Test fix --help shows options."""
        result = runner.invoke(app, ["fix", "--help"])
        assert result.exit_code == 0
        assert "--dry-run" in result.output
        assert "--dest" in result.output


class TestCheck:
    """Tests for check command."""

    def test_clean_file(self, make_file: MakeFile) -> None:
        """Test a conforming file exits 0."""
        path = make_file("a.txt", b"a\n")
        result = runner.invoke(app, ["check", str(path), "-e", "lf", "-n", "--no-color"])
        assert result.exit_code == 0
        assert "No issues found" in result.output

    def test_violations(self, make_file: MakeFile) -> None:
        """Test violations exit 1 and are listed."""
        path = make_file("a.txt", b"a  \r\n")
        result = runner.invoke(app, ["check", str(path), "-e", "lf", "-w", "--no-color"])
        assert result.exit_code == 1
        assert "[end_of_line]" in result.output
        assert "[trim_trailing_whitespace]" in result.output
        assert "Found: 2 error(s) in 1/1 file(s)" in result.output

    def test_disabled_boolean_option(self, make_file: MakeFile) -> None:
        """Test the negative form of a boolean option checks the opposite."""
        path = make_file("a.txt", b"a\n")
        result = runner.invoke(app, ["check", str(path), "-N"])
        assert result.exit_code == 1
        assert "[insert_final_newline]" in result.output

    def test_json_format(self, make_file: MakeFile) -> None:
        """Test JSON output."""
        path = make_file("a.txt", b"a\r\nb\n")
        result = runner.invoke(app, ["check", str(path), "-e", "lf", "--format", "json"])
        assert result.exit_code == 1
        parsed = json.loads(result.stdout)
        assert [v["line_number"] for v in parsed["violations"]] == [1]
        assert parsed["violations"][0]["file_name"] == str(path)
        assert parsed["summary"]["files_checked"] == 1

    def test_unknown_format(self, make_file: MakeFile) -> None:
        """Test an unknown format is a usage error."""
        path = make_file("a.txt", b"a\n")
        result = runner.invoke(app, ["check", str(path), "--format", "sarif"])
        assert result.exit_code == 64
        assert "Unknown format" in result.output

    def test_fail_on_fatal(self, make_file: MakeFile) -> None:
        """Test ordinary violations pass when only fatal fails."""
        path = make_file("a.txt", b"a\r\n")
        result = runner.invoke(app, ["check", str(path), "-e", "lf", "--fail-on", "fatal"])
        assert result.exit_code == 0

    @pytest.mark.parametrize(
        ("has_fatal", "has_error", "fail_on", "expected"),
        [
            (True, False, "fatal", ExitCode.FATAL),
            (False, True, "error", ExitCode.ERROR),
            (False, True, "fatal", ExitCode.SUCCESS),
            (False, False, "error", ExitCode.SUCCESS),
        ],
    )
    def test_exit_code(
        self, has_fatal: bool, has_error: bool, fail_on: str, expected: ExitCode
    ) -> None:
        """Test exit codes for the two severities."""
        assert get_exit_code(has_fatal, has_error, fail_on) is expected

    def test_directory(self, tmp_path: Path, make_file: MakeFile) -> None:
        """Test directories are walked and binary files skipped."""
        make_file("src/a.txt", b"a\r\n")
        make_file("src/b.txt", b"b\n")
        make_file("src/image.png", b"\x89PNG\x00\x00")
        make_file("src/.git/HEAD", b"ref\r\n")
        result = runner.invoke(app, ["check", str(tmp_path / "src"), "-e", "lf", "-f", "json"])
        assert result.exit_code == 1
        parsed = json.loads(result.stdout)
        assert parsed["summary"]["files_checked"] == 2
        assert parsed["summary"]["files_with_violations"] == 1

    def test_quiet_clean(self, make_file: MakeFile) -> None:
        """Test quiet mode prints nothing for a clean run."""
        path = make_file("a.txt", b"a\n")
        result = runner.invoke(app, ["check", str(path), "-e", "lf", "-q"])
        assert result.exit_code == 0
        assert result.output == ""

    def test_output_file(self, tmp_path: Path, make_file: MakeFile) -> None:
        """Test --out writes the report."""
        path = make_file("a.txt", b"a\r\n")
        report = tmp_path / "report.json"
        result = runner.invoke(
            app, ["check", str(path), "-e", "lf", "-f", "json", "--out", str(report)]
        )
        assert result.exit_code == 1
        assert json.loads(report.read_text(encoding="utf-8"))["summary"]["error_count"] == 1


class TestSettingsFile:
    """Tests for --settings."""

    def test_sectioned_settings(self, tmp_path: Path, make_file: MakeFile) -> None:
        """Test settings apply by file pattern."""
        settings = make_file("conf/settings.yaml", b'"*.py":\n  indent_style: space\n')
        make_file("src/a.py", b"\tx\n")
        make_file("src/Makefile", b"\tx\n")
        result = runner.invoke(
            app, ["check", str(tmp_path / "src"), "--settings", str(settings), "-f", "json"]
        )
        assert result.exit_code == 1
        violations = json.loads(result.stdout)["violations"]
        assert [Path(v["file_name"]).name for v in violations] == ["a.py"]

    def test_options_override_file(self, make_file: MakeFile) -> None:
        """Test command-line options win over the settings file."""
        settings = make_file("conf/settings.yaml", b"end_of_line: crlf\n")
        path = make_file("a.txt", b"a\n")
        result = runner.invoke(app, ["check", str(path), "--settings", str(settings), "-e", "lf"])
        assert result.exit_code == 0

    def test_missing_settings_file(self, tmp_path: Path, make_file: MakeFile) -> None:
        """Test a missing settings file is a configuration error."""
        path = make_file("a.txt", b"a\n")
        result = runner.invoke(
            app, ["check", str(path), "--settings", str(tmp_path / "missing.yaml")]
        )
        assert result.exit_code == 78
        assert "Configuration error" in result.output


class TestMaxBytes:
    """Tests for the input size limit."""

    def test_flag(self, make_file: MakeFile) -> None:
        """Test oversized files are fatal."""
        path = make_file("a.txt", b"abcdef\n")
        result = runner.invoke(app, ["check", str(path), "--max-bytes", "3", "--no-color"])
        assert result.exit_code == 2
        assert "File too large" in result.output

    def test_environment(self, make_file: MakeFile, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the limit can come from the environment."""
        monkeypatch.setenv("EC_LINT_MAX_BYTES", "3")
        path = make_file("a.txt", b"abcdef\n")
        assert runner.invoke(app, ["check", str(path)]).exit_code == 2

    def test_zero_is_unlimited(self, make_file: MakeFile) -> None:
        """Test 0 disables the limit."""
        path = make_file("a.txt", b"abcdef\n")
        assert runner.invoke(app, ["check", str(path), "--max-bytes", "0"]).exit_code == 0


class TestFix:
    """Tests for fix command."""

    def test_fix_in_place(self, make_file: MakeFile) -> None:
        """Test files are rewritten in place."""
        path = make_file("a.txt", b"a  \r\nb")
        result = runner.invoke(app, ["fix", str(path), "-w", "-e", "lf", "-n", "--no-color"])
        assert result.exit_code == 0
        assert path.read_bytes() == b"a\nb\n"
        assert f"Fixed {path}" in result.output
        assert "1 file(s) fixed" in result.output

    def test_dry_run(self, make_file: MakeFile) -> None:
        """Test --dry-run leaves files alone."""
        path = make_file("a.txt", b"a\r\n")
        result = runner.invoke(app, ["fix", str(path), "-e", "lf", "--dry-run", "--no-color"])
        assert result.exit_code == 0
        assert path.read_bytes() == b"a\r\n"
        assert f"Would fix {path}" in result.output
        assert "1 file(s) would be fixed" in result.output

    def test_dest(self, tmp_path: Path, make_file: MakeFile) -> None:
        """Test --dest writes fixed copies below the destination."""
        source = make_file("src/pkg/a.txt", b"a\r\n")
        dest = tmp_path / "out"
        result = runner.invoke(app, ["fix", str(tmp_path / "src"), "-e", "lf", "-d", str(dest)])
        assert result.exit_code == 0
        assert (dest / "pkg" / "a.txt").read_bytes() == b"a\n"
        assert source.read_bytes() == b"a\r\n"

    def test_dest_receives_unchanged_files(self, tmp_path: Path, make_file: MakeFile) -> None:
        """Test --dest copies conforming files next to the fixed ones."""
        make_file("src/bad.txt", b"a\r\n")
        make_file("src/good.txt", b"b\n")
        dest = tmp_path / "out"
        result = runner.invoke(
            app, ["fix", str(tmp_path / "src"), "-e", "lf", "-d", str(dest), "--no-color"]
        )
        assert result.exit_code == 0
        assert (dest / "bad.txt").read_bytes() == b"a\n"
        assert (dest / "good.txt").read_bytes() == b"b\n"
        assert "good.txt" not in result.output
        assert "1 file(s) fixed" in result.output

    def test_dry_run_with_dest(self, tmp_path: Path, make_file: MakeFile) -> None:
        """Test --dry-run writes nothing below the destination."""
        make_file("src/a.txt", b"a\r\n")
        dest = tmp_path / "out"
        result = runner.invoke(
            app, ["fix", str(tmp_path / "src"), "-e", "lf", "-d", str(dest), "--dry-run"]
        )
        assert result.exit_code == 0
        assert not dest.exists()

    def test_unchanged_not_written(self, make_file: MakeFile) -> None:
        """Test conforming files are left alone."""
        path = make_file("a.txt", b"a\n")
        result = runner.invoke(app, ["fix", str(path), "-e", "lf", "--no-color"])
        assert result.exit_code == 0
        assert "Fixed" not in result.output
        assert "0 file(s) fixed" in result.output

    def test_unreadable_input_fails(self, make_file: MakeFile) -> None:
        """Test a fatal input makes fix exit 2."""
        path = make_file("a.txt", b"abcdef\r\n")
        result = runner.invoke(app, ["fix", str(path), "-e", "lf", "--max-bytes", "3"])
        assert result.exit_code == 2
        assert path.read_bytes() == b"abcdef\r\n"
        assert "✖ File too large" in result.output

    def test_content_not_matching_bom_fails(self, make_file: MakeFile) -> None:
        """Test fix refuses to rewrite content that does not match its BOM."""
        path = make_file("a.txt", b"\xff\xfeab\n")
        result = runner.invoke(app, ["fix", str(path), "-e", "crlf", "-n"])
        assert result.exit_code == 2
        assert "not rewritten" in result.output
        assert path.read_bytes() == b"\xff\xfeab\n"


class TestInfer:
    """Tests for infer command."""

    def test_json(self, tmp_path: Path, make_file: MakeFile) -> None:
        """Test inferred settings as JSON."""
        make_file("a.py", b"def f():\n    return 1\n")
        make_file("b.py", b"x = 1\n")
        result = runner.invoke(app, ["infer", str(tmp_path)])
        assert result.exit_code == 0
        parsed = json.loads(result.stdout)
        assert parsed["end_of_line"] == "lf"
        assert parsed["indent_style"] == "space"
        assert parsed["insert_final_newline"] is True

    def test_score(self, make_file: MakeFile) -> None:
        """Test --score shows the raw tally."""
        path = make_file("a.txt", b"a\r\nb\n")
        result = runner.invoke(app, ["infer", str(path), "--score"])
        assert result.exit_code == 0
        scores = json.loads(result.stdout)
        assert scores["end_of_line"] == {"crlf": 1, "lf": 1}
        assert "tab_width" not in scores

    def test_ini_with_root(self, make_file: MakeFile) -> None:
        """Test .editorconfig output."""
        path = make_file("a.txt", b"a\n")
        result = runner.invoke(app, ["infer", str(path), "--ini", "--root"])
        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        assert "root = true" in lines
        assert "[*]" in lines
        assert "end_of_line = lf" in lines

    def test_score_and_ini(self, make_file: MakeFile) -> None:
        """Test --score cannot be combined with --ini."""
        path = make_file("a.txt", b"a\n")
        result = runner.invoke(app, ["infer", str(path), "--score", "--ini"])
        assert result.exit_code == 78

    def test_output_file(self, tmp_path: Path, make_file: MakeFile) -> None:
        """Test --out writes the inferred settings."""
        path = make_file("a.txt", b"a\n")
        target = tmp_path / "out" / ".editorconfig"
        target.parent.mkdir()
        result = runner.invoke(app, ["infer", str(path), "--ini", "--out", str(target)])
        assert result.exit_code == 0
        text = target.read_text(encoding="utf-8")
        assert "insert_final_newline = true" in text.splitlines()
        assert text.endswith("max_line_length = 10\n")


class TestRules:
    """Tests for rules command."""

    def test_rules_in_order(self) -> None:
        """Test rules are listed in the order they run."""
        result = runner.invoke(app, ["rules"])
        assert result.exit_code == 0
        names = [
            line.split()[0]
            for line in result.output.splitlines()
            if line.startswith("  ") and not line.startswith("    ")
        ]
        assert names == [
            "charset",
            "indent_style",
            "indent_size",
            "tab_width",
            "trim_trailing_whitespace",
            "end_of_line",
            "insert_final_newline",
            "max_line_length",
        ]
        assert "  charset [document]" in result.output
