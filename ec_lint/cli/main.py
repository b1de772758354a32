"""
Main CLI application.

Entry point for ec-lint command.
"""

from __future__ import annotations

import logging
import os
import sys
import time
from pathlib import Path  # noqa: TC003
from typing import Annotated, Any

import typer

import ec_lint
from ec_lint.cli.context import CliContext, ExitCode, get_exit_code
from ec_lint.cli.files import is_binary, iter_files, read_input
from ec_lint.cli.output import OutputFormat, TerminalOutput, get_output_adapter
from ec_lint.core.errors import InvalidConfigurationError, Severity, Violation

# Default input size limit for CLI usage (can be overridden via flag/env).
_DEFAULT_MAX_BYTES = 100 * 1024 * 1024  # 100 MiB


def _resolve_max_bytes(max_bytes: int | None) -> int | None:
    if max_bytes is not None:
        return None if max_bytes <= 0 else max_bytes

    env_value = os.environ.get("EC_LINT_MAX_BYTES")
    if env_value:
        try:
            parsed = int(env_value)
        except ValueError:
            raise typer.BadParameter("EC_LINT_MAX_BYTES must be an integer") from None
        return None if parsed <= 0 else parsed

    return _DEFAULT_MAX_BYTES


# Create main app
app = typer.Typer(
    name="ec-lint",
    help="Validate, fix and infer EditorConfig settings",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"ec-lint {ec_lint.__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log rule dispatch and file handling to stderr"),
    ] = False,
) -> None:
    """Validate, fix and infer EditorConfig settings."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(levelname)s %(name)s: %(message)s",
        )


# =============================================================================
# Shared options
# =============================================================================

PathsArgument = Annotated[
    list[Path] | None,
    typer.Argument(help="Files or directories (default: current directory)", exists=True),
]
CharsetOption = Annotated[
    str | None,
    typer.Option("--charset", "-c", help="Set to latin1, utf-8, utf-8-bom, utf-16be or utf-16le"),
]
IndentStyleOption = Annotated[
    str | None,
    typer.Option("--indent-style", "-i", help="Set to tab or space"),
]
IndentSizeOption = Annotated[
    str | None,
    typer.Option("--indent-size", "-s", help="Set to a whole number or tab"),
]
TabWidthOption = Annotated[
    int | None,
    typer.Option("--tab-width", "-t", help="Columns used to represent a tab character"),
]
TrimOption = Annotated[
    bool | None,
    typer.Option(
        "--trim-trailing-whitespace/--no-trim-trailing-whitespace",
        "-w/-W",
        help="Trims any trailing whitespace",
    ),
]
EndOfLineOption = Annotated[
    str | None,
    typer.Option("--end-of-line", "-e", help="Set to lf, cr or crlf"),
]
FinalNewlineOption = Annotated[
    bool | None,
    typer.Option(
        "--insert-final-newline/--no-insert-final-newline",
        "-n/-N",
        help="Ensures files end with a newline",
    ),
]
MaxLineLengthOption = Annotated[
    int | None,
    typer.Option("--max-line-length", "-m", help="Set to a whole number"),
]
SettingsOption = Annotated[
    Path | None,
    typer.Option("--settings", help="YAML settings file (flat or sectioned by glob)"),
]
MaxBytesOption = Annotated[
    int | None,
    typer.Option(
        "--max-bytes",
        help="Maximum input size in bytes (0 = unlimited). Defaults to EC_LINT_MAX_BYTES or 100MiB.",
    ),
]


def _build_context(settings_path: Path | None, **kwargs: Any) -> CliContext:
    """Create the run context, loading the settings file if given."""
    from ec_lint.core.rules import load_settings_file

    settings_file = None
    if settings_path is not None:
        try:
            settings_file = load_settings_file(settings_path)
        except InvalidConfigurationError as e:
            typer.echo(f"Configuration error: {e}", err=True)
            raise typer.Exit(ExitCode.CONFIG) from None

    return CliContext(settings_file=settings_file, engine_version=ec_lint.__version__, **kwargs)


def _rule_settings(
    charset: str | None,
    indent_style: str | None,
    indent_size: str | None,
    tab_width: int | None,
    trim_trailing_whitespace: bool | None,
    end_of_line: str | None,
    insert_final_newline: bool | None,
    max_line_length: int | None,
) -> dict[str, Any]:
    """Settings given as command-line options; unset options are left out."""
    options = {
        "charset": charset,
        "indent_style": indent_style,
        "indent_size": indent_size,
        "tab_width": tab_width,
        "trim_trailing_whitespace": trim_trailing_whitespace,
        "end_of_line": end_of_line,
        "insert_final_newline": insert_final_newline,
        "max_line_length": max_line_length,
    }
    return {key: value for key, value in options.items() if value is not None}


def _inputs(paths: list[Path] | None) -> list[Path]:
    return paths or [Path.cwd()]


# =============================================================================
# Check Command
# =============================================================================


@app.command()
def check(
    paths: PathsArgument = None,
    charset: CharsetOption = None,
    indent_style: IndentStyleOption = None,
    indent_size: IndentSizeOption = None,
    tab_width: TabWidthOption = None,
    trim_trailing_whitespace: TrimOption = None,
    end_of_line: EndOfLineOption = None,
    insert_final_newline: FinalNewlineOption = None,
    max_line_length: MaxLineLengthOption = None,
    settings: SettingsOption = None,
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: terminal, json"),
    ] = "terminal",
    fail_on: Annotated[
        str,
        typer.Option("--fail-on", help="Severity level that triggers failure: error, fatal"),
    ] = "error",
    output: Annotated[
        Path | None,
        typer.Option("--out", "-o", help="Write output to file"),
    ] = None,
    color: Annotated[
        bool,
        typer.Option("--color/--no-color", help="Enable/disable colored output"),
    ] = True,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress non-error output"),
    ] = False,
    max_bytes: MaxBytesOption = None,
) -> None:
    """Check files against EditorConfig settings."""
    from ec_lint.core.rules import CheckResult, ExecutionPipeline, summarize

    try:
        output_format = OutputFormat(format)
    except ValueError:
        typer.echo(f"Unknown format: {format}", err=True)
        typer.echo("Available formats: terminal, json", err=True)
        raise typer.Exit(ExitCode.USAGE) from None

    ctx = _build_context(
        settings,
        format=output_format.value,
        output_file=output,
        color=color,
        quiet=quiet,
        fail_on=fail_on,
        settings=_rule_settings(
            charset,
            indent_style,
            indent_size,
            tab_width,
            trim_trailing_whitespace,
            end_of_line,
            insert_final_newline,
            max_line_length,
        ),
        max_bytes=_resolve_max_bytes(max_bytes),
    )

    start_time = time.perf_counter()
    pipeline = ExecutionPipeline()
    results: list[CheckResult] = []

    for file, _base in iter_files(_inputs(paths)):
        file_name = str(file)
        data = read_input(file, ctx.max_bytes)
        if isinstance(data, Violation):
            results.append(CheckResult([data], file_name=file_name))
            continue
        if is_binary(data):
            continue
        results.append(pipeline.check_bytes(ctx.settings_for(file_name), data, file_name))

    summary = summarize(results, duration_ms=int((time.perf_counter() - start_time) * 1000))

    adapter = get_output_adapter(output_format, color=ctx.color)
    rendered = adapter.render_results(results, summary)

    if ctx.output_file:
        ctx.output_file.write_text(rendered, encoding="utf-8")
        if not ctx.quiet:
            typer.echo(f"Output written to {ctx.output_file}")
    elif not (ctx.quiet and not summary.total_violations):
        typer.echo(rendered)

    violations = [v for result in results for v in result.violations]
    exit_code = get_exit_code(
        has_fatal=any(v.severity == Severity.FATAL for v in violations),
        has_error=any(v.severity == Severity.ERROR for v in violations),
        fail_on=ctx.fail_on,
    )
    raise typer.Exit(exit_code)


# =============================================================================
# Fix Command
# =============================================================================


@app.command()
def fix(
    paths: PathsArgument = None,
    charset: CharsetOption = None,
    indent_style: IndentStyleOption = None,
    indent_size: IndentSizeOption = None,
    tab_width: TabWidthOption = None,
    trim_trailing_whitespace: TrimOption = None,
    end_of_line: EndOfLineOption = None,
    insert_final_newline: FinalNewlineOption = None,
    max_line_length: MaxLineLengthOption = None,
    settings: SettingsOption = None,
    dest: Annotated[
        Path | None,
        typer.Option("--dest", "-d", help="Destination folder for fixed files"),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="List files that would change without writing"),
    ] = False,
    color: Annotated[
        bool,
        typer.Option("--color/--no-color", help="Enable/disable colored output"),
    ] = True,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress non-error output"),
    ] = False,
    max_bytes: MaxBytesOption = None,
) -> None:
    """Fix files to conform to EditorConfig settings."""
    from ec_lint.core.rules import ExecutionPipeline
    from ec_lint.core.writer import destination_for, write_file

    ctx = _build_context(
        settings,
        color=color,
        quiet=quiet,
        settings=_rule_settings(
            charset,
            indent_style,
            indent_size,
            tab_width,
            trim_trailing_whitespace,
            end_of_line,
            insert_final_newline,
            max_line_length,
        ),
        max_bytes=_resolve_max_bytes(max_bytes),
        dry_run=dry_run,
        dest=dest,
    )

    terminal = TerminalOutput(color=ctx.color)
    errors = TerminalOutput(stream=sys.stderr, color=ctx.color)
    pipeline = ExecutionPipeline()
    fixed_count = 0
    failed = False

    for file, base in iter_files(_inputs(paths)):
        file_name = str(file)
        data = read_input(file, ctx.max_bytes)
        if isinstance(data, Violation):
            typer.echo(errors.render_failure(str(data)), err=True)
            failed = True
            continue
        if is_binary(data):
            continue

        result = pipeline.fix_bytes(ctx.settings_for(file_name), data, file_name)
        if result.fixed is None:
            for violation in result.violations:
                typer.echo(errors.render_failure(str(violation)), err=True)
            failed = True
            continue
        # A destination tree receives every file, fixed or not
        if not result.changed and ctx.dest is None:
            continue

        target = destination_for(file, ctx.dest, base)
        if ctx.dry_run:
            if result.changed:
                fixed_count += 1
                if not ctx.quiet:
                    typer.echo(f"Would fix {file_name}")
            continue

        write_result = write_file(result.fixed, target, original=data)
        if not write_result.success:
            message = f"Failed to write {target}: {write_result.error}"
            typer.echo(errors.render_failure(message), err=True)
            failed = True
            continue
        if not result.changed:
            continue
        fixed_count += 1
        if not ctx.quiet:
            typer.echo(f"Fixed {file_name}" + (f" -> {target}" if target != file else ""))

    if not ctx.quiet:
        verb = "would be fixed" if ctx.dry_run else "fixed"
        typer.echo(terminal.render_success(f"{fixed_count} file(s) {verb}"))

    raise typer.Exit(ExitCode.FATAL if failed else ExitCode.SUCCESS)


# =============================================================================
# Infer Command
# =============================================================================


@app.command()
def infer(
    paths: PathsArgument = None,
    score: Annotated[
        bool,
        typer.Option("--score", help="Show the tallied score for each setting"),
    ] = False,
    ini: Annotated[
        bool,
        typer.Option("--ini", help="Export the settings as an .editorconfig file"),
    ] = False,
    root: Annotated[
        bool,
        typer.Option("--root", help="Add root = true to the .editorconfig output"),
    ] = False,
    output: Annotated[
        Path | None,
        typer.Option("--out", "-o", help="Write output to file"),
    ] = None,
    max_bytes: MaxBytesOption = None,
) -> None:
    """Infer EditorConfig settings from existing files."""
    from ec_lint.core.rules import ExecutionPipeline, InferOptions, render_inferred

    try:
        options = InferOptions.create(score=score, ini=ini, root=root)
    except InvalidConfigurationError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(ExitCode.CONFIG) from None

    limit = _resolve_max_bytes(max_bytes)
    errors = TerminalOutput(stream=sys.stderr)
    pipeline = ExecutionPipeline()
    tally = pipeline.new_tally()
    failed = False

    for file, _base in iter_files(_inputs(paths)):
        data = read_input(file, limit)
        if isinstance(data, Violation):
            typer.echo(errors.render_failure(str(data)), err=True)
            failed = True
            continue
        if is_binary(data):
            continue
        for violation in pipeline.infer_bytes(data, tally, str(file)):
            typer.echo(errors.render_failure(str(violation)), err=True)
            failed = True

    rendered = render_inferred(tally, options)
    if output:
        output.write_text(rendered if rendered.endswith("\n") else rendered + "\n", encoding="utf-8")
    else:
        typer.echo(rendered, nl=not rendered.endswith("\n"))

    raise typer.Exit(ExitCode.FATAL if failed else ExitCode.SUCCESS)


# =============================================================================
# Utility Commands
# =============================================================================


@app.command("rules")
def list_rules() -> None:
    """List the rules in the order they run."""
    from ec_lint.core.rules import build_registry

    typer.echo("Rules:\n")
    for rule in build_registry():
        typer.secho(f"  {rule.name}", bold=True, nl=False)
        typer.echo(f" [{rule.scope.value}]")
        typer.echo(f"    {rule.description}")


# =============================================================================
# CLI Entry Point
# =============================================================================


def run() -> None:
    """Run the CLI application."""
    app()


if __name__ == "__main__":
    run()
