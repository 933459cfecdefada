"""CLI entry point for presubmit-gate.

This module provides the Typer-based CLI with commands:
- presubmit-gate validate: Validate configuration
- presubmit-gate filter: Show which presubmits a comment would trigger

Exit codes:
- 0: Success
- 1: Configuration error
- 2: Run-condition evaluation error
"""

from __future__ import annotations

import json
from enum import IntEnum
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

from presubmit_gate import __version__
from presubmit_gate.config import load_config
from presubmit_gate.config.loader import ConfigError
from presubmit_gate.filters import (
    RunConditionEvaluationError,
    filter_for_comment,
    filter_presubmits,
)
from presubmit_gate.jobs import DeferredChangedFilesProvider, StaticChangedFilesProvider
from presubmit_gate.logging import configure_logging, get_logger, log_comment_received

if TYPE_CHECKING:
    from presubmit_gate.config.schema import Config
    from presubmit_gate.filters import PartitionResult
    from presubmit_gate.jobs import ChangedFilesProvider


class ExitCode(IntEnum):
    """CLI exit codes."""

    SUCCESS = 0
    CONFIG_ERROR = 1
    EVALUATION_ERROR = 2


app = typer.Typer(
    name="presubmit-gate",
    help="Decide which presubmit jobs a trigger comment runs.",
    add_completion=False,
    no_args_is_help=True,
)

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to configuration file.",
    ),
]

VerboseOption = Annotated[
    bool,
    typer.Option(
        "--verbose",
        "-v",
        help="Enable debug logging.",
    ),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"presubmit-gate {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Decide which presubmit jobs a trigger comment runs."""


def _load_or_exit(config: Path | None) -> Config:
    try:
        return load_config(config)
    except ConfigError as e:
        typer.echo(
            typer.style(f"✗ Configuration error: {e}", fg=typer.colors.RED),
            err=True,
        )
        raise typer.Exit(ExitCode.CONFIG_ERROR) from e


@app.command()
def validate(
    config: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Validate configuration without evaluating anything.

    Exits with code 0 if valid, or code 1 if there are errors.
    """
    configure_logging(verbose=verbose, json_output=False)

    cfg = _load_or_exit(config)
    typer.echo(typer.style("✓ Configuration is valid", fg=typer.colors.GREEN))

    if verbose:
        typer.echo("\nPresubmits:")
        for presubmit in cfg.presubmits:
            mode = "explicit" if presubmit.needs_explicit_trigger() else "automatic"
            typer.echo(f"  {presubmit.name} ({mode}): {presubmit.rerun_command}")

    raise typer.Exit(ExitCode.SUCCESS)


@app.command("filter")
def filter_command(
    comment: Annotated[
        str,
        typer.Option(
            "--comment",
            "-m",
            help="Comment body to evaluate, e.g. '/test all'.",
        ),
    ],
    branch: Annotated[
        str,
        typer.Option(
            "--branch",
            "-b",
            help="Base branch of the pull request.",
        ),
    ] = "main",
    changed_files: Annotated[
        list[str] | None,
        typer.Option(
            "--changed-file",
            "-f",
            help="Path changed by the pull request (repeatable).",
        ),
    ] = None,
    changed_files_from: Annotated[
        Path | None,
        typer.Option(
            "--changed-files-from",
            help="File listing changed paths, one per line. Read only if a presubmit needs it.",
        ),
    ] = None,
    config: ConfigOption = None,
    as_json: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Print the result as JSON.",
        ),
    ] = False,
    verbose: VerboseOption = False,
) -> None:
    """Show which presubmits a comment would trigger and which it skips.

    Jobs the comment doesn't select at all are not listed. Exits with code 2
    if a selected presubmit's run conditions can't be evaluated, e.g. when
    --changed-files-from can't be read.
    """
    configure_logging(verbose=verbose)
    log = get_logger("presubmit_gate.cli")

    cfg = _load_or_exit(config)
    log_comment_received(comment, branch, len(cfg.presubmits))

    changes = _changes_provider(changed_files or [], changed_files_from)
    try:
        result = filter_presubmits(
            filter_for_comment(comment),
            changes,
            branch,
            cfg.presubmits,
        )
    except RunConditionEvaluationError as e:
        log.error("run_condition_failed", job=e.job_name, error=str(e.cause))
        typer.echo(typer.style(f"✗ {e}", fg=typer.colors.RED), err=True)
        raise typer.Exit(ExitCode.EVALUATION_ERROR) from e

    _print_result(result, as_json=as_json)


def _changes_provider(
    changed_files: list[str], changed_files_from: Path | None
) -> ChangedFilesProvider:
    if changed_files_from is None:
        return StaticChangedFilesProvider(changed_files)

    def fetch() -> list[str]:
        lines = changed_files_from.read_text(encoding="utf-8").splitlines()
        return changed_files + [line.strip() for line in lines if line.strip()]

    return DeferredChangedFilesProvider(fetch)


def _print_result(result: PartitionResult, *, as_json: bool) -> None:
    if as_json:
        typer.echo(
            json.dumps(
                {"to_trigger": result.trigger_names, "to_skip": result.skip_names}
            )
        )
        return

    typer.echo(f"To trigger ({len(result.to_trigger)}):")
    for name in result.trigger_names:
        typer.echo(typer.style(f"  ▶ {name}", fg=typer.colors.GREEN))
    typer.echo(f"To skip ({len(result.to_skip)}):")
    for name in result.skip_names:
        typer.echo(typer.style(f"  ⏭ {name}", fg=typer.colors.YELLOW))
