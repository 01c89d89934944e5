from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer

from deliverb_release import __version__
from deliverb_release.cli.context import build_context
from deliverb_release.cli.release_flow import print_usage, run_release
from deliverb_release.core.errors import ErrorCode
from deliverb_release.core.result import Err
from deliverb_release.output.console import ConsoleProtocol, Style
from deliverb_release.services.release.errors import ReleaseError


app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=int(ErrorCode.OK))


def report_release_error(error: ReleaseError, console: ConsoleProtocol) -> NoReturn:
    """Print a release error the way the CLI presents it, then exit 1."""
    match error.kind:
        case "invalid_argument":
            print_usage(console)
        case "dirty_working_tree":
            console.warning(error.message)
            if error.hint:
                console.print(error.hint, Style.DIM)
            console.print("Please commit or stash them before creating a release.", Style.WARNING)
        case _:
            console.error(error.message)
            if error.hint:
                console.print(f"hint: {error.hint}", Style.DIM)
    raise typer.Exit(code=int(ErrorCode.FAILURE))


@app.command()
def release(
    args: list[str] | None = typer.Argument(
        None,
        metavar="[major|minor|patch]",
        help="Release type: major, minor or patch.",
        show_default=False,
    ),
    root: Path | None = typer.Option(
        None,
        "--root",
        help="Project root (defaults to the current directory).",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Config file (defaults to <root>/release.toml when present).",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Bump the project version in package.json, CMakeLists.txt and CHANGELOG.md."""
    ctx = build_context(root=root, config_path=config)

    result = run_release(args or [], ctx)
    if isinstance(result, Err):
        report_release_error(result.error, ctx.console)


def main() -> None:
    app()
