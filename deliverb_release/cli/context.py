from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path

import typer

from deliverb_release.core.config import (
    CONFIG_FILE_NAME,
    ReleaseConfig,
    load_config,
    load_config_or_default,
)
from deliverb_release.core.errors import ErrorCode
from deliverb_release.core.result import Err
from deliverb_release.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    root: Path
    config: ReleaseConfig
    console: ConsoleProtocol
    today: date


def build_context(*, root: Path | None = None, config_path: Path | None = None) -> CLIContext:
    """Resolve the project root, load config and pin today's date.

    An explicit ``config_path`` must exist; the default ``release.toml`` is
    optional.
    """
    console = RichConsole()

    try:
        project_root = (root or Path.cwd()).expanduser().resolve()
    except OSError as e:
        console.error(f"invalid project root: {e}")
        raise typer.Exit(code=int(ErrorCode.FAILURE))

    if config_path is not None:
        config_result = load_config(config_path)
    else:
        config_result = load_config_or_default(project_root / CONFIG_FILE_NAME)

    if isinstance(config_result, Err):
        console.error(config_result.error.message)
        raise typer.Exit(code=int(ErrorCode.FAILURE))

    return CLIContext(
        root=project_root,
        config=config_result.value,
        console=console,
        today=date.today(),
    )
