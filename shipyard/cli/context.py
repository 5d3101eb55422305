from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from shipyard.core.config import CONFIG_FILE_NAME, Config, load_config_or_default
from shipyard.core.errors import ErrorCode
from shipyard.core.result import Err
from shipyard.git.repository import find_repository_root
from shipyard.output.console import ConsoleProtocol, RichConsole
from shipyard.platform.context import RepositoryContext
from shipyard.platform.process import SubprocessRunner

# Set by the --repo / --config global options.
REPO_ENV = "SHIPYARD_REPO"
CONFIG_ENV = "SHIPYARD_CONFIG"


@dataclass(frozen=True, slots=True)
class CLIContext:
    repo: RepositoryContext
    config: Config
    console: ConsoleProtocol


def resolve_repo_root(runner: SubprocessRunner) -> Path:
    override = os.environ.get(REPO_ENV)
    if override:
        return Path(override)
    cwd = Path.cwd()
    return find_repository_root(cwd, runner) or cwd


def build_context() -> CLIContext:
    runner = SubprocessRunner()
    root = resolve_repo_root(runner)

    config_override = os.environ.get(CONFIG_ENV)
    config_path = Path(config_override) if config_override else root / CONFIG_FILE_NAME

    config_result = load_config_or_default(config_path)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.FAILURE))

    return CLIContext(
        repo=RepositoryContext(root=root, runner=runner),
        config=config_result.value,
        console=RichConsole(),
    )
