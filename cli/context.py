"""Active-analysis state shared between CLI invocations.

``analysis import`` and ``analysis use`` record which stored analysis the
``graph`` commands read when no ``--file`` is given.  The state lives in
``context.json`` under ``settings.cli_config_dir`` (``~/.sitegraph_cli``).
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from functools import wraps
from pathlib import Path
from typing import Callable

import typer
from sitegraph.config import settings

_CONTEXT_FILE = "context.json"


@dataclass
class CliContext:
    active_analysis_id: str | None = None
    active_analysis_url: str | None = None

    def to_json(self) -> str:
        return json.dumps(asdict(self), indent=2)

    @classmethod
    def from_json(cls, data: str) -> CliContext:
        # Files from an incompatible version (unknown keys, bad JSON) reset to empty.
        try:
            return cls(**json.loads(data))
        except (json.JSONDecodeError, TypeError):
            return cls()


def context_path() -> Path:
    return settings.cli_config_dir / _CONTEXT_FILE


def load_context() -> CliContext:
    """Read the saved context; an absent or unreadable file gives an empty one."""
    try:
        text = context_path().read_text(encoding="utf-8")
    except OSError:
        return CliContext()
    return CliContext.from_json(text)


def save_context(ctx: CliContext) -> None:
    settings.cli_config_dir.mkdir(parents=True, exist_ok=True)
    context_path().write_text(ctx.to_json(), encoding="utf-8")


def clear_context() -> None:
    save_context(CliContext())


def require_context(func: Callable) -> Callable:
    """Exit with code 1 before running *func* when no analysis is active."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        if not load_context().active_analysis_id:
            typer.echo("❌ No active analysis selected.")
            typer.echo("Run 'analysis import <file>' or 'analysis use <id>' first.")
            raise typer.Exit(code=1)
        return func(*args, **kwargs)

    return wrapper
