from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click

from advisor_match.core.errors import MatchEngineError
from advisor_match.data import Snapshot, load_snapshot


def mask_secret(value: str | None) -> str:
    if not value:
        return "(unset)"
    return (value[:4] + "..." + value[-4:]) if len(value) > 8 else "***"


def echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def open_snapshot(path: str | Path) -> Snapshot:
    """Load a snapshot, turning structural failures into CLI errors."""
    try:
        return load_snapshot(path)
    except MatchEngineError as exc:
        raise click.ClickException(str(exc)) from exc
