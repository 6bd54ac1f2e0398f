from __future__ import annotations

import sys

import click
from pydantic import ValidationError

from advisor_match.cli.context import CLIContext, build_context
from advisor_match.logging_config import setup_logging


def _register_commands(cli_group: click.Group) -> None:
    from advisor_match.cli.commands import diagnostics, matching

    for module in (diagnostics, matching):
        module.register(cli_group)


@click.group()
@click.option("--floor", type=int, default=None, help="Override the minimum score floor (0-100).")
@click.option("--workers", type=int, default=None, help="Override the scoring worker count (>= 1).")
@click.pass_context
def cli(ctx: click.Context, floor: int | None, workers: int | None) -> None:
    """advisor-match CLI."""
    try:
        ctx.obj = build_context(min_score_floor=floor, workers=workers)
    except ValidationError as exc:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
        raise click.UsageError(f"Invalid configuration: {fields}") from exc
    setup_logging(ctx.obj.settings.log_level, stream=sys.stderr)


_register_commands(cli)


def main() -> None:
    cli()


__all__ = ["CLIContext", "cli", "main"]
