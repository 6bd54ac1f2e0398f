from __future__ import annotations

import click

from advisor_match.cli.context import CLIContext
from advisor_match.cli.shared import echo_json, mask_secret, open_snapshot


def register(cli: click.Group) -> None:
    @cli.command("env-info")
    @click.pass_obj
    def env_info_cmd(ctx: CLIContext) -> None:
        """Print the effective scoring configuration (API key masked)."""
        settings = ctx.settings

        click.echo("--- Loaded from Settings ---")
        click.echo(f"API_KEY:                 {mask_secret(settings.api_key_str)}")
        click.echo(f"SKILL_SCALE_MAX:         {settings.skill_scale_max}")
        click.echo(f"NEUTRAL_BASELINE:        {settings.neutral_baseline}")
        click.echo(f"SEGMENT_MULTIPLIER:      {settings.segment_match_multiplier}")
        click.echo(f"HORIZON_WEIGHTS:         {settings.horizon_weights}")
        click.echo(
            "COVERAGE THRESHOLDS:     "
            f"strong>={settings.strong_coverage_threshold} weak<={settings.weak_coverage_threshold}"
        )
        click.echo(f"MIN_SCORE_FLOOR:         {settings.min_score_floor}")
        click.echo(f"DEFAULT_TOP_K:           {settings.default_top_k}")
        click.echo(f"MATCH_WORKERS:           {settings.match_workers}")
        click.echo(f"RUNS_DIR:                {settings.active_runs_dir}")

    @cli.command("validate-taxonomy")
    @click.option(
        "--snapshot",
        type=click.Path(exists=True, dir_okay=False),
        required=True,
        help="Path to a snapshot JSON document",
    )
    @click.pass_obj
    def validate_taxonomy_cmd(ctx: CLIContext, snapshot: str) -> None:
        """Build the taxonomy and report record counts and skipped rows."""
        snap = open_snapshot(snapshot)
        taxonomy = snap.taxonomy
        echo_json(
            {
                "domains": [
                    {
                        "id": d.id,
                        "name": d.name,
                        "subtopics": [s.id for s in taxonomy.subtopics_for(d.id)],
                    }
                    for d in taxonomy.domains()
                ],
                "subtopic_count": len(taxonomy),
                "advisor_count": len(snap.advisors),
                "client_count": len(snap.clients),
                "warnings": list(snap.warnings),
            }
        )
