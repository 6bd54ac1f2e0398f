from __future__ import annotations

from typing import Tuple

import click

from advisor_match.cli.context import CLIContext
from advisor_match.cli.shared import echo_json, open_snapshot
from advisor_match.core.errors import EmptyCandidatePoolError
from advisor_match.core.models import AssignmentRole
from advisor_match.matching import MatchEngine, MatchRunArtifactWriter, default_run_dir
from advisor_match.ranking import confidence_label, score_label

_ROLE_CHOICE = click.Choice([r.value for r in AssignmentRole])


def register(cli: click.Group) -> None:
    @cli.command("match-run")
    @click.option(
        "--snapshot",
        type=click.Path(exists=True, dir_okay=False),
        required=True,
        help="Path to a snapshot JSON document",
    )
    @click.option("--client", "client_ids", multiple=True, help="Client id(s); default: all")
    @click.option("--advisor", "advisor_ids", multiple=True, help="Restrict the pool to these advisors")
    @click.option("--role", "roles", type=_ROLE_CHOICE, multiple=True, help="Role(s); default: lead")
    @click.option("--topk", type=int, default=None, help="Top-K advisors per client and role")
    @click.option(
        "--include-prospects/--exclude-prospects",
        default=True,
        help="Whether unassigned prospects take part in the run.",
    )
    @click.option(
        "--run-dir",
        type=click.Path(file_okay=False),
        default=None,
        help="Artifact folder (run.json, results.json, ...); default: RUNS_DIR/<timestamp>",
    )
    @click.pass_obj
    def match_run_cmd(
        ctx: CLIContext,
        snapshot: str,
        client_ids: Tuple[str, ...],
        advisor_ids: Tuple[str, ...],
        roles: Tuple[str, ...],
        topk: int | None,
        include_prospects: bool,
        run_dir: str | None,
    ) -> None:
        """Rank the advisor pool for one or more clients."""
        settings = ctx.settings
        snap = open_snapshot(snapshot)

        clients = list(snap.clients)
        if client_ids:
            unknown = sorted(set(client_ids) - {c.id for c in clients})
            if unknown:
                raise click.ClickException(f"Unknown client id(s): {', '.join(unknown)}")
            clients = [c for c in clients if c.id in set(client_ids)]
        if not include_prospects:
            clients = [c for c in clients if not c.is_prospect]

        advisors = list(snap.advisors)
        if advisor_ids:
            unknown = sorted(set(advisor_ids) - {a.id for a in advisors})
            if unknown:
                raise click.ClickException(f"Unknown advisor id(s): {', '.join(unknown)}")
            advisors = [a for a in advisors if a.id in set(advisor_ids)]

        engine = MatchEngine(snap.taxonomy, settings)
        try:
            run = engine.run_match(
                clients,
                advisors,
                roles=roles or (AssignmentRole.lead,),
                top_k=topk,
            )
        except EmptyCandidatePoolError as exc:
            raise click.ClickException(str(exc)) from exc

        out_dir = run_dir or default_run_dir(settings.active_runs_dir)
        MatchRunArtifactWriter().write(out_dir, run)

        echo_json(
            {
                "run_dir": out_dir,
                "snapshot_warnings": list(snap.warnings),
                "run": run.to_dict(),
            }
        )

    @cli.command("score-pair")
    @click.option(
        "--snapshot",
        type=click.Path(exists=True, dir_okay=False),
        required=True,
        help="Path to a snapshot JSON document",
    )
    @click.option("--client", "client_id", required=True, help="Client id")
    @click.option("--advisor", "advisor_id", required=True, help="Advisor id")
    @click.option("--role", type=_ROLE_CHOICE, default=AssignmentRole.lead.value, show_default=True)
    @click.pass_obj
    def score_pair_cmd(
        ctx: CLIContext, snapshot: str, client_id: str, advisor_id: str, role: str
    ) -> None:
        """Explain how one advisor scores for one client."""
        snap = open_snapshot(snapshot)
        client = snap.client(client_id)
        if client is None:
            raise click.ClickException(f"Unknown client id: {client_id}")
        advisor = snap.advisor(advisor_id)
        if advisor is None:
            raise click.ClickException(f"Unknown advisor id: {advisor_id}")

        pair = MatchEngine(snap.taxonomy, ctx.settings).score_pair(client, advisor, role)
        echo_json(
            {
                "client_id": pair.client_id,
                "advisor_id": pair.advisor_id,
                "role": pair.role.value,
                "score": pair.score,
                "label": score_label(pair.score),
                "eligible": pair.eligible,
                "explanation": pair.explanation.to_dict(),
                "metrics": pair.metrics.to_dict(),
                "confidence_label": confidence_label(pair.metrics.confidence),
                "contributions": [
                    {
                        "subtopic_id": c.subtopic_id,
                        "subtopic": c.subtopic_name,
                        "skill_level": c.skill_level,
                        "weight": round(c.weight, 4),
                        "coverage": round(c.coverage, 4),
                    }
                    for c in pair.breakdown.contributions
                ],
                "warnings": list(pair.warnings),
            }
        )
