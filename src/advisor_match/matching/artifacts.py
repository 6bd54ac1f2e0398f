from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any

from advisor_match.matching.results import MatchRun


def default_run_dir(base: str | Path | None = None) -> str:
    base_dir = Path(base) if base else Path("runs")
    return str(base_dir / datetime.now().strftime("%Y%m%d-%H%M%S"))


class MatchRunArtifactWriter:
    """Persist a finished match run for later inspection."""

    def write(self, run_dir: str | Path, run: MatchRun) -> Path:
        target = Path(run_dir)
        target.mkdir(parents=True, exist_ok=True)

        def _write_json(name: str, content: Any) -> None:
            (target / name).write_text(
                json.dumps(content, indent=2, ensure_ascii=False),
                encoding="utf-8",
            )

        payload = run.to_dict()
        _write_json("run.json", payload)
        _write_json("results.json", payload["results"])
        _write_json("excluded.json", payload["excluded"])
        if payload["warnings"]:
            _write_json("warnings.json", payload["warnings"])
        return target
