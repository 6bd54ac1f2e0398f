"""
Snapshot loading: a JSON document of already-materialized records.

Shape:
    {
      "domains":   [{"id", "name", "display_order"?, "is_active"?}],
      "subtopics": [{"id", "domain_id", "name"?, "default_weight"?, ...}],
      "advisors":  [{"id", "max_families", "current_families", "target_segment",
                     "years_experience"?, "skills": [{"subtopic_id", "skill_level", ...}]}],
      "clients":   [{"id", "segment", "complexity_tier"?, "is_prospect"?,
                     "needs": [{"subtopic_id", "importance", "urgency", "horizon"}]}],
      "advisor_skills"?: [...],   # flat rows keyed by advisor_id
      "client_needs"?:   [...]    # flat rows keyed by client_id
    }

Taxonomy problems are fatal; a malformed advisor, client, skill or need row is
skipped and reported as a warning.
"""

from __future__ import annotations

import json
import math
import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from advisor_match.core.errors import InvalidTaxonomyError, SnapshotFormatError
from advisor_match.core.models import (
    Advisor,
    AdvisorSkillRecord,
    Client,
    ClientNeedRecord,
    ComplexityTier,
    Domain,
    Horizon,
    Subtopic,
    parse_complexity,
    parse_horizon,
    parse_segment,
)
from advisor_match.taxonomy import Taxonomy

logger = logging.getLogger("advisor_match.data.snapshot")


@dataclass(frozen=True)
class Snapshot:
    taxonomy: Taxonomy
    advisors: Tuple[Advisor, ...]
    clients: Tuple[Client, ...]
    warnings: Tuple[str, ...] = ()

    def advisor(self, advisor_id: str) -> Optional[Advisor]:
        return next((a for a in self.advisors if a.id == advisor_id), None)

    def client(self, client_id: str) -> Optional[Client]:
        return next((c for c in self.clients if c.id == client_id), None)


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


_TRUE_STRINGS = {"true", "yes", "1"}
_FALSE_STRINGS = {"false", "no", "0"}


def _parse_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise ValueError(f"expected a boolean, got {value!r}")


def _finite(value: Any, field_name: str) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"{field_name} must be a finite number, got {value!r}")
    return number


def _count(value: Any, field_name: str) -> int:
    number = int(_finite(value, field_name))
    if number < 0:
        raise ValueError(f"{field_name} must not be negative, got {number}")
    return number


def _row_id(row: Any) -> Any:
    return row.get("id") if isinstance(row, dict) else None


def _as_list(data: Dict[str, Any], key: str) -> List[Any]:
    value = data.get(key) or []
    if not isinstance(value, list):
        raise SnapshotFormatError(f"'{key}' must be a list")
    return value


def _parse_taxonomy(data: Dict[str, Any]) -> Taxonomy:
    try:
        domains = [
            Domain(
                id=str(row["id"]),
                name=str(row.get("name") or row["id"]),
                display_order=int(row.get("display_order") or 0),
                is_active=_parse_bool(row.get("is_active"), True),
            )
            for row in _as_list(data, "domains")
        ]
        subtopics = [
            Subtopic(
                id=str(row["id"]),
                domain_id=str(row["domain_id"]),
                name=str(row.get("name") or row["id"]),
                default_weight=_finite(row.get("default_weight", 1.0), "default_weight"),
                display_order=int(row.get("display_order") or 0),
                is_active=_parse_bool(row.get("is_active"), True),
            )
            for row in _as_list(data, "subtopics")
        ]
    except (AttributeError, KeyError, OverflowError, TypeError, ValueError) as exc:
        raise InvalidTaxonomyError(f"Malformed taxonomy record: {exc}") from exc
    return Taxonomy.build(domains, subtopics)


def _parse_skill(row: Dict[str, Any], advisor_id: str) -> AdvisorSkillRecord:
    return AdvisorSkillRecord(
        advisor_id=str(row.get("advisor_id") or advisor_id),
        subtopic_id=str(row["subtopic_id"]),
        skill_level=_finite(row["skill_level"], "skill_level"),
        case_count=_count(row.get("case_count") or 0, "case_count"),
        last_assessed_at=_parse_timestamp(row.get("last_assessed_at")),
    )


def _parse_need(row: Dict[str, Any], client_id: str) -> ClientNeedRecord:
    return ClientNeedRecord(
        client_id=str(row.get("client_id") or client_id),
        subtopic_id=str(row["subtopic_id"]),
        importance=_finite(row["importance"], "importance"),
        urgency=_finite(row["urgency"], "urgency"),
        horizon=parse_horizon(row.get("horizon") or Horizon.three_year),
    )


def _parse_rows(rows, parse, owner_id: str, label: str, warnings: List[str]) -> list:
    parsed = []
    for row in rows:
        try:
            parsed.append(parse(row, owner_id))
        except (AttributeError, KeyError, OverflowError, TypeError, ValueError) as exc:
            warnings.append(f"{owner_id}: skipped malformed {label} record ({exc!r})")
    return parsed


def snapshot_from_dict(data: Dict[str, Any]) -> Snapshot:
    if not isinstance(data, dict):
        raise SnapshotFormatError("Snapshot document must be a JSON object")

    taxonomy = _parse_taxonomy(data)
    warnings: List[str] = []

    flat_skills: Dict[str, list] = defaultdict(list)
    for row in _as_list(data, "advisor_skills"):
        if isinstance(row, dict) and row.get("advisor_id"):
            flat_skills[str(row["advisor_id"])].append(row)
        else:
            warnings.append(f"skipped advisor skill row without advisor_id ({row!r})")
    flat_needs: Dict[str, list] = defaultdict(list)
    for row in _as_list(data, "client_needs"):
        if isinstance(row, dict) and row.get("client_id"):
            flat_needs[str(row["client_id"])].append(row)
        else:
            warnings.append(f"skipped client need row without client_id ({row!r})")

    advisors: List[Advisor] = []
    for row in _as_list(data, "advisors"):
        try:
            advisor_id = str(row["id"])
            skill_rows = list(row.get("skills") or []) + flat_skills.get(advisor_id, [])
            skills = _parse_rows(skill_rows, _parse_skill, advisor_id, "skill", warnings)
            advisors.append(
                Advisor(
                    id=advisor_id,
                    name=row.get("name"),
                    max_families=_count(row["max_families"], "max_families"),
                    current_families=_count(row.get("current_families") or 0, "current_families"),
                    target_segment=parse_segment(row["target_segment"]),
                    years_experience=_finite(row.get("years_experience") or 0, "years_experience"),
                    certifications=tuple(row.get("certifications") or ()),
                    skills=tuple(skills),
                )
            )
        except (AttributeError, KeyError, OverflowError, TypeError, ValueError) as exc:
            warnings.append(f"skipped malformed advisor record {_row_id(row)!r} ({exc!r})")

    clients: List[Client] = []
    for row in _as_list(data, "clients"):
        try:
            client_id = str(row["id"])
            need_rows = list(row.get("needs") or []) + flat_needs.get(client_id, [])
            needs = _parse_rows(need_rows, _parse_need, client_id, "need", warnings)
            clients.append(
                Client(
                    id=client_id,
                    name=row.get("name"),
                    segment=parse_segment(row["segment"]),
                    complexity_tier=parse_complexity(
                        row.get("complexity_tier") or ComplexityTier.standard
                    ),
                    is_prospect=_parse_bool(row.get("is_prospect"), False),
                    needs=tuple(needs),
                )
            )
        except (AttributeError, KeyError, OverflowError, TypeError, ValueError) as exc:
            warnings.append(f"skipped malformed client record {_row_id(row)!r} ({exc!r})")

    for message in warnings:
        logger.warning(message)

    return Snapshot(
        taxonomy=taxonomy,
        advisors=tuple(advisors),
        clients=tuple(clients),
        warnings=tuple(warnings),
    )


def load_snapshot(path: str | Path) -> Snapshot:
    with open(Path(path), "r", encoding="utf-8") as handle:
        try:
            data = json.load(handle)
        except json.JSONDecodeError as exc:
            raise SnapshotFormatError(f"{path}: not valid JSON ({exc})") from exc
    return snapshot_from_dict(data)
