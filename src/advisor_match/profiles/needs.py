from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Tuple

from advisor_match.core.models import Client, Horizon
from advisor_match.taxonomy import Taxonomy

logger = logging.getLogger("advisor_match.profiles.needs")


@dataclass(frozen=True)
class Need:
    importance: float
    urgency: float
    horizon: Horizon


@dataclass(frozen=True)
class NeedProfile:
    client_id: str
    needs: Mapping[str, Need]
    warnings: Tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.needs)

    def __iter__(self) -> Iterator[Tuple[str, Need]]:
        # Subtopic-id order keeps every downstream breakdown deterministic.
        return iter(sorted(self.needs.items()))

    @property
    def is_empty(self) -> bool:
        return not self.needs


def build_need_profile(client: Client, taxonomy: Taxonomy) -> NeedProfile:
    """
    Build subtopic -> Need for one client. Subtopics the client did not
    ask about are simply absent; a client without needs is valid.
    """
    needs: Dict[str, Need] = {}
    warnings: List[str] = []

    for record in client.needs:
        sid = record.subtopic_id
        if record.client_id != client.id:
            warnings.append(
                f"client {client.id}: skipped need owned by client '{record.client_id}' "
                f"(subtopic '{sid}')"
            )
            continue
        if not taxonomy.has_subtopic(sid):
            warnings.append(f"client {client.id}: skipped need for unknown subtopic '{sid}'")
            continue
        if not taxonomy.is_active(sid):
            warnings.append(f"client {client.id}: skipped need for inactive subtopic '{sid}'")
            continue
        if not (math.isfinite(record.importance) and math.isfinite(record.urgency)):
            warnings.append(
                f"client {client.id}: skipped need for '{sid}' with non-finite "
                f"importance/urgency ({record.importance}/{record.urgency})"
            )
            continue
        if record.importance < 0 or record.urgency < 0:
            warnings.append(
                f"client {client.id}: skipped need for '{sid}' with negative "
                f"importance/urgency ({record.importance}/{record.urgency})"
            )
            continue
        if sid in needs:
            warnings.append(f"client {client.id}: skipped duplicate need for subtopic '{sid}'")
            continue
        needs[sid] = Need(
            importance=float(record.importance),
            urgency=float(record.urgency),
            horizon=record.horizon,
        )

    for message in warnings:
        logger.warning(message)

    return NeedProfile(
        client_id=client.id,
        needs=MappingProxyType(dict(sorted(needs.items()))),
        warnings=tuple(warnings),
    )
