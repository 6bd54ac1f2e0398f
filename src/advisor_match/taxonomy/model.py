from __future__ import annotations

import math
from types import MappingProxyType
from typing import Iterable, List, Mapping, Tuple

from advisor_match.core.errors import InvalidTaxonomyError
from advisor_match.core.models import Domain, Subtopic


class Taxonomy:
    """
    Two-level domain -> subtopic tree with O(1) subtopic lookup.
    Build once per snapshot via Taxonomy.build(); instances are read-only.
    """

    def __init__(
        self,
        domains: Mapping[str, Domain],
        subtopics: Mapping[str, Subtopic],
    ):
        self._domains = MappingProxyType(dict(domains))
        self._subtopics = MappingProxyType(dict(subtopics))

    @classmethod
    def build(cls, domains: Iterable[Domain], subtopics: Iterable[Subtopic]) -> "Taxonomy":
        domain_map: dict[str, Domain] = {}
        for domain in domains:
            if domain.id in domain_map:
                raise InvalidTaxonomyError(f"Duplicate domain id '{domain.id}'")
            domain_map[domain.id] = domain

        subtopic_map: dict[str, Subtopic] = {}
        for sub in subtopics:
            if sub.id in subtopic_map:
                raise InvalidTaxonomyError(f"Duplicate subtopic id '{sub.id}'")
            if sub.domain_id not in domain_map:
                raise InvalidTaxonomyError(
                    f"Subtopic '{sub.id}' references missing domain '{sub.domain_id}'"
                )
            if not (math.isfinite(sub.default_weight) and sub.default_weight > 0):
                raise InvalidTaxonomyError(
                    f"Subtopic '{sub.id}' has invalid default weight {sub.default_weight}"
                )
            subtopic_map[sub.id] = sub

        return cls(domain_map, subtopic_map)

    def __len__(self) -> int:
        return len(self._subtopics)

    def __contains__(self, subtopic_id: object) -> bool:
        return subtopic_id in self._subtopics

    def has_subtopic(self, subtopic_id: str) -> bool:
        return subtopic_id in self._subtopics

    def lookup(self, subtopic_id: str) -> Tuple[Domain, float]:
        """Return (domain, default_weight) for a subtopic; KeyError when unknown."""
        sub = self._subtopics[subtopic_id]
        return self._domains[sub.domain_id], sub.default_weight

    def is_active(self, subtopic_id: str) -> bool:
        sub = self._subtopics.get(subtopic_id)
        if sub is None:
            return False
        return sub.is_active and self._domains[sub.domain_id].is_active

    def name_of(self, subtopic_id: str) -> str:
        sub = self._subtopics.get(subtopic_id)
        return sub.name if sub and sub.name else subtopic_id

    def domains(self) -> List[Domain]:
        return sorted(self._domains.values(), key=lambda d: (d.display_order, d.id))

    def subtopics_for(self, domain_id: str) -> List[Subtopic]:
        return sorted(
            (s for s in self._subtopics.values() if s.domain_id == domain_id),
            key=lambda s: (s.display_order, s.id),
        )
