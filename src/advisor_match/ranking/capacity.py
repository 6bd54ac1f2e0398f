from __future__ import annotations

from typing import Optional

from advisor_match.core.models import Advisor, AssignmentRole


def utilization(advisor: Advisor) -> float:
    """Unclamped current/max ratio; 0.0 when no capacity is configured."""
    if advisor.max_families <= 0:
        return 0.0
    return advisor.current_families / advisor.max_families


def capacity_percentage(advisor: Advisor) -> int:
    """Display percentage, clamped to [0, 100]."""
    pct = int(utilization(advisor) * 100 + 0.5)
    return max(0, min(100, pct))


class CapacityGate:
    """Role-dependent eligibility based on an advisor's current caseload."""

    def is_eligible(self, advisor: Advisor, role: AssignmentRole) -> bool:
        if role is not AssignmentRole.lead:
            # Backup/support seats do not draw on the lead capacity pool.
            return True
        if advisor.max_families <= 0:
            return False
        return advisor.current_families < advisor.max_families

    def exclusion_reason(self, advisor: Advisor, role: AssignmentRole) -> Optional[str]:
        if self.is_eligible(advisor, role):
            return None
        if advisor.max_families <= 0:
            return "no lead capacity configured"
        load = f"{advisor.current_families}/{advisor.max_families} families"
        if advisor.current_families > advisor.max_families:
            return f"over capacity for lead role ({load})"
        return f"at capacity for lead role ({load})"
