from .coverage import SkillCoverageIndex, build_coverage_index
from .needs import Need, NeedProfile, build_need_profile

__all__ = [
    "Need",
    "NeedProfile",
    "SkillCoverageIndex",
    "build_coverage_index",
    "build_need_profile",
]
