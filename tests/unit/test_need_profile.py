from __future__ import annotations

from advisor_match.core.models import Client, ClientNeedRecord, Horizon, Segment
from advisor_match.profiles import build_need_profile


def _need(subtopic_id: str, importance: float = 5, urgency: float = 5, owner: str = "cli-1"):
    return ClientNeedRecord(
        client_id=owner,
        subtopic_id=subtopic_id,
        importance=importance,
        urgency=urgency,
        horizon=Horizon.one_year,
    )


def _client(*needs: ClientNeedRecord) -> Client:
    return Client(id="cli-1", segment=Segment.traditional, needs=needs)


def test_profile_contains_only_requested_subtopics(taxonomy):
    profile = build_need_profile(_client(_need("tax-planning", 8, 3)), taxonomy)

    assert len(profile) == 1
    need = profile.needs["tax-planning"]
    assert (need.importance, need.urgency, need.horizon) == (8.0, 3.0, Horizon.one_year)
    assert "estate-trusts" not in profile.needs


def test_client_without_needs_yields_empty_profile(taxonomy):
    profile = build_need_profile(_client(), taxonomy)

    assert profile.is_empty
    assert list(profile) == []
    assert profile.warnings == ()


def test_iteration_is_ordered_by_subtopic_id(taxonomy):
    profile = build_need_profile(
        _client(_need("tax-planning"), _need("charitable"), _need("retirement-income")),
        taxonomy,
    )

    assert [sid for sid, _ in profile] == ["charitable", "retirement-income", "tax-planning"]


def test_invalid_needs_are_skipped_with_warnings(taxonomy):
    profile = build_need_profile(
        _client(
            _need("crypto"),
            _need("legacy-annuities"),
            _need("tax-loss", importance=-1),
            _need("estate-trusts", importance=7),
            _need("estate-trusts", importance=2),
            _need("charitable", owner="cli-9"),
        ),
        taxonomy,
    )

    assert list(profile.needs) == ["estate-trusts"]
    assert profile.needs["estate-trusts"].importance == 7.0
    joined = "\n".join(profile.warnings)
    assert "unknown subtopic 'crypto'" in joined
    assert "inactive subtopic 'legacy-annuities'" in joined
    assert "negative importance/urgency" in joined
    assert "duplicate need for subtopic 'estate-trusts'" in joined
    assert "owned by client 'cli-9'" in joined


def test_non_finite_needs_are_skipped_with_warnings(taxonomy):
    profile = build_need_profile(
        _client(
            _need("tax-loss", importance=float("nan")),
            _need("charitable", urgency=float("inf")),
            _need("tax-planning"),
        ),
        taxonomy,
    )

    assert list(profile.needs) == ["tax-planning"]
    assert len(profile.warnings) == 2
    assert all("non-finite" in w for w in profile.warnings)
