from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from advisor_match.core.errors import InvalidTaxonomyError, SnapshotFormatError
from advisor_match.core.models import ComplexityTier, Horizon, Segment
from advisor_match.data import load_snapshot, snapshot_from_dict
from advisor_match.matching import MatchEngine


def test_snapshot_parses_nested_records(snapshot_doc):
    snap = snapshot_from_dict(snapshot_doc)

    assert len(snap.taxonomy) == 2
    assert [a.id for a in snap.advisors] == ["adv-a", "adv-b"]
    assert snap.warnings == ()

    avery = snap.advisor("adv-a")
    assert avery.target_segment is Segment.essentials
    assert avery.skills[0].skill_level == 9.0
    assert avery.skills[0].last_assessed_at == datetime(2026, 1, 10, tzinfo=timezone.utc)

    carter = snap.client("cli-c")
    assert carter.is_prospect
    assert carter.complexity_tier is ComplexityTier.complex
    assert carter.needs[0].horizon is Horizon.immediate
    assert snap.client("nobody") is None


def test_flat_skill_and_need_rows_are_merged(snapshot_doc):
    snapshot_doc["advisor_skills"] = [
        {"advisor_id": "adv-b", "subtopic_id": "tax-planning", "skill_level": 6},
        {"subtopic_id": "tax-planning", "skill_level": 6},
    ]
    snapshot_doc["client_needs"] = [
        {"client_id": "cli-c", "subtopic_id": "tax-planning", "importance": 4, "urgency": 2, "horizon": "5yr"}
    ]

    snap = snapshot_from_dict(snapshot_doc)

    assert [s.subtopic_id for s in snap.advisor("adv-b").skills] == ["estate-trusts", "tax-planning"]
    assert snap.client("cli-c").needs[1].horizon is Horizon.five_year
    assert len(snap.warnings) == 1
    assert "without advisor_id" in snap.warnings[0]


def test_malformed_records_are_skipped_with_warnings(snapshot_doc):
    snapshot_doc["advisors"].append({"id": "adv-x", "target_segment": "essentials"})
    snapshot_doc["clients"].append({"id": "cli-x", "segment": "galactic"})
    snapshot_doc["advisors"][0]["skills"].append({"subtopic_id": "tax-planning", "skill_level": "high"})

    snap = snapshot_from_dict(snapshot_doc)

    assert [a.id for a in snap.advisors] == ["adv-a", "adv-b"]
    assert [c.id for c in snap.clients] == ["cli-c"]
    assert len(snap.advisor("adv-a").skills) == 1
    assert len(snap.warnings) == 3
    assert any("adv-x" in w for w in snap.warnings)
    assert any("cli-x" in w for w in snap.warnings)
    assert any("skipped malformed skill record" in w for w in snap.warnings)


@pytest.mark.parametrize(
    "mutate",
    [
        lambda doc: doc["subtopics"].append(dict(doc["subtopics"][0])),
        lambda doc: doc["subtopics"].append({"id": "orphan", "domain_id": "missing"}),
        lambda doc: doc["subtopics"][0].update(default_weight=-1),
        lambda doc: doc["domains"].append({"name": "no id"}),
    ],
)
def test_taxonomy_errors_are_fatal(snapshot_doc, mutate):
    mutate(snapshot_doc)

    with pytest.raises(InvalidTaxonomyError):
        snapshot_from_dict(snapshot_doc)


def test_non_object_document_is_rejected():
    with pytest.raises(SnapshotFormatError):
        snapshot_from_dict([])
    with pytest.raises(SnapshotFormatError):
        snapshot_from_dict({"domains": "estate", "subtopics": []})


def test_load_snapshot_reads_json_file(tmp_path, snapshot_doc):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(snapshot_doc), encoding="utf-8")

    assert len(load_snapshot(path).clients) == 1


def test_load_snapshot_rejects_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(SnapshotFormatError, match="not valid JSON"):
        load_snapshot(path)


def test_non_finite_numbers_are_skipped_with_warnings(snapshot_doc, settings):
    snapshot_doc["advisors"][0]["skills"][0]["skill_level"] = float("nan")
    snapshot_doc["clients"][0]["needs"].append(
        {"subtopic_id": "tax-planning", "importance": float("nan"), "urgency": 3}
    )

    snap = snapshot_from_dict(snapshot_doc)

    assert snap.advisor("adv-a").skills == ()
    assert [n.subtopic_id for n in snap.client("cli-c").needs] == ["estate-trusts"]
    assert len(snap.warnings) == 2
    assert all("finite" in w for w in snap.warnings)

    run = MatchEngine(snap.taxonomy, settings).run_match(list(snap.clients), list(snap.advisors))
    assert [(r.advisor_id, r.score) for r in run.results] == [("adv-a", 0)]


def test_overflowing_json_numbers_are_skipped(tmp_path, snapshot_doc):
    text = json.dumps(snapshot_doc).replace('"importance": 10', '"importance": 1e999')
    path = tmp_path / "snapshot.json"
    path.write_text(text, encoding="utf-8")

    snap = load_snapshot(path)

    assert snap.client("cli-c").needs == ()
    assert "importance must be a finite number" in snap.warnings[0]


def test_negative_capacity_counters_skip_the_advisor(snapshot_doc):
    snapshot_doc["advisors"][1].update(current_families=-4, max_families=-1)

    snap = snapshot_from_dict(snapshot_doc)

    assert [a.id for a in snap.advisors] == ["adv-a"]
    assert len(snap.warnings) == 1
    assert "adv-b" in snap.warnings[0]
    assert "must not be negative" in snap.warnings[0]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("false", False), ("True", True), ("no", False), (1, True), (0, False), (None, False)],
)
def test_prospect_flag_parsing(snapshot_doc, raw, expected):
    snapshot_doc["clients"][0]["is_prospect"] = raw

    assert snapshot_from_dict(snapshot_doc).client("cli-c").is_prospect is expected


def test_unreadable_flags_are_rejected(snapshot_doc):
    snapshot_doc["clients"][0]["is_prospect"] = "maybe"

    snap = snapshot_from_dict(snapshot_doc)

    assert snap.clients == ()
    assert "expected a boolean" in snap.warnings[0]

    snapshot_doc["subtopics"][0]["is_active"] = "sometimes"
    with pytest.raises(InvalidTaxonomyError):
        snapshot_from_dict(snapshot_doc)


def test_inactive_string_flag_deactivates_subtopic(snapshot_doc):
    snapshot_doc["subtopics"][1]["is_active"] = "false"

    snap = snapshot_from_dict(snapshot_doc)

    assert not snap.taxonomy.is_active("tax-planning")
    assert snap.taxonomy.is_active("estate-trusts")
