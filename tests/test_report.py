"""Tests for summary rendering."""

from __future__ import annotations

import json
from pathlib import Path

from classsplit.models import ExtractionWarning, GroupSummary, SplitSummary, TypeSummary
from classsplit.report import SummaryReporter, summary_to_dict, write_summary_json


def _summary(**overrides) -> SplitSummary:
    summary = SplitSummary(
        source_path="src/Person.cs",
        output_dir="out",
        policy="visibility",
        types=[
            TypeSummary(
                name="Person",
                member_count=3,
                groups=[
                    GroupSummary("Person_Part1.cs", ["Name", "Greet"], exposed=2, hidden=0),
                    GroupSummary("Person_Part2.cs", ["Score"], exposed=0, hidden=1),
                ],
            )
        ],
    )
    for key, value in overrides.items():
        setattr(summary, key, value)
    return summary


def test_render_summary_lists_types_and_groups() -> None:
    text = SummaryReporter().render_summary(_summary())

    assert text.startswith("=== SPLIT SUMMARY ===\nSource file: Person.cs\n")
    assert "Total types processed: 1" in text
    assert "All types split" in text
    assert "Type: Person" in text
    assert "  Split into: 2 files" in text
    assert "      Public: 2, Non-public: 0" in text
    assert "      Member names: Name, Greet" in text


def test_render_summary_for_round_robin_omits_visibility_tally() -> None:
    summary = _summary(policy="round_robin", split_count=2, type_filter="Person")
    for group in summary.types[0].groups:
        group.exposed = None
        group.hidden = None

    text = SummaryReporter().render_summary(summary)

    assert "Specific type split: Person" in text
    assert "round-robin across 2 files" in text
    assert "Public:" not in text


def test_render_summary_lists_skipped_sites() -> None:
    warning = ExtractionWarning("unmatched_type", "Unmatched braces for type Broken", 0, 1, "Broken")

    text = SummaryReporter().render_summary(_summary(warnings=[warning]))

    assert "Skipped sites:" in text
    assert "line 1: Unmatched braces for type Broken" in text


def test_summary_json_includes_derived_counts(tmp_path: Path) -> None:
    path = tmp_path / "reports" / "summary.json"

    write_summary_json(_summary(), path)

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["types"][0]["group_count"] == 2
    assert payload["types"][0]["groups"][1]["member_count"] == 1
    assert payload == summary_to_dict(_summary())
