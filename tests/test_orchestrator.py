"""Tests for classsplit.orchestrator."""

from __future__ import annotations

from pathlib import Path

import pytest

from classsplit.config import default_config
from classsplit.models import SplitRequest
from classsplit.orchestrator import (
    OutputError,
    SourceNotFoundError,
    SourceTooLargeError,
    SplitOrchestrator,
    TypeNotFoundError,
)
from tests._fixtures.memory_fs import InMemoryFileSystem, ReadOnlyFileSystem
from tests._fixtures.samples import BROKEN_FIRST, PERSON, THREE_TYPES


class RecordingProgress:
    """Collects progress messages for assertions."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)


def _orchestrator(fs: InMemoryFileSystem, **overrides) -> SplitOrchestrator:
    config = default_config(Path("."))
    for key, value in overrides.items():
        section, field_name = key.split("__")
        setattr(getattr(config, section), field_name, value)
    return SplitOrchestrator(config, filesystem=fs, progress=RecordingProgress())


def test_visibility_split_writes_exposed_then_hidden_files() -> None:
    fs = InMemoryFileSystem({"src/Person.cs": PERSON})

    outcome = _orchestrator(fs).run(SplitRequest(Path("src/Person.cs"), Path("out")))

    assert sorted(fs.writes) == [Path("out/Person_Part1.cs"), Path("out/Person_Part2.cs")]
    assert fs.created == [Path("out")]
    part1 = fs.writes[Path("out/Person_Part1.cs")]
    part2 = fs.writes[Path("out/Person_Part2.cs")]
    assert "    public string Name" in part1
    assert "    public void Greet()" in part1
    assert "    private void Validate(string value)" in part2
    assert part2.index("    private void Validate(string value)") < part2.index("    private int Score()")

    summary = outcome.summary
    assert summary.policy == "visibility"
    assert [t.name for t in summary.types] == ["Person"]
    person = summary.types[0]
    assert person.member_count == 4
    assert person.group_count == 2
    assert [g.member_names for g in person.groups] == [["Name", "Greet"], ["Validate", "Score"]]
    assert [(g.exposed, g.hidden) for g in person.groups] == [(2, 0), (0, 2)]


def test_round_robin_split_distributes_by_index() -> None:
    fs = InMemoryFileSystem({"src/Person.cs": PERSON})

    outcome = _orchestrator(fs).run(
        SplitRequest(Path("src/Person.cs"), Path("out"), split_count=3)
    )

    assert len(fs.writes) == 3
    groups = outcome.summary.types[0].groups
    assert [g.member_names for g in groups] == [["Name", "Score"], ["Greet"], ["Validate"]]
    assert all(g.exposed is None for g in groups)
    assert outcome.summary.policy == "round_robin"


def test_every_type_is_split_independently() -> None:
    fs = InMemoryFileSystem({"Staff.cs": THREE_TYPES})

    outcome = _orchestrator(fs).run(SplitRequest(Path("Staff.cs"), Path("out")))

    assert sorted(path.name for path in fs.writes) == [
        "Person_Part1.cs",
        "Person_Part2.cs",
        "Point_Part1.cs",
        "Registry_Part1.cs",
    ]
    registry = fs.writes[Path("out/Registry_Part1.cs")]
    assert registry[:6] == [
        "using System;",
        "using System.Collections.Generic;",
        "",
        "namespace Company.Staff;",
        "",
        "internal sealed partial class Registry",
    ]
    assert "public partial struct Point" in fs.writes[Path("out/Point_Part1.cs")]
    assert [t.group_count for t in outcome.summary.types] == [2, 1, 1]


def test_type_filter_is_case_insensitive() -> None:
    fs = InMemoryFileSystem({"Staff.cs": THREE_TYPES})

    outcome = _orchestrator(fs).run(
        SplitRequest(Path("Staff.cs"), Path("out"), type_name="registry")
    )

    assert list(fs.writes) == [Path("out/Registry_Part1.cs")]
    assert outcome.summary.type_filter == "registry"


def test_missing_type_fails_without_writing() -> None:
    fs = InMemoryFileSystem({"Staff.cs": THREE_TYPES})

    with pytest.raises(TypeNotFoundError, match="Ghost"):
        _orchestrator(fs).run(SplitRequest(Path("Staff.cs"), Path("out"), type_name="Ghost"))

    assert fs.writes == {}
    assert fs.created == []


def test_unmatched_type_is_skipped_and_siblings_written() -> None:
    fs = InMemoryFileSystem({"Mixed.cs": BROKEN_FIRST})

    outcome = _orchestrator(fs).run(SplitRequest(Path("Mixed.cs"), Path("out")))

    assert list(fs.writes) == [Path("out/Good_Part1.cs")]
    assert [w.kind for w in outcome.summary.warnings] == ["unmatched_type"]


def test_missing_source_is_fatal() -> None:
    fs = InMemoryFileSystem()

    with pytest.raises(SourceNotFoundError):
        _orchestrator(fs).run(SplitRequest(Path("nope.cs"), Path("out")))


def test_oversized_source_is_rejected() -> None:
    fs = InMemoryFileSystem({"Big.cs": PERSON})

    with pytest.raises(SourceTooLargeError):
        _orchestrator(fs, input__max_file_size_mb=0.0001).run(
            SplitRequest(Path("Big.cs"), Path("out"))
        )


def test_unwritable_output_is_fatal() -> None:
    fs = ReadOnlyFileSystem({"src/Person.cs": PERSON})

    with pytest.raises(OutputError):
        _orchestrator(fs).run(SplitRequest(Path("src/Person.cs"), Path("out")))


def test_missing_output_directory_without_creation_is_fatal() -> None:
    fs = InMemoryFileSystem({"src/Person.cs": PERSON})

    with pytest.raises(OutputError, match="does not exist"):
        _orchestrator(fs, output__create_directories=False).run(
            SplitRequest(Path("src/Person.cs"), Path("out"))
        )


def test_existing_output_directory_is_not_recreated() -> None:
    fs = InMemoryFileSystem({"src/Person.cs": PERSON})
    fs.directories.add(Path("out"))

    _orchestrator(fs).run(SplitRequest(Path("src/Person.cs"), Path("out")))

    assert fs.created == []
    assert len(fs.writes) == 2


def test_dry_run_renders_without_writing() -> None:
    fs = InMemoryFileSystem({"src/Person.cs": PERSON})

    outcome = _orchestrator(fs).run(
        SplitRequest(Path("src/Person.cs"), Path("out"), dry_run=True)
    )

    assert fs.writes == {}
    assert fs.created == []
    assert len(outcome.documents) == 2
    assert outcome.summary.written == [
        str(Path("out") / "Person_Part1.cs"),
        str(Path("out") / "Person_Part2.cs"),
    ]


def test_type_without_members_produces_no_file() -> None:
    fs = InMemoryFileSystem({"Empty.cs": "public class Empty\n{\n    private int _x;\n}\n"})

    outcome = _orchestrator(fs).run(SplitRequest(Path("Empty.cs"), Path("out")))

    assert fs.writes == {}
    assert outcome.summary.types[0].member_count == 0
    assert outcome.summary.types[0].group_count == 0


def test_zero_types_completes_with_empty_summary() -> None:
    fs = InMemoryFileSystem({"Blank.cs": "using System;\n"})

    outcome = _orchestrator(fs).run(SplitRequest(Path("Blank.cs"), Path("out")))

    assert outcome.summary.types == []
    assert fs.writes == {}


def test_configured_round_robin_applies_when_request_has_no_count() -> None:
    fs = InMemoryFileSystem({"src/Person.cs": PERSON})
    orchestrator = _orchestrator(fs, split__mode="round_robin", split__count=2)

    outcome = orchestrator.run(SplitRequest(Path("src/Person.cs"), Path("out")))

    assert outcome.summary.split_count == 2
    assert [g.member_names for g in outcome.summary.types[0].groups] == [
        ["Name", "Validate"],
        ["Greet", "Score"],
    ]


def test_output_extension_follows_input() -> None:
    fs = InMemoryFileSystem({"src/Person.txt": PERSON})

    _orchestrator(fs).run(SplitRequest(Path("src/Person.txt"), Path("out")))

    assert sorted(path.name for path in fs.writes) == ["Person_Part1.txt", "Person_Part2.txt"]


def test_progress_messages_are_reported() -> None:
    fs = InMemoryFileSystem({"src/Person.cs": PERSON})
    orchestrator = _orchestrator(fs)

    orchestrator.run(SplitRequest(Path("src/Person.cs"), Path("out")))

    messages = orchestrator.progress.messages  # type: ignore[attr-defined]
    assert any("Found 1 types" in message for message in messages)
    assert any("Wrote 2 files" in message for message in messages)


def test_split_request_rejects_non_positive_count() -> None:
    with pytest.raises(ValueError):
        SplitRequest(Path("a.cs"), Path("out"), split_count=0)
