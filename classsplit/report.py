"""Human-readable and JSON reporting for split runs."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict

from jinja2 import Environment, FileSystemLoader

from .models import ExtractionResult, ExtractionWarning, SplitSummary

_TEMPLATES_DIR = Path(__file__).with_name("templates")


class SummaryReporter:
    """Renders split summaries and extraction listings through Jinja templates."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        directories = []
        if templates_dir is not None:
            directories.append(str(templates_dir))
        directories.append(str(_TEMPLATES_DIR))
        self._env = Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def render_summary(self, summary: SplitSummary) -> str:
        template = self._env.get_template("summary.j2")
        return template.render(
            summary=summary,
            source_name=Path(summary.source_path).name,
            output_dir=_absolute(summary.output_dir),
            processed=summary.types,
        )

    def render_inspection(self, result: ExtractionResult) -> str:
        template = self._env.get_template("inspect.j2")
        source = result.source
        return template.render(
            source_name=source.path.name if source.path else "(text)",
            namespace=source.namespace,
            using_directives=[line.strip() for line in source.using_directives],
            types=source.types,
            warnings=result.warnings,
        )


def summary_to_dict(summary: SplitSummary) -> Dict[str, Any]:
    """Return a JSON-ready view of ``summary`` including derived counts."""
    payload = asdict(summary)
    for type_payload, type_summary in zip(payload["types"], summary.types):
        type_payload["group_count"] = type_summary.group_count
        for group_payload, group in zip(type_payload["groups"], type_summary.groups):
            group_payload["member_count"] = group.member_count
    payload["warnings"] = [_warning_to_dict(warning) for warning in summary.warnings]
    return payload


def write_summary_json(summary: SplitSummary, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(summary_to_dict(summary), indent=2, sort_keys=True) + "\n", encoding="utf-8"
    )


def _warning_to_dict(warning: ExtractionWarning) -> Dict[str, Any]:
    return {
        "kind": warning.kind,
        "message": warning.message,
        "line": warning.line,
        "offset": warning.offset,
        "name": warning.name,
    }


def _absolute(path: str) -> str:
    try:
        return str(Path(path).expanduser().resolve())
    except OSError:
        return path


__all__ = ["SummaryReporter", "summary_to_dict", "write_summary_json"]
