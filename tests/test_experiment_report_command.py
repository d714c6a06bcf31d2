"""Integration tests for the experiment_report management command."""

from __future__ import annotations

import json
from io import StringIO

import pytest
from django.core.management import CommandError, call_command

pytestmark = pytest.mark.integration


def _export() -> dict:
    def submission(record_id: str, class_code: str, group: str, hypothesis: str, control, washers, created):
        return {
            "id": record_id,
            "classCode": class_code,
            "groupName": group,
            "members": ["Alex", "Bo"],
            "hypothesis": hypothesis,
            "conditions": [
                {"label": "Control (no added mass)", "mass": 250, "trials": control},
                {"label": "3 washers", "mass": 280, "trials": washers},
            ],
            "createdAt": created,
        }

    return {
        "classes": [{"code": "P2", "name": "Period 2"}, {"code": "P3", "name": "Period 3"}],
        "submissions": [
            submission("a", "P2", "Rockets", "increase", [1.0, 1.1, 0.9], [0.8, 0.8, 0.8], "2025-10-02T09:05:00+00:00"),
            submission("b", "P2", "Rollers", "decrease", [1.2, 1.3, 1.1], [0.4, 0.6, 0.8], "2025-10-02T09:00:00+00:00"),
            submission("c", "P3", "Zoomers", "decrease", [2.0, 2.1, 1.9], [1.5, 1.4, 1.6], "2025-10-02T10:00:00+00:00"),
        ],
    }


def test_experiment_report_prints_views_for_one_class(tmp_path) -> None:
    """Restricting to P2 reports the two P2 groups."""

    path = tmp_path / "export.json"
    path.write_text(json.dumps(_export()), encoding="utf-8")
    out = StringIO()

    call_command("experiment_report", str(path), "--class", "p2", stdout=out)
    output = out.getvalue()

    assert "Filter: P2 (2 of 3 submissions)" in output
    assert "Control (no added mass): mean=1.100" in output
    assert "supported=decrease correct=1/2 (50%)" in output
    assert "1. Rockets [P2]" in output
    assert "Effect size vs Control (no added mass):" in output


def test_experiment_report_rejects_bad_input(tmp_path) -> None:
    """Missing files, invalid JSON and undecodable records raise CommandError."""

    with pytest.raises(CommandError, match="File not found"):
        call_command("experiment_report", str(tmp_path / "missing.json"))

    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(CommandError, match="Invalid JSON"):
        call_command("experiment_report", str(bad))

    no_id = tmp_path / "no_id.json"
    no_id.write_text(json.dumps({"submissions": [{"classCode": "P2"}]}), encoding="utf-8")
    with pytest.raises(CommandError, match="missing an id"):
        call_command("experiment_report", str(no_id))
