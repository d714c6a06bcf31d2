"""Print the instructor dashboard views for a JSON export."""

from __future__ import annotations

import json
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from classroom.pipeline import DashboardUpdate, ReactivePipeline
from classroom.stores import InMemoryExperimentStore
from experiment_analysis.records import RecordDecodeError
from experiment_analysis.tables import format_fixed


class Command(BaseCommand):
    """Derive dashboard statistics from a JSON export of the record store."""

    help = (
        "Load {'classes': [...], 'submissions': [...]} from a JSON file and print "
        "per-condition statistics, trend, hypothesis correctness, precision ranking "
        "and effect sizes."
    )

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument("path", help="Path to the JSON export.")
        parser.add_argument(
            "--class",
            dest="class_code",
            default=None,
            help="Restrict the report to one class code (default: all classes).",
        )

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        path = Path(options["path"])
        class_code: str | None = options["class_code"]

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise CommandError(f"File not found: {path}") from exc
        except json.JSONDecodeError as exc:
            raise CommandError(f"Invalid JSON in {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise CommandError("Expected a JSON object with 'classes' and 'submissions'.")

        store = InMemoryExperimentStore()
        try:
            store.load(
                submissions=data.get("submissions") or [],
                classes=data.get("classes") or [],
            )
        except RecordDecodeError as exc:
            raise CommandError(str(exc)) from exc

        pipeline = ReactivePipeline(store.submissions, store.classes).start()
        if class_code:
            pipeline.select_class(class_code.strip().upper())
        update = pipeline.latest
        pipeline.close()
        if update is None:  # pragma: no cover
            raise CommandError("No dashboard update was produced.")

        for line in _report_lines(update):
            self.stdout.write(line)
        return None


def _report_lines(update: DashboardUpdate) -> list[str]:
    """Render a DashboardUpdate as plain text lines."""

    views = update.views
    lines = [f"Filter: {views.active_filter} ({views.filtered_count} of {views.record_count} submissions)"]

    lines.append("Average distance by condition:")
    for stats in views.condition_stats:
        lines.append(
            f"  {stats.label}: mean={format_fixed(stats.mean) or '-'} "
            f"se={format_fixed(stats.standard_error) or '-'} "
            f"ci95=[{format_fixed(stats.ci95.low) or '-'}, {format_fixed(stats.ci95.high) or '-'}] "
            f"n={stats.n}"
        )

    regression = views.trend.regression
    lines.append(
        f"Trend: slope={regression.slope:.5f} m/g r2={regression.r2:.3f} "
        f"points={len(views.trend.points)}"
    )

    tally = views.hypotheses
    rate = "-" if tally.correct_rate is None else f"{tally.correct_rate:.0%}"
    lines.append(
        f"Hypotheses: {tally.counts} supported={tally.correct_direction or 'none'} "
        f"correct={tally.correct}/{tally.total} ({rate})"
    )

    lines.append("Most precise groups:")
    for rank, entry in enumerate(views.precision_ranking, start=1):
        lines.append(f"  {rank}. {entry.group_name} [{entry.class_code}] sd={format_fixed(entry.sd) or '-'}")

    if views.effect_sizes:
        lines.append(f"Effect size vs {views.effect_sizes[0].control_label}:")
        for effect in views.effect_sizes:
            lines.append(f"  {effect.label}: d={format_fixed(effect.d, digits=2) or '-'}")
    return lines
