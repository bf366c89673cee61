"""Render a widget definition against a JSON dataset from the command line."""

from __future__ import annotations

import json
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from analysis.chart_registry import DEFAULT_REGISTRY
from core.charting.codec import decode_rows, decode_widget, encode_rendered_widget
from core.charting.render import render_widget


class Command(BaseCommand):
    """Render one widget payload and print the chart-ready JSON."""

    help = "Render a widget (JSON file with 'widget' and 'rows') into its chart-ready payload."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument("path", type=Path, help="JSON file containing {'widget': {...}, 'rows': [...]}.")
        parser.add_argument(
            "--validate-only",
            action="store_true",
            help="Only print binding validation errors; exit non-zero when any exist.",
        )

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        path: Path = options["path"]
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise CommandError(f"Cannot read {path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise CommandError(f"{path} is not valid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise CommandError(f"{path} must contain a JSON object.")

        try:
            widget = decode_widget(payload.get("widget"))
            rows = decode_rows(payload.get("rows"))
        except ValueError as exc:
            raise CommandError(str(exc)) from exc

        if options["validate_only"]:
            errors = DEFAULT_REGISTRY.validate(widget.chart_type, widget.binding)
            for error in errors:
                self.stdout.write(error)
            if errors:
                raise CommandError(f"{len(errors)} validation error(s).")
            self.stdout.write(self.style.SUCCESS("Widget bindings are valid."))
            return None

        rendered = render_widget(widget=widget, rows=rows, registry=DEFAULT_REGISTRY)
        self.stdout.write(json.dumps(encode_rendered_widget(rendered), indent=2, default=str))
        return None
