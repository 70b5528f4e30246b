"""Text and HTML rendering of accuracy results."""
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape


# Category display names and order
CATEGORY_ORDER = ["digit", "bubble"]

CATEGORY_LABELS = {
    "digit": "Digit fields",
    "bubble": "Bubble fields",
}


def format_percentage(value: Optional[float]) -> str:
    return "n/a" if value is None else f"{value:.2f}%"


def group_fields_by_category(fields: List[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    """Group per-field rows by category, keeping field order within each."""
    groups: Dict[str, List[Dict[str, Any]]] = {category: [] for category in CATEGORY_ORDER}
    for row in fields:
        groups.setdefault(row["category"], []).append(row)
    return groups


@dataclass
class AccuracyReport:
    """
    Accuracy report for one run.

    Wraps the summary produced by ``metrics.build_summary`` and renders it
    for the console (plain text) or as an HTML page (Jinja2).
    """
    summary: Dict[str, Any]
    title: str = "Scan Accuracy"
    source: Optional[str] = None
    timestamp: Optional[str] = None

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")

    def to_dict(self) -> Dict[str, Any]:
        """Convert report to dictionary for template rendering."""
        return {
            "title": self.title,
            "source": self.source,
            "timestamp": self.timestamp,
            "fields": self.summary["fields"],
            "grouped_fields": group_fields_by_category(self.summary["fields"]),
            "categories": self.summary["categories"],
            "overall": self.summary["overall"],
            "forms_scored": self.summary.get("forms_scored", 0),
            "reconciliation": self.summary["reconciliation"],
            "category_order": CATEGORY_ORDER,
            "category_labels": CATEGORY_LABELS,
        }

    def render_text(self, show_ids: bool = False) -> str:
        """Render the console summary."""
        lines = ["", "FINAL RESULTS:"]
        for row in self.summary["fields"]:
            lines.append(
                f"Field {row['index']} ({row['name']}): {row['correct']}/{row['total']} "
                f"correct ({format_percentage(row['percentage'])})"
            )

        lines.append("")
        for category in CATEGORY_ORDER:
            entry = self.summary["categories"].get(category)
            if entry is None:
                continue
            lines.append(
                f"{CATEGORY_LABELS[category]}: {entry['correct']}/{entry['total']} "
                f"correct ({format_percentage(entry['percentage'])})"
            )
        overall = self.summary["overall"]
        lines.append(
            f"Overall: {overall['correct']}/{overall['total']} "
            f"correct ({format_percentage(overall['percentage'])})"
        )

        reconciliation = self.summary["reconciliation"]
        counts = reconciliation["counts"]
        sections = [
            ("Matching Client IDs", "matching"),
            ("Only in Excel file", "only_expected"),
            ("Not in Excel file", "only_actual"),
        ]
        lines.append("")
        for label, key in sections:
            lines.append(f"{label}: {counts[key]}")
        if show_ids:
            for label, key in sections:
                lines.append("")
                lines.append(f"{label} ({counts[key]}):")
                lines.extend(reconciliation[key])
        return "\n".join(lines)

    def render_html(self, template_dir: Optional[Path] = None) -> str:
        """
        Render the report as HTML.

        Args:
            template_dir: Directory containing Jinja2 templates.
                         Defaults to the templates directory in this package.

        Returns:
            Rendered HTML string
        """
        if template_dir is None:
            template_dir = Path(__file__).parent / "templates"

        env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html", "xml"]),
        )
        env.filters["pct"] = format_percentage

        template = env.get_template("accuracy-report.html.j2")
        return template.render(**self.to_dict())

    def save_html(self, output_path: Path, template_dir: Optional[Path] = None) -> Path:
        """Render and save the HTML report, creating parent directories."""
        html = self.render_html(template_dir)
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(html)
        return output_path

    def save_json(self, output_path: Path) -> Path:
        """Write the summary (plus report metadata) as JSON."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        data = {"title": self.title, "source": self.source, "timestamp": self.timestamp}
        data.update(self.summary)
        output_path.write_text(json.dumps(data, indent=2, default=str))
        return output_path
