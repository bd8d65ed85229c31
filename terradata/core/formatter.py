"""Output formatters for season summaries."""

import json
from dataclasses import asdict

from terradata.core.reporting import SeasonSummary


class MarkdownFormatter:
    """Markdown report for players."""

    def format(self, summary: SeasonSummary) -> str:
        status = "In progress"
        if summary.outcome:
            status = "VICTORY" if summary.outcome.succeeded else "FAILED"

        lines = [
            f"**Season Report: {status}**",
            f"**Crop:** {summary.crop.title()} | **Week:** {summary.week}/{summary.max_weeks}",
            "",
            "**FIELD:**",
            f"- Healthy crops: {summary.crop_health_pct:.0f}%",
            f"- Stressed zones: {summary.stressed_zones}",
            f"- Soil health: {summary.soil_health:.2f}",
            "",
            "**RESOURCES:**",
            f"- Water used: {summary.water_used:g}L ({summary.water_efficiency_pct:.0f}% remaining)",
            f"- Fertilizer used: {summary.fertilizer_used:g}kg",
            f"- Sustainability: {summary.sustainability_score:.0f}",
            "",
            "**YIELD:**",
            f"- Projected: {summary.yield_projection.current_projection:,.0f} "
            f"of {summary.yield_projection.potential_max:,.0f} "
            f"({summary.yield_projection.efficiency_rating:.0%})",
            "",
        ]

        if summary.extreme_events:
            lines.append("**EXTREME WEATHER:**")
            lines.extend(f"- {e}" for e in summary.extreme_events)
            lines.append("")

        if summary.outcome and summary.outcome.failures:
            lines.append("**FAILED CONDITIONS:**")
            lines.extend(f"- {f.value.replace('_', ' ')}" for f in summary.outcome.failures)
            lines.append("")

        if summary.recommendations:
            lines.append("**RECOMMENDATIONS:**")
            for i, rec in enumerate(summary.recommendations, 1):
                lines.append(f"{i}. {rec}")

        return "\n".join(lines).rstrip()


class JSONFormatter:
    """JSON with full details."""

    def format(self, summary: SeasonSummary) -> dict:
        data = asdict(summary)
        data["outcome"] = summary.outcome.to_dict() if summary.outcome else None
        return data

    def to_json(self, summary: SeasonSummary) -> str:
        return json.dumps(self.format(summary), indent=2, default=str)


def format_summary(summary: SeasonSummary, style: str = "markdown") -> str:
    if style == "json":
        return JSONFormatter().to_json(summary)
    return MarkdownFormatter().format(summary)
