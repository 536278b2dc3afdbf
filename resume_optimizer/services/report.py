from __future__ import annotations

import csv
import io
import json
from collections import Counter
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from resume_optimizer.schemas.optimization import SessionState

REPORT_FORMATS = ("json", "markdown", "csv")
MEDIA_TYPES = {
    "json": "application/json",
    "markdown": "text/markdown",
    "csv": "text/csv",
}


class OptimizationReport(BaseModel):
    initial_score: int
    final_score: int
    potential_score: int
    improvement: int
    applied_suggestion_count: int
    applied_keyword_count: int
    suggestion_types: dict[str, int] = Field(default_factory=dict)
    applied_keywords: list[str] = Field(default_factory=list)
    section_scores: dict[str, int] = Field(default_factory=dict)
    generated_at: str


def build_report(state: SessionState) -> OptimizationReport:
    applied_suggestions = [item for item in state.suggestions if item.is_applied]
    applied_keywords = [item.text for item in state.keywords if item.is_applied]
    breakdown = state.breakdown
    return OptimizationReport(
        initial_score=breakdown.base,
        final_score=breakdown.total,
        potential_score=breakdown.potential,
        improvement=breakdown.total - breakdown.base,
        applied_suggestion_count=len(applied_suggestions),
        applied_keyword_count=len(applied_keywords),
        suggestion_types=dict(Counter(item.type for item in applied_suggestions).most_common()),
        applied_keywords=applied_keywords,
        section_scores=dict(breakdown.section_scores),
        generated_at=datetime.now(timezone.utc).isoformat(),
    )


def to_json(report: OptimizationReport) -> str:
    return json.dumps(report.model_dump(), ensure_ascii=False, indent=2)


def to_csv(report: OptimizationReport) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["metric", "value"])
    writer.writerow(["initial_score", report.initial_score])
    writer.writerow(["final_score", report.final_score])
    writer.writerow(["potential_score", report.potential_score])
    writer.writerow(["improvement", report.improvement])
    writer.writerow(["applied_suggestions", report.applied_suggestion_count])
    writer.writerow(["applied_keywords", report.applied_keyword_count])
    for suggestion_type, count in report.suggestion_types.items():
        writer.writerow([f"suggestion_type:{suggestion_type}", count])
    for section_id, score in report.section_scores.items():
        writer.writerow([f"section:{section_id}", score])
    if report.applied_keywords:
        writer.writerow(["keywords", "; ".join(report.applied_keywords)])
    return buffer.getvalue()


def to_markdown(report: OptimizationReport) -> str:
    sign = "+" if report.improvement >= 0 else ""
    lines = [
        "# Resume Optimization Report",
        "",
        "## Overall Results",
        "",
        f"- **Initial Score**: {report.initial_score}",
        f"- **Final Score**: {report.final_score}",
        f"- **Potential Score**: {report.potential_score}",
        f"- **Improvement**: {sign}{report.improvement} points",
        f"- **Applied Suggestions**: {report.applied_suggestion_count}",
        f"- **Applied Keywords**: {report.applied_keyword_count}",
    ]
    if report.suggestion_types:
        lines += ["", "## Applied Suggestion Types", ""]
        lines += [f"- **{name}**: {count}" for name, count in report.suggestion_types.items()]
    if report.applied_keywords:
        lines += ["", "## Applied Keywords", ""]
        lines += [f"- {keyword}" for keyword in report.applied_keywords]
    if report.section_scores:
        lines += ["", "## Section Scores", "", "| Section | Score |", "| --- | --- |"]
        lines += [f"| {section_id} | {score} |" for section_id, score in report.section_scores.items()]
    return "\n".join(lines) + "\n"


def render_report(state: SessionState, fmt: str = "json") -> str:
    report = build_report(state)
    if fmt == "markdown":
        return to_markdown(report)
    if fmt == "csv":
        return to_csv(report)
    if fmt == "json":
        return to_json(report)
    raise ValueError(f"Unsupported report format '{fmt}'")
