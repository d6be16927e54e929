"""Textbericht für ein OptimizationResult (reine Formatierung)."""

from datetime import date
from typing import Optional

from optimizer.types import OptimizationResult


def generate_optimization_report(
    result: OptimizationResult, report_date: Optional[date] = None
) -> str:
    """Rendert das Ergebnis als Klartext-Bericht."""
    report_date = report_date or date.today()
    lines: list[str] = []

    lines.append("=== OPTIMIERUNGSBERICHT ===")
    lines.append(f"Datum: {report_date.strftime('%d.%m.%Y')}")
    lines.append("")

    lines.append("ZUSAMMENFASSUNG:")
    lines.append(f"- Neue Zuweisungen: {result.new_assignments}")
    lines.append(f"- Gelöste Konflikte: {result.resolved_conflicts}")
    lines.append(f"- Effizienzsteigerung: {result.efficiency_gain:.1f}%")
    lines.append(f"- Gesamtbewertung: {result.overall_score}")
    lines.append("")

    lines.append("METRIKEN:")
    for metric in result.metrics:
        lines.append(f"- {metric.name}: {metric.score:.1f}%")
        lines.append(f"  {metric.description}")
    lines.append("")

    if result.warnings:
        lines.append("WARNUNGEN:")
        for warning in result.warnings:
            lines.append(f"- {warning}")
        lines.append("")

    if result.conflicts:
        lines.append("KONFLIKTE:")
        for conflict in result.conflicts:
            lines.append(f"- [{conflict.severity}] {conflict.description}")
        lines.append("")

    lines.append("EMPFOHLENE ZUWEISUNGEN:")
    for index, rec in enumerate(result.recommended_assignments, 1):
        lines.append(f"{index}. Lehrer: {rec.teacher_id}")
        lines.append(f"   Klasse: {rec.class_id}")
        lines.append(f"   Fach: {rec.subject_id}")
        lines.append(f"   Stunden: {rec.hours_per_week:g}")
        lines.append(f"   Vertrauen: {rec.confidence:.1f}%")
        lines.append(f"   Begründung: {', '.join(rec.reasoning)}")
        lines.append("")

    return "\n".join(lines)
