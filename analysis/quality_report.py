"""Qualitätskennzahlen eines Optimierungslaufs.

Berechnet die Metriken (je 0–100, höher = besser), die Gesamtbewertung und
die Warnhinweise.
"""

import math
from typing import Optional

from models.assignment import Assignment
from optimizer.types import (
    ClassRequirement, ClassTotalHoursConstraint, OptimizationMetric, OverallScore,
    RecommendedAssignment, TeacherWorkload,
)

METRIC_QUALIFICATION = "Qualifikationsabgleich"
METRIC_WORKLOAD_BALANCE = "Arbeitsbelastungsverteilung"
METRIC_COVERAGE = "Stundenabdeckung"
METRIC_EFFICIENCY = "Ressourceneffizienz"
METRIC_TOTAL_HOURS = "Stundenbudget-Einhaltung"


# ─── Einzelmetriken ───────────────────────────────────────────────────────────

def qualification_score(
    recommendations: list[RecommendedAssignment], workloads: list[TeacherWorkload]
) -> float:
    """Anteil der Empfehlungen an Lehrkräfte mit erfasster Qualifikation."""
    if not recommendations:
        return 100.0
    qualified_ids = {w.teacher_id for w in workloads if w.qualifications}
    qualified = sum(1 for r in recommendations if r.teacher_id in qualified_ids)
    return qualified / len(recommendations) * 100


def workload_balance_score(workloads: list[TeacherWorkload], spread: float = 30.0) -> float:
    """100 − Standardabweichung der Auslastung relativ zur akzeptierten Streuung."""
    if not workloads:
        return 100.0
    utilizations = [w.utilization for w in workloads]
    mean = sum(utilizations) / len(utilizations)
    variance = sum((u - mean) ** 2 for u in utilizations) / len(utilizations)
    std_dev = math.sqrt(variance)
    return 100 - min(100.0, std_dev / spread * 100)


def coverage_score(
    requirements: list[ClassRequirement], recommendations: list[RecommendedAssignment]
) -> float:
    """Zugewiesene Defizitstunden / offene Defizitstunden."""
    total_required = sum(r.deficit for r in requirements)
    if total_required <= 0:
        return 100.0
    wanted = {(r.class_id, r.subject_id) for r in requirements}
    total_assigned = sum(
        r.hours_per_week for r in recommendations
        if (r.class_id, r.subject_id) in wanted
    )
    return min(100.0, total_assigned / total_required * 100)


def efficiency_score(
    workloads_after: list[TeacherWorkload], recommendations: list[RecommendedAssignment]
) -> float:
    """Empfohlene Stunden / verbleibende freie Stunden nach der Zuteilung.

    Überbuchte Lehrkräfte verringern die freie Summe (keine Untergrenze 0).
    """
    total_available = sum(w.available_hours for w in workloads_after)
    if total_available <= 0:
        return 100.0
    total_recommended = sum(r.hours_per_week for r in recommendations)
    return min(100.0, total_recommended / total_available * 100)


def total_hours_compliance_score(
    constraints: dict[str, ClassTotalHoursConstraint],
    recommendations: list[RecommendedAssignment],
    tolerance: float = 0.5,
) -> float:
    """Anteil der Klassen mit Budget, deren Endstand ±tolerance am Budget liegt."""
    if not constraints:
        return 100.0
    compliant = 0
    for class_id, c in constraints.items():
        projected = c.current_total + sum(
            r.hours_per_week for r in recommendations if r.class_id == class_id
        )
        if abs(projected - c.target_total) <= tolerance:
            compliant += 1
    return compliant / len(constraints) * 100


# ─── Zusammenstellung ─────────────────────────────────────────────────────────

def calculate_optimization_metrics(
    workloads_after: list[TeacherWorkload],
    requirements: list[ClassRequirement],
    recommendations: list[RecommendedAssignment],
    constraints: Optional[dict[str, ClassTotalHoursConstraint]] = None,
    balance_spread: float = 30.0,
    compliance_tolerance: float = 0.5,
) -> list[OptimizationMetric]:
    """Alle Metriken des Laufs; die Budget-Metrik nur wenn Budgets existieren."""
    metrics = [
        OptimizationMetric(
            name=METRIC_QUALIFICATION,
            score=qualification_score(recommendations, workloads_after),
            description="Prozentsatz der Zuweisungen mit passender Lehrerqualifikation",
        ),
        OptimizationMetric(
            name=METRIC_WORKLOAD_BALANCE,
            score=workload_balance_score(workloads_after, balance_spread),
            description="Gleichmäßigkeit der Arbeitsbelastung zwischen Lehrkräften",
        ),
        OptimizationMetric(
            name=METRIC_COVERAGE,
            score=coverage_score(requirements, recommendations),
            description="Prozentsatz der erforderlichen Stunden, die zugewiesen wurden",
        ),
        OptimizationMetric(
            name=METRIC_EFFICIENCY,
            score=efficiency_score(workloads_after, recommendations),
            description="Optimale Nutzung der verfügbaren Lehrerstunden",
        ),
    ]
    if constraints:
        metrics.append(OptimizationMetric(
            name=METRIC_TOTAL_HOURS,
            score=total_hours_compliance_score(constraints, recommendations, compliance_tolerance),
            description="Prozentsatz der Klassen, die ihr Stundenbudget genau erreichen",
        ))
    return metrics


def overall_grade(metrics: list[OptimizationMetric]) -> OverallScore:
    """Gesamtbewertung aus dem ungewichteten Mittel aller Metriken."""
    if not metrics:
        return "optimal"
    avg = sum(m.score for m in metrics) / len(metrics)
    if avg >= 95:
        return "optimal"
    if avg >= 85:
        return "good"
    if avg >= 70:
        return "warning"
    return "poor"


_WARNING_RULES: list[tuple[str, float, str]] = [
    (METRIC_QUALIFICATION, 80,
     "Einige Zuweisungen erfolgen an Lehrkräfte ohne passende Qualifikation"),
    (METRIC_WORKLOAD_BALANCE, 70,
     "Ungleichmäßige Verteilung der Arbeitsbelastung erkannt"),
    (METRIC_COVERAGE, 90,
     "Nicht alle erforderlichen Stunden konnten zugewiesen werden"),
    (METRIC_TOTAL_HOURS, 100,
     "Nicht alle Klassen erreichen ihr Stundenbudget"),
]


def evaluate_optimization_result(
    metrics: list[OptimizationMetric], recommendations: list[RecommendedAssignment]
) -> tuple[OverallScore, list[str]]:
    """Gesamtbewertung und Warnhinweise (reiner Text, keine Fehler)."""
    by_name = {m.name: m for m in metrics}
    warnings = [
        text for name, threshold, text in _WARNING_RULES
        if name in by_name and by_name[name].score < threshold
    ]
    if not recommendations:
        warnings.append("Keine neuen Zuweisungen möglich mit den aktuellen Einstellungen")
    return overall_grade(metrics), warnings


def calculate_efficiency_gain(
    assignments: list[Assignment], recommendations: list[RecommendedAssignment]
) -> float:
    """Anteil der neuen Stunden am Gesamtvolumen nach Übernahme (max. 100)."""
    new_hours = sum(r.hours_per_week for r in recommendations)
    current_hours = sum(a.hours_per_week for a in assignments)
    if current_hours == 0:
        return 100.0 if new_hours > 0 else 0.0
    return min(new_hours / (current_hours + new_hours) * 100, 100.0)


def count_resolved_conflicts(num_conflicts: int, num_recommendations: int) -> int:
    """Grobe Schätzung: jede Empfehlung löst höchstens einen Befund."""
    remaining = max(0, num_conflicts - num_recommendations)
    return max(0, num_conflicts - remaining)
