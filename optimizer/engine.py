"""Einstiegspunkt: kompletter Optimierungslauf.

Ablauf:
  1. Auslastung der Lehrkräfte und Defizite der Klassen berechnen
  2. Klassenbudgets aufbauen, Ist-Stand auf Konflikte prüfen
  3. Defizite greedy zuteilen
  4. Metriken, Gesamtbewertung und Warnungen zusammenstellen
"""

import logging
from typing import Optional

from analysis.conflict_analyzer import analyze_conflicts
from analysis.quality_report import (
    calculate_efficiency_gain, calculate_optimization_metrics,
    count_resolved_conflicts, evaluate_optimization_result,
)
from config.schema import OptimizationSettings, OptimizerConfig
from models.assignment import Assignment
from models.school_class import SchoolClass
from models.subject import Subject
from models.teacher import Teacher
from optimizer.allocation import allocate_requirements
from optimizer.curriculum import CurriculumTable
from optimizer.requirements import build_class_total_constraints, calculate_class_requirements
from optimizer.types import OptimizationResult
from optimizer.workload import calculate_teacher_workloads

logger = logging.getLogger(__name__)


def run_optimization(
    teachers: list[Teacher],
    classes: list[SchoolClass],
    subjects: list[Subject],
    assignments: list[Assignment],
    settings: Optional[OptimizationSettings] = None,
    curriculum: Optional[CurriculumTable] = None,
    config: Optional[OptimizerConfig] = None,
) -> OptimizationResult:
    """Schlägt neue Zuweisungen vor. Ändert keine Eingabedaten.

    Ohne curriculum gilt die Stundentafel aus der Config bzw. der Standard.
    Jeder Aufruf arbeitet auf eigenem Zwischenstand und ist bei gleichen
    Eingaben deterministisch.
    """
    config = config or OptimizerConfig()
    settings = settings or config.settings
    curriculum = curriculum or CurriculumTable.from_config(config.curriculum)

    workloads = calculate_teacher_workloads(teachers, assignments)
    requirements = calculate_class_requirements(classes, subjects, assignments, curriculum)
    constraints = build_class_total_constraints(classes, assignments)
    conflicts = analyze_conflicts(teachers, classes, subjects, assignments, curriculum)

    logger.info(
        f"Optimierung: {len(teachers)} Lehrkräfte, {len(classes)} Klassen, "
        f"{len(requirements)} offene Defizite, {len(constraints)} Stundenbudgets"
    )

    outcome = allocate_requirements(
        requirements, workloads, constraints, settings, config.ideal_utilization
    )
    recommendations = outcome.recommendations

    metrics = calculate_optimization_metrics(
        workloads_after=outcome.workloads,
        requirements=requirements,
        recommendations=recommendations,
        constraints=constraints,
        balance_spread=config.balance_spread,
        compliance_tolerance=config.compliance_tolerance,
    )
    overall, warnings = evaluate_optimization_result(metrics, recommendations)

    logger.info(
        f"Optimierung beendet: {len(recommendations)} Empfehlungen | "
        f"Bewertung: {overall} | Konflikte im Ist-Stand: {len(conflicts)}"
    )

    return OptimizationResult(
        new_assignments=len(recommendations),
        resolved_conflicts=count_resolved_conflicts(len(conflicts), len(recommendations)),
        efficiency_gain=calculate_efficiency_gain(assignments, recommendations),
        overall_score=overall,
        metrics=metrics,
        warnings=warnings,
        recommended_assignments=recommendations,
        conflicts=conflicts.to_list(),
    )
