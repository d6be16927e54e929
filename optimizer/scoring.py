"""Kandidatenbewertung: welche Lehrkraft passt zu einem Defizit?"""

from typing import Optional

from config.schema import OptimizationSettings
from optimizer.types import ClassRequirement, TeacherCandidate, TeacherWorkload

QUALIFIED_POINTS = 100.0
UNQUALIFIED_POINTS = 20.0
BALANCE_WEIGHT = 0.5
HOURS_POINTS_PER_HOUR = 10.0
HOURS_POINTS_CAP = 50.0
FULL_COVERAGE_BONUS = 20.0


def find_suitable_teachers(
    requirement: ClassRequirement,
    workloads: list[TeacherWorkload],
    settings: OptimizationSettings,
    ideal_utilization: float = 85.0,
) -> list[TeacherCandidate]:
    """Bewertet alle Lehrkräfte für ein Defizit, beste zuerst.

    Die Qualifikationsprüfung ist hier grob: gezählt wird, ob überhaupt eine
    Qualifikation erfasst ist, nicht ob sie zum Fach passt. Der Fachabgleich
    findet in der Konfliktanalyse statt.
    """
    candidates: list[TeacherCandidate] = []

    for workload in workloads:
        available = workload.available_hours
        if available <= 0 and settings.respect_max_hours:
            continue

        has_qualification = len(workload.qualifications) > 0
        if not has_qualification and settings.prioritize_qualifications:
            continue

        reasoning: list[str] = []
        if has_qualification:
            score = QUALIFIED_POINTS
            reasoning.append("Hat Qualifikation für das Fach")
        else:
            score = UNQUALIFIED_POINTS
            reasoning.append("Keine direkte Qualifikation")

        if settings.balance_workload:
            score += BALANCE_WEIGHT * (100 - abs(workload.utilization - ideal_utilization))
            reasoning.append(f"Aktuelle Auslastung: {workload.utilization:.1f}%")

        score += min(available * HOURS_POINTS_PER_HOUR, HOURS_POINTS_CAP)
        reasoning.append(f"Verfügbare Stunden: {available:g}")

        candidates.append(TeacherCandidate(
            teacher_id=workload.teacher_id,
            score=score,
            available_hours=available,
            reasoning=reasoning,
        ))

    candidates.sort(key=lambda c: c.score, reverse=True)
    return candidates


def select_best_candidate(
    candidates: list[TeacherCandidate], requirement: ClassRequirement
) -> Optional[TeacherCandidate]:
    """Bonus für Kandidaten, die das ganze Defizit abdecken; bester gewinnt."""
    if not candidates:
        return None

    needed = requirement.deficit
    adjusted: list[TeacherCandidate] = []
    for candidate in candidates:
        if candidate.available_hours >= needed:
            adjusted.append(candidate.model_copy(update={
                "score": candidate.score + FULL_COVERAGE_BONUS,
                "reasoning": candidate.reasoning + ["Kann alle benötigten Stunden übernehmen"],
            }))
        else:
            adjusted.append(candidate)

    adjusted.sort(key=lambda c: c.score, reverse=True)
    return adjusted[0]
