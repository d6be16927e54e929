"""Greedy-Zuteilung: ein Durchlauf über die priorisierten Defizite.

Jede Entscheidung bucht Stunden auf die Lehrkraft und das Klassenbudget;
spätere Defizite sehen diesen Stand. Es gibt kein Backtracking, ein
übersprungenes Defizit wird nicht erneut betrachtet.
"""

import logging
from dataclasses import dataclass, field

from config.schema import OptimizationSettings
from optimizer.scoring import find_suitable_teachers, select_best_candidate
from optimizer.types import (
    ClassRequirement, ClassTotalHoursConstraint, RecommendedAssignment, TeacherWorkload,
)

logger = logging.getLogger(__name__)


@dataclass
class AllocationState:
    """Arbeitskopie von Auslastung und Restbudgets für genau einen Lauf."""

    workloads: dict[str, TeacherWorkload]
    remaining_budgets: dict[str, float]
    recommendations: list[RecommendedAssignment] = field(default_factory=list)

    @classmethod
    def seed(
        cls,
        workloads: list[TeacherWorkload],
        constraints: dict[str, ClassTotalHoursConstraint],
    ) -> "AllocationState":
        return cls(
            workloads={w.teacher_id: w.model_copy(deep=True) for w in workloads},
            remaining_budgets={
                class_id: c.remaining_hours for class_id, c in constraints.items()
            },
        )

    def workload_list(self) -> list[TeacherWorkload]:
        return list(self.workloads.values())

    def consume_budget(self, class_id: str, hours: float) -> float:
        """Bucht Stunden vom Klassenbudget ab und gibt den Rest zurück."""
        remaining = self.remaining_budgets[class_id] - hours
        if remaining < 0:
            logger.error(
                f"Klasse {class_id}: Restbudget negativ ({remaining:g}h) – "
                f"Zuteilung hätte vorher begrenzt werden müssen"
            )
            remaining = 0.0
        self.remaining_budgets[class_id] = remaining
        return remaining


@dataclass
class AllocationOutcome:
    """Ergebnis der Zuteilung inklusive Endstand der Arbeitskopien."""

    recommendations: list[RecommendedAssignment]
    workloads: list[TeacherWorkload]
    remaining_budgets: dict[str, float]


def allocate_requirements(
    requirements: list[ClassRequirement],
    workloads: list[TeacherWorkload],
    constraints: dict[str, ClassTotalHoursConstraint],
    settings: OptimizationSettings,
    ideal_utilization: float = 85.0,
) -> AllocationOutcome:
    """Verteilt die Defizite in der gegebenen Reihenfolge auf Lehrkräfte.

    Die übergebenen Workloads und Constraints bleiben unverändert.
    """
    state = AllocationState.seed(workloads, constraints)

    for req in requirements:
        has_budget = req.class_id in state.remaining_budgets
        if has_budget and state.remaining_budgets[req.class_id] <= 0:
            logger.debug(
                f"{req.class_id}/{req.subject_id}: Stundenbudget erschöpft, übersprungen"
            )
            continue

        candidates = find_suitable_teachers(
            req, state.workload_list(), settings, ideal_utilization
        )
        best = select_best_candidate(candidates, req)
        if best is None:
            logger.debug(f"{req.class_id}/{req.subject_id}: keine geeignete Lehrkraft")
            continue

        hours = min(req.deficit, best.available_hours)
        if has_budget:
            hours = min(hours, state.remaining_budgets[req.class_id])
        if hours <= 0:
            continue

        reasoning = list(best.reasoning)
        if has_budget:
            remaining = state.consume_budget(req.class_id, hours)
            reasoning.append(
                f"Klassen-Stundenbudget: {hours:g}h verbraucht, {remaining:g}h verbleibend"
            )

        state.workloads[best.teacher_id].commit(hours)
        state.recommendations.append(RecommendedAssignment(
            teacher_id=best.teacher_id,
            class_id=req.class_id,
            subject_id=req.subject_id,
            hours_per_week=hours,
            confidence=best.score,
            reasoning=reasoning,
        ))
        logger.debug(
            f"{req.class_id}/{req.subject_id}: {hours:g}h an {best.teacher_id} "
            f"(Score {best.score:.1f})"
        )

    return AllocationOutcome(
        recommendations=state.recommendations,
        workloads=state.workload_list(),
        remaining_budgets=dict(state.remaining_budgets),
    )
