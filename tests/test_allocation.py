"""Tests für Kandidatenbewertung, Greedy-Zuteilung und den Gesamtlauf."""

import logging

import pytest
from pydantic import ValidationError

from config.schema import OptimizationSettings, OptimizerConfig
from models.assignment import Assignment
from models.school_class import SchoolClass
from models.subject import Subject
from models.teacher import Teacher
from optimizer.allocation import AllocationState, allocate_requirements
from optimizer.curriculum import CurriculumTable
from optimizer.engine import run_optimization
from optimizer.requirements import build_class_total_constraints
from optimizer.scoring import find_suitable_teachers, select_best_candidate
from optimizer.types import ClassRequirement, TeacherCandidate, TeacherWorkload
from optimizer.workload import calculate_teacher_workloads

DEUTSCH = Subject(id="D", name="Deutsch", short_name="D")
MATHE = Subject(id="M", name="Mathematik", short_name="M")
SPORT = Subject(id="SP", name="Sport", short_name="SP")


def _make_teacher(tid: str, max_hours: float = 25.0, quals=None) -> Teacher:
    return Teacher(
        id=tid, first_name="Vor", last_name=tid,
        qualifications=quals if quals is not None else ["Deutsch"],
        max_hours=max_hours,
    )


def _make_workload(tid: str, current: float, max_hours: float, quals=None) -> TeacherWorkload:
    return TeacherWorkload(
        teacher_id=tid,
        current_hours=current,
        max_hours=max_hours,
        utilization=current / max_hours * 100 if max_hours else 0.0,
        qualifications=quals if quals is not None else ["Deutsch"],
    )


def _make_requirement(cls: str, subject: str, required: float,
                      current: float = 0.0, priority: float = 100.0) -> ClassRequirement:
    return ClassRequirement(
        class_id=cls, subject_id=subject, required_hours=required,
        current_hours=current, priority=priority,
    )


# ─── KANDIDATEN ───────────────────────────────────────────────────────────────

class TestCandidateScoring:
    def test_score_components(self):
        """100 Qualifikation + 0.5·(100−85) Balance + 50 Stunden-Deckel."""
        candidates = find_suitable_teachers(
            _make_requirement("5a", "D", 4), [_make_workload("T1", 0, 25)],
            OptimizationSettings(),
        )
        assert len(candidates) == 1
        assert candidates[0].score == pytest.approx(157.5)
        assert candidates[0].available_hours == 25

    def test_unqualified_excluded_when_prioritized(self):
        workloads = [_make_workload("T1", 0, 25, quals=[])]
        settings = OptimizationSettings(prioritize_qualifications=True)
        assert find_suitable_teachers(_make_requirement("5a", "D", 4), workloads, settings) == []

    def test_unqualified_scored_low_otherwise(self):
        workloads = [_make_workload("T1", 0, 25, quals=[])]
        settings = OptimizationSettings(prioritize_qualifications=False, balance_workload=False)
        candidates = find_suitable_teachers(_make_requirement("5a", "D", 4), workloads, settings)
        assert candidates[0].score == pytest.approx(70.0)
        assert "Keine direkte Qualifikation" in candidates[0].reasoning

    def test_any_qualification_counts(self):
        """Die Kandidatensuche prüft nur, ob überhaupt eine Qualifikation existiert."""
        workloads = [_make_workload("T1", 0, 25, quals=["Sport"])]
        candidates = find_suitable_teachers(
            _make_requirement("5a", "D", 4), workloads, OptimizationSettings()
        )
        assert candidates[0].reasoning[0] == "Hat Qualifikation für das Fach"

    def test_full_teacher_excluded_when_respecting_max(self):
        workloads = [_make_workload("T1", 25, 25)]
        assert find_suitable_teachers(
            _make_requirement("5a", "D", 4), workloads, OptimizationSettings()
        ) == []

    def test_full_teacher_kept_without_respect_max(self):
        workloads = [_make_workload("T1", 25, 25)]
        settings = OptimizationSettings(respect_max_hours=False)
        candidates = find_suitable_teachers(_make_requirement("5a", "D", 4), workloads, settings)
        assert len(candidates) == 1
        assert candidates[0].available_hours == 0

    def test_balance_prefers_ideal_utilization(self):
        workloads = [
            _make_workload("LOW", 0, 100),
            _make_workload("IDEAL", 85, 100),
        ]
        settings = OptimizationSettings()
        candidates = find_suitable_teachers(_make_requirement("5a", "D", 4), workloads, settings)
        assert candidates[0].teacher_id == "IDEAL"

    def test_sorted_descending(self):
        workloads = [_make_workload("A", 24, 25), _make_workload("B", 10, 25)]
        candidates = find_suitable_teachers(
            _make_requirement("5a", "D", 4), workloads, OptimizationSettings()
        )
        scores = [c.score for c in candidates]
        assert scores == sorted(scores, reverse=True)

    def test_select_best_bonus_for_full_coverage(self):
        req = _make_requirement("5a", "D", 4)
        candidates = [
            TeacherCandidate(teacher_id="PART", score=110, available_hours=2, reasoning=[]),
            TeacherCandidate(teacher_id="FULL", score=100, available_hours=4, reasoning=[]),
        ]
        best = select_best_candidate(candidates, req)
        assert best.teacher_id == "FULL"
        assert best.score == 120
        assert "Kann alle benötigten Stunden übernehmen" in best.reasoning
        # Eingaben bleiben unverändert
        assert candidates[1].score == 100
        assert candidates[1].reasoning == []

    def test_select_best_empty(self):
        assert select_best_candidate([], _make_requirement("5a", "D", 4)) is None


# ─── ZUTEILUNG ────────────────────────────────────────────────────────────────

class TestAllocateRequirements:
    def test_teacher_never_exceeds_max(self):
        workloads = [_make_workload("T1", 0, 5)]
        reqs = [_make_requirement("5a", "D", 4), _make_requirement("5b", "D", 4)]
        outcome = allocate_requirements(reqs, workloads, {}, OptimizationSettings())
        assert [r.hours_per_week for r in outcome.recommendations] == [4, 1]
        assert outcome.workloads[0].current_hours == 5

    def test_full_teacher_never_gets_hours_even_without_respect_max(self):
        workloads = [_make_workload("T1", 25, 25)]
        settings = OptimizationSettings(respect_max_hours=False)
        outcome = allocate_requirements([_make_requirement("5a", "D", 4)], workloads, {}, settings)
        assert outcome.recommendations == []

    def test_exhausted_budget_skips_class(self):
        classes = [SchoolClass(id="5a", grade=5, target_hours_total=10)]
        assignments = [Assignment(id="A1", teacher_id="X", class_id="5a",
                                  subject_id="M", hours_per_week=10)]
        constraints = build_class_total_constraints(classes, assignments)
        outcome = allocate_requirements(
            [_make_requirement("5a", "D", 4)], [_make_workload("T1", 0, 25)],
            constraints, OptimizationSettings(),
        )
        assert outcome.recommendations == []
        assert outcome.workloads[0].current_hours == 0

    def test_hours_clamped_to_class_budget(self):
        classes = [SchoolClass(id="5a", grade=5, target_hours_total=6)]
        constraints = build_class_total_constraints(classes, [])
        reqs = [_make_requirement("5a", "D", 4), _make_requirement("5a", "M", 4)]
        workloads = [_make_workload("T1", 0, 25, quals=["Deutsch", "Mathematik"])]
        outcome = allocate_requirements(reqs, workloads, constraints, OptimizationSettings())
        assert [r.hours_per_week for r in outcome.recommendations] == [4, 2]
        assert outcome.remaining_budgets["5a"] == 0
        assert any("Klassen-Stundenbudget" in s for s in outcome.recommendations[1].reasoning)

    def test_inputs_not_mutated(self):
        workloads = [_make_workload("T1", 0, 25)]
        classes = [SchoolClass(id="5a", grade=5, target_hours_total=6)]
        constraints = build_class_total_constraints(classes, [])
        allocate_requirements([_make_requirement("5a", "D", 4)], workloads,
                              constraints, OptimizationSettings())
        assert workloads[0].current_hours == 0
        assert constraints["5a"].remaining_hours == 6

    def test_later_requirements_see_committed_hours(self):
        """Nach der ersten Buchung liegt T1 näher an 85% und gewinnt erneut."""
        workloads = [_make_workload("T1", 0, 10), _make_workload("T2", 0, 10)]
        reqs = [_make_requirement("5a", "D", 4), _make_requirement("5b", "D", 4)]
        outcome = allocate_requirements(reqs, workloads, {}, OptimizationSettings())
        assert [r.teacher_id for r in outcome.recommendations] == ["T1", "T1"]
        by_id = {w.teacher_id: w for w in outcome.workloads}
        assert by_id["T1"].current_hours == 8
        assert by_id["T1"].utilization == pytest.approx(80.0)
        assert by_id["T2"].current_hours == 0

    def test_no_candidates_no_recommendation(self):
        outcome = allocate_requirements(
            [_make_requirement("5a", "D", 4)], [], {}, OptimizationSettings()
        )
        assert outcome.recommendations == []

    def test_negative_budget_is_logged_and_clamped(self, caplog):
        state = AllocationState(workloads={}, remaining_budgets={"5a": 2.0})
        with caplog.at_level(logging.ERROR, logger="optimizer.allocation"):
            remaining = state.consume_budget("5a", 3)
        assert remaining == 0.0
        assert state.remaining_budgets["5a"] == 0.0
        assert any(r.levelno == logging.ERROR and "5a" in r.getMessage()
                   for r in caplog.records)

    def test_budget_consumed_without_error(self, caplog):
        state = AllocationState(workloads={}, remaining_budgets={"5a": 6.0})
        with caplog.at_level(logging.ERROR, logger="optimizer.allocation"):
            assert state.consume_budget("5a", 4) == 2.0
        assert not caplog.records


# ─── GESAMTLAUF ───────────────────────────────────────────────────────────────

class TestRunOptimization:
    def test_single_teacher_single_gap(self):
        """Eine Lehrkraft, eine Klasse, 4h Deutsch offen."""
        result = run_optimization(
            [_make_teacher("T", quals=["Deutsch"])],
            [SchoolClass(id="C", grade=5)],
            [DEUTSCH],
            [],
            settings=OptimizationSettings(),
            curriculum=CurriculumTable({5: {"Deutsch": 4}}),
        )
        assert result.new_assignments == 1
        rec = result.recommended_assignments[0]
        assert (rec.teacher_id, rec.class_id, rec.subject_id) == ("T", "C", "D")
        assert rec.hours_per_week == 4
        assert rec.confidence > 0
        assert result.get_metric("Stundenabdeckung").score == 100
        # 4h empfohlen, danach 21h frei
        assert result.get_metric("Ressourceneffizienz").score == pytest.approx(4 / 21 * 100)

    def test_full_class_gets_nothing(self):
        """Klasse hat ihr Budget von 10h bereits ausgeschöpft."""
        assignments = [Assignment(id="A1", teacher_id="X", class_id="C",
                                  subject_id="M", hours_per_week=10)]
        result = run_optimization(
            [_make_teacher("T"), _make_teacher("X", quals=["Mathematik"])],
            [SchoolClass(id="C", grade=5, target_hours_total=10)],
            [DEUTSCH, MATHE],
            assignments,
            curriculum=CurriculumTable({5: {"Deutsch": 4, "Mathematik": 4}}),
        )
        assert result.recommendations_for_class("C") == []
        assert result.new_assignments == 0
        assert result.resolved_conflicts == 0
        assert any("Keine neuen Zuweisungen" in w for w in result.warnings)

    def test_class_budget_is_hard_ceiling(self):
        result = run_optimization(
            [_make_teacher("T", quals=["Deutsch", "Mathematik", "Sport"])],
            [SchoolClass(id="C", grade=5, target_hours_total=6)],
            [DEUTSCH, MATHE, SPORT],
            [],
            curriculum=CurriculumTable({5: {"Deutsch": 4, "Mathematik": 4, "Sport": 3}}),
        )
        assert sum(r.hours_per_week for r in result.recommended_assignments) == 6

    def test_core_subjects_served_first(self):
        """Nur 4h frei: Deutsch (Hauptfach) geht vor Sport."""
        result = run_optimization(
            [_make_teacher("T", max_hours=4, quals=["Deutsch", "Sport"])],
            [SchoolClass(id="C", grade=5)],
            [SPORT, DEUTSCH],
            [],
            curriculum=CurriculumTable({5: {"Deutsch": 4, "Sport": 3}}),
        )
        assert [r.subject_id for r in result.recommended_assignments] == ["D"]

    def test_team_teaching_not_double_counted(self):
        assignments = [
            Assignment(id="A1", teacher_id="T1", class_id="C", subject_id="D", hours_per_week=2),
            Assignment(id="A2", teacher_id="T2", class_id="C", subject_id="D", hours_per_week=2),
        ]
        result = run_optimization(
            [_make_teacher("T1"), _make_teacher("T2"), _make_teacher("T3")],
            [SchoolClass(id="C", grade=5)],
            [DEUTSCH],
            assignments,
            curriculum=CurriculumTable({5: {"Deutsch": 4}}),
        )
        assert sum(r.hours_per_week for r in result.recommended_assignments) == 2

    def test_is_deterministic(self):
        kwargs = dict(
            teachers=[_make_teacher("T1", max_hours=6), _make_teacher("T2", max_hours=6)],
            classes=[SchoolClass(id="5a", grade=5), SchoolClass(id="5b", grade=5)],
            subjects=[DEUTSCH],
            assignments=[],
            curriculum=CurriculumTable({5: {"Deutsch": 4}}),
        )
        assert run_optimization(**kwargs) == run_optimization(**kwargs)

    def test_result_is_frozen(self):
        result = run_optimization([], [], [], [])
        with pytest.raises(ValidationError):
            result.new_assignments = 5

    def test_empty_input(self):
        result = run_optimization([], [], [], [])
        assert result.new_assignments == 0
        assert result.efficiency_gain == 0
        assert result.conflicts == []

    def test_config_curriculum_used_without_explicit_table(self):
        config = OptimizerConfig(curriculum={5: {"Deutsch": 2}})
        result = run_optimization(
            [_make_teacher("T")], [SchoolClass(id="C", grade=5)], [DEUTSCH], [],
            config=config,
        )
        assert result.recommended_assignments[0].hours_per_week == 2

    def test_existing_conflicts_reported(self):
        assignments = [Assignment(id="A1", teacher_id="T", class_id="C",
                                  subject_id="M", hours_per_week=2)]
        result = run_optimization(
            [_make_teacher("T", quals=["Deutsch"])],
            [SchoolClass(id="C", grade=5)],
            [DEUTSCH, MATHE],
            assignments,
            curriculum=CurriculumTable({5: {"Deutsch": 4, "Mathematik": 2}}),
        )
        assert any(c.type == "qualification" for c in result.conflicts)
        assert result.resolved_conflicts == 1

    def test_inputs_unchanged(self):
        teachers = [_make_teacher("T")]
        before = [t.model_copy(deep=True) for t in teachers]
        run_optimization(teachers, [SchoolClass(id="C", grade=5)], [DEUTSCH], [],
                         curriculum=CurriculumTable({5: {"Deutsch": 4}}))
        assert teachers == before
        assert calculate_teacher_workloads(teachers, [])[0].current_hours == 0
