"""Abgeleitete Datentypen eines Optimierungslaufs.

Alle Typen leben nur für die Dauer eines Laufs. TeacherWorkload und
ClassTotalHoursConstraint werden während der Zuteilung fortgeschrieben,
OptimizationResult ist nach dem Aufbau unveränderlich.
"""

from typing import Iterator, Literal, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict

ConflictType = Literal["qualification", "workload", "schedule", "preference", "total_hours"]
Severity = Literal["low", "medium", "high", "critical"]
OverallScore = Literal["optimal", "good", "warning", "poor"]
EntityKind = Literal["assignment", "teacher", "class"]

SEVERITY_ORDER: dict[str, int] = {"critical": 0, "high": 1, "medium": 2, "low": 3}


# ─── Arbeitsstand ─────────────────────────────────────────────────────────────

class TeacherWorkload(BaseModel):
    """Ist-Auslastung einer Lehrkraft."""

    teacher_id: str
    current_hours: float
    max_hours: float
    utilization: float          # current / max · 100, 0 bei max = 0
    qualifications: list[str]

    @property
    def available_hours(self) -> float:
        return self.max_hours - self.current_hours

    def commit(self, hours: float) -> None:
        """Bucht zusätzliche Stunden und rechnet die Auslastung neu."""
        self.current_hours += hours
        self.utilization = utilization_percent(self.current_hours, self.max_hours)


class ClassRequirement(BaseModel):
    """Offenes Stundendefizit einer Klasse in einem Fach."""

    class_id: str
    subject_id: str
    required_hours: float
    current_hours: float
    priority: float

    @property
    def deficit(self) -> float:
        return self.required_hours - self.current_hours


class ClassTotalHoursConstraint(BaseModel):
    """Hartes Wochenstunden-Budget einer Klasse."""

    class_id: str
    target_total: float
    current_total: float
    remaining_hours: float
    is_hard_constraint: bool = True


# ─── Konflikte ────────────────────────────────────────────────────────────────

class ConflictKey(NamedTuple):
    """Eindeutiger Schlüssel eines Befunds: (Entitätsart, ID, Befundart)."""

    entity_kind: EntityKind
    entity_id: str
    conflict_kind: str


class Conflict(BaseModel):
    """Ein einzelner Befund der Konfliktanalyse."""

    type: ConflictType
    severity: Severity
    description: str
    entity_kind: EntityKind
    entity_id: str
    conflict_kind: str


class ConflictMatrix:
    """Menge von Befunden, dedupliziert über ConflictKey.

    Der erste Befund pro Schlüssel bleibt erhalten, spätere werden ignoriert.
    """

    def __init__(self) -> None:
        self._entries: dict[ConflictKey, Conflict] = {}

    def add(
        self,
        key: ConflictKey,
        conflict_type: ConflictType,
        severity: Severity,
        description: str,
    ) -> bool:
        """Fügt einen Befund hinzu. Gibt False zurück wenn der Schlüssel existiert."""
        if key in self._entries:
            return False
        self._entries[key] = Conflict(
            type=conflict_type,
            severity=severity,
            description=description,
            entity_kind=key.entity_kind,
            entity_id=key.entity_id,
            conflict_kind=key.conflict_kind,
        )
        return True

    def get(self, key: ConflictKey) -> Optional[Conflict]:
        return self._entries.get(key)

    def by_type(self, conflict_type: ConflictType) -> list[Conflict]:
        return [c for c in self._entries.values() if c.type == conflict_type]

    def by_severity(self, severity: Severity) -> list[Conflict]:
        return [c for c in self._entries.values() if c.severity == severity]

    def to_list(self) -> list[Conflict]:
        """Alle Befunde, nach Schweregrad sortiert (kritisch zuerst)."""
        return sorted(self._entries.values(), key=lambda c: SEVERITY_ORDER[c.severity])

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[ConflictKey]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ConflictMatrix({len(self._entries)} Befunde)"

    def print_rich(self) -> None:
        """Gibt alle Befunde als Tabelle über Rich aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        if not self._entries:
            console.print("[dim]Keine Konflikte gefunden.[/dim]")
            return

        colors = {"critical": "red", "high": "yellow", "medium": "cyan", "low": "dim"}
        table = Table(title="Konfliktanalyse", box=box.ROUNDED, show_lines=False)
        table.add_column("Schwere", width=10)
        table.add_column("Typ", width=13)
        table.add_column("Entität", width=14)
        table.add_column("Beschreibung")
        for c in self.to_list():
            color = colors[c.severity]
            table.add_row(
                f"[{color}]{c.severity.upper()}[/{color}]",
                c.type,
                f"{c.entity_kind}:{c.entity_id}",
                c.description,
            )
        console.print(table)


class ConflictCheckResult(BaseModel):
    """Ergebnis der Vorab-Prüfung einer einzelnen Zuweisung."""

    has_conflicts: bool
    conflicts: list[str]
    warnings: list[str]


class ValidationResult(BaseModel):
    """Ergebnis der Validierung einer einzelnen Zuweisung."""

    is_valid: bool
    violations: list[str]
    warnings: list[str] = []


# ─── Empfehlungen & Ergebnis ──────────────────────────────────────────────────

class TeacherCandidate(BaseModel):
    """Bewertete Lehrkraft für ein bestimmtes Defizit."""

    teacher_id: str
    score: float
    available_hours: float
    reasoning: list[str]


class RecommendedAssignment(BaseModel):
    """Vorgeschlagene neue Zuweisung. Rein beratend, wird nie gespeichert."""

    teacher_id: str
    class_id: str
    subject_id: str
    hours_per_week: float
    confidence: float
    reasoning: list[str]


class OptimizationMetric(BaseModel):
    """Eine benannte Kennzahl (0–100, höher = besser)."""

    name: str
    score: float
    description: str


class OptimizationResult(BaseModel):
    """Gesamtergebnis eines Optimierungslaufs."""

    model_config = ConfigDict(frozen=True)

    new_assignments: int
    resolved_conflicts: int
    efficiency_gain: float
    overall_score: OverallScore
    metrics: list[OptimizationMetric]
    warnings: list[str]
    recommended_assignments: list[RecommendedAssignment]
    conflicts: list[Conflict] = []

    def get_metric(self, name: str) -> Optional[OptimizationMetric]:
        return next((m for m in self.metrics if m.name == name), None)

    def recommendations_for_class(self, class_id: str) -> list[RecommendedAssignment]:
        return [r for r in self.recommended_assignments if r.class_id == class_id]

    def print_rich(self) -> None:
        """Gibt das Ergebnis formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        score_color = {
            "optimal": "green", "good": "green", "warning": "yellow", "poor": "red",
        }[self.overall_score]

        lines = [
            f"Neue Zuweisungen: [bold]{self.new_assignments}[/bold] | "
            f"Gelöste Konflikte: [bold]{self.resolved_conflicts}[/bold] | "
            f"Effizienzsteigerung: [bold]{self.efficiency_gain:.1f}%[/bold]",
            f"Gesamtbewertung: [{score_color}]{self.overall_score}[/{score_color}]",
        ]
        for m in self.metrics:
            color = "green" if m.score >= 85 else "yellow" if m.score >= 70 else "red"
            lines.append(f"  {m.name}: [{color}]{m.score:.1f}%[/{color}]")
        if self.warnings:
            lines.append("\n[yellow bold]Warnungen:[/yellow bold]")
            for w in self.warnings:
                lines.append(f"  [yellow]• {w}[/yellow]")
        console.print(Panel("\n".join(lines), title="Optimierung", border_style="cyan"))

        if not self.recommended_assignments:
            console.print("[dim]Keine Empfehlungen.[/dim]")
            return

        table = Table(title="Empfohlene Zuweisungen", box=box.ROUNDED)
        table.add_column("#", justify="right", width=4)
        table.add_column("Lehrkraft", width=12)
        table.add_column("Klasse", width=10)
        table.add_column("Fach", width=12)
        table.add_column("Std.", justify="right", width=6)
        table.add_column("Score", justify="right", width=7)
        for i, r in enumerate(self.recommended_assignments, 1):
            table.add_row(
                str(i), r.teacher_id, r.class_id, r.subject_id,
                f"{r.hours_per_week:g}", f"{r.confidence:.1f}",
            )
        console.print(table)


def utilization_percent(current_hours: float, max_hours: float) -> float:
    """Auslastung in Prozent; 0 wenn kein Deputat hinterlegt ist."""
    if max_hours <= 0:
        return 0.0
    return current_hours / max_hours * 100
