from typing import Optional

from pydantic import BaseModel, Field, field_validator


# ─── OPTIMIERUNGS-EINSTELLUNGEN ───

class OptimizationSettings(BaseModel):
    """Schalter für einen Optimierungslauf.

    Wirkung der einzelnen Optionen:
    - prioritize_qualifications: Lehrkräfte ohne erfasste Qualifikation werden
      als Kandidaten ausgeschlossen (sonst nur mit 20 statt 100 Punkten bewertet).
    - balance_workload: Bonus 0.5 × (100 − |Auslastung − 85|) pro Kandidat,
      bevorzugt Lehrkräfte nahe der Ziel-Auslastung.
    - minimize_conflicts: wird an den Host durchgereicht; beeinflusst die
      Zuteilung nicht.
    - respect_max_hours: Lehrkräfte ohne freie Stunden (max − ist ≤ 0) werden
      als Kandidaten ausgeschlossen.
    - allow_partial_assignments: wird an den Host durchgereicht; Teilzuweisungen
      (weniger Stunden als das Defizit) entstehen unabhängig davon.
    """
    prioritize_qualifications: bool = Field(True,
        description="Nur Lehrkräfte mit erfasster Qualifikation berücksichtigen")
    balance_workload: bool = Field(True,
        description="Gleichmäßige Auslastung bevorzugen (Ziel 85%)")
    minimize_conflicts: bool = Field(True,
        description="Konflikte minimieren (ohne Einfluss auf die Zuteilung)")
    respect_max_hours: bool = Field(True,
        description="Maximale Wochenstunden der Lehrkräfte einhalten")
    allow_partial_assignments: bool = Field(False,
        description="Teilzuweisungen erlauben (ohne Einfluss auf die Zuteilung)")


# ─── GESAMT-CONFIG ───

class OptimizerConfig(BaseModel):
    """Gesamtkonfiguration des Zuweisungs-Optimierers."""
    # Name der Schule (nur Anzeige)
    school_name: str = Field("Muster-Realschule",
        description="Name der Schule")
    # Bundesland (bestimmt die Standard-Stundentafel)
    bundesland: str = Field("NRW")
    # Schalter für den Optimierungslauf
    settings: OptimizationSettings = Field(default_factory=OptimizationSettings)
    # Optional: eigene Stundentafel (Jahrgang → Fach → Wochenstunden).
    # None = Standard-Stundentafel aus config/defaults.py
    curriculum: Optional[dict[int, dict[str, float]]] = Field(None,
        description="Eigene Stundentafel (None = Standard)")
    # Ziel-Auslastung der Lehrkräfte in Prozent
    ideal_utilization: float = Field(85.0, ge=0, le=100,
        description="Ziel-Auslastung Lehrkräfte (%)")
    # Standardabweichung der Auslastung, ab der die Balance-Metrik 0 ergibt
    balance_spread: float = Field(30.0, gt=0,
        description="Akzeptierte Streuung der Auslastung (Prozentpunkte)")
    # Toleranz für die Stundenbudget-Einhaltung je Klasse
    compliance_tolerance: float = Field(0.5, ge=0,
        description="Toleranz Stundenbudget-Einhaltung (Stunden)")

    @field_validator("curriculum")
    @classmethod
    def _check_curriculum_hours(cls, v):
        if v is None:
            return v
        for grade, row in v.items():
            for subject, hours in row.items():
                if hours < 0:
                    raise ValueError(
                        f"Stundentafel: negative Stunden für {subject} in Jahrgang {grade}"
                    )
        return v
