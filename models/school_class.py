"""Datenmodell für eine Schulklasse (Pydantic v2)."""

from typing import Optional

from pydantic import BaseModel, Field


class SchoolClass(BaseModel):
    """Repräsentiert eine einzelne Klasse (z.B. 7b)."""

    id: str
    name: str = ""                                # "5a", "10c"
    grade: int = Field(ge=5, le=10)
    # Harte Obergrenze der Wochenstunden; None = kein Budget
    target_hours_total: Optional[float] = Field(None, ge=0)
    student_count: int = Field(0, ge=0)

    @property
    def has_hour_budget(self) -> bool:
        """True wenn ein hartes Stundenbudget gesetzt ist."""
        return self.target_hours_total is not None
