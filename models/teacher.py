"""Datenmodell für eine Lehrkraft (Pydantic v2)."""

from pydantic import BaseModel, Field, field_validator


class Teacher(BaseModel):
    """Repräsentiert eine einzelne Lehrkraft."""

    id: str
    first_name: str
    last_name: str
    short_name: str = ""                          # Kürzel ("MÜL")
    qualifications: list[str] = []                # Fächer mit Lehrbefähigung
    max_hours: float = Field(25.0, ge=0)          # Wochenstunden-Deputat
    current_hours: float = Field(0.0, ge=0)       # gespeicherter Ist-Stand
    is_active: bool = True

    @property
    def name(self) -> str:
        """Anzeigename "Vorname Nachname"."""
        return f"{self.first_name} {self.last_name}".strip()

    @field_validator("short_name")
    @classmethod
    def normalize_short_name(cls, v: str) -> str:
        return v.upper()

    def is_qualified_for(self, subject_name: str) -> bool:
        """True wenn das Fach in der Qualifikationsliste steht (exakter Name)."""
        return subject_name in self.qualifications
