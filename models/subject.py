"""Datenmodell für ein Unterrichtsfach (Pydantic v2)."""

from pydantic import BaseModel


class Subject(BaseModel):
    """Repräsentiert ein Unterrichtsfach."""

    id: str
    name: str           # kanonischer Name, z.B. "Deutsch"
    short_name: str     # Kürzel für die Stundentafel, z.B. "D"
    category: str = "sonstig"
