"""Datenmodell für einen Schüler (Pydantic v2)."""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict


class Student(BaseModel):
    """Ein Schüler aus dem Roster einer Branch.

    Schüler ohne gültige Klasse (leer/nur Leerzeichen) werden bei jeder
    Gruppierung ausgelassen.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    student_id: Union[int, str]            # Eindeutiger Schlüssel
    name: str
    classroom_name: Optional[str] = None   # "5A", "Grade 7 - B", ...
    branch_id: Optional[Union[int, str]] = None

    @property
    def has_classroom(self) -> bool:
        """True wenn der Schüler einer Klasse zugeordnet ist."""
        return bool(self.classroom_name and self.classroom_name.strip())
