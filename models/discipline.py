"""Datenmodelle für Verhaltens-Items und BPS-Einträge (Pydantic v2)."""

from datetime import datetime
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator


class Polarity(str, Enum):
    """Polarität eines Verhaltens-Items."""
    PRS = "prs"   # Positive Recognition
    DPS = "dps"   # Disciplinary Point


class DisciplineItem(BaseModel):
    """Ein auswählbares Verhalten (positiv oder negativ).

    Das Vorzeichen von item_point sollte zu item_type passen, wird aber
    nicht erzwungen.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    discipline_item_id: Union[int, str]
    item_title: str
    item_point: int
    item_type: str   # "prs" / "dps"

    @field_validator("item_type")
    @classmethod
    def normalize_type(cls, v: str) -> str:
        return v.strip().lower()

    @property
    def polarity(self) -> Optional[Polarity]:
        try:
            return Polarity(self.item_type)
        except ValueError:
            return None

    @property
    def is_positive(self) -> bool:
        return self.polarity == Polarity.PRS


class DisciplineRecord(BaseModel):
    """Ein gespeicherter BPS-Eintrag, wie ihn der Server zurückliefert."""

    model_config = ConfigDict(extra="ignore")

    discipline_record_id: Union[int, str]
    student_id: Optional[Union[int, str]] = None
    student_name: str = ""
    classroom_name: Optional[str] = None
    item_title: str = ""
    item_point: int = 0
    item_type: str = ""
    date: Optional[datetime] = None
    note: Optional[str] = None
    teacher_name: Optional[str] = None

    @field_validator("item_type")
    @classmethod
    def normalize_type(cls, v: str) -> str:
        return v.strip().lower()
