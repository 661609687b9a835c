"""Branch und BPS-Gesamtdatensatz einer Lehrkraft (Pydantic v2)."""

import json
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, model_validator

from models.discipline import DisciplineRecord
from models.student import Student


class Branch(BaseModel):
    """Ein Schulstandort mit Roster, BPS-Einträgen und (optional) Katalog.

    discipline_items bleibt roh (flache Liste oder {prs_items, dps_items}),
    die Auflösung übernimmt bps.catalog.
    """

    model_config = ConfigDict(extra="ignore")

    branch_id: Union[int, str]
    branch_name: str = ""
    academic_year_id: Optional[Union[int, str]] = None
    students: list[Student] = []
    bps_records: list[DisciplineRecord] = []
    total_bps_records: Optional[int] = None
    discipline_items: Any = None

    @property
    def record_count(self) -> int:
        if self.total_bps_records is not None:
            return self.total_bps_records
        return len(self.bps_records)


class BpsData(BaseModel):
    """Antwort von get-teacher-bps-data: alle Branches der Lehrkraft."""

    model_config = ConfigDict(extra="ignore")

    branches: list[Branch] = []
    # Der Server liefert den Katalog meist auf oberster Ebene
    discipline_items: Any = None

    @model_validator(mode="after")
    def _propagate_catalog(self):
        if self.discipline_items is None:
            return self
        self.branches = [
            b if b.discipline_items is not None
            else b.model_copy(update={"discipline_items": self.discipline_items})
            for b in self.branches
        ]
        return self

    def get_branch(self, index: int = 0) -> Optional[Branch]:
        """Branch mit Index; bei ungültigem Index die erste, ohne Branches None."""
        if not self.branches:
            return None
        if 0 <= index < len(self.branches):
            return self.branches[index]
        return self.branches[0]

    # ─── Persistenz ────────────────────────────────────────────────────────

    def save_json(self, path: Path) -> None:
        """Speichert den Datensatz als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.model_dump_json(indent=2))

    @classmethod
    def load_json(cls, path: Path) -> "BpsData":
        """Lädt einen Datensatz aus einer JSON-Datei."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate(json.load(f))
