"""Lokale BPS-Datenquelle auf Basis einer JSON-Datei (Demo-Modus).

Bietet dieselbe Schnittstelle wie client.api.BpsApiClient, damit der Wizard
ohne Backend benutzbar ist. Angelegte und gelöschte Einträge werden direkt
in die Datei zurückgeschrieben.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from bps.catalog import resolve_catalog
from bps.errors import BpsApiError, RecordRequestError
from config.schema import FallbackCatalogConfig
from models.branch import Branch, BpsData
from models.discipline import DisciplineItem, DisciplineRecord, Polarity

logger = logging.getLogger(__name__)


class LocalBpsSource:
    """JSON-Datei als Roster-Quelle und Einzel-Endpunkt.

    Args:
        path: JSON-Datei im Format von get-teacher-bps-data.
        teacher_name: Wird in neue Einträge übernommen.
        fallback: Ersatz-Katalog aus der Konfiguration, derselbe wie im Wizard.
    """

    def __init__(self, path: Path, teacher_name: Optional[str] = None,
                 fallback: Optional[FallbackCatalogConfig] = None) -> None:
        self.path = Path(path)
        self.teacher_name = teacher_name
        self.fallback = fallback
        self._data: Optional[BpsData] = None

    async def fetch_bps_data(self) -> BpsData:
        """Liest die Datei neu ein (dient auch als Aktualisierung)."""
        try:
            self._data = BpsData.load_json(self.path)
        except FileNotFoundError as e:
            raise BpsApiError(str(e)) from e
        except ValueError as e:
            raise BpsApiError(f"Ungültige Datendatei {self.path}: {e}") from e
        logger.debug(f"Lokale BPS-Daten geladen: {self.path}")
        return self._data

    async def store_record(self, student_id: Union[int, str],
                           discipline_item_id: Union[int, str], note: str = "") -> None:
        data = await self._loaded()
        branch, student = self._find_student(data, student_id)
        if student is None:
            raise RecordRequestError(f"Schüler {student_id} unbekannt",
                                     status_code=404, server_message="Student not found")
        item = self._find_item(branch, discipline_item_id)
        if item is None:
            raise RecordRequestError(f"Verhalten {discipline_item_id} unbekannt",
                                     status_code=404, server_message="Discipline item not found")

        next_id = 1 + max(
            (int(r.discipline_record_id) for b in data.branches for r in b.bps_records
             if str(r.discipline_record_id).isdigit()),
            default=0,
        )
        try:
            record = DisciplineRecord(
                discipline_record_id=next_id,
                student_id=student.student_id,
                student_name=student.name,
                classroom_name=student.classroom_name,
                item_title=item.item_title,
                item_point=item.item_point,
                item_type=item.item_type,
                date=datetime.now(timezone.utc),
                note=(note or "").strip() or None,
                teacher_name=self.teacher_name,
            )
        except ValidationError as e:
            raise RecordRequestError(f"Eintrag ungültig ({student_id}/{discipline_item_id}): "
                                     f"{e.error_count()} Validierungsfehler") from e

        branch.bps_records.append(record)
        if branch.total_bps_records is not None:
            branch.total_bps_records += 1
        try:
            data.save_json(self.path)
        except OSError as e:
            # Speicherstand der Datei bleibt maßgeblich
            branch.bps_records.remove(record)
            if branch.total_bps_records is not None:
                branch.total_bps_records -= 1
            raise RecordRequestError(f"Datei {self.path} nicht schreibbar: {e}") from e

    async def delete_record(self, discipline_record_id: Union[int, str]) -> None:
        data = await self._loaded()
        for branch in data.branches:
            for record in branch.bps_records:
                if str(record.discipline_record_id) == str(discipline_record_id):
                    branch.bps_records.remove(record)
                    if branch.total_bps_records:
                        branch.total_bps_records -= 1
                    data.save_json(self.path)
                    return
        raise RecordRequestError(f"Eintrag {discipline_record_id} unbekannt",
                                 status_code=404, server_message="Record not found")

    # ─── Hilfsfunktionen ───

    async def _loaded(self) -> BpsData:
        if self._data is None:
            return await self.fetch_bps_data()
        return self._data

    @staticmethod
    def _find_student(data: BpsData, student_id):
        for branch in data.branches:
            for student in branch.students:
                if str(student.student_id) == str(student_id):
                    return branch, student
        return None, None

    def _find_item(self, branch: Branch, discipline_item_id) -> Optional[DisciplineItem]:
        for polarity in Polarity:
            for item in resolve_catalog(branch, polarity, self.fallback):
                if str(item.discipline_item_id) == str(discipline_item_id):
                    return item
        return None
