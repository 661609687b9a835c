"""Ansicht der gespeicherten BPS-Einträge einer Branch."""

from datetime import datetime, timezone
from typing import Iterable, Literal

from pydantic import BaseModel

from models.branch import Branch
from models.discipline import DisciplineRecord

RecordFilter = Literal["all", "prs", "dps"]

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _sort_date(record: DisciplineRecord) -> datetime:
    if record.date is None:
        return _OLDEST
    if record.date.tzinfo is None:
        return record.date.replace(tzinfo=timezone.utc)
    return record.date


def filter_records(records: Iterable[DisciplineRecord],
                   record_type: RecordFilter = "all") -> list[DisciplineRecord]:
    """Filtert nach Polarität und sortiert die neuesten Einträge nach vorne."""
    if record_type not in ("all", "prs", "dps"):
        raise ValueError(f"Unbekannter Filter: {record_type!r}")
    selected = [
        r for r in records
        if record_type == "all" or r.item_type == record_type
    ]
    return sorted(selected, key=_sort_date, reverse=True)


class BranchStatistics(BaseModel):
    """Kennzahlen einer Branch für die Kopfzeile."""

    branch_name: str
    total_records: int
    prs_count: int
    dps_count: int
    point_sum: int


def branch_statistics(branch: Branch) -> BranchStatistics:
    records = branch.bps_records
    return BranchStatistics(
        branch_name=branch.branch_name,
        total_records=branch.record_count,
        prs_count=sum(1 for r in records if r.item_type == "prs"),
        dps_count=sum(1 for r in records if r.item_type == "dps"),
        point_sum=sum(r.item_point for r in records),
    )
