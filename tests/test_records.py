"""Tests für die Eintrags-Ansicht (Filter, Sortierung, Kennzahlen)."""

from datetime import datetime, timezone

import pytest

from bps.records import branch_statistics, filter_records
from models.branch import Branch
from models.discipline import DisciplineRecord


def _r(rid, item_type, points, date=None) -> DisciplineRecord:
    return DisciplineRecord(discipline_record_id=rid, item_type=item_type,
                            item_point=points, date=date)


RECORDS = [
    _r(1, "prs", 3, datetime(2025, 9, 1, tzinfo=timezone.utc)),
    _r(2, "dps", -2, datetime(2025, 9, 5, tzinfo=timezone.utc)),
    _r(3, "prs", 5, datetime(2025, 9, 3)),
    _r(4, "DPS", -1),
]


class TestFilterRecords:
    def test_all_sorted_newest_first(self):
        """Neueste zuerst; naive Daten als UTC, ohne Datum ganz hinten."""
        ids = [r.discipline_record_id for r in filter_records(RECORDS)]
        assert ids == [2, 3, 1, 4]

    def test_only_prs(self):
        assert [r.discipline_record_id for r in filter_records(RECORDS, "prs")] == [3, 1]

    def test_only_dps_case_insensitive(self):
        assert [r.discipline_record_id for r in filter_records(RECORDS, "dps")] == [2, 4]

    def test_unknown_filter_raises(self):
        with pytest.raises(ValueError):
            filter_records(RECORDS, "neutral")


class TestBranchStatistics:
    def test_counts_and_sum(self):
        branch = Branch(branch_id=1, branch_name="Main", bps_records=RECORDS)
        stats = branch_statistics(branch)
        assert stats.total_records == 4
        assert stats.prs_count == 2
        assert stats.dps_count == 2
        assert stats.point_sum == 5

    def test_server_total_preferred(self):
        """total_bps_records vom Server hat Vorrang vor der Listenlänge."""
        branch = Branch(branch_id=1, bps_records=RECORDS[:1], total_bps_records=120)
        assert branch_statistics(branch).total_records == 120
