"""Testdaten-Generator für den BPS-Client.

Erzeugt eine reproduzierbare Antwort im Format von get-teacher-bps-data,
mit absichtlichen Sonderfällen für robuste Tests:

  1. Schüler ohne Klasse (None, "" und nur Leerzeichen) → fallen aus dem Roster
  2. Namen mit Umlauten und Kleinschreibung → Sortierung prüfen
  3. Zweite Branch ohne eigenen Katalog → Katalog von oberster Ebene
"""

import random
from datetime import datetime, timedelta, timezone
from typing import Optional

from models.branch import Branch, BpsData
from models.discipline import DisciplineRecord
from models.student import Student

# ─── Namens-Listen ────────────────────────────────────────────────────────────

_FIRST_NAMES = [
    "Aung", "Bella", "Chit", "Daniel", "Ei", "Emma", "Hnin", "Htet", "Kyaw",
    "Lin", "Mya", "Nandar", "Noah", "Olivia", "Phyo", "Sophia", "Thiri",
    "Thura", "Wai", "Yuki", "Zaw", "Ömer", "Élodie", "amy",
]

_LAST_NAMES = [
    "Aung", "Htun", "Kyaw", "Lwin", "Min", "Naing", "Oo", "Soe", "Thant",
    "Tun", "Win", "Zaw", "Smith", "Tanaka", "Müller",
]

_CLASSROOMS = ["Grade 5 - A", "Grade 5 - B", "Grade 6 - A", "Grade 7 - A", "Grade 8 - B"]

_BRANCH_NAMES = ["Main Campus", "North Campus"]

# ─── Katalog ─────────────────────────────────────────────────────────────────

_PRS_CATALOG: list[tuple[str, int]] = [
    ("Active Participation", 2),
    ("Helping a Classmate", 3),
    ("Excellent Homework", 2),
    ("Responsible Leadership", 5),
    ("Kindness", 1),
]

_DPS_CATALOG: list[tuple[str, int]] = [
    ("Late Arrival", -1),
    ("Uniform Violation", -1),
    ("Using Phone in Class", -2),
    ("Disrespect", -3),
    ("Fighting", -10),
]


def demo_catalog() -> dict:
    """Katalog im Objekt-Format {prs_items, dps_items} (wie vom Server)."""
    return {
        "prs_items": [
            {"discipline_item_id": 100 + i, "item_title": title,
             "item_point": points, "item_type": "prs"}
            for i, (title, points) in enumerate(_PRS_CATALOG, start=1)
        ],
        "dps_items": [
            {"discipline_item_id": 200 + i, "item_title": title,
             "item_point": points, "item_type": "dps"}
            for i, (title, points) in enumerate(_DPS_CATALOG, start=1)
        ],
    }


class FakeDataGenerator:
    """Generiert eine vollständige Demo-Antwort für eine Lehrkraft."""

    def __init__(self, seed: Optional[int] = None, students_per_class: int = 6,
                 records_per_branch: int = 12) -> None:
        self.rng = random.Random(seed)
        self.students_per_class = students_per_class
        self.records_per_branch = records_per_branch
        self._next_student_id = 1
        self._next_record_id = 1

    # ─── Schüler ──────────────────────────────────────────────────────────────

    def _make_student(self, classroom: Optional[str], branch_id: int) -> Student:
        name = f"{self.rng.choice(_FIRST_NAMES)} {self.rng.choice(_LAST_NAMES)}"
        student = Student(
            student_id=self._next_student_id,
            name=name,
            classroom_name=classroom,
            branch_id=branch_id,
        )
        self._next_student_id += 1
        return student

    def _generate_students(self, branch_id: int, classrooms: list[str]) -> list[Student]:
        students = [
            self._make_student(classroom, branch_id)
            for classroom in classrooms
            for _ in range(self.students_per_class)
        ]
        # Sonderfälle: ohne gültige Klasse
        for classroom in (None, "", "   "):
            students.append(self._make_student(classroom, branch_id))
        self.rng.shuffle(students)
        return students

    # ─── Einträge ─────────────────────────────────────────────────────────────

    def _generate_records(self, students: list[Student]) -> list[DisciplineRecord]:
        valid = [s for s in students if s.has_classroom]
        items = [(t, p, "prs") for t, p in _PRS_CATALOG] + [(t, p, "dps") for t, p in _DPS_CATALOG]
        base = datetime(2025, 9, 1, 8, 0, tzinfo=timezone.utc)
        records = []
        for _ in range(self.records_per_branch):
            student = self.rng.choice(valid)
            title, points, item_type = self.rng.choice(items)
            records.append(DisciplineRecord(
                discipline_record_id=self._next_record_id,
                student_id=student.student_id,
                student_name=student.name,
                classroom_name=student.classroom_name,
                item_title=title,
                item_point=points,
                item_type=item_type,
                date=base + timedelta(days=self.rng.randint(0, 60),
                                      minutes=self.rng.randint(0, 480)),
                note=self.rng.choice(["", "", "Parent informed", "Second time this week"]),
                teacher_name="Demo Teacher",
            ))
            self._next_record_id += 1
        return records

    # ─── Gesamt ───────────────────────────────────────────────────────────────

    def generate(self) -> BpsData:
        """Erzeugt den vollständigen Datensatz als BpsData-Objekt."""
        branches = []
        for index, branch_name in enumerate(_BRANCH_NAMES, start=1):
            classrooms = _CLASSROOMS if index == 1 else _CLASSROOMS[:2]
            students = self._generate_students(index, classrooms)
            records = self._generate_records(students)
            branches.append(Branch(
                branch_id=index,
                branch_name=branch_name,
                academic_year_id=2025,
                students=students,
                bps_records=records,
                total_bps_records=len(records),
            ))
        return BpsData(branches=branches, discipline_items=demo_catalog())

    # ─── Ausgabe ──────────────────────────────────────────────────────────────

    def print_summary(self, data: BpsData) -> None:
        """Gibt eine Rich-Tabelle mit Übersicht der erzeugten Daten aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        table = Table(title="Erzeugte Testdaten", box=box.ROUNDED)
        table.add_column("Branch", style="bold cyan")
        table.add_column("Schüler", justify="right")
        table.add_column("ohne Klasse", justify="right")
        table.add_column("Einträge", justify="right")

        for branch in data.branches:
            without = sum(1 for s in branch.students if not s.has_classroom)
            table.add_row(branch.branch_name, str(len(branch.students)),
                          str(without), str(len(branch.bps_records)))
        console.print(table)
