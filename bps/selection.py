"""Auswahl-Zustand des 3-Schritte-BPS-Wizards.

Schritt 1: Schüler wählen → Schritt 2: Verhalten wählen → Schritt 3: Prüfen & Absenden.

Alle Operationen sind total: ungültige Übergänge (z.B. ``next_step`` in
Schritt 2 ohne Verhalten) ändern nichts und geben False zurück. Die
Auswahl-Mengen sind nach ID geschlüsselt und behalten die Einfüge-Reihenfolge,
die später die Reihenfolge der Requests bestimmt.
"""

from enum import Enum, IntEnum
from typing import Iterable, Optional, Union

from bps.catalog import as_polarity
from bps.roster import filter_by_name, group_by_classroom
from models.discipline import DisciplineItem, Polarity
from models.student import Student


class WizardStep(IntEnum):
    SELECT_STUDENTS = 1
    SELECT_BEHAVIORS = 2
    REVIEW = 3


class SelectionMode(str, Enum):
    SINGLE = "single"
    MULTIPLE = "multiple"


STEP_TITLES = {
    WizardStep.SELECT_STUDENTS: "Select Student(s)",
    WizardStep.SELECT_BEHAVIORS: "Choose Behavior(s)",
    WizardStep.REVIEW: "Review & Submit",
}


class SelectionState:
    """Zustand einer Wizard-Sitzung.

    Args:
        students: Roster der aktiven Branch (Grundlage für Klassen-Auswahl).
        mode: Start-Modus für die Schülerauswahl.
    """

    def __init__(
        self,
        students: Iterable[Student] = (),
        mode: SelectionMode = SelectionMode.SINGLE,
    ) -> None:
        self._groups = group_by_classroom(students)
        self.mode_student = mode
        self._students: dict[Union[int, str], Student] = {}
        self._behaviors: dict[Union[int, str], DisciplineItem] = {}
        self.active_polarity: Optional[Polarity] = None
        self.search_query = ""
        self.note = ""
        self.step = WizardStep.SELECT_STUDENTS

    # ─── Lesezugriff ───

    @property
    def selected_students(self) -> list[Student]:
        return list(self._students.values())

    @property
    def selected_behaviors(self) -> list[DisciplineItem]:
        return list(self._behaviors.values())

    @property
    def step_title(self) -> str:
        return STEP_TITLES[self.step]

    def is_student_selected(self, student: Student) -> bool:
        return student.student_id in self._students

    def is_behavior_selected(self, item: DisciplineItem) -> bool:
        return item.discipline_item_id in self._behaviors

    def grouped_students(self) -> dict[str, list[Student]]:
        """Alle Klassen der Branch (ungefiltert)."""
        return self._groups

    def filtered_students(self) -> dict[str, list[Student]]:
        """Klassen nach aktueller Suche gefiltert."""
        return filter_by_name(self._groups, self.search_query)

    # ─── Schülerauswahl ───

    def set_student_mode(self, mode: SelectionMode) -> None:
        """Wechselt den Modus; jeder Wechsel leert die Schülerauswahl.

        Der Nutzer muss danach neu auswählen. Gleicher Modus → keine Änderung.
        """
        mode = SelectionMode(mode)
        if mode == self.mode_student:
            return
        self.mode_student = mode
        self._students.clear()

    def toggle_student(self, student: Student) -> None:
        """Multiple: hinzufügen/entfernen. Single: ersetzt die Auswahl."""
        key = student.student_id
        if self.mode_student == SelectionMode.SINGLE:
            self._students = {key: student}
            return
        if key in self._students:
            del self._students[key]
        else:
            self._students[key] = student

    def toggle_whole_class(self, class_name: str) -> None:
        """Wählt alle sichtbaren Schüler einer Klasse an bzw. ab.

        Arbeitet auf der gefilterten Ansicht: bei aktiver Suche sind nur die
        sichtbaren Schüler betroffen. Sind alle bereits gewählt, werden genau
        diese entfernt, sonst die fehlenden ergänzt. Nur im Modus Multiple.
        """
        if self.mode_student != SelectionMode.MULTIPLE:
            return
        visible = self.filtered_students().get(class_name, [])
        if not visible:
            return
        if all(s.student_id in self._students for s in visible):
            for s in visible:
                self._students.pop(s.student_id, None)
        else:
            for s in visible:
                self._students.setdefault(s.student_id, s)

    def is_class_fully_selected(self, class_name: str) -> bool:
        visible = self.filtered_students().get(class_name, [])
        return bool(visible) and all(s.student_id in self._students for s in visible)

    def set_search_query(self, query: str) -> None:
        self.search_query = query or ""

    # ─── Verhaltensauswahl ───

    def select_polarity(self, polarity: Union[Polarity, str, None]) -> None:
        """Setzt die angezeigte Polarität; die Auswahl bleibt erhalten."""
        self.active_polarity = None if polarity is None else as_polarity(polarity)

    def toggle_behavior(self, item: DisciplineItem) -> None:
        """Hinzufügen/entfernen, unabhängig von der aktiven Polarität."""
        key = item.discipline_item_id
        if key in self._behaviors:
            del self._behaviors[key]
        else:
            self._behaviors[key] = item

    def clear_behaviors(self) -> None:
        self._behaviors.clear()
        self.active_polarity = None

    def set_note(self, note: str) -> None:
        self.note = note or ""

    # ─── Punkte ───

    def total_points_per_student(self) -> int:
        return sum(i.item_point for i in self._behaviors.values())

    def grand_total(self) -> int:
        """Punkte je Schüler × Anzahl Schüler (im Modus Single immer × 1)."""
        factor = 1
        if self.mode_student == SelectionMode.MULTIPLE:
            factor = max(1, len(self._students))
        return self.total_points_per_student() * factor

    # ─── Schritte ───

    def can_proceed(self) -> bool:
        """Gating-Regel des aktuellen Schritts."""
        if self.step == WizardStep.SELECT_STUDENTS:
            if self.mode_student == SelectionMode.SINGLE:
                return len(self._students) == 1
            return len(self._students) > 0
        if self.step == WizardStep.SELECT_BEHAVIORS:
            return self.can_submit()
        return False

    def can_submit(self) -> bool:
        return bool(self._students) and bool(self._behaviors)

    def next_step(self) -> bool:
        """Einen Schritt weiter, falls erlaubt. Gibt True bei Wechsel zurück."""
        if not self.can_proceed():
            return False
        self.step = WizardStep(self.step + 1)
        return True

    def back(self) -> bool:
        """Genau einen Schritt zurück. In Schritt 1 ohne Wirkung."""
        if self.step == WizardStep.SELECT_STUDENTS:
            return False
        self.step = WizardStep(self.step - 1)
        return True

    def reset(self) -> None:
        """Zurück auf Schritt 1 mit leerer Auswahl (Modus bleibt)."""
        self._students.clear()
        self._behaviors.clear()
        self.active_polarity = None
        self.search_query = ""
        self.note = ""
        self.step = WizardStep.SELECT_STUDENTS

    def __repr__(self) -> str:
        return (
            f"SelectionState(step={self.step.value}, mode={self.mode_student.value}, "
            f"students={len(self._students)}, behaviors={len(self._behaviors)})"
        )
