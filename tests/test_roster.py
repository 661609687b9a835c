"""Tests für den Roster-Index (Gruppierung, Sortierung, Namenssuche)."""

from models.student import Student
from bps.roster import (
    filter_by_name,
    group_by_classroom,
    sorted_class_names,
    valid_student_count,
)


def _s(sid, name, classroom="5A") -> Student:
    return Student(student_id=sid, name=name, classroom_name=classroom)


# ─── GRUPPIERUNG ──────────────────────────────────────────────────────────────

class TestGroupByClassroom:
    def test_example_amy_before_bob_cy_excluded(self):
        """Bob/Amy in 5A, Cy ohne Klasse → {"5A": [Amy, Bob]}."""
        students = [_s(1, "Bob"), _s(2, "Amy"), _s(3, "Cy", "")]
        groups = group_by_classroom(students)
        assert list(groups) == ["5A"]
        assert [s.name for s in groups["5A"]] == ["Amy", "Bob"]

    def test_blank_and_none_classrooms_excluded(self):
        """None, "" und nur Leerzeichen fallen heraus."""
        students = [_s(1, "A", None), _s(2, "B", ""), _s(3, "C", "   "), _s(4, "D", "6B")]
        groups = group_by_classroom(students)
        assert list(groups) == ["6B"]
        assert valid_student_count(students) == 1

    def test_union_equals_valid_students(self):
        """Vereinigung aller Gruppen = Eingabe ohne Schüler ohne Klasse."""
        students = [
            _s(1, "Zoe", "5A"), _s(2, "Max", "5B"), _s(3, "Lea", None),
            _s(4, "Ben", "5A"), _s(5, "Ida", "7C"), _s(6, "Tom", " "),
        ]
        groups = group_by_classroom(students)
        grouped_ids = {s.student_id for members in groups.values() for s in members}
        assert grouped_ids == {1, 2, 4, 5}
        for class_name, members in groups.items():
            assert all(s.classroom_name == class_name for s in members)
            assert all(s.classroom_name.strip() for s in members)

    def test_names_sorted_within_group(self):
        """Namen innerhalb jeder Klasse aufsteigend."""
        students = [_s(i, n) for i, n in enumerate(["Dan", "carl", "Bea", "Abe"])]
        names = [s.name for s in group_by_classroom(students)["5A"]]
        assert names == ["Abe", "Bea", "carl", "Dan"]

    def test_exact_classroom_name_is_key(self):
        """Klassennamen werden nicht normalisiert."""
        groups = group_by_classroom([_s(1, "A", "5A"), _s(2, "B", "5a")])
        assert set(groups) == {"5A", "5a"}

    def test_accented_names_sorted_by_base_letter(self):
        """Akzente zählen nicht als eigene Buchstaben: Élodie steht bei E."""
        students = [_s(1, "Zaw Oo"), _s(2, "Élodie Min"), _s(3, "Emma Soe"), _s(4, "Daniel Tun")]
        names = [s.name for s in group_by_classroom(students)["5A"]]
        assert names == ["Daniel Tun", "Élodie Min", "Emma Soe", "Zaw Oo"]

    def test_umlaut_sorted_with_base_vowel(self):
        students = [_s(1, "Zoe"), _s(2, "Ömer"), _s(3, "Noah"), _s(4, "Paul")]
        names = [s.name for s in group_by_classroom(students)["5A"]]
        assert names == ["Noah", "Ömer", "Paul", "Zoe"]

    def test_empty_input(self):
        assert group_by_classroom([]) == {}

    def test_sorted_class_names(self):
        groups = group_by_classroom([_s(1, "A", "7B"), _s(2, "B", "5A"), _s(3, "C", "6C")])
        assert sorted_class_names(groups) == ["5A", "6C", "7B"]


# ─── NAMENSSUCHE ──────────────────────────────────────────────────────────────

class TestFilterByName:
    def _groups(self):
        return group_by_classroom([
            _s(1, "Amy Lin", "5A"), _s(2, "Bob Oo", "5A"),
            _s(3, "Mya Win", "6B"), _s(4, "Noah Smith", "6B"),
        ])

    def test_empty_query_returns_input(self):
        """Leere oder Leerzeichen-Suche → unverändert."""
        groups = self._groups()
        assert filter_by_name(groups, "") is groups
        assert filter_by_name(groups, "   ") is groups

    def test_case_insensitive_substring(self):
        filtered = filter_by_name(self._groups(), "LIN")
        assert list(filtered) == ["5A"]
        assert [s.name for s in filtered["5A"]] == ["Amy Lin"]

    def test_classes_without_hits_dropped(self):
        """Klassen ohne Treffer entfallen, andere bleiben vollständig."""
        filtered = filter_by_name(self._groups(), "o")
        assert [s.name for s in filtered["5A"]] == ["Bob Oo"]
        assert [s.name for s in filtered["6B"]] == ["Noah Smith"]

    def test_no_hits_anywhere(self):
        assert filter_by_name(self._groups(), "xyz") == {}

    def test_input_not_mutated(self):
        groups = self._groups()
        filter_by_name(groups, "Amy")
        assert len(groups["5A"]) == 2
        assert len(groups["6B"]) == 2

    def test_query_surrounding_whitespace_ignored(self):
        filtered = filter_by_name(self._groups(), " Amy ")
        assert [s.name for s in filtered["5A"]] == ["Amy Lin"]
