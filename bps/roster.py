"""Roster-Index: Schüler nach Klasse gruppieren und nach Namen filtern.

Reine Funktionen über übergebenen Daten, keine Seiteneffekte.
"""

import locale
import unicodedata
from collections import defaultdict
from typing import Iterable

from models.student import Student


def _base_letters(text: str) -> str:
    """Kleinbuchstaben ohne Akzente: "Élodie" → "elodie"."""
    decomposed = unicodedata.normalize("NFKD", text.casefold())
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def collation_key(text: str) -> tuple[str, str, str]:
    """Locale-abhängiger Sortierschlüssel.

    Primär nach Grundbuchstaben (Akzente und Groß-/Kleinschreibung
    zweitrangig), damit "Élodie" auch unter der C-Locale bei "E" einsortiert
    wird. Die aktive Locale setzt main.cli() über LC_COLLATE.
    """
    return (locale.strxfrm(_base_letters(text)), locale.strxfrm(text.casefold()), text)


def group_by_classroom(students: Iterable[Student]) -> dict[str, list[Student]]:
    """Gruppiert Schüler nach exaktem classroom_name.

    Schüler ohne Klasse (None, leer, nur Leerzeichen) werden ausgelassen.
    Innerhalb jeder Klasse nach Namen sortiert.
    """
    grouped: dict[str, list[Student]] = defaultdict(list)
    for student in students:
        if not student.has_classroom:
            continue
        grouped[student.classroom_name].append(student)

    for members in grouped.values():
        members.sort(key=lambda s: collation_key(s.name))
    return dict(grouped)


def filter_by_name(
    groups: dict[str, list[Student]], query: str
) -> dict[str, list[Student]]:
    """Filtert jede Klasse per Teilstring-Suche im Namen (case-insensitive).

    Leerzeichen am Rand der Suche zählen nicht. Leere Suche → Eingabe
    unverändert. Klassen ohne Treffer entfallen.
    """
    if not query or not query.strip():
        return groups

    needle = query.strip().casefold()
    filtered: dict[str, list[Student]] = {}
    for class_name, members in groups.items():
        hits = [s for s in members if needle in s.name.casefold()]
        if hits:
            filtered[class_name] = hits
    return filtered


def sorted_class_names(groups: dict[str, list[Student]]) -> list[str]:
    """Klassennamen aufsteigend (locale-abhängig) für die Anzeige."""
    return sorted(groups, key=collation_key)


def valid_student_count(students: Iterable[Student]) -> int:
    """Anzahl Schüler mit gültiger Klasse."""
    return sum(1 for s in students if s.has_classroom)
