"""Fehlerklassen der BPS-Erfassung."""

from typing import Optional


class BpsError(Exception):
    """Basisklasse aller BPS-Fehler."""


class SelectionValidationError(BpsError):
    """Absenden ohne Schüler oder ohne Verhalten – vor jedem Netzwerkaufruf."""

    MESSAGE = "select at least one student and one behavior"

    def __init__(self, message: str = MESSAGE) -> None:
        super().__init__(message)
        self.message = message


class BpsApiError(BpsError):
    """Fehler beim Zugriff auf das Backend (HTTP-Fehler, Netzwerk, Timeout).

    Args:
        message: Beschreibung für Log und Anzeige.
        status_code: HTTP-Status, falls eine Antwort kam.
        server_message: Fehlertext aus der Server-Antwort, falls vorhanden.
    """

    def __init__(self, message: str, status_code: Optional[int] = None,
                 server_message: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.server_message = server_message


class RecordRequestError(BpsApiError):
    """Ein einzelner Aufruf zum Anlegen eines BPS-Eintrags ist fehlgeschlagen."""
