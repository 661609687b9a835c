"""Submission-Engine: Schüler × Verhalten als einzelne BPS-Einträge anlegen.

Das Backend kennt nur einen Einzel-Endpunkt (kein Batch). Die Requests
laufen deshalb strikt nacheinander: jeder wird abgewartet, bevor der nächste
startet. Die Reihenfolge ist schülerweise (Schüler außen, Verhalten innen)
und entspricht der Auswahl-Reihenfolge; die Fehlerliste folgt ihr.

Ein fehlgeschlagenes Paar bricht den Lauf nicht ab. submit() liefert immer
ein SubmissionResult; nur die Vorab-Prüfung (leere Auswahl) wirft.
"""

import asyncio
import inspect
import logging
from enum import Enum
from typing import Awaitable, Callable, Optional, Protocol, Sequence, Union

from pydantic import BaseModel

from bps.errors import BpsApiError, SelectionValidationError
from models.discipline import DisciplineItem
from models.student import Student

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Network error occurred"


class CreateRecord(Protocol):
    """Legt genau einen BPS-Eintrag an; wirft BpsApiError bei Fehlern."""

    async def __call__(self, student_id: Union[int, str],
                       discipline_item_id: Union[int, str], note: str) -> None: ...


RefreshCallback = Callable[[], Awaitable[object]]
ConfirmCallback = Callable[["SubmissionResult"], Union[bool, Awaitable[bool]]]


class SubmissionOutcome(str, Enum):
    ALL_SUCCEEDED = "all_succeeded"
    PARTIAL_SUCCESS = "partial_success"
    ALL_FAILED = "all_failed"


class SubmissionError(BaseModel):
    """Ein fehlgeschlagenes (Schüler, Verhalten)-Paar."""

    student_name: str
    behavior_title: str
    message: str


class SubmissionResult(BaseModel):
    """Ergebnis eines Absende-Laufs."""

    total_expected: int
    success_count: int = 0
    errors: list[SubmissionError] = []
    refreshed: bool = False

    @property
    def outcome(self) -> SubmissionOutcome:
        if not self.errors:
            return SubmissionOutcome.ALL_SUCCEEDED
        if self.success_count == 0:
            return SubmissionOutcome.ALL_FAILED
        return SubmissionOutcome.PARTIAL_SUCCESS

    @property
    def attempted(self) -> int:
        return self.success_count + len(self.errors)

    def print_rich(self) -> None:
        """Gibt das Ergebnis formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel

        console = Console()
        outcome = self.outcome
        if outcome == SubmissionOutcome.ALL_SUCCEEDED:
            status = f"[bold green]✓ {self.success_count} BPS-Einträge gespeichert[/bold green]"
        elif outcome == SubmissionOutcome.PARTIAL_SUCCESS:
            status = (
                f"[bold yellow]⚠ {self.success_count} von {self.total_expected} "
                f"Einträgen gespeichert[/bold yellow]"
            )
        else:
            status = "[bold red]✗ Kein Eintrag gespeichert[/bold red]"

        lines = [status]
        if self.errors:
            lines.append("\n[red bold]Fehlgeschlagen:[/red bold]")
            for e in self.errors:
                lines.append(f"  [red]• {e.student_name} – {e.behavior_title}: {e.message}[/red]")
        console.print(Panel("\n".join(lines), title="BPS-Übermittlung", border_style="cyan"))


class SubmissionEngine:
    """Führt die Übermittlung aus und stößt danach die Aktualisierung an.

    Args:
        create_record: Kollaborator für den Einzel-Endpunkt.
        refresh: Optional; lädt die Branch-Daten neu (ohne Argumente).
    """

    def __init__(self, create_record: CreateRecord,
                 refresh: Optional[RefreshCallback] = None) -> None:
        self._create_record = create_record
        self._refresh = refresh

    async def submit(
        self,
        students: Sequence[Student],
        behaviors: Sequence[DisciplineItem],
        note: str = "",
        confirm_partial: Optional[ConfirmCallback] = None,
    ) -> SubmissionResult:
        """Legt für jedes (Schüler, Verhalten)-Paar einen Eintrag an.

        Raises:
            SelectionValidationError: Keine Schüler oder kein Verhalten gewählt.
        """
        if not students or not behaviors:
            raise SelectionValidationError()

        note = (note or "").strip()
        result = SubmissionResult(total_expected=len(students) * len(behaviors))
        logger.info(
            f"BPS-Übermittlung: {len(students)} Schüler × {len(behaviors)} Verhalten "
            f"= {result.total_expected} Requests"
        )

        for student in students:
            for behavior in behaviors:
                try:
                    await self._create_record(
                        student.student_id, behavior.discipline_item_id, note
                    )
                except (BpsApiError, OSError, asyncio.TimeoutError) as e:
                    message = getattr(e, "server_message", None) or NETWORK_ERROR_MESSAGE
                    logger.warning(
                        f"BPS-Eintrag fehlgeschlagen: {student.name} / "
                        f"{behavior.item_title}: {e}"
                    )
                    result.errors.append(SubmissionError(
                        student_name=student.name,
                        behavior_title=behavior.item_title,
                        message=message,
                    ))
                else:
                    result.success_count += 1

        logger.info(
            f"BPS-Übermittlung beendet: {result.success_count}/{result.total_expected} "
            f"erfolgreich ({result.outcome.value})"
        )

        if await self._should_refresh(result, confirm_partial):
            result.refreshed = await self._run_refresh()
        return result

    async def _should_refresh(self, result: SubmissionResult,
                              confirm_partial: Optional[ConfirmCallback]) -> bool:
        if self._refresh is None:
            return False
        if result.outcome == SubmissionOutcome.ALL_SUCCEEDED:
            return True
        if result.outcome == SubmissionOutcome.PARTIAL_SUCCESS and confirm_partial is not None:
            answer = confirm_partial(result)
            if inspect.isawaitable(answer):
                answer = await answer
            return bool(answer)
        return False

    async def _run_refresh(self) -> bool:
        try:
            await self._refresh()
        except (BpsApiError, OSError, asyncio.TimeoutError) as e:
            # Ergebnis bleibt gültig, nur die Anzeige ist veraltet
            logger.warning(f"Aktualisierung nach Übermittlung fehlgeschlagen: {e}")
            return False
        return True
