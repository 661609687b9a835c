"""Interaktiver BPS-Wizard für die Konsole.

Schritt 1: Schüler wählen (einzeln oder mehrere, ganze Klassen, Suche)
Schritt 2: Verhalten wählen (positiv/negativ, beliebig kombinierbar)
Schritt 3: Prüfen, Notiz eingeben, absenden
"""

import logging
from typing import Optional, Protocol, Union

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table
from rich import box

from bps.catalog import resolve_catalog
from bps.roster import sorted_class_names
from bps.selection import SelectionMode, SelectionState, WizardStep
from bps.submission import SubmissionEngine, SubmissionOutcome, SubmissionResult
from config.schema import FallbackCatalogConfig
from models.branch import Branch
from models.discipline import DisciplineItem, Polarity
from models.student import Student

logger = logging.getLogger(__name__)
console = Console()


class BpsSource(Protocol):
    """Gemeinsame Schnittstelle von BpsApiClient und LocalBpsSource."""

    async def fetch_bps_data(self): ...

    async def store_record(self, student_id: Union[int, str],
                           discipline_item_id: Union[int, str], note: str = "") -> None: ...


def parse_numbers(text: str) -> list[int]:
    """Parst '1,3 5' → [1, 3, 5]; ungültige Tokens werden ignoriert."""
    numbers = []
    for token in text.replace(",", " ").split():
        if token.isdigit():
            numbers.append(int(token))
    return numbers


def _points(item: DisciplineItem) -> str:
    color = "green" if item.item_point >= 0 else "red"
    return f"[{color}]{item.item_point:+d}[/{color}]"


# ─── SCHRITT 1 ───

def _visible_students(state: SelectionState) -> tuple[list[str], list[Student]]:
    groups = state.filtered_students()
    class_names = sorted_class_names(groups)
    flat = [s for name in class_names for s in groups[name]]
    return class_names, flat


def _show_students(state: SelectionState) -> tuple[list[str], list[Student]]:
    class_names, flat = _visible_students(state)
    groups = state.filtered_students()
    mode = "mehrere" if state.mode_student == SelectionMode.MULTIPLE else "einzeln"
    table = Table(title=f"Schüler ({mode})", box=box.ROUNDED)
    table.add_column("Nr.", justify="right")
    table.add_column("Name", style="bold")
    table.add_column("Klasse")
    table.add_column("", width=2)

    nr = 1
    for k, name in enumerate(class_names, start=1):
        marker = " [green]✓ alle[/green]" if state.is_class_fully_selected(name) else ""
        table.add_row("", f"[cyan]K{k}: {name}[/cyan]{marker}", "", "")
        for student in groups[name]:
            mark = "[green]✓[/green]" if state.is_student_selected(student) else ""
            table.add_row(str(nr), student.name, name, mark)
            nr += 1
    console.print(table)
    if state.search_query:
        console.print(f"[dim]Suche: '{state.search_query}'[/dim]")
    return class_names, flat


def _step_students(state: SelectionState) -> Optional[str]:
    class_names, flat = _show_students(state)
    console.print(
        "[dim]Nummern = Schüler wählen, k<Nr> = ganze Klasse, /text = Suche, "
        "m = Modus wechseln, w = weiter, q = abbrechen[/dim]"
    )
    cmd = Prompt.ask("Eingabe", default="w").strip()
    if cmd == "q":
        return "quit"
    if cmd == "w":
        if not state.next_step():
            console.print("[yellow]Bitte zuerst einen Schüler wählen.[/yellow]")
        return None
    if cmd == "m":
        new_mode = (SelectionMode.SINGLE if state.mode_student == SelectionMode.MULTIPLE
                    else SelectionMode.MULTIPLE)
        state.set_student_mode(new_mode)
        console.print(f"[dim]Modus: {new_mode.value} – Auswahl zurückgesetzt.[/dim]")
        return None
    if cmd.startswith("/"):
        state.set_search_query(cmd[1:])
        return None
    if cmd.lower().startswith("k"):
        for k in parse_numbers(cmd[1:]):
            if 1 <= k <= len(class_names):
                state.toggle_whole_class(class_names[k - 1])
        if state.mode_student != SelectionMode.MULTIPLE:
            console.print("[yellow]Ganze Klassen nur im Modus 'mehrere' (m).[/yellow]")
        return None
    for nr in parse_numbers(cmd):
        if 1 <= nr <= len(flat):
            state.toggle_student(flat[nr - 1])
    return None


# ─── SCHRITT 2 ───

def _step_behaviors(state: SelectionState, branch: Branch,
                    fallback: Optional[FallbackCatalogConfig]) -> Optional[str]:
    selected = state.selected_behaviors
    if selected:
        console.print(
            "[bold]Gewählt:[/bold] " + ", ".join(f"{i.item_title} ({i.item_point:+d})" for i in selected)
            + f"  [dim]= {state.total_points_per_student():+d} je Schüler[/dim]"
        )

    if state.active_polarity is None:
        console.print("[dim]p = positiv, n = negativ, c = Auswahl leeren, "
                      "z = zurück, w = weiter, q = abbrechen[/dim]")
        cmd = Prompt.ask("Eingabe", default="p").strip().lower()
        if cmd == "p":
            state.select_polarity(Polarity.PRS)
        elif cmd == "n":
            state.select_polarity(Polarity.DPS)
        return _common_step_command(state, cmd)

    items = resolve_catalog(branch, state.active_polarity, fallback)
    title = "Positives Verhalten" if state.active_polarity == Polarity.PRS else "Negatives Verhalten"
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("Nr.", justify="right")
    table.add_column("Verhalten", style="bold")
    table.add_column("Punkte", justify="right")
    table.add_column("", width=2)
    for nr, item in enumerate(items, start=1):
        mark = "[green]✓[/green]" if state.is_behavior_selected(item) else ""
        table.add_row(str(nr), item.item_title, _points(item), mark)
    console.print(table)
    console.print("[dim]Nummern = wählen, a = andere Polarität, c = Auswahl leeren, "
                  "z = zurück, w = weiter, q = abbrechen[/dim]")
    cmd = Prompt.ask("Eingabe", default="w").strip().lower()
    if cmd == "a":
        state.select_polarity(None)
        return None
    for nr in parse_numbers(cmd):
        if 1 <= nr <= len(items):
            state.toggle_behavior(items[nr - 1])
    return _common_step_command(state, cmd)


def _common_step_command(state: SelectionState, cmd: str) -> Optional[str]:
    if cmd == "q":
        return "quit"
    if cmd == "c":
        state.clear_behaviors()
    elif cmd == "z":
        state.back()
    elif cmd == "w":
        if not state.next_step():
            console.print("[yellow]Bitte mindestens ein Verhalten wählen.[/yellow]")
    return None


# ─── SCHRITT 3 ───

def _show_review(state: SelectionState) -> None:
    table = Table(title="Prüfen & Absenden", box=box.ROUNDED)
    table.add_column("Schüler", style="bold")
    table.add_column("Klasse")
    for s in state.selected_students:
        table.add_row(s.name, s.classroom_name or "")
    console.print(table)

    items = Table(box=box.SIMPLE)
    items.add_column("Verhalten", style="bold")
    items.add_column("Punkte", justify="right")
    for i in state.selected_behaviors:
        items.add_row(i.item_title, _points(i))
    console.print(items)

    n = len(state.selected_students) * len(state.selected_behaviors)
    console.print(
        f"[bold]{n} Einträge[/bold] | {state.total_points_per_student():+d} Punkte je Schüler | "
        f"gesamt {state.grand_total():+d}"
    )


# ─── HAUPT-WIZARD ───

async def run_bps_wizard(
    source: BpsSource,
    branch: Branch,
    fallback: Optional[FallbackCatalogConfig] = None,
) -> Optional[SubmissionResult]:
    """Führt den Wizard für eine Branch aus und übermittelt die Auswahl.

    Returns:
        SubmissionResult oder None, wenn der Nutzer abbricht.
    """
    console.print(Panel(
        f"[bold]BPS-Eintrag hinzufügen[/bold]\n{branch.branch_name}",
        border_style="cyan",
    ))
    multiple = Confirm.ask("Mehrere Schüler auswählen?", default=False)
    state = SelectionState(
        branch.students,
        mode=SelectionMode.MULTIPLE if multiple else SelectionMode.SINGLE,
    )
    logger.debug(f"BPS-Wizard: {branch.branch_name}, {len(branch.students)} Schüler, {state!r}")
    if not state.grouped_students():
        console.print("[yellow]Keine Schüler mit Klasse in dieser Branch.[/yellow]")
        return None

    try:
        while True:
            console.print(f"\n[bold cyan]Schritt {state.step.value}/3 — {state.step_title}[/bold cyan]")
            if state.step == WizardStep.SELECT_STUDENTS:
                action = _step_students(state)
            elif state.step == WizardStep.SELECT_BEHAVIORS:
                action = _step_behaviors(state, branch, fallback)
            else:
                _show_review(state)
                state.set_note(Prompt.ask("Notiz (optional)", default=state.note))
                choice = Prompt.ask("Absenden? (j = ja, z = zurück, q = abbrechen)",
                                    choices=["j", "z", "q"], default="j")
                if choice == "z":
                    state.back()
                    continue
                action = "quit" if choice == "q" else "submit"

            if action == "quit":
                console.print("[yellow]Abgebrochen.[/yellow]")
                return None
            if action == "submit":
                break
    except KeyboardInterrupt:
        console.print("\n[yellow]Wizard abgebrochen.[/yellow]")
        return None

    def _confirm_partial(partial: SubmissionResult) -> bool:
        partial.print_rich()
        return Confirm.ask("Daten trotz Fehlern neu laden?", default=True)

    engine = SubmissionEngine(source.store_record, refresh=source.fetch_bps_data)
    console.print(f"[dim]Speichere {len(state.selected_students) * len(state.selected_behaviors)} "
                  f"Einträge...[/dim]")
    result = await engine.submit(
        state.selected_students,
        state.selected_behaviors,
        state.note,
        confirm_partial=_confirm_partial,
    )
    if result.outcome != SubmissionOutcome.PARTIAL_SUCCESS:
        result.print_rich()
    return result
