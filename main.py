"""BPS-Client — Haupt-CLI.

Verwendung:
  python main.py setup                         Ersteinrichtung (Wizard)
  python main.py config edit                   Konfiguration bearbeiten
  python main.py config show                   Konfiguration anzeigen
  python main.py generate                      Demo-Daten als JSON erzeugen
  python main.py records [--type prs|dps]      BPS-Einträge anzeigen
  python main.py add                           BPS-Einträge hinzufügen (Wizard)
  python main.py delete <record_id>            BPS-Eintrag löschen

Datenquelle: --auth-code (oder BPS_AUTH_CODE) für das Backend,
             --data-json <datei> für eine lokale JSON-Datei.
"""

import asyncio
import locale
import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()

# Standard-Pfad für Demo-Daten
DEFAULT_DATA_JSON = Path("output/bps_data.json")


def _load_config_or_abort():
    """Lädt die Konfiguration oder bricht mit Fehlermeldung ab."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    if mgr.first_run_check():
        console.print(
            "[red]Keine Konfiguration gefunden.[/red]\n"
            "Führen Sie zunächst [bold]python main.py setup[/bold] aus."
        )
        sys.exit(1)
    try:
        return mgr, mgr.load()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)


def _setup_logging(level_name: str, log_file: Optional[str] = None) -> None:
    """Konsolen-Logging über Rich, optional zusätzlich in eine Datei."""
    level = logging.getLevelName(level_name.upper())
    handlers: list[logging.Handler] = [
        RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)
    ]
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        handlers.append(file_handler)
    logging.basicConfig(level=level, format="%(message)s", handlers=handlers, force=True)
    # httpx loggt jeden Request auf INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))


@asynccontextmanager
async def _open_source(config, auth_code: Optional[str], data_json: Optional[Path]):
    """Öffnet Backend-Client oder lokale JSON-Quelle."""
    if data_json is not None:
        from data.local_source import LocalBpsSource
        yield LocalBpsSource(data_json, fallback=config.fallback_catalog)
        return

    if not auth_code:
        console.print(
            "[red]Kein Auth-Code angegeben.[/red]\n"
            "Verwenden Sie [bold]--auth-code[/bold] / BPS_AUTH_CODE "
            "oder [bold]--data-json[/bold] für lokale Daten."
        )
        sys.exit(1)

    from client.api import BpsApiClient, build_http_client
    async with build_http_client(config.api) as http_client:
        yield BpsApiClient(http_client, config.api, auth_code)


def _source_options(func):
    """Gemeinsame Optionen für Befehle mit Datenquelle."""
    func = click.option("--data-json", type=click.Path(path_type=Path), default=None,
                        help="Lokale JSON-Datei statt Backend verwenden.")(func)
    func = click.option("--auth-code", envvar="BPS_AUTH_CODE", default=None,
                        help="Auth-Code der Lehrkraft (oder BPS_AUTH_CODE).")(func)
    return func


async def _fetch_or_abort(source):
    from bps.errors import BpsApiError
    try:
        return await source.fetch_bps_data()
    except BpsApiError as e:
        console.print(f"[red bold]BPS-Daten konnten nicht geladen werden:[/red bold]\n{e}")
        sys.exit(1)


# ─── SETUP ────────────────────────────────────────────────────────────────────

@click.command("setup")
def cmd_setup():
    """Ersteinrichtung: Konfiguration mit dem Setup-Wizard anlegen."""
    from config.wizard import run_wizard
    from config.manager import ConfigManager

    mgr = ConfigManager()
    if not mgr.first_run_check():
        console.print(
            "[yellow]Eine Konfiguration existiert bereits.[/yellow]\n"
            "Verwenden Sie [bold]python main.py config edit[/bold] zum Bearbeiten."
        )
        if not click.confirm("Trotzdem neu einrichten?", default=False):
            return

    config = run_wizard()
    if config is not None:
        mgr.save(config)
        console.print("[bold green]Einrichtung abgeschlossen![/bold green]")
        console.print("Führen Sie jetzt [bold]python main.py records[/bold] aus.")


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen oder bearbeiten."""


@cmd_config.command("show")
def config_show():
    """Zeigt die aktuelle Konfiguration an."""
    mgr, config = _load_config_or_abort()
    from config.wizard import _show_fallback_table

    console.print(Panel(
        f"[bold]{config.school_name}[/bold]  |  Branch-Index {config.default_branch_index}",
        title="BPS-Konfiguration",
        border_style="cyan",
    ))

    api = config.api
    table = Table(title="Backend", box=box.ROUNDED)
    table.add_column("Endpunkt")
    table.add_column("URL")
    table.add_row("BPS-Daten", api.url(api.endpoints.get_teacher_bps))
    table.add_row("Anlegen", api.url(api.endpoints.store_bps))
    table.add_row("Löschen", api.url(api.endpoints.delete_bps))
    console.print(table)
    console.print(f"[bold]Timeout:[/bold] {api.timeout_seconds:g}s | "
                  f"[bold]Log-Level:[/bold] {config.logging.level}")

    _show_fallback_table(config.fallback_catalog)


@cmd_config.command("edit")
def config_edit():
    """Bearbeitet die Konfiguration interaktiv."""
    mgr, config = _load_config_or_abort()
    mgr.edit_interactive(config)


# ─── GENERATE ─────────────────────────────────────────────────────────────────

@click.command("generate")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad für JSON-Export.")
def cmd_generate(seed: int, json_path: str):
    """Erzeugt Demo-Daten (Branches, Schüler, Einträge, Katalog)."""
    from data.fake_data import FakeDataGenerator

    console.print("[bold]Demo-Daten werden generiert...[/bold]")
    gen = FakeDataGenerator(seed=seed)
    data = gen.generate()
    gen.print_summary(data)

    out_path = Path(json_path)
    data.save_json(out_path)
    console.print(f"[green]✓[/green] JSON gespeichert: {out_path}")
    console.print(f"Weiter mit [bold]python main.py records --data-json {out_path}[/bold]")


# ─── RECORDS ──────────────────────────────────────────────────────────────────

@click.command("records")
@_source_options
@click.option("--type", "record_type", type=click.Choice(["all", "prs", "dps"]),
              default="all", help="Nur positive (prs) oder negative (dps) Einträge.")
@click.option("--branch", "branch_index", type=int, default=None,
              help="Branch-Index (Standard aus Konfiguration).")
def cmd_records(auth_code: Optional[str], data_json: Optional[Path],
                record_type: str, branch_index: Optional[int]):
    """Zeigt die BPS-Einträge einer Branch."""
    mgr, config = _load_config_or_abort()
    from bps.records import branch_statistics, filter_records

    async def _run():
        async with _open_source(config, auth_code, data_json) as source:
            return await _fetch_or_abort(source)

    data = asyncio.run(_run())
    idx = config.default_branch_index if branch_index is None else branch_index
    branch = data.get_branch(idx)
    if branch is None:
        console.print("[yellow]Keine Branches vorhanden.[/yellow]")
        return

    if len(data.branches) > 1:
        names = "  ".join(
            f"[bold]{b.branch_name}[/bold]" if b is branch else f"[dim]{b.branch_name}[/dim]"
            for b in data.branches
        )
        console.print(names)

    stats = branch_statistics(branch)
    console.print(Panel(
        f"[bold]{stats.branch_name}[/bold]  |  Schuljahr {branch.academic_year_id or '–'}\n"
        f"Einträge: {stats.total_records}  |  "
        f"[green]positiv: {stats.prs_count}[/green]  |  [red]negativ: {stats.dps_count}[/red]",
        border_style="cyan",
    ))

    records = filter_records(branch.bps_records, record_type)
    table = Table(title=f"BPS-Einträge ({len(records)})", box=box.ROUNDED)
    table.add_column("ID", style="dim")
    table.add_column("Datum")
    table.add_column("Schüler", style="bold")
    table.add_column("Klasse")
    table.add_column("Verhalten")
    table.add_column("Punkte", justify="right")
    table.add_column("Notiz")
    for r in records:
        color = "green" if r.item_type == "prs" else "red"
        table.add_row(
            str(r.discipline_record_id),
            r.date.strftime("%Y-%m-%d") if r.date else "",
            r.student_name,
            r.classroom_name or "",
            r.item_title,
            f"[{color}]{r.item_point:+d}[/{color}]",
            r.note or "",
        )
    console.print(table)


# ─── ADD ──────────────────────────────────────────────────────────────────────

@click.command("add")
@_source_options
@click.option("--branch", "branch_index", type=int, default=None,
              help="Branch-Index (Standard aus Konfiguration).")
def cmd_add(auth_code: Optional[str], data_json: Optional[Path],
            branch_index: Optional[int]):
    """Fügt BPS-Einträge über den 3-Schritte-Wizard hinzu."""
    mgr, config = _load_config_or_abort()
    from bps.submission import SubmissionOutcome
    from bps.wizard import run_bps_wizard

    async def _run():
        async with _open_source(config, auth_code, data_json) as source:
            data = await _fetch_or_abort(source)
            idx = config.default_branch_index if branch_index is None else branch_index
            branch = data.get_branch(idx)
            if branch is None:
                console.print("[yellow]Keine Branches vorhanden.[/yellow]")
                return None
            return await run_bps_wizard(source, branch, config.fallback_catalog)

    result = asyncio.run(_run())
    if result is not None and result.outcome == SubmissionOutcome.ALL_FAILED:
        sys.exit(1)


# ─── DELETE ───────────────────────────────────────────────────────────────────

@click.command("delete")
@click.argument("record_id")
@_source_options
@click.option("--yes", "-y", is_flag=True, default=False, help="Ohne Rückfrage löschen.")
def cmd_delete(record_id: str, auth_code: Optional[str], data_json: Optional[Path], yes: bool):
    """Löscht einen BPS-Eintrag."""
    mgr, config = _load_config_or_abort()
    from bps.errors import BpsApiError

    if not yes and not click.confirm(f"BPS-Eintrag {record_id} wirklich löschen?", default=False):
        return

    async def _run():
        async with _open_source(config, auth_code, data_json) as source:
            await source.delete_record(record_id)

    try:
        asyncio.run(_run())
    except BpsApiError as e:
        detail = e.server_message or str(e)
        console.print(f"[red bold]Löschen fehlgeschlagen:[/red bold] {detail}")
        sys.exit(1)
    console.print(f"[green]✓[/green] BPS-Eintrag {record_id} gelöscht.")


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Debug-Ausgaben.")
def cli(verbose: bool):
    """BPS-Client: Verhaltenspunkte (positiv/negativ) für Lehrkräfte erfassen.

    Starten Sie mit: python main.py setup
    """
    from config.manager import ConfigManager
    mgr = ConfigManager()
    level, log_file = "WARNING", None
    if not mgr.first_run_check():
        try:
            logging_config = mgr.load().logging
            level, log_file = logging_config.level, logging_config.file
        except ValueError:
            pass  # Fehler meldet der jeweilige Befehl
    _setup_logging("DEBUG" if verbose else level, log_file)
    try:
        # Namenssortierung nach System-Locale (bps.roster.collation_key)
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logging.getLogger(__name__).debug(f"System-Locale nicht verfügbar: {e}")


def main():
    """Einstiegspunkt. Startet automatisch den Wizard beim ersten Aufruf."""
    from config.manager import ConfigManager
    mgr = ConfigManager()

    if len(sys.argv) == 1 and mgr.first_run_check():
        console.print(Panel(
            "[bold]Willkommen beim BPS-Client![/bold]\n\n"
            "Keine Konfiguration gefunden.\n"
            "Der Setup-Wizard wird jetzt gestartet...",
            border_style="cyan",
        ))
        sys.argv.append("setup")

    cli()


# Befehle registrieren
cli.add_command(cmd_setup)
cli.add_command(cmd_config)
cli.add_command(cmd_generate)
cli.add_command(cmd_records)
cli.add_command(cmd_add)
cli.add_command(cmd_delete)


if __name__ == "__main__":
    main()
