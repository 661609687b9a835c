"""Interaktiver Setup-Wizard für die Ersteinrichtung des BPS-Clients.

Führt den Nutzer Schritt für Schritt durch alle Konfigurationsbereiche.
Nutzt rich für schöne Konsolenausgabe.
"""

from typing import Optional

from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, FloatPrompt, IntPrompt, Prompt
from rich.table import Table
from rich import box

from config.schema import (
    ApiConfig,
    BpsConfig,
    FallbackCatalogConfig,
    FallbackItemDef,
    LoggingConfig,
)
from config.defaults import default_api, default_fallback_catalog

console = Console()


def _header(title: str) -> None:
    console.print()
    console.print(Panel(f"[bold cyan]{title}[/bold cyan]", expand=False))


def _info(text: str) -> None:
    console.print(f"[dim]{text}[/dim]")


def _success(text: str) -> None:
    console.print(f"[green]✓[/green] {text}")


def _warn(text: str) -> None:
    console.print(f"[yellow]⚠[/yellow]  {text}")


def _show_fallback_table(fc: FallbackCatalogConfig) -> None:
    """Zeigt den Ersatz-Katalog als rich-Tabelle an."""
    table = Table(title="Ersatz-Katalog", box=box.ROUNDED)
    table.add_column("ID", style="dim")
    table.add_column("Verhalten", style="bold")
    table.add_column("Punkte", justify="right")
    for prefix, items, color in (("dummy_prs_", fc.prs_items, "green"),
                                 ("dummy_dps_", fc.dps_items, "red")):
        for i, item in enumerate(items, start=1):
            table.add_row(f"{prefix}{i}", item.title,
                          f"[{color}]{item.points:+d}[/{color}]")
    console.print(table)


# ─── SCHRITT 1: Schule ───

def _wizard_school() -> tuple[str, int]:
    _header("Schritt 1 — Schule")
    name = Prompt.ask("Name der Schule", default="Muster-Schule")
    branch = IntPrompt.ask("Standard-Branch (Index, 0 = erste)", default=0)
    return name, max(0, branch)


# ─── SCHRITT 2: Backend ───

def _wizard_api(current: Optional[ApiConfig] = None) -> ApiConfig:
    _header("Schritt 2 — Backend")
    api = current or default_api()
    _info("Der Auth-Code wird beim Aufruf übergeben (--auth-code oder BPS_AUTH_CODE).")

    base_url = Prompt.ask("Basis-URL der Mobile-API", default=api.base_url)
    timeout = FloatPrompt.ask("Timeout pro Request (Sekunden)", default=api.timeout_seconds)

    try:
        result = ApiConfig(base_url=base_url, timeout_seconds=timeout,
                           endpoints=api.endpoints)
        _success("Backend konfiguriert.")
        return result
    except ValidationError as e:
        _warn(f"Validierungsfehler: {e.errors()[0]['msg']}")
        _warn("Bisherige Einstellungen werden verwendet.")
        return api


# ─── SCHRITT 3: Ersatz-Katalog ───

def _wizard_fallback(current: Optional[FallbackCatalogConfig] = None) -> FallbackCatalogConfig:
    _header("Schritt 3 — Ersatz-Katalog")
    fc = current or default_fallback_catalog()
    _show_fallback_table(fc)
    _info("Wird nur genutzt, wenn das Backend keine Verhaltens-Items liefert.")

    if Confirm.ask("Ersatz-Katalog übernehmen?", default=True):
        _success("Ersatz-Katalog übernommen.")
        return fc

    def _ask_items(label: str, items: list[FallbackItemDef]) -> list[FallbackItemDef]:
        console.print(f"\n[bold]{label}[/bold]")
        result = []
        for i, item in enumerate(items, start=1):
            title = Prompt.ask(f"  {i}. Bezeichnung", default=item.title)
            points = IntPrompt.ask(f"  {i}. Punkte", default=item.points)
            result.append(FallbackItemDef(title=title, points=points))
        return result

    prs = _ask_items("Positive Items (Punkte ≥ 0)", fc.prs_items)
    dps = _ask_items("Negative Items (Punkte ≤ 0)", fc.dps_items)
    try:
        result = FallbackCatalogConfig(prs_items=prs, dps_items=dps)
        _success("Ersatz-Katalog konfiguriert und validiert.")
        return result
    except ValidationError as e:
        _warn(f"Validierungsfehler: {e.errors()[0]['msg']}")
        _warn("Bisheriger Ersatz-Katalog wird verwendet.")
        return fc


# ─── SCHRITT 4: Logging ───

def _wizard_logging(current: Optional[LoggingConfig] = None) -> LoggingConfig:
    _header("Schritt 4 — Logging")
    lc = current or LoggingConfig()
    level = Prompt.ask("Log-Level",
                       choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                       default=lc.level)
    log_file = Prompt.ask("Log-Datei (leer = keine)", default=lc.file or "")
    _success("Logging konfiguriert.")
    return LoggingConfig(level=level, file=log_file or None)


# ─── ZUSAMMENFASSUNG ───

def _show_summary(config: BpsConfig) -> None:
    _header("Zusammenfassung")
    table = Table(box=box.ROUNDED, title="Konfigurationsübersicht")
    table.add_column("Bereich", style="bold cyan")
    table.add_column("Wert")

    table.add_row("Schule", config.school_name)
    table.add_row("Standard-Branch", str(config.default_branch_index))
    table.add_row("Backend", config.api.base_url)
    table.add_row("Timeout", f"{config.api.timeout_seconds:g}s")
    table.add_row(
        "Ersatz-Katalog",
        f"{len(config.fallback_catalog.prs_items)} positiv, "
        f"{len(config.fallback_catalog.dps_items)} negativ"
    )
    table.add_row("Log-Level", config.logging.level)
    console.print(table)


# ─── HAUPT-WIZARD ───

def run_wizard() -> Optional[BpsConfig]:
    """Führt den vollständigen interaktiven Setup-Wizard aus.

    Returns:
        Fertige BpsConfig oder None, wenn der Nutzer abbricht.
    """
    console.print()
    console.print(Panel(
        "[bold]Willkommen beim BPS-Client![/bold]\n\n"
        "Erfassung von Verhaltenspunkten (positiv/negativ) für Lehrkräfte.\n\n"
        "Der Wizard führt Sie durch alle Konfigurationsbereiche.\n"
        "[dim]Standard-Werte können mit Enter übernommen werden.[/dim]",
        title="[bold cyan]BPS-Client v1[/bold cyan]",
        border_style="cyan",
    ))

    if not Confirm.ask("\nMöchten Sie den Client jetzt einrichten?", default=True):
        console.print("[yellow]Einrichtung abgebrochen.[/yellow]")
        return None

    try:
        name, branch_index = _wizard_school()
        api = _wizard_api()
        fallback = _wizard_fallback()
        logging_config = _wizard_logging()

        config = BpsConfig(
            school_name=name,
            default_branch_index=branch_index,
            api=api,
            fallback_catalog=fallback,
            logging=logging_config,
        )

        _show_summary(config)

        if not Confirm.ask("\nKonfiguration speichern?", default=True):
            console.print("[yellow]Konfiguration wird nicht gespeichert.[/yellow]")
            return None

        _success("Konfiguration wird gespeichert...")
        return config

    except KeyboardInterrupt:
        console.print("\n[yellow]Wizard abgebrochen.[/yellow]")
        return None
