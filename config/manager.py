"""Konfigurationsmanager: Laden, Speichern, Validieren und interaktives Bearbeiten.

Nutzt ruamel.yaml für YAML-Serialisierung mit Kommentaren.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table
from rich import box
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.schema import (
    ApiConfig,
    BpsConfig,
    FallbackCatalogConfig,
    LoggingConfig,
)

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── YAML-KOMMENTAR-AUFBAU ───

_YAML_HEADER = f"""\
# ============================================
# BPS-Client — Konfiguration
# Version: 1.0
# Erstellt: {date.today().isoformat()}
# ============================================
"""

_SECTION_COMMENTS = {
    "api": (
        "Backend",
        "Basis-URL der Mobile-API und Endpunkt-Pfade.\n"
        "Der Auth-Code wird NICHT hier gespeichert (--auth-code / BPS_AUTH_CODE).",
    ),
    "fallback_catalog": (
        "Ersatz-Katalog",
        "Greift nur, wenn die Branch keine Verhaltens-Items liefert.\n"
        "Punktwerte sind Platzhalter – mit der Schulleitung abstimmen.",
    ),
    "logging": (
        "Logging",
        None,
    ),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "bps_config.yaml"

    def first_run_check(self) -> bool:
        """Gibt True zurück wenn noch keine Config existiert (Erstaufruf)."""
        return not self.DEFAULT_CONFIG.exists()

    # ─── Laden ───

    def load(self, path: Optional[Path] = None) -> BpsConfig:
        """Lade Config aus YAML. Validiert automatisch via Pydantic."""
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            raise FileNotFoundError(
                f"Konfigurationsdatei nicht gefunden: {target}\n"
                f"Führen Sie 'python main.py setup' aus, um den Client einzurichten."
            )
        with open(target, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        try:
            config = BpsConfig.model_validate(dict(raw or {}))
            return config
        except Exception as e:
            raise ValueError(
                f"Konfigurationsdatei ungültig: {target}\n"
                f"Pydantic-Fehler: {e}"
            ) from e

    # ─── Speichern ───

    def save(self, config: BpsConfig, path: Optional[Path] = None) -> None:
        """Speichere Config als YAML mit deutschen Kommentaren."""
        target = path or self.DEFAULT_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)

        data = self._build_commented_yaml(config)

        with open(target, "w", encoding="utf-8") as f:
            f.write(_YAML_HEADER + "\n")
            yaml.dump(data, f)

        console.print(f"[green]✓[/green] Konfiguration gespeichert: {target}")

    def _build_commented_yaml(self, config: BpsConfig) -> CommentedMap:
        """Baut die YAML-Struktur mit Kommentaren auf."""
        raw = json.loads(config.model_dump_json())
        cm = CommentedMap(raw)

        for field, (label, comment) in _SECTION_COMMENTS.items():
            cm.yaml_set_comment_before_after_key(
                field,
                before=f"\n─── {label} ───" + (f"\n{comment}" if comment else ""),
            )

        if "api" in cm:
            api_map = CommentedMap(cm["api"])
            api_map.yaml_add_eol_comment("Sekunden pro Request", "timeout_seconds")
            cm["api"] = api_map

        return cm

    # ─── Interaktives Bearbeiten ───

    def edit_interactive(self, config: BpsConfig) -> BpsConfig:
        """Interaktives Bearbeitungsmenü für die Konfiguration."""
        while True:
            console.print()
            console.print(Panel(
                "[bold]Konfiguration bearbeiten[/bold]",
                border_style="cyan",
            ))
            console.print("  [bold]1.[/bold] Backend (URL, Timeout)")
            console.print("  [bold]2.[/bold] Ersatz-Katalog")
            console.print("  [bold]3.[/bold] Logging")
            console.print("  [bold]0.[/bold] Speichern & Zurück")

            choice = Prompt.ask("\nAuswahl", default="0")

            if choice == "1":
                config = config.model_copy(
                    update={"api": self._edit_api(config.api)}
                )
            elif choice == "2":
                config = config.model_copy(
                    update={"fallback_catalog": self._edit_fallback(config.fallback_catalog)}
                )
            elif choice == "3":
                config = config.model_copy(
                    update={"logging": self._edit_logging(config.logging)}
                )
            elif choice == "0":
                self.save(config)
                break
            else:
                console.print("[yellow]Ungültige Auswahl.[/yellow]")

        return config

    def _edit_api(self, api: ApiConfig) -> ApiConfig:
        """Backend-Verbindung: startet den Wizard-Schritt neu."""
        from config.wizard import _wizard_api
        console.print(f"\n[bold]Aktuell:[/bold] {api.base_url} "
                      f"(Timeout {api.timeout_seconds:g}s)")
        return _wizard_api(api)

    def _edit_fallback(self, fc: FallbackCatalogConfig) -> FallbackCatalogConfig:
        """Ersatz-Katalog interaktiv anpassen."""
        from config.wizard import _show_fallback_table, _wizard_fallback
        console.print("\n[bold]Aktueller Ersatz-Katalog:[/bold]")
        _show_fallback_table(fc)
        if not Confirm.ask("Änderungen vornehmen?", default=False):
            return fc
        return _wizard_fallback(fc)

    def _edit_logging(self, lc: LoggingConfig) -> LoggingConfig:
        """Logging-Einstellungen interaktiv anpassen."""
        table = Table(box=box.SIMPLE)
        table.add_column("Parameter", style="bold")
        table.add_column("Aktuell")
        for k, v in lc.model_dump().items():
            table.add_row(k, str(v))
        console.print(table)

        from config.wizard import _wizard_logging
        return _wizard_logging(lc)
