from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional


# ─── API ───

class EndpointConfig(BaseModel):
    """Pfade der benötigten Endpunkte relativ zur Basis-URL."""
    # Roster, Einträge und Katalog aller Branches der Lehrkraft
    get_teacher_bps: str = "/get-teacher-bps-data/"
    # Einen einzelnen BPS-Eintrag anlegen (kein Batch-Endpunkt vorhanden)
    store_bps: str = "/discipline/store-bps"
    # Einen BPS-Eintrag löschen
    delete_bps: str = "/discipline/delete-bps"


class ApiConfig(BaseModel):
    """Verbindung zum SIS-Backend."""
    # Basis-URL der Mobile-API, ohne abschließenden Slash
    base_url: str = Field("https://sis.bfi.edu.mm/mobile-api",
        description="Basis-URL der Mobile-API")
    # Timeout pro Request in Sekunden (Timeout = Fehler für dieses Paar)
    timeout_seconds: float = Field(15.0, gt=0, le=300,
        description="Timeout pro Request (Sekunden)")
    endpoints: EndpointConfig = Field(default_factory=EndpointConfig)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Basis-URL muss mit http:// oder https:// beginnen: {v}")
        return v.rstrip("/")

    def url(self, path: str) -> str:
        """Vollständige URL für einen Endpunkt-Pfad."""
        return f"{self.base_url}{path}"


# ─── FALLBACK-KATALOG ───

class FallbackItemDef(BaseModel):
    """Ein Eintrag des eingebauten Ersatz-Katalogs."""
    title: str
    points: int


class FallbackCatalogConfig(BaseModel):
    """Ersatz-Katalog, falls die Branch keine Verhaltens-Items liefert.

    Die Punktwerte sind Platzhalter, keine fachlich abgestimmten Werte.
    Genau 4 Items je Polarität.
    """
    prs_items: list[FallbackItemDef]
    dps_items: list[FallbackItemDef]

    @model_validator(mode='after')
    def validate_sizes(self):
        for name, items in (("prs_items", self.prs_items), ("dps_items", self.dps_items)):
            if len(items) != 4:
                raise ValueError(f"{name}: genau 4 Einträge erwartet, {len(items)} gefunden")
        if any(i.points < 0 for i in self.prs_items):
            raise ValueError("prs_items: Punkte müssen >= 0 sein")
        if any(i.points > 0 for i in self.dps_items):
            raise ValueError("dps_items: Punkte müssen <= 0 sein")
        return self


# ─── LOGGING ───

class LoggingConfig(BaseModel):
    """Logging-Einstellungen für die CLI."""
    # Name eines logging-Levels ("DEBUG", "INFO", "WARNING", ...)
    level: str = Field("WARNING", description="Log-Level")
    # Optional: zusätzlich in Datei schreiben
    file: Optional[str] = None

    @field_validator("level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        v = v.upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unbekanntes Log-Level: {v}")
        return v


# ─── GESAMT-CONFIG ───

class BpsConfig(BaseModel):
    """Gesamtkonfiguration des BPS-Clients."""
    # Name der Schule (nur Anzeige)
    school_name: str = Field("Muster-Schule",
        description="Name der Schule")
    # Index der beim Start gewählten Branch
    default_branch_index: int = Field(0, ge=0)
    api: ApiConfig = Field(default_factory=ApiConfig)
    fallback_catalog: FallbackCatalogConfig
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
