from config.schema import (
    ApiConfig,
    BpsConfig,
    FallbackCatalogConfig,
    FallbackItemDef,
    LoggingConfig,
)


# ─── Ersatz-Katalog ───────────────────────────────────────────────────────────
# Beispielwerte. Punktwerte sind Platzhalter und
# mit der Schulleitung abzustimmen.

FALLBACK_PRS_ITEMS: list[tuple[str, int]] = [
    ("Excellent Participation", 5),
    ("Helping Others", 3),
    ("Outstanding Homework", 4),
    ("Leadership", 5),
]

FALLBACK_DPS_ITEMS: list[tuple[str, int]] = [
    ("Late to Class", -2),
    ("Disrupting Class", -3),
    ("Missing Homework", -2),
    ("Disrespectful Behavior", -5),
]

FALLBACK_ID_PREFIX = {"prs": "dummy_prs_", "dps": "dummy_dps_"}


def default_fallback_catalog() -> FallbackCatalogConfig:
    """Standard-Ersatzkatalog: 4 positive + 4 negative Items."""
    return FallbackCatalogConfig(
        prs_items=[FallbackItemDef(title=t, points=p) for t, p in FALLBACK_PRS_ITEMS],
        dps_items=[FallbackItemDef(title=t, points=p) for t, p in FALLBACK_DPS_ITEMS],
    )


def default_api() -> ApiConfig:
    """Standard-Verbindung zur Mobile-API."""
    return ApiConfig()


def default_bps_config() -> BpsConfig:
    """Vollständige Default-Konfiguration."""
    return BpsConfig(
        school_name="Muster-Schule",
        default_branch_index=0,
        api=default_api(),
        fallback_catalog=default_fallback_catalog(),
        logging=LoggingConfig(),
    )
