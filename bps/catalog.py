"""Verhaltens-Katalog: verfügbare Items einer Polarität aus den Branch-Daten.

Die Branch-Daten liefern den Katalog in unterschiedlichen Formen:

  1. flache Liste ``discipline_items: [{..., "item_type": "prs"}, ...]``
  2. Objekt ``discipline_items: {"prs_items": [...], "dps_items": [...]}``

Die Resolver werden der Reihe nach versucht; der erste mit nicht-leerem
Ergebnis gewinnt. Liefert keiner etwas, greift der Ersatz-Katalog. Damit ist
der Wizard immer benutzbar.
"""

import logging
from collections.abc import Mapping
from typing import Any, Callable, Optional, Union

from pydantic import ValidationError

from config.defaults import FALLBACK_ID_PREFIX, default_fallback_catalog
from config.schema import FallbackCatalogConfig
from models.branch import Branch
from models.discipline import DisciplineItem, Polarity

logger = logging.getLogger(__name__)

Resolver = Callable[[Any, Polarity], Optional[list[DisciplineItem]]]


def as_polarity(value: Union[Polarity, str]) -> Polarity:
    """Wandelt "prs"/"dps" in beliebiger Schreibweise in Polarity um (sonst ValueError)."""
    if isinstance(value, Polarity):
        return value
    return Polarity(value.strip().lower())


def _parse_items(raw_items: Any, default_type: Optional[str] = None) -> list[DisciplineItem]:
    """Validiert rohe Item-Dicts; fehlerhafte Einträge werden übersprungen."""
    items: list[DisciplineItem] = []
    if not isinstance(raw_items, (list, tuple)):
        return items
    for raw in raw_items:
        if isinstance(raw, DisciplineItem):
            items.append(raw)
            continue
        if not isinstance(raw, Mapping):
            logger.warning(f"Katalog-Eintrag ignoriert (kein Objekt): {raw!r}")
            continue
        data = dict(raw)
        if default_type and not data.get("item_type"):
            data["item_type"] = default_type
        try:
            items.append(DisciplineItem.model_validate(data))
        except ValidationError as e:
            logger.warning(
                f"Katalog-Eintrag ignoriert ({data.get('discipline_item_id')!r}): "
                f"{e.error_count()} Validierungsfehler"
            )
    return items


def _from_flat_list(raw: Any, polarity: Polarity) -> Optional[list[DisciplineItem]]:
    if not isinstance(raw, (list, tuple)):
        return None
    items = [i for i in _parse_items(raw) if i.item_type == polarity.value]
    return items or None


def _from_keyed_object(raw: Any, polarity: Polarity) -> Optional[list[DisciplineItem]]:
    if not isinstance(raw, Mapping):
        return None
    key = f"{polarity.value}_items"
    items = _parse_items(raw.get(key), default_type=polarity.value)
    return items or None


RESOLVERS: list[Resolver] = [_from_flat_list, _from_keyed_object]


def fallback_catalog(
    polarity: Union[Polarity, str],
    config: Optional[FallbackCatalogConfig] = None,
) -> list[DisciplineItem]:
    """Eingebauter Ersatz-Katalog (4 Items) für eine Polarität."""
    polarity = as_polarity(polarity)
    config = config or default_fallback_catalog()
    defs = config.prs_items if polarity == Polarity.PRS else config.dps_items
    prefix = FALLBACK_ID_PREFIX[polarity.value]
    return [
        DisciplineItem(
            discipline_item_id=f"{prefix}{i}",
            item_title=d.title,
            item_point=d.points,
            item_type=polarity.value,
        )
        for i, d in enumerate(defs, start=1)
    ]


def _raw_catalog(branch_data: Union[Branch, Mapping, None]) -> Any:
    if branch_data is None:
        return None
    if isinstance(branch_data, Branch):
        return branch_data.discipline_items
    if isinstance(branch_data, Mapping):
        return branch_data.get("discipline_items")
    return None


def resolve_catalog(
    branch_data: Union[Branch, Mapping, None],
    polarity: Union[Polarity, str],
    fallback: Optional[FallbackCatalogConfig] = None,
) -> list[DisciplineItem]:
    """Verfügbare Verhaltens-Items für eine Polarität.

    Args:
        branch_data: Branch-Modell, rohes Branch-Dict oder None.
        polarity: "prs" oder "dps" (ValueError bei anderen Werten).
        fallback: Optionaler Ersatz-Katalog aus der Konfiguration.

    Returns:
        Nie leere Liste von DisciplineItem.
    """
    polarity = as_polarity(polarity)
    raw = _raw_catalog(branch_data)

    if raw is not None:
        for resolver in RESOLVERS:
            items = resolver(raw, polarity)
            if items:
                logger.debug(f"Katalog '{polarity.value}' via {resolver.__name__}: {len(items)} Items")
                return items

    logger.info(f"Kein Katalog für '{polarity.value}' in den Branch-Daten – Ersatz-Katalog aktiv")
    return fallback_catalog(polarity, fallback)
