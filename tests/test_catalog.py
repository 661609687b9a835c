"""Tests für den Verhaltens-Katalog (Resolver-Kette und Ersatz-Katalog)."""

import pytest

from bps.catalog import as_polarity, fallback_catalog, resolve_catalog
from config.schema import FallbackCatalogConfig, FallbackItemDef
from models.branch import Branch, BpsData
from models.discipline import Polarity


def _item(iid, title, points, item_type):
    return {"discipline_item_id": iid, "item_title": title,
            "item_point": points, "item_type": item_type}


FLAT = [
    _item(1, "Helpful", 3, "prs"),
    _item(2, "Late", -1, "dps"),
    _item(3, "Kind", 2, "PRS"),
]

KEYED = {
    "prs_items": [_item(11, "Helpful", 3, "prs")],
    "dps_items": [{"discipline_item_id": 21, "item_title": "Late", "item_point": -1}],
}


# ─── RESOLVER-KETTE ───────────────────────────────────────────────────────────

class TestResolveCatalog:
    def test_flat_list_filtered_by_type(self):
        """Flache Liste: nur Items der gewünschten Polarität, Typ case-insensitive."""
        branch = Branch(branch_id=1, discipline_items=FLAT)
        items = resolve_catalog(branch, "prs")
        assert [i.discipline_item_id for i in items] == [1, 3]
        assert all(i.item_type == "prs" for i in items)

    def test_keyed_object(self):
        """Objekt-Form {prs_items, dps_items}; fehlender item_type wird ergänzt."""
        branch = Branch(branch_id=1, discipline_items=KEYED)
        dps = resolve_catalog(branch, Polarity.DPS)
        assert [i.discipline_item_id for i in dps] == [21]
        assert dps[0].item_type == "dps"

    def test_raw_mapping_branch(self):
        """Rohes Branch-Dict wird ebenso akzeptiert."""
        items = resolve_catalog({"discipline_items": KEYED}, "prs")
        assert [i.item_title for i in items] == ["Helpful"]

    def test_missing_catalog_uses_fallback(self):
        """Ohne discipline_items → 4 Ersatz-Items dummy_prs_1..4."""
        items = resolve_catalog(Branch(branch_id=1), "prs")
        assert [i.discipline_item_id for i in items] == [
            "dummy_prs_1", "dummy_prs_2", "dummy_prs_3", "dummy_prs_4",
        ]

    def test_none_branch_uses_fallback(self):
        items = resolve_catalog(None, "dps")
        assert len(items) == 4
        assert all(str(i.discipline_item_id).startswith("dummy_dps_") for i in items)

    @pytest.mark.parametrize("raw", [
        None, [], {}, "unsinn", 42,
        {"prs_items": []},
        [_item(2, "Late", -1, "dps")],
        [{"item_title": "ohne id"}, "kein objekt"],
    ])
    def test_never_empty(self, raw):
        """Für jede Eingabeform liefert der Katalog mindestens ein Item."""
        assert resolve_catalog({"discipline_items": raw}, "prs")

    def test_malformed_entries_skipped(self):
        """Fehlerhafte Einträge werden übersprungen, gültige bleiben."""
        raw = [{"item_title": "ohne id", "item_type": "prs"}, _item(5, "Ok", 1, "prs")]
        items = resolve_catalog({"discipline_items": raw}, "prs")
        assert [i.discipline_item_id for i in items] == [5]

    def test_other_polarity_empty_falls_back(self):
        """Flache Liste ohne dps-Items → Ersatz-Katalog nur für dps."""
        raw = [_item(1, "Helpful", 3, "prs")]
        dps = resolve_catalog({"discipline_items": raw}, "dps")
        assert dps[0].discipline_item_id == "dummy_dps_1"

    def test_unknown_polarity_raises(self):
        with pytest.raises(ValueError):
            resolve_catalog(None, "neutral")

    def test_top_level_catalog_propagated(self):
        """Katalog auf oberster Ebene gilt für Branches ohne eigenen."""
        data = BpsData.model_validate({
            "branches": [
                {"branch_id": 1, "discipline_items": FLAT},
                {"branch_id": 2},
            ],
            "discipline_items": KEYED,
        })
        assert resolve_catalog(data.branches[0], "prs")[0].discipline_item_id == 1
        assert resolve_catalog(data.branches[1], "prs")[0].discipline_item_id == 11


# ─── ERSATZ-KATALOG ───────────────────────────────────────────────────────────

class TestFallbackCatalog:
    def test_default_values(self):
        prs = fallback_catalog("prs")
        assert [i.item_title for i in prs] == [
            "Excellent Participation", "Helping Others", "Outstanding Homework", "Leadership",
        ]
        assert all(i.item_point >= 0 for i in prs)
        assert all(i.item_point <= 0 for i in fallback_catalog("dps"))

    def test_configured_values(self):
        """Punktwerte kommen aus der Konfiguration."""
        config = FallbackCatalogConfig(
            prs_items=[FallbackItemDef(title=f"P{i}", points=i) for i in range(4)],
            dps_items=[FallbackItemDef(title=f"D{i}", points=-i) for i in range(4)],
        )
        items = resolve_catalog(None, "dps", config)
        assert [i.item_title for i in items] == ["D0", "D1", "D2", "D3"]
        assert items[3].item_point == -3
        assert items[3].discipline_item_id == "dummy_dps_4"

    def test_as_polarity(self):
        assert as_polarity(" PRS ") is Polarity.PRS
        assert as_polarity(Polarity.DPS) is Polarity.DPS
        with pytest.raises(ValueError):
            as_polarity("x")
