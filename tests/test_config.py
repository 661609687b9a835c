"""Tests für das Konfigurationssystem und die Datenmodelle."""

from pathlib import Path

import pytest

from config.schema import (
    ApiConfig,
    BpsConfig,
    FallbackCatalogConfig,
    FallbackItemDef,
    LoggingConfig,
)
from config.defaults import (
    FALLBACK_DPS_ITEMS,
    FALLBACK_PRS_ITEMS,
    default_bps_config,
    default_fallback_catalog,
)
from config.manager import ConfigManager
from models.branch import BpsData
from models.discipline import DisciplineItem, Polarity
from models.student import Student


# ─── DEFAULT-KONFIGURATION ────────────────────────────────────────────────────

class TestDefaultConfig:
    def test_default_bps_config_valid(self):
        """Vollständige Default-Config ist valide."""
        config = default_bps_config()
        assert config.school_name == "Muster-Schule"
        assert config.default_branch_index == 0
        assert config.logging.level == "WARNING"

    def test_default_fallback_catalog(self):
        """4 positive + 4 negative Ersatz-Items."""
        fc = default_fallback_catalog()
        assert [(i.title, i.points) for i in fc.prs_items] == FALLBACK_PRS_ITEMS
        assert [(i.title, i.points) for i in fc.dps_items] == FALLBACK_DPS_ITEMS

    def test_default_endpoints(self):
        api = ApiConfig()
        assert api.url(api.endpoints.get_teacher_bps).endswith("/mobile-api/get-teacher-bps-data/")
        assert api.url(api.endpoints.store_bps).endswith("/discipline/store-bps")


# ─── PYDANTIC-VALIDIERUNG ─────────────────────────────────────────────────────

class TestPydanticValidation:
    def test_base_url_trailing_slash_removed(self):
        assert ApiConfig(base_url=" https://x.test/api/ ").base_url == "https://x.test/api"

    def test_base_url_without_scheme_raises(self):
        with pytest.raises(Exception):
            ApiConfig(base_url="x.test/api")

    def test_timeout_must_be_positive(self):
        with pytest.raises(Exception):
            ApiConfig(timeout_seconds=0)

    def test_fallback_wrong_size_raises(self):
        """Ersatz-Katalog braucht genau 4 Items je Polarität."""
        fc = default_fallback_catalog()
        with pytest.raises(Exception):
            FallbackCatalogConfig(prs_items=fc.prs_items[:3], dps_items=fc.dps_items)

    def test_fallback_sign_checked(self):
        """Negative Punkte in prs_items → Validierungsfehler."""
        fc = default_fallback_catalog()
        prs = fc.prs_items[:3] + [FallbackItemDef(title="Falsch", points=-1)]
        with pytest.raises(Exception):
            FallbackCatalogConfig(prs_items=prs, dps_items=fc.dps_items)

    def test_logging_level_normalized(self):
        assert LoggingConfig(level="debug").level == "DEBUG"
        with pytest.raises(Exception):
            LoggingConfig(level="LAUT")

    def test_fallback_catalog_required(self):
        with pytest.raises(Exception):
            BpsConfig()


# ─── YAML SPEICHERN / LADEN ───────────────────────────────────────────────────

class TestConfigManager:
    def test_save_and_load_roundtrip(self, tmp_path: Path):
        """Config speichern, laden und validieren — vollständiger Roundtrip."""
        config = default_bps_config().model_copy(update={
            "school_name": "Test-Schule",
            "api": ApiConfig(base_url="https://sis.example.test/api", timeout_seconds=5),
            "logging": LoggingConfig(level="INFO", file="bps.log"),
        })
        mgr = ConfigManager()
        mgr.CONFIG_DIR = tmp_path
        mgr.DEFAULT_CONFIG = tmp_path / "bps_config.yaml"

        mgr.save(config)
        assert mgr.DEFAULT_CONFIG.exists()

        loaded = mgr.load(mgr.DEFAULT_CONFIG)
        assert loaded == config

    def test_saved_yaml_has_comments(self, tmp_path: Path):
        mgr = ConfigManager()
        mgr.DEFAULT_CONFIG = tmp_path / "bps_config.yaml"
        mgr.save(default_bps_config())
        text = mgr.DEFAULT_CONFIG.read_text(encoding="utf-8")
        assert text.startswith("# ====")
        assert "Ersatz-Katalog" in text
        assert "Sekunden pro Request" in text

    def test_first_run_check_no_file(self, tmp_path: Path):
        """first_run_check gibt True zurück wenn keine Config existiert."""
        mgr = ConfigManager()
        mgr.DEFAULT_CONFIG = tmp_path / "nonexistent.yaml"
        assert mgr.first_run_check() is True

    def test_first_run_check_with_file(self, tmp_path: Path):
        """first_run_check gibt False zurück wenn Config existiert."""
        mgr = ConfigManager()
        mgr.CONFIG_DIR = tmp_path
        mgr.DEFAULT_CONFIG = tmp_path / "bps_config.yaml"
        mgr.save(default_bps_config())
        assert mgr.first_run_check() is False

    def test_load_nonexistent_raises(self, tmp_path: Path):
        """Laden einer nicht-existenten Datei → FileNotFoundError."""
        mgr = ConfigManager()
        with pytest.raises(FileNotFoundError):
            mgr.load(tmp_path / "not_there.yaml")

    def test_load_invalid_raises_value_error(self, tmp_path: Path):
        path = tmp_path / "bps_config.yaml"
        path.write_text("school_name: Test\napi:\n  base_url: ftp://x\n", encoding="utf-8")
        with pytest.raises(ValueError):
            ConfigManager().load(path)


# ─── MODELLE ──────────────────────────────────────────────────────────────────

class TestModels:
    def test_student_has_classroom(self):
        assert Student(student_id=1, name="A", classroom_name="5A").has_classroom
        assert not Student(student_id=2, name="B", classroom_name="  ").has_classroom
        assert not Student(student_id=3, name="C").has_classroom

    def test_student_extra_fields_ignored(self):
        s = Student.model_validate({"student_id": "S1", "name": "A", "photo": "x.png"})
        assert s.student_id == "S1"

    def test_discipline_item_polarity(self):
        item = DisciplineItem(discipline_item_id=1, item_title="X", item_point=2, item_type=" PRS")
        assert item.item_type == "prs"
        assert item.polarity is Polarity.PRS
        assert item.is_positive

    def test_discipline_item_unknown_type(self):
        item = DisciplineItem(discipline_item_id=1, item_title="X", item_point=0, item_type="misc")
        assert item.polarity is None

    def test_get_branch_index_fallback(self):
        """Ungültiger Index → erste Branch; ohne Branches → None."""
        data = BpsData.model_validate({"branches": [{"branch_id": 1}, {"branch_id": 2}]})
        assert data.get_branch(1).branch_id == 2
        assert data.get_branch(5).branch_id == 1
        assert BpsData().get_branch() is None
