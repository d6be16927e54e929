"""Tests für Konfiguration, Standardwerte und den ConfigManager."""

import pytest
from pydantic import ValidationError

from config.defaults import (
    CORE_SUBJECTS, PARALLEL_GROUPS, STUNDENTAFEL_REALSCHULE_NRW, SUBJECT_METADATA,
    default_optimizer_config, default_settings,
)
from config.manager import ConfigManager
from config.schema import OptimizationSettings, OptimizerConfig


@pytest.fixture
def manager(tmp_path):
    mgr = ConfigManager()
    mgr.DEFAULT_CONFIG = tmp_path / "config" / "optimizer_config.yaml"
    return mgr


# ─── DEFAULT-KONFIGURATION ────────────────────────────────────────────────────

class TestDefaults:
    def test_default_settings(self):
        s = default_settings()
        assert s.prioritize_qualifications
        assert s.balance_workload
        assert s.minimize_conflicts
        assert s.respect_max_hours
        assert not s.allow_partial_assignments
        assert s == OptimizationSettings()

    def test_default_config(self):
        config = default_optimizer_config()
        assert config.bundesland == "NRW"
        assert config.curriculum is None
        assert config.ideal_utilization == 85

    def test_core_subjects(self):
        assert CORE_SUBJECTS == {"Deutsch", "Mathematik", "Englisch"}

    def test_stundentafel_has_no_parallel_members(self):
        members = {m for group in PARALLEL_GROUPS.values() for m in group}
        for grade, row in STUNDENTAFEL_REALSCHULE_NRW.items():
            assert not members & set(row), f"Jahrgang {grade} enthält Einzelfächer"

    def test_stundentafel_subjects_have_metadata(self):
        for row in STUNDENTAFEL_REALSCHULE_NRW.values():
            assert set(row) <= set(SUBJECT_METADATA)

    def test_stundentafel_totals(self):
        totals = {g: sum(r.values()) for g, r in STUNDENTAFEL_REALSCHULE_NRW.items()}
        assert totals == {5: 28, 6: 28, 7: 33, 8: 34, 9: 32, 10: 35}


# ─── SCHEMA-VALIDIERUNG ───────────────────────────────────────────────────────

class TestSchema:
    def test_negative_curriculum_hours_rejected(self):
        with pytest.raises(ValidationError):
            OptimizerConfig(curriculum={5: {"Deutsch": -1}})

    def test_ideal_utilization_range(self):
        with pytest.raises(ValidationError):
            OptimizerConfig(ideal_utilization=120)

    def test_balance_spread_positive(self):
        with pytest.raises(ValidationError):
            OptimizerConfig(balance_spread=0)


# ─── CONFIGMANAGER ────────────────────────────────────────────────────────────

class TestConfigManager:
    def test_first_run(self, manager):
        assert manager.first_run_check()
        manager.save(default_optimizer_config())
        assert not manager.first_run_check()

    def test_roundtrip(self, manager):
        config = OptimizerConfig(
            school_name="Realschule am Park",
            settings=OptimizationSettings(balance_workload=False),
            curriculum={5: {"Deutsch": 5, "Mathematik": 4}},
            ideal_utilization=80,
        )
        manager.save(config)
        loaded = manager.load()
        assert loaded == config

    def test_yaml_has_german_comments(self, manager):
        manager.save(default_optimizer_config())
        text = manager.DEFAULT_CONFIG.read_text(encoding="utf-8")
        assert "Lehrerzuweisungs-Optimierer" in text
        assert "Optimierungs-Schalter" in text
        assert "# Qualifikation priorisieren" in text

    def test_load_missing_raises(self, manager):
        with pytest.raises(FileNotFoundError):
            manager.load()

    def test_load_invalid_raises_value_error(self, manager):
        manager.DEFAULT_CONFIG.parent.mkdir(parents=True)
        manager.DEFAULT_CONFIG.write_text("ideal_utilization: 500\n", encoding="utf-8")
        with pytest.raises(ValueError, match="ungültig"):
            manager.load()

    def test_load_or_default(self, manager):
        assert manager.load_or_default() == default_optimizer_config()

