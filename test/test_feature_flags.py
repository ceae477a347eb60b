"""
Feature Flags Tests - Tests für das Feature Flag System
"""

import pytest
from config.feature_flags import (
    is_enabled,
    set_flag,
    get_all_flags,
    FEATURE_FLAGS
)

from conftest import FEATURE_FLAG_DEFAULTS


class TestFeatureFlagsBasic:
    """Tests für grundlegende Feature Flag Funktionalität."""

    def test_is_enabled_existing_flag_false(self):
        """Test: Existierendes Flag mit Wert False."""
        assert is_enabled("sketch_debug") is False

    def test_is_enabled_nonexistent_flag(self):
        """Test: Nicht existierendes Flag gibt False zurück."""
        assert is_enabled("nonexistent_flag_xyz123") is False

    def test_get_all_flags_returns_copy(self):
        """Test: get_all_flags gibt eine Kopie zurück."""
        flags = get_all_flags()
        flags["new_flag"] = True

        assert "new_flag" not in FEATURE_FLAGS

    def test_set_flag_runtime(self):
        """Test: Set Flag zur Laufzeit."""
        set_flag("runtime_test_flag", True)
        assert is_enabled("runtime_test_flag") is True

        set_flag("runtime_test_flag", False)
        assert is_enabled("runtime_test_flag") is False

        del FEATURE_FLAGS["runtime_test_flag"]


class TestFlagDefaults:
    """Registry und conftest-Defaults müssen synchron sein."""

    def test_registry_matches_test_defaults(self):
        assert get_all_flags() == FEATURE_FLAG_DEFAULTS

    @pytest.mark.parametrize("flag", ["sketch_debug", "persistence_debug", "render_debug"])
    def test_debug_flags_default_false(self, flag):
        assert is_enabled(flag) is False

    def test_compact_json_default_false(self):
        """Test: Dateien werden standardmäßig eingerückt gespeichert."""
        assert is_enabled("compact_json") is False


class TestFeatureFlagRuntimeModification:

    def test_debug_flags_can_be_enabled(self):
        """Test: Debug Flags können aktiviert werden."""
        for flag in ("sketch_debug", "persistence_debug", "render_debug"):
            set_flag(flag, True)
            assert is_enabled(flag) is True

    def test_isolation_resets_previous_mutation(self):
        """Test: Der vorherige Test hat Flags gesetzt, die conftest-Isolation setzt sie zurück."""
        assert is_enabled("sketch_debug") is False
        assert is_enabled("render_debug") is False
