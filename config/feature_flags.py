"""
Pistachio - Feature Flags
=========================

Feature Flags ermöglichen gezieltes Debugging einzelner Subsysteme,
ohne dass Logging-Level global umgestellt werden müssen.

Die Flags sind reine Laufzeit-Schalter. Es werden keine Umgebungsvariablen
gelesen; Tests setzen Flags über set_flag() und die conftest-Isolation.
"""

from typing import Dict

# Feature Flag Registry
# =====================
FEATURE_FLAGS: Dict[str, bool] = {
    # Debug-Modi
    "sketch_debug": False,  # EntityStore/Sketch Debug (Inserts, Clear)
    "persistence_debug": False,  # Mapper + JSON-Codec Debug ([DTO], [CODEC])
    "render_debug": False,  # Zusammenfassung pro gebauter RenderScene

    # Datei-Format
    "compact_json": False,  # Speichern ohne Einrückung (kleinere Dateien)
}


def is_enabled(flag: str) -> bool:
    """
    Prüft ob ein Feature-Flag aktiviert ist.

    Args:
        flag: Name des Feature-Flags

    Returns:
        True wenn aktiviert, False wenn nicht aktiviert oder unbekannt
    """
    return FEATURE_FLAGS.get(flag, False)


def set_flag(flag: str, value: bool) -> None:
    """
    Setzt ein Feature-Flag zur Laufzeit.
    Nützlich für Tests und Debugging.

    Args:
        flag: Name des Feature-Flags
        value: Neuer Wert
    """
    FEATURE_FLAGS[flag] = value


def get_all_flags() -> Dict[str, bool]:
    """Gibt alle Feature-Flags zurück."""
    return FEATURE_FLAGS.copy()
