"""
Pistachio - Configuration Module
================================

Zentrale Konfiguration für alle globalen Einstellungen.
"""

from .feature_flags import is_enabled, set_flag, get_all_flags, FEATURE_FLAGS
