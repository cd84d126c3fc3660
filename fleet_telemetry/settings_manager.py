"""
Settings Manager für den Fleet Telemetry Decoder
Verwaltet lokale Konfigurationseinstellungen
"""

import json
import logging
import os
from typing import Any, Dict

from .const import (
    CONF_DEFAULT_LOGIC_ID,
    CONF_DEVICES,
    CONF_WEB_PORT,
    DEFAULT_LOGIC_ID,
    DEFAULT_WEB_PORT,
)


def default_settings() -> Dict[str, Any]:
    """Standard-Einstellungen."""
    return {
        CONF_WEB_PORT: DEFAULT_WEB_PORT,
        CONF_DEFAULT_LOGIC_ID: DEFAULT_LOGIC_ID,
        CONF_DEVICES: {},
    }


class SettingsManager:
    """Verwaltet Decoder-Einstellungen."""

    def __init__(self, config_file: str = None):
        """Initialisiere Settings Manager."""
        if config_file is None:
            # Persistente Speicherung in /data falls vorhanden
            if os.path.exists('/data'):
                config_file = '/data/settings.json'
            else:
                config_file = 'settings.json'  # Fallback für Entwicklung
        self.config_file = config_file
        self.settings = {}
        self.load_settings()

    def load_settings(self):
        """Lade Einstellungen aus Datei."""
        try:
            if os.path.exists(self.config_file):
                with open(self.config_file, 'r') as f:
                    self.settings = default_settings()
                    self.settings.update(json.load(f))
                logging.info("Einstellungen geladen")
            else:
                self.settings = default_settings()
                self.save_settings()
                logging.info("Standard-Einstellungen erstellt")
        except Exception as e:
            logging.error(f"Fehler beim Laden der Einstellungen: {e}")
            self.settings = default_settings()

    def save_settings(self):
        """Speichere Einstellungen in Datei."""
        try:
            if os.path.dirname(self.config_file):
                os.makedirs(os.path.dirname(self.config_file), exist_ok=True)

            with open(self.config_file, 'w') as f:
                json.dump(self.settings, f, indent=2)
            logging.info("Einstellungen gespeichert")
            return True
        except Exception as e:
            logging.error(f"Fehler beim Speichern der Einstellungen: {e}")
            return False

    def get_setting(self, key: str, default=None):
        """Hole einzelne Einstellung."""
        return self.settings.get(key, default)

    def set_setting(self, key: str, value: Any):
        """Setze einzelne Einstellung."""
        self.settings[key] = value
        return self.save_settings()

    def get_all_settings(self) -> Dict[str, Any]:
        """Hole alle Einstellungen."""
        return self.settings.copy()

    def reset_to_defaults(self):
        """Setze auf Standard-Einstellungen zurück."""
        self.settings = default_settings()
        return self.save_settings()
