#!/usr/bin/env python3
"""
Fleet Telemetry Decoder
Hauptanwendung für die Troubleshooting-API der Geräte-Rohdaten
"""

import logging
import os
import sys
from typing import Any, Dict

from .const import CONF_DEFAULT_LOGIC_ID, CONF_DEVICES, CONF_WEB_PORT, DEFAULT_LOGIC_ID, DEFAULT_WEB_PORT
from .device_registry import DeviceRegistry
from .settings_manager import SettingsManager
from .web_gui import WebGUI


def setup_logging():
    """Konfiguriere Logging."""
    log_level = os.getenv('LOG_LEVEL', 'info').upper()

    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    # Reduziere Werkzeug Request-Logs
    logging.getLogger('werkzeug').setLevel(logging.WARNING)


class TelemetryDecoderApp:
    """Hauptklasse für den Telemetry Decoder."""

    def __init__(self, settings_path: str = None):
        """Initialisiere die Anwendung."""
        setup_logging()
        self.settings_path = settings_path
        self.config = self.load_config()

        self.registry = None
        self.web_gui = None

        logging.info("Fleet Telemetry Decoder initialisiert")

    def load_config(self) -> Dict[str, Any]:
        """Lade Konfiguration aus gespeicherten Einstellungen oder Environment Variables."""
        try:
            settings = SettingsManager(self.settings_path)
            saved_settings = settings.get_all_settings()
            logging.info(f"🔧 SETTINGS PFAD: {settings.config_file}")

            return {
                CONF_WEB_PORT: int(os.getenv('WEB_PORT') or saved_settings.get(CONF_WEB_PORT) or DEFAULT_WEB_PORT),
                CONF_DEFAULT_LOGIC_ID: int(os.getenv('DEFAULT_LOGIC_ID') or saved_settings.get(CONF_DEFAULT_LOGIC_ID) or DEFAULT_LOGIC_ID),
                CONF_DEVICES: saved_settings.get(CONF_DEVICES) or {}
            }
        except Exception as e:
            logging.warning(f"Konnte gespeicherte Einstellungen nicht laden: {e}, verwende Environment Variables")
            return {
                CONF_WEB_PORT: int(os.getenv('WEB_PORT', str(DEFAULT_WEB_PORT))),
                CONF_DEFAULT_LOGIC_ID: int(os.getenv('DEFAULT_LOGIC_ID', str(DEFAULT_LOGIC_ID))),
                CONF_DEVICES: {}
            }

    def build(self) -> WebGUI:
        """Erstelle Registry und Web API."""
        self.registry = DeviceRegistry(
            devices=self.config[CONF_DEVICES],
            default_logic_id=self.config[CONF_DEFAULT_LOGIC_ID]
        )
        self.web_gui = WebGUI(port=self.config[CONF_WEB_PORT], registry=self.registry)
        return self.web_gui

    def start(self):
        """Starte die Anwendung."""
        logging.info("Starte Fleet Telemetry Decoder...")

        try:
            self.build().run()
        except KeyboardInterrupt:
            logging.info("Shutdown angefordert")
        except Exception as e:
            logging.error(f"Fehler beim Starten: {e}")
            sys.exit(1)

        logging.info("Fleet Telemetry Decoder beendet")


def main():
    app = TelemetryDecoderApp()
    app.start()


if __name__ == "__main__":
    main()
