"""
Device Registry für den Fleet Telemetry Decoder
Verwaltet die Zuordnung Gerät -> Konvertierungslogik
"""

import logging
import threading
import time
from typing import Any, Dict, Optional, Tuple

from .const import LOGIC_LABEL_UNKNOWN, LOGIC_LABELS, LOGIC_UNKNOWN, SUPPORTED_LOGIC_IDS
from .hex_conversion import convert_hex_data, detect_logic_id_from_device_id

SOURCE_ASSIGNED = 'assigned'
SOURCE_DEFAULT = 'default'
SOURCE_DETECTED = 'detected'


def logic_label(logic_id: int) -> str:
    """Anzeigename einer Konvertierungslogik."""
    return LOGIC_LABELS.get(logic_id, LOGIC_LABEL_UNKNOWN)


class DeviceRegistry:
    """Zuordnung von Geräte-IDs zu Konvertierungslogiken."""

    def __init__(self, devices: Optional[Dict[str, Any]] = None, default_logic_id: int = LOGIC_UNKNOWN):
        """Initialisiere Registry mit konfigurierten Geräten."""
        self.default_logic_id = default_logic_id
        self.assignments = {}  # device_id -> assignment_info
        self._lock = threading.Lock()

        for device_id, logic_id in (devices or {}).items():
            try:
                logic_id = int(logic_id)
            except (TypeError, ValueError):
                logging.warning(f"Ungültige Logic ID für Gerät {device_id} in Konfiguration: {logic_id}")
                continue
            if not self.assign_logic(device_id, logic_id):
                logging.warning(f"Gerät {device_id} aus Konfiguration übersprungen")

        logging.info(f"Device Registry initialisiert ({len(self.assignments)} Geräte)")

    def assign_logic(self, device_id: str, logic_id: int) -> bool:
        """Weise einem Gerät eine Konvertierungslogik zu."""
        if not isinstance(device_id, str) or not device_id:
            logging.error(f"Ungültige Geräte-ID: {device_id!r}")
            return False

        if isinstance(logic_id, bool) or logic_id not in SUPPORTED_LOGIC_IDS:
            logging.error(f"Logic ID {logic_id} wird nicht unterstützt")
            return False

        with self._lock:
            self.assignments[device_id] = {
                'logic_id': logic_id,
                'assigned_at': time.time()
            }
        logging.info(f"Logic {logic_id} an Gerät {device_id} zugewiesen")
        return True

    def remove_assignment(self, device_id: str) -> bool:
        """Entferne Zuweisung von Gerät."""
        with self._lock:
            removed = self.assignments.pop(device_id, None)

        if removed is None:
            return False

        logging.info(f"Zuweisung für Gerät {device_id} entfernt")
        return True

    def get_assignments(self) -> Dict[str, Any]:
        """Gib alle Zuweisungen zurück."""
        with self._lock:
            return {device_id: dict(info) for device_id, info in self.assignments.items()}

    def resolve_logic(self, device_id: str) -> Tuple[int, str]:
        """Ermittle Logic ID und deren Herkunft für ein Gerät."""
        with self._lock:
            assignment = self.assignments.get(device_id)

        if assignment:
            return assignment['logic_id'], SOURCE_ASSIGNED

        if self.default_logic_id in SUPPORTED_LOGIC_IDS:
            return self.default_logic_id, SOURCE_DEFAULT

        return detect_logic_id_from_device_id(device_id), SOURCE_DETECTED

    def get_logic_id(self, device_id: str) -> int:
        """Gib Logic ID für Gerät zurück (0 = unbekannt)."""
        return self.resolve_logic(device_id)[0]

    def decode_device_payload(self, device_id: str, hex_data: str) -> Dict[str, Any]:
        """Dekodiere Rohdaten eines Geräts mit der zugeordneten Logik."""
        logic_id, source = self.resolve_logic(device_id)
        result = convert_hex_data(hex_data, logic_id)

        if result.success:
            logging.info(f"✅ Payload für {device_id} dekodiert ({result.logic_type})")
        else:
            logging.warning(f"Payload für {device_id} nicht dekodiert: {result.error}")

        return {
            'device_id': device_id,
            'logic_id': logic_id,
            'logic_source': source,
            'logic_label': logic_label(logic_id),
            'hex_length': len(hex_data or ''),
            'result': result.to_dict()
        }
