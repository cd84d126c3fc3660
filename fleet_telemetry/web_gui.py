"""
Web API für den Fleet Telemetry Decoder
Flask-basierte Troubleshooting-Schnittstelle für Rohdaten von Geräten
"""

import logging

from flask import Flask, jsonify, request
from flask_cors import CORS

from .const import NO_FAULT, P1_FAULT_CODES
from .device_registry import DeviceRegistry, logic_label
from .hex_conversion import convert_hex_data, detect_logic_id_from_device_id


def _json_body():
    """JSON-Body des Requests als dict (leer falls ungültig)."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _parse_logic_id(value):
    """
    Logic ID aus Request-Daten als int.

    Akzeptiert nur Ganzzahlen oder Ziffern-Strings; bool, float und alles
    andere ergeben None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    return None


class WebGUI:
    """Troubleshooting-API für Hex-Konvertierung."""

    def __init__(self, port: int = 5000, registry: DeviceRegistry = None):
        """Initialisiere Web API."""
        self.port = port
        self.registry = registry if registry is not None else DeviceRegistry()

        self.app = Flask(__name__)
        CORS(self.app)

        # Routen definieren
        self.setup_routes()

        logging.info(f"Web API initialisiert auf Port {port}")

    def setup_routes(self):
        """Definiere API-Routen."""

        @self.app.route('/api/health')
        def health():
            """API: Statusabfrage."""
            return jsonify({"status": "ok"})

        @self.app.route('/api/convert', methods=['POST'])
        def convert():
            """API: Rohdaten mit angegebener Logik konvertieren."""
            data = _json_body()

            if 'hex_data' not in data or 'logic_id' not in data:
                return jsonify({"error": "hex_data und logic_id sind erforderlich"}), 400

            if not isinstance(data['hex_data'], str):
                return jsonify({"error": "hex_data muss ein String sein"}), 400

            logic_id = _parse_logic_id(data['logic_id'])
            if logic_id is None:
                return jsonify({"error": "logic_id muss eine Zahl sein"}), 400

            result = convert_hex_data(data['hex_data'], logic_id)
            return jsonify(result.to_dict())

        @self.app.route('/api/detect/<device_id>')
        def detect(device_id):
            """API: Logik anhand der Geräte-ID erkennen."""
            logic_id = detect_logic_id_from_device_id(device_id)
            return jsonify({
                "device_id": device_id,
                "logic_id": logic_id,
                "logic_label": logic_label(logic_id)
            })

        @self.app.route('/api/devices')
        def get_devices():
            """API: Liste aller Gerätezuweisungen."""
            return jsonify({"devices": self.registry.get_assignments()})

        @self.app.route('/api/devices', methods=['POST'])
        def assign_device():
            """API: Logik einem Gerät zuweisen."""
            data = _json_body()

            device_id = data.get('device_id')
            logic_id = _parse_logic_id(data.get('logic_id'))
            if not isinstance(device_id, str) or not device_id or logic_id is None:
                return jsonify({"error": "device_id und logic_id sind erforderlich"}), 400

            if self.registry.assign_logic(device_id, logic_id):
                return jsonify({"success": True, "message": "Logik erfolgreich zugewiesen"})
            else:
                return jsonify({"error": f"Logic ID {logic_id} wird nicht unterstützt"}), 400

        @self.app.route('/api/devices/<device_id>', methods=['DELETE'])
        def remove_device(device_id):
            """API: Gerätezuweisung entfernen."""
            if self.registry.remove_assignment(device_id):
                return jsonify({"success": True, "message": "Zuweisung entfernt"})
            else:
                return jsonify({"error": "Gerät nicht gefunden"}), 404

        @self.app.route('/api/devices/<device_id>/decode', methods=['POST'])
        def decode_device(device_id):
            """API: Rohdaten eines Geräts dekodieren."""
            data = _json_body()

            hex_data = data.get('hex_data')
            if not isinstance(hex_data, str):
                return jsonify({"error": "hex_data ist erforderlich"}), 400

            return jsonify(self.registry.decode_device_payload(device_id, hex_data))

        @self.app.route('/api/fault-codes')
        def fault_codes():
            """API: P1 Fehlercode-Tabelle."""
            return jsonify({
                "fault_codes": {str(code): name for code, name in P1_FAULT_CODES.items()},
                "unknown": NO_FAULT
            })

    def run(self):
        """Starte Web-Server."""
        try:
            self.app.run(
                host='0.0.0.0',
                port=self.port,
                debug=False,
                use_reloader=False,
                threaded=True
            )
        except Exception as e:
            logging.error(f"Fehler beim Starten der Web API: {e}")
