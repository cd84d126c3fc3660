"""
Hex Data Conversion Router
Selects the decoder for a conversion logic ID and classifies device IDs
"""

import logging
import re

from .const import (
    ERROR_NO_HEX_DATA,
    LOGIC_P1,
    LOGIC_P2,
    LOGIC_TYPE_UNKNOWN,
    LOGIC_UNKNOWN,
)
from .conversion import ConversionResult, StepTrace
from .errors import UnsupportedLogicError, ValidationError
from .p1_decoder import convert_p1_logic
from .p2_decoder import convert_p2_logic

logger = logging.getLogger(__name__)

P1_DEVICE_PATTERN = re.compile(r'P\d+|Q\d+|genvolt-.*', re.IGNORECASE | re.ASCII)
P2_DEVICE_PATTERN = re.compile(r'HK\d+|sick-.*|test-sensor-.*', re.IGNORECASE | re.ASCII)

DECODERS = {
    LOGIC_P1: convert_p1_logic,
    LOGIC_P2: convert_p2_logic,
}


def convert_hex_data(hex_data: str, logic_id: int) -> ConversionResult:
    """Decode hex_data with the decoder registered for logic_id. Never raises."""
    if not isinstance(hex_data, str) or not hex_data.strip():
        return ConversionResult.failed((), ValidationError(ERROR_NO_HEX_DATA), LOGIC_TYPE_UNKNOWN)

    decoder = None
    if isinstance(logic_id, int) and not isinstance(logic_id, bool):
        decoder = DECODERS.get(logic_id)
    if decoder is None:
        trace = StepTrace()
        trace.add(
            "Unknown conversion logic",
            f"Logic ID: {logic_id}",
            "No decoder available",
            "Supported logic IDs: 1 (P1 Fault Data), 2 (P2 SICK Sensor Data)",
        )
        logger.warning(f"Unbekannte Konvertierungslogik: {logic_id}")
        error = UnsupportedLogicError(
            f"Unknown conversion logic ID: {logic_id}. Supported values: 1 (P1), 2 (P2)"
        )
        return ConversionResult.failed(trace.steps, error, LOGIC_TYPE_UNKNOWN)

    return decoder(hex_data)


def detect_logic_id_from_device_id(device_id: str) -> int:
    """Guess the conversion logic ID from device naming conventions (0 = unknown)."""
    if not device_id:
        return LOGIC_UNKNOWN

    if P1_DEVICE_PATTERN.fullmatch(device_id):
        return LOGIC_P1

    if P2_DEVICE_PATTERN.fullmatch(device_id):
        return LOGIC_P2

    return LOGIC_UNKNOWN
