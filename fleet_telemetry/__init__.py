"""
Fleet Telemetry Decoder
Dekodiert Hex-Rohdaten von P1 (Genvolt HV) und P2 (SICK Sensor) Geräten
"""

__version__ = "1.0.0"

from .conversion import ConversionResult, ConversionStep, P1DecodedData, P2DecodedData
from .errors import (
    ConversionError,
    DecodeError,
    FormatError,
    LengthError,
    UnsupportedLogicError,
    ValidationError,
)
from .hex_conversion import convert_hex_data, detect_logic_id_from_device_id
from .p1_decoder import convert_p1_logic
from .p2_decoder import convert_p2_logic

# Namen wie im Dashboard-Frontend
convertHexData = convert_hex_data
convertP1Logic = convert_p1_logic
convertP2Logic = convert_p2_logic
detectLogicIdFromDeviceId = detect_logic_id_from_device_id
