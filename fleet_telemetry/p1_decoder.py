"""
P1 Logic Decoder
Decodes the decimal-encoded 16-hex-digit fault/runtime record of Genvolt high-voltage control units
"""

import logging
from typing import Tuple

from .bit_utils import (
    bits_to_int,
    char_from_end,
    hex_to_binary,
    is_digit_string,
    require_length,
    slice_from_end,
)
from .const import (
    ERROR_EMPTY_INPUT,
    LOGIC_TYPE_P1,
    NO_FAULT,
    P1_FAULT_CODES,
    P1_RECORD_LENGTH,
    P1_RECORD_MASK,
)
from .conversion import ConversionResult, P1DecodedData, StepTrace
from .errors import ConversionError, DecodeError, FormatError

logger = logging.getLogger(__name__)

_DIGIT_BLOCK = 18


def _on_off(bit: str) -> str:
    return "On" if bit == '1' else "Off"


def convert_p1_logic(hex_data: str) -> ConversionResult:
    """
    Decode a P1 record

    Args:
        hex_data: Decimal digit string; its value is the 64-bit record

    Returns:
        ConversionResult with the ten P1 fields on success. Never raises.
    """
    trace = StepTrace()
    hex_data = hex_data if hex_data is not None else ""

    try:
        trace.add(
            "Validate input format",
            f'"{hex_data}"',
            "Valid numeric string" if hex_data else "Invalid: empty input",
            "P1 requires numeric string input (digits only)",
        )

        if not hex_data.strip():
            raise FormatError(ERROR_EMPTY_INPUT)

        if not is_digit_string(hex_data):
            trace.add(
                "Format validation failed",
                hex_data,
                "Invalid format",
                "P1 logic requires numeric string (digits only)",
            )
            raise FormatError("Invalid format: P1 logic requires numeric string (digits only)")

        decoded = _decode_record(hex_data, trace)

    except ConversionError as e:
        logger.warning(f"P1 Konvertierung abgelehnt: {e.message}")
        return ConversionResult.failed(trace.steps, e, LOGIC_TYPE_P1)
    except Exception as e:
        trace.add("Conversion failed", hex_data, "Error occurred", f"Error: {e}")
        logger.error(f"P1 Konvertierung fehlgeschlagen: {e}")
        error = DecodeError(f"Failed to decode P1 hex data: {e}")
        return ConversionResult.failed(trace.steps, error, LOGIC_TYPE_P1)

    logger.debug(f"P1 Datensatz dekodiert: {decoded}")
    return ConversionResult.ok(trace, decoded, LOGIC_TYPE_P1)


def low_64_bits(digits: str) -> Tuple[int, bool]:
    """
    Reduce a decimal digit string to its low 64 bits

    Works through the digits in blocks so arbitrarily long strings never go
    through a single int() conversion.

    Returns:
        (value, truncated) where truncated is True if higher bits were dropped
    """
    value = 0
    truncated = False
    for start in range(0, len(digits), _DIGIT_BLOCK):
        block = digits[start:start + _DIGIT_BLOCK]
        value = value * 10 ** len(block) + int(block)
        if value > P1_RECORD_MASK:
            truncated = True
            value &= P1_RECORD_MASK
    return value, truncated


def _decode_record(digits: str, trace: StepTrace) -> P1DecodedData:
    # 16-char hex record
    value, truncated = low_64_bits(digits)
    notes = "Format as 16-character hex with leading zeros"
    if truncated:
        notes += "; value exceeded 64 bits, truncated to the low 64 bits"
    hex_str = require_length(format(value, 'X').zfill(P1_RECORD_LENGTH), P1_RECORD_LENGTH)
    trace.add("Convert to 16-character hex string", digits, hex_str, notes)

    # Runtime
    runtime_hex = slice_from_end(hex_str, 4)
    runtime = int(runtime_hex, 16)
    trace.add(
        "Extract runtime from last 4 characters",
        f'"{runtime_hex}" (hex)',
        f"{runtime} minutes",
        "Direct hex to decimal conversion",
    )

    # Fault bitfield, code = 15 - bit index
    fault_hex = slice_from_end(hex_str, 8, 4)
    fault_binary = hex_to_binary(fault_hex, 16)
    fault_positions = [15 - i for i, bit in enumerate(fault_binary) if bit == '1']
    fault_descriptions = [P1_FAULT_CODES.get(code, NO_FAULT) for code in fault_positions]
    positions_text = ', '.join(str(code) for code in fault_positions)
    trace.add(
        "Extract and decode fault codes",
        f'"{fault_hex}" → "{fault_binary}" (binary)',
        f"Active faults: [{positions_text}]",
        "Convert to binary, find bit positions where value = 1",
    )
    trace.add(
        "Map fault codes to descriptions",
        f"Fault positions: [{positions_text}]",
        ', '.join(fault_descriptions) or "No active faults",
        "Look up fault descriptions from fault code table",
    )

    # Leading fault
    leading_code_hex = char_from_end(hex_str, 10)
    leading_time_hex = slice_from_end(hex_str, 12, 10)
    leading_code = int(leading_code_hex, 16)
    leading_time = int(leading_time_hex, 16)
    trace.add(
        "Extract leading fault information",
        f'Code: "{leading_code_hex}", Time: "{leading_time_hex}"',
        f"Leading fault: {leading_code}, Duration: {leading_time}hr",
        "Single hex character for code, 2 hex chars for time in hours",
    )

    # Signal status byte
    signal_hex = slice_from_end(hex_str, 14, 12)
    signal_binary = hex_to_binary(signal_hex, 8)
    genset_signal = _on_off(signal_binary[0])
    thermostat_status = _on_off(signal_binary[1])
    hv_voltage = bits_to_int(signal_binary[2:])
    trace.add(
        "Extract signal status information",
        f'"{signal_hex}" → "{signal_binary}" (binary)',
        f"Genset: {genset_signal}, Thermostat: {thermostat_status}, HV: {hv_voltage}kV",
        "Bit 0: Genset Signal, Bit 1: Thermostat, Bits 2-7: HV Output Voltage",
    )

    # HV current byte (most significant)
    hv_current_hex = hex_str[0:2]
    hv_current_binary = hex_to_binary(hv_current_hex, 8)
    hv_source_no = bits_to_int(hv_current_binary[:2])
    hv_current = bits_to_int(hv_current_binary[2:])
    trace.add(
        "Extract HV current information",
        f'"{hv_current_hex}" → "{hv_current_binary}" (binary)',
        f"Source: {hv_source_no}, Current: {hv_current}mA",
        "Bits 0-1: HV Source Number, Bits 2-7: HV Output Current",
    )

    return P1DecodedData(
        runtime_min=runtime,
        fault_codes=', '.join(str(code) for code in fault_positions),
        fault_descriptions=', '.join(fault_descriptions),
        leading_fault_code=leading_code,
        leading_fault_time_hr=leading_time,
        genset_signal=genset_signal,
        thermostat_status=thermostat_status,
        hv_output_voltage_kv=hv_voltage,
        hv_source_no=hv_source_no,
        hv_output_current_ma=hv_current,
    )
