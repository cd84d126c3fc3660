"""
P2 Logic Decoder
Decodes the XOR-obfuscated 64-character motor/GPS record of SICK sensor units

Layout after decryption (8 chunks of 32 bits):
    0  device series (2 ASCII bytes) + serial number
    1  GSM signal, motor ON time, motor OFF time, wheels configured
    2  latitude / longitude integer parts
    3  latitude decimal part
    4  longitude decimal part
    5  wheels detected, fault code, motor current (byte-swapped)
    6, 7  reserved
"""

import logging
from typing import List

from .bit_utils import (
    hex_to_ascii,
    is_hex_string,
    require_length,
    split_bytes,
    split_chunks,
    swap_bytes,
    xor_chunk,
)
from .const import (
    LOGIC_TYPE_P2,
    P2_CHUNK_COUNT,
    P2_CHUNK_LENGTH,
    P2_GSM_OVERFLOW_LIMIT,
    P2_GSM_OVERFLOW_OFFSET,
    P2_RECORD_LENGTH,
    P2_XOR_KEY,
)
from .conversion import ConversionResult, P2DecodedData, StepTrace
from .errors import ConversionError, DecodeError, FormatError, LengthError

logger = logging.getLogger(__name__)

XOR_KEY_INT = int(P2_XOR_KEY, 16)


def convert_p2_logic(hex_data: str) -> ConversionResult:
    """
    Decode a P2 record

    Args:
        hex_data: Exactly 64 hex characters

    Returns:
        ConversionResult with the ten P2 fields on success. Never raises.
    """
    trace = StepTrace()
    hex_data = hex_data if hex_data is not None else ""

    try:
        length = len(hex_data)
        trace.add(
            "Validate input format",
            f'"{hex_data}" ({length} chars)',
            "Valid 64-character hex string" if length == P2_RECORD_LENGTH else f"Invalid: {length} characters",
            "P2 requires exactly 64-character hex string",
        )

        if length != P2_RECORD_LENGTH:
            raise LengthError(
                f"Invalid length: P2 logic requires exactly 64-character hex string, got {length}"
            )

        if not is_hex_string(hex_data):
            trace.add(
                "Format validation failed",
                hex_data,
                "Invalid format",
                "P2 logic requires hexadecimal characters only (0-9, A-F)",
            )
            raise FormatError("Invalid format: P2 logic requires hexadecimal characters only")

        decoded = _decode_record(hex_data, trace)

    except ConversionError as e:
        logger.warning(f"P2 Konvertierung abgelehnt: {e.message}")
        return ConversionResult.failed(trace.steps, e, LOGIC_TYPE_P2)
    except Exception as e:
        trace.add("Conversion failed", hex_data, "Error occurred", f"Error: {e}")
        logger.error(f"P2 Konvertierung fehlgeschlagen: {e}")
        error = DecodeError(f"Failed to decode P2 hex data: {e}")
        return ConversionResult.failed(trace.steps, error, LOGIC_TYPE_P2)

    logger.debug(f"P2 Datensatz dekodiert: {decoded}")
    return ConversionResult.ok(trace, decoded, LOGIC_TYPE_P2)


def decrypt_chunks(hex_data: str) -> List[str]:
    """XOR-decrypt all eight 32-bit chunks of a P2 record."""
    chunks = split_chunks(hex_data, P2_CHUNK_LENGTH)
    return [
        require_length(xor_chunk(chunk, XOR_KEY_INT, P2_CHUNK_LENGTH), P2_CHUNK_LENGTH)
        for chunk in chunks
    ]


def _decode_record(hex_data: str, trace: StepTrace) -> P2DecodedData:
    trace.add(
        "Setup XOR decryption key",
        f'Key: "{P2_XOR_KEY}"',
        f"Key integer: {XOR_KEY_INT}",
        "Standard decryption key for P2 devices",
    )

    chunks = split_chunks(hex_data, P2_CHUNK_LENGTH)
    trace.add(
        "Split 64-character hex into 8 chunks",
        "64-char string",
        f"{P2_CHUNK_COUNT} chunks: [{', '.join(chunks)}]",
        "Each chunk represents different data categories",
    )

    decrypted = decrypt_chunks(hex_data)
    trace.add(
        "XOR decrypt each chunk",
        f"Encrypted chunks with key {P2_XOR_KEY}",
        f"Decrypted: [{', '.join(decrypted)}]",
        "Apply XOR operation to each 8-character chunk",
    )

    # Chunk 0: device id
    series_hex = decrypted[0][:4]
    serial_hex = decrypted[0][4:]
    series = hex_to_ascii(series_hex)
    serial = str(int(serial_hex, 16)).zfill(5)
    device_id = series + serial
    trace.add(
        "Extract Device ID from Chunk 1",
        f'Series: "{series_hex}", Serial: "{serial_hex}"',
        f'Device ID: "{device_id}"',
        "Series (4 hex → ASCII) + Serial (4 hex → 5-digit decimal)",
    )

    # Chunk 1: operational values
    gsm_hex, motor_on_hex, motor_off_hex, wheels_hex = split_bytes(decrypted[1])
    gsm_signal = int(gsm_hex, 16)
    if gsm_signal > P2_GSM_OVERFLOW_LIMIT:
        gsm_signal -= P2_GSM_OVERFLOW_OFFSET
    motor_on = int(motor_on_hex, 16)
    motor_off = int(motor_off_hex, 16)
    wheels_configured = int(wheels_hex, 16)
    trace.add(
        "Extract operational values from Chunk 2",
        f'"{decrypted[1]}" split into 2-char segments',
        f"GSM: {gsm_signal}, Motor ON: {motor_on}s, Motor OFF: {motor_off}s, Wheels: {wheels_configured}",
        "GSM signal (with overflow check), motor timings, wheel count",
    )

    # Chunk 2: coordinate integer parts
    lat_int_hex = decrypted[2][:4]
    lng_int_hex = decrypted[2][4:]
    latitude_integer = int(lat_int_hex, 16)
    longitude_integer = int(lng_int_hex, 16)
    trace.add(
        "Extract coordinate integer parts from Chunk 3",
        f'"{decrypted[2]}" → Lat: "{lat_int_hex}", Lng: "{lng_int_hex}"',
        f"Latitude int: {latitude_integer}, Longitude int: {longitude_integer}",
        "Integer parts of GPS coordinates",
    )

    # Chunks 3/4: decimal parts, joined textually
    latitude_decimal = int(decrypted[3], 16)
    longitude_decimal = int(decrypted[4], 16)
    latitude = float(f"{latitude_integer}.{latitude_decimal}")
    longitude = float(f"{longitude_integer}.{longitude_decimal}")
    trace.add(
        "Extract coordinate decimal parts and combine",
        f'Chunk 4: "{decrypted[3]}" (lat decimal), Chunk 5: "{decrypted[4]}" (lng decimal)',
        f"Final coordinates: {latitude}, {longitude}",
        "Combine integer.decimal format for final GPS coordinates",
    )

    # Chunk 5: detection and current
    wheels_detected_hex, fault_hex, current_low, current_high = split_bytes(decrypted[5])
    wheels_detected = int(wheels_detected_hex, 16)
    fault_code = int(fault_hex, 16)
    motor_current = int(swap_bytes(current_low, current_high), 16)
    trace.add(
        "Extract detection and current values from Chunk 6",
        f'"{decrypted[5]}" with byte swapping for current',
        f"Wheels detected: {wheels_detected}, Fault: {fault_code}, Current: {motor_current}mA",
        "Wheels detected, fault code, motor current with byte swapping",
    )

    return P2DecodedData(
        device_id=device_id,
        gsm_signal_strength=gsm_signal,
        motor_on_time_sec=motor_on,
        motor_off_time_sec=motor_off,
        wheels_configured=wheels_configured,
        latitude=latitude,
        longitude=longitude,
        wheels_detected=wheels_detected,
        fault_code=fault_code,
        motor_current_ma=motor_current,
    )
