from __future__ import annotations

import unittest
from typing import List
from unittest import mock

from fleet_telemetry.conversion import P2DecodedData
from fleet_telemetry.p2_decoder import convert_p2_logic, decrypt_chunks

XOR_KEY = 0x7AC5B2E1

P2_FIELDS = [
    "device_id_extracted",
    "GSM_Signal_Strength",
    "Motor_ON_Time_sec",
    "Motor_OFF_Time_sec",
    "Number_of_Wheels_Configured",
    "Latitude",
    "Longitude",
    "Number_of_Wheels_Detected",
    "Fault_Code",
    "Motor_Current_mA",
]


def encrypt(plain_chunks: List[str]) -> str:
    return "".join(format(int(chunk, 16) ^ XOR_KEY, "08X") for chunk in plain_chunks)


def sample_chunks(**overrides: str) -> List[str]:
    chunks = {
        "device": "484B0065",
        "operational": "041E3C08",
        "coord_int": "001C004D",
        "lat_dec": "00000265",
        "lng_dec": "0000082A",
        "detection": "08003412",
        "reserved1": "00000000",
        "reserved2": "00000000",
    }
    chunks.update(overrides)
    return list(chunks.values())


class P2DecoderTests(unittest.TestCase):
    def test_all_zero_record(self) -> None:
        result = convert_p2_logic("0" * 64)
        self.assertTrue(result.success)
        self.assertEqual(result.logic_type, "P2")
        self.assertEqual(
            result.decoded_data,
            {
                "device_id_extracted": "z\u00c545793",
                "GSM_Signal_Strength": -6,
                "Motor_ON_Time_sec": 197,
                "Motor_OFF_Time_sec": 178,
                "Number_of_Wheels_Configured": 225,
                "Latitude": float("31429.2059776737"),
                "Longitude": float("45793.2059776737"),
                "Number_of_Wheels_Detected": 122,
                "Fault_Code": 197,
                "Motor_Current_mA": 57778,
            },
        )
        self.assertEqual(decrypt_chunks("0" * 64), ["7AC5B2E1"] * 8)

    def test_decrypt_step_lists_all_chunks(self) -> None:
        result = convert_p2_logic("0" * 64)
        decrypt_step = next(s for s in result.steps if s.description == "XOR decrypt each chunk")
        self.assertEqual(decrypt_step.output, "Decrypted: [" + ", ".join(["7AC5B2E1"] * 8) + "]")

    def test_typed_view_matches_field_map(self) -> None:
        result = convert_p2_logic("0" * 64)
        self.assertIsInstance(result.decoded, P2DecodedData)
        self.assertEqual(result.decoded.motor_current_ma, 57778)
        self.assertEqual(result.decoded.device_id, "z\u00c545793")
        self.assertEqual(result.decoded.as_dict(), dict(result.decoded_data))
        self.assertIsNone(convert_p2_logic("0" * 63).decoded)

    def test_result_is_read_only_and_unhashable(self) -> None:
        result = convert_p2_logic("0" * 64)
        with self.assertRaises(TypeError):
            result.decoded_data["Fault_Code"] = 0
        self.assertEqual(result.decoded_data["Fault_Code"], 197)
        with self.assertRaises(TypeError):
            hash(result)
        self.assertEqual(result, convert_p2_logic("0" * 64))

    def test_sample_record(self) -> None:
        result = convert_p2_logic(encrypt(sample_chunks()))
        self.assertTrue(result.success)
        self.assertEqual(list(result.decoded_data), P2_FIELDS)
        data = result.decoded_data
        self.assertEqual(data["device_id_extracted"], "HK00101")
        self.assertEqual(data["GSM_Signal_Strength"], 4)
        self.assertEqual(data["Motor_ON_Time_sec"], 30)
        self.assertEqual(data["Motor_OFF_Time_sec"], 60)
        self.assertEqual(data["Number_of_Wheels_Configured"], 8)
        self.assertEqual(data["Latitude"], 28.613)
        self.assertEqual(data["Longitude"], 77.209)
        self.assertEqual(data["Number_of_Wheels_Detected"], 8)
        self.assertEqual(data["Fault_Code"], 0)
        self.assertEqual(data["Motor_Current_mA"], 0x1234)

    def test_lowercase_input(self) -> None:
        record = encrypt(sample_chunks())
        self.assertEqual(
            convert_p2_logic(record.lower()).decoded_data,
            convert_p2_logic(record).decoded_data,
        )

    def test_motor_current_bytes_are_swapped(self) -> None:
        result = convert_p2_logic(encrypt(sample_chunks(detection="0000ABCD")))
        self.assertEqual(result.decoded_data["Motor_Current_mA"], int("CD" + "AB", 16))
        self.assertNotEqual(result.decoded_data["Motor_Current_mA"], int("AB" + "CD", 16))

    def test_gsm_overflow_correction(self) -> None:
        cases = {"06": 6, "07": 7 - 128, "00": 0, "FF": 255 - 128}
        for raw, expected in cases.items():
            with self.subTest(raw=raw):
                result = convert_p2_logic(encrypt(sample_chunks(operational=raw + "1E3C08")))
                self.assertEqual(result.decoded_data["GSM_Signal_Strength"], expected)

    def test_null_bytes_stripped_from_series(self) -> None:
        result = convert_p2_logic(encrypt(sample_chunks(device="00410001")))
        self.assertEqual(result.decoded_data["device_id_extracted"], "A00001")

    def test_coordinates_concatenate_decimal_digits(self) -> None:
        # 0x0A = 10, so the decimal part reads ".10" rather than a tenth of the value
        result = convert_p2_logic(encrypt(sample_chunks(coord_int="00010002", lat_dec="0000000A", lng_dec="00000001")))
        self.assertEqual(result.decoded_data["Latitude"], 1.10)
        self.assertEqual(result.decoded_data["Longitude"], 2.1)

    def test_wrong_length(self) -> None:
        result = convert_p2_logic("A" * 63)
        self.assertFalse(result.success)
        self.assertIn("got 63", result.error)
        self.assertEqual(result.error_type, "LengthError")
        self.assertEqual(len(result.steps), 1)
        self.assertEqual(result.steps[0].output, "Invalid: 63 characters")

    def test_lengths_other_than_64_fail(self) -> None:
        for length in (0, 1, 8, 65, 128):
            with self.subTest(length=length):
                result = convert_p2_logic("0" * length)
                self.assertFalse(result.success)
                self.assertIn(f"got {length}", result.error)

    def test_non_hex_characters(self) -> None:
        record = "0" * 60 + "ZZ00"
        result = convert_p2_logic(record)
        self.assertFalse(result.success)
        self.assertEqual(result.error_type, "FormatError")
        self.assertIn("Invalid format", result.error)
        self.assertEqual(result.steps[-1].description, "Format validation failed")

    def test_unexpected_error_keeps_trace(self) -> None:
        with mock.patch("fleet_telemetry.p2_decoder.hex_to_ascii", side_effect=ValueError("bad byte")):
            result = convert_p2_logic("0" * 64)
        self.assertFalse(result.success)
        self.assertEqual(result.error, "Failed to decode P2 hex data: bad byte")
        self.assertEqual(result.steps[-1].description, "Conversion failed")
        self.assertEqual(len(result.steps), 5)

    def test_idempotent(self) -> None:
        record = encrypt(sample_chunks())
        self.assertEqual(convert_p2_logic(record), convert_p2_logic(record))


if __name__ == "__main__":
    unittest.main()
