from __future__ import annotations

import unittest
from unittest import mock

from fleet_telemetry.conversion import P1DecodedData
from fleet_telemetry.p1_decoder import convert_p1_logic, low_64_bits

P1_FIELDS = [
    "RuntimeMin",
    "FaultCodes",
    "FaultDescriptions",
    "LeadingFaultCode",
    "LeadingFaultTimeHr",
    "GensetSignal",
    "ThermostatStatus",
    "HVOutputVoltage_kV",
    "HVSourceNo",
    "HVOutputCurrent_mA",
]

# C5 | BF | 0C | 7 | 0 | 8001 | 012C
SAMPLE_RECORD = "C5BF0C708001012C"


class P1DecoderTests(unittest.TestCase):
    def test_minimal_record(self) -> None:
        result = convert_p1_logic("1")
        self.assertTrue(result.success)
        self.assertIsNone(result.error)
        self.assertEqual(result.logic_type, "P1")
        self.assertEqual(
            result.decoded_data,
            {
                "RuntimeMin": 1,
                "FaultCodes": "",
                "FaultDescriptions": "",
                "LeadingFaultCode": 0,
                "LeadingFaultTimeHr": 0,
                "GensetSignal": "Off",
                "ThermostatStatus": "Off",
                "HVOutputVoltage_kV": 0,
                "HVSourceNo": 0,
                "HVOutputCurrent_mA": 0,
            },
        )
        self.assertEqual(result.steps[1].output, "0000000000000001")

    def test_field_order(self) -> None:
        result = convert_p1_logic("1")
        self.assertEqual(list(result.decoded_data), P1_FIELDS)

    def test_full_record(self) -> None:
        result = convert_p1_logic(str(int(SAMPLE_RECORD, 16)))
        self.assertTrue(result.success)
        data = result.decoded_data
        self.assertEqual(result.steps[1].output, SAMPLE_RECORD)
        self.assertEqual(data["RuntimeMin"], 300)
        self.assertEqual(data["FaultCodes"], "15, 0")
        self.assertEqual(
            data["FaultDescriptions"],
            "FAULT_INVALID_FAULT_REPORTED, FAULT_HT_VTG_TOO_LOW",
        )
        self.assertEqual(data["LeadingFaultCode"], 7)
        self.assertEqual(data["LeadingFaultTimeHr"], 12)
        self.assertEqual(data["GensetSignal"], "On")
        self.assertEqual(data["ThermostatStatus"], "Off")
        self.assertEqual(data["HVOutputVoltage_kV"], 63)
        self.assertEqual(data["HVSourceNo"], 3)
        self.assertEqual(data["HVOutputCurrent_mA"], 5)

    def test_fault_codes_keep_bit_order(self) -> None:
        # bits 2, 5 and 12 of the fault word (from the left)
        result = convert_p1_logic(str(int("0000000024080000", 16)))
        self.assertEqual(result.decoded_data["FaultCodes"], "13, 10, 3")
        self.assertEqual(
            result.decoded_data["FaultDescriptions"],
            "FAULT_SHAKER_MOTOR_CURRENT_TOO_LOW, FAULT_GSM_SIG_LOST, FAULT_THERMOSTAT_BROKEN",
        )

    def test_thermostat_bit(self) -> None:
        result = convert_p1_logic(str(int("0041000000000000", 16)))
        self.assertEqual(result.decoded_data["GensetSignal"], "Off")
        self.assertEqual(result.decoded_data["ThermostatStatus"], "On")
        self.assertEqual(result.decoded_data["HVOutputVoltage_kV"], 1)

    def test_steps_are_numbered_from_one(self) -> None:
        result = convert_p1_logic("123456789")
        self.assertEqual([s.step for s in result.steps], list(range(1, len(result.steps) + 1)))
        self.assertEqual(len(result.steps), 8)

    def test_value_above_64_bits_is_truncated(self) -> None:
        result = convert_p1_logic(str(2 ** 64 + 1))
        self.assertTrue(result.success)
        self.assertEqual(result.steps[1].output, "0000000000000001")
        self.assertIn("truncated", result.steps[1].notes)
        self.assertEqual(result.decoded_data["RuntimeMin"], 1)

    def test_very_long_digit_string_is_truncated(self) -> None:
        digits = "9" * 5000
        expected = (pow(10, 5000, 2 ** 64) - 1) % 2 ** 64
        result = convert_p1_logic(digits)
        self.assertTrue(result.success, result.error)
        self.assertEqual(result.steps[1].output, format(expected, "016X"))
        self.assertIn("truncated", result.steps[1].notes)
        self.assertEqual(result.decoded_data["RuntimeMin"], expected & 0xFFFF)

    def test_low_64_bits(self) -> None:
        self.assertEqual(low_64_bits("18446744073709551615"), (2 ** 64 - 1, False))
        self.assertEqual(low_64_bits(str(2 ** 64)), (0, True))
        self.assertEqual(low_64_bits("0" * 40 + "7"), (7, False))

    def test_typed_view_matches_field_map(self) -> None:
        result = convert_p1_logic(str(int(SAMPLE_RECORD, 16)))
        self.assertIsInstance(result.decoded, P1DecodedData)
        self.assertEqual(result.decoded.runtime_min, result.decoded_data["RuntimeMin"])
        self.assertEqual(result.decoded.as_dict(), dict(result.decoded_data))
        self.assertIsNone(convert_p1_logic("abc").decoded)

    def test_empty_input(self) -> None:
        result = convert_p1_logic("")
        self.assertFalse(result.success)
        self.assertEqual(result.error, "Empty input data")
        self.assertEqual(result.decoded_data, {})
        self.assertEqual(len(result.steps), 1)
        self.assertEqual(result.steps[0].output, "Invalid: empty input")

    def test_non_digit_input(self) -> None:
        result = convert_p1_logic("12a3")
        self.assertFalse(result.success)
        self.assertIn("Invalid format", result.error)
        self.assertEqual(result.error_type, "FormatError")
        self.assertEqual(result.logic_type, "P1")
        self.assertEqual(result.steps[-1].description, "Format validation failed")
        self.assertEqual(result.steps[-1].input, "12a3")

    def test_rejects_whitespace_and_signs(self) -> None:
        for value in (" 12", "12 ", "-5", "+5", "1.0", "١٢"):
            with self.subTest(value=value):
                self.assertFalse(convert_p1_logic(value).success)

    def test_unexpected_error_keeps_trace(self) -> None:
        with mock.patch("fleet_telemetry.p1_decoder.hex_to_binary", side_effect=RuntimeError("boom")):
            result = convert_p1_logic("42")
        self.assertFalse(result.success)
        self.assertEqual(result.error, "Failed to decode P1 hex data: boom")
        self.assertEqual(result.error_type, "DecodeError")
        self.assertEqual(result.decoded_data, {})
        self.assertEqual(
            [s.description for s in result.steps],
            [
                "Validate input format",
                "Convert to 16-character hex string",
                "Extract runtime from last 4 characters",
                "Conversion failed",
            ],
        )
        self.assertEqual(result.steps[-1].notes, "Error: boom")

    def test_idempotent(self) -> None:
        first = convert_p1_logic("98765432101234")
        second = convert_p1_logic("98765432101234")
        self.assertEqual(first, second)
        self.assertEqual(first.to_dict(), second.to_dict())


if __name__ == "__main__":
    unittest.main()
