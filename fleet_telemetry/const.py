"""Constants for the fleet telemetry decoder."""

# Conversion logic IDs
LOGIC_UNKNOWN = 0
LOGIC_P1 = 1
LOGIC_P2 = 2
SUPPORTED_LOGIC_IDS = (LOGIC_P1, LOGIC_P2)

# Logic type tags
LOGIC_TYPE_P1 = "P1"
LOGIC_TYPE_P2 = "P2"
LOGIC_TYPE_UNKNOWN = "Unknown"

LOGIC_LABELS = {
    LOGIC_P1: "P1 Logic - Fault Data",
    LOGIC_P2: "P2 Logic - SICK Sensor Data",
}
LOGIC_LABEL_UNKNOWN = "Unknown Logic"

# P1 record layout
P1_RECORD_LENGTH = 16
P1_RECORD_MASK = (1 << 64) - 1
NO_FAULT = "No Fault"

P1_FAULT_CODES = {
    0: "FAULT_HT_VTG_TOO_LOW",
    1: "FAULT_HT_ARC_CNT_SHORT",
    2: "FAULT_HT_I_TOO_LOW",
    3: "FAULT_THERMOSTAT_BROKEN",
    4: "FAULT_GENSET_SIG_LOST",
    5: "FAULT_MOTOR_CURRENT_TOO_LOW",
    6: "FAULT_MOTOR_CURRENT_TOO_HIGH",
    7: "FAULT_SCRAPPING_PENDING",
    8: "FAULT_SOOT_COLLECTION_PENDING",
    9: "FAULT_MOTOR_OUT_OF_PARK",
    10: "FAULT_GSM_SIG_LOST",
    11: "FAULT_INDUCEMENT_REQUESTED",
    12: "FAULT_ES_SIGNAL",
    13: "FAULT_SHAKER_MOTOR_CURRENT_TOO_LOW",
    14: "FAULT_SHAKER_MOTOR_CURRENT_TOO_HIGH",
    15: "FAULT_INVALID_FAULT_REPORTED",
}

# P2 record layout
P2_RECORD_LENGTH = 64
P2_CHUNK_LENGTH = 8
P2_CHUNK_COUNT = 8
P2_XOR_KEY = "7AC5B2E1"
P2_GSM_OVERFLOW_LIMIT = 6
P2_GSM_OVERFLOW_OFFSET = 128

# Error messages
ERROR_NO_HEX_DATA = "No hex data provided"
ERROR_EMPTY_INPUT = "Empty input data"

# Settings keys
CONF_WEB_PORT = "web_port"
CONF_DEFAULT_LOGIC_ID = "default_logic_id"
CONF_DEVICES = "devices"

# Default values
DEFAULT_WEB_PORT = 5000
DEFAULT_LOGIC_ID = LOGIC_UNKNOWN
