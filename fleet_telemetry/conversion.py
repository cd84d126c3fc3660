"""
Conversion Result Module
Step trace, decoded field views and the result envelope returned by every decoder
"""

from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .const import LOGIC_TYPE_UNKNOWN
from .errors import ConversionError

FieldValue = Union[str, int, float]
DecodedData = Dict[str, FieldValue]


@dataclass(frozen=True)
class ConversionStep:
    """One row of the execution trace"""
    step: int
    description: str
    input: str
    output: str
    notes: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'step': self.step,
            'description': self.description,
            'input': self.input,
            'output': self.output,
        }
        if self.notes is not None:
            data['notes'] = self.notes
        return data


class StepTrace:
    """Collects ConversionSteps with strictly increasing ordinals starting at 1."""

    def __init__(self):
        self._steps: List[ConversionStep] = []

    def add(self, description: str, input: str, output: str, notes: Optional[str] = None) -> ConversionStep:
        step = ConversionStep(len(self._steps) + 1, description, input, output, notes)
        self._steps.append(step)
        return step

    def __len__(self):
        return len(self._steps)

    @property
    def steps(self) -> Tuple[ConversionStep, ...]:
        return tuple(self._steps)


class _DecodedView:
    """Mixin rendering a typed decoded record as the generic field map."""

    FIELD_NAMES: Dict[str, str] = {}

    def as_dict(self) -> DecodedData:
        return {self.FIELD_NAMES[f.name]: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class P1DecodedData(_DecodedView):
    """Fault/runtime record of a high-voltage control unit"""
    runtime_min: int
    fault_codes: str
    fault_descriptions: str
    leading_fault_code: int
    leading_fault_time_hr: int
    genset_signal: str
    thermostat_status: str
    hv_output_voltage_kv: int
    hv_source_no: int
    hv_output_current_ma: int

    FIELD_NAMES = {
        'runtime_min': 'RuntimeMin',
        'fault_codes': 'FaultCodes',
        'fault_descriptions': 'FaultDescriptions',
        'leading_fault_code': 'LeadingFaultCode',
        'leading_fault_time_hr': 'LeadingFaultTimeHr',
        'genset_signal': 'GensetSignal',
        'thermostat_status': 'ThermostatStatus',
        'hv_output_voltage_kv': 'HVOutputVoltage_kV',
        'hv_source_no': 'HVSourceNo',
        'hv_output_current_ma': 'HVOutputCurrent_mA',
    }


@dataclass(frozen=True)
class P2DecodedData(_DecodedView):
    """Motor/GPS record of a sensor unit"""
    device_id: str
    gsm_signal_strength: int
    motor_on_time_sec: int
    motor_off_time_sec: int
    wheels_configured: int
    latitude: float
    longitude: float
    wheels_detected: int
    fault_code: int
    motor_current_ma: int

    FIELD_NAMES = {
        'device_id': 'device_id_extracted',
        'gsm_signal_strength': 'GSM_Signal_Strength',
        'motor_on_time_sec': 'Motor_ON_Time_sec',
        'motor_off_time_sec': 'Motor_OFF_Time_sec',
        'wheels_configured': 'Number_of_Wheels_Configured',
        'latitude': 'Latitude',
        'longitude': 'Longitude',
        'wheels_detected': 'Number_of_Wheels_Detected',
        'fault_code': 'Fault_Code',
        'motor_current_ma': 'Motor_Current_mA',
    }


@dataclass(frozen=True)
class ConversionResult:
    """
    Decoder output envelope; success iff decoded_data is non-empty and error is None

    decoded_data is a read-only view over a private copy. Instances compare
    by value but are not hashable.
    """
    steps: Tuple[ConversionStep, ...]
    decoded_data: Mapping[str, FieldValue]
    success: bool
    logic_type: str = LOGIC_TYPE_UNKNOWN
    error: Optional[str] = None
    error_type: Optional[str] = None
    decoded: Any = field(default=None, compare=False, repr=False)

    __hash__ = None

    def __post_init__(self):
        object.__setattr__(self, 'steps', tuple(self.steps))
        object.__setattr__(self, 'decoded_data', MappingProxyType(dict(self.decoded_data)))

    @classmethod
    def ok(cls, trace: StepTrace, decoded: _DecodedView, logic_type: str) -> 'ConversionResult':
        return cls(
            steps=trace.steps,
            decoded_data=decoded.as_dict(),
            success=True,
            logic_type=logic_type,
            decoded=decoded,
        )

    @classmethod
    def failed(cls, steps: Tuple[ConversionStep, ...], error: ConversionError, logic_type: str) -> 'ConversionResult':
        return cls(
            steps=steps,
            decoded_data={},
            success=False,
            logic_type=logic_type,
            error=error.message,
            error_type=type(error).__name__,
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON envelope with the camelCase keys the dashboard consumes."""
        data = {
            'steps': [step.to_dict() for step in self.steps],
            'decodedData': dict(self.decoded_data),
            'success': self.success,
            'logicType': self.logic_type,
        }
        if self.error is not None:
            data['error'] = self.error
            data['errorType'] = self.error_type
        return data
