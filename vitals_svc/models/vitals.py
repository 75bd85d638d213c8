"""
Domain models for vital-sign readings and the alerts derived from them.

Both are persisted as JSON in the key/prefix store:
    vitals:<patientId>:<epochMillis>          -> VitalReading
    alert:<patientId>:<epochMillis>-<type>    -> Alert
"""
from enum import Enum
from typing import Optional, Union

from pydantic import ConfigDict

from models.base import CamelModel, UTCDateTime


class AlertType(str, Enum):
    """Vital sign an alert was raised for."""

    HEART_RATE = "HeartRate"
    OXYGEN_LEVEL = "OxygenLevel"
    TEMPERATURE = "Temperature"
    BLOOD_PRESSURE = "BloodPressure"


class AlertSeverity(str, Enum):
    WARNING = "warning"
    CRITICAL = "critical"


class VitalReading(CamelModel):
    """
    One recorded set of vital-sign values for a patient.

    Every vital is optional. Temperature is always degrees Celsius.
    Readings are immutable once stored.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    patient_id: str
    heart_rate: Optional[float] = None
    blood_pressure: Optional[str] = None
    oxygen_level: Optional[float] = None
    temperature: Optional[float] = None
    notes: str = ""
    timestamp: UTCDateTime
    recorded_by: str


class Alert(CamelModel):
    """
    A classified threshold breach for one vital of one reading.

    `timestamp` is the triggering reading's timestamp. Only the
    acknowledgement fields ever change after creation.
    """

    id: str
    patient_id: str
    reading_id: str
    type: AlertType
    severity: AlertSeverity
    value: Union[float, str]
    message: str
    timestamp: UTCDateTime
    acknowledged: bool = False
    acknowledged_by: Optional[str] = None
    acknowledged_at: Optional[UTCDateTime] = None
