"""
Pydantic schemas for vital reading API operations.
"""
from typing import List, Optional

from pydantic import ConfigDict, Field, field_validator, model_validator

from models import Alert, CamelModel, VitalReading

PATIENT_ID_PATTERN = r"^[A-Za-z0-9_-]{1,128}$"
BLOOD_PRESSURE_PATTERN = r"^\d{2,3}/\d{2,3}$"
# Route segments that would shadow a patient id, e.g. GET /alerts/all
RESERVED_PATIENT_IDS = frozenset({"all"})


class VitalReadingCreate(CamelModel):
    """Schema for recording a new set of vital signs.

    At least one vital must be present. Blood pressure may be sent either as
    a single "systolic/diastolic" string or as separate `systolic` and
    `diastolic` numbers, not both. Temperature is degrees Celsius.
    """
    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "patientId": "patient-123",
                "heartRate": 72,
                "bloodPressure": "118/76",
                "oxygenLevel": 98,
                "temperature": 36.8,
                "notes": "Resting, after breakfast"
            }
        },
    )

    patient_id: str = Field(
        ...,
        pattern=PATIENT_ID_PATTERN,
        description="Identifier of the patient the reading belongs to",
        examples=["patient-123"]
    )
    heart_rate: Optional[float] = Field(
        None,
        ge=0,
        le=300,
        description="Heart rate in beats per minute",
        examples=[72]
    )
    blood_pressure: Optional[str] = Field(
        None,
        pattern=BLOOD_PRESSURE_PATTERN,
        description="Blood pressure as 'systolic/diastolic' in mmHg",
        examples=["118/76"]
    )
    systolic: Optional[int] = Field(None, ge=20, le=300, description="Systolic pressure in mmHg")
    diastolic: Optional[int] = Field(None, ge=20, le=300, description="Diastolic pressure in mmHg")
    oxygen_level: Optional[float] = Field(
        None,
        ge=0,
        le=100,
        description="Peripheral oxygen saturation in percent",
        examples=[98]
    )
    temperature: Optional[float] = Field(
        None,
        ge=20,
        le=45,
        description="Body temperature in degrees Celsius",
        examples=[36.8]
    )
    notes: Optional[str] = Field("", max_length=1000, description="Free-text notes")

    @field_validator("patient_id")
    @classmethod
    def _reject_reserved_patient_id(cls, value: str) -> str:
        if value in RESERVED_PATIENT_IDS:
            raise ValueError(f"'{value}' is reserved and cannot be used as a patient id")
        return value

    @model_validator(mode="after")
    def _combine_blood_pressure(self) -> "VitalReadingCreate":
        if (self.systolic is None) != (self.diastolic is None):
            raise ValueError("systolic and diastolic must be provided together")
        if self.systolic is not None:
            if self.blood_pressure is not None:
                raise ValueError("Send either bloodPressure or systolic/diastolic, not both")
            self.blood_pressure = f"{self.systolic}/{self.diastolic}"
        if self.notes is None:
            self.notes = ""
        if all(
            v is None
            for v in (self.heart_rate, self.blood_pressure, self.oxygen_level, self.temperature)
        ):
            raise ValueError("At least one vital sign is required")
        return self


class VitalReadingCreatedResponse(CamelModel):
    """The stored reading plus the alerts derived from it (null when none)."""
    vital_reading: VitalReading
    alerts: Optional[List[Alert]] = None


class VitalReadingListResponse(CamelModel):
    vitals: List[VitalReading]
