"""
Read-only view of user profiles.

Profiles are created and edited by the identity/profile service; this
service only reads them to count patients and to label alerts.
"""
from typing import Optional

from pydantic import ConfigDict

from models.base import CamelModel, UTCDateTime

PATIENT_ROLE = "patient"


class Profile(CamelModel):
    """A stored user profile. Unknown keys are kept as-is."""

    model_config = ConfigDict(extra="allow")

    id: str
    name: str = ""
    email: Optional[str] = None
    role: str
    age: Optional[int] = None
    assigned_doctor_id: Optional[str] = None
    created_at: Optional[UTCDateTime] = None

    @property
    def is_patient(self) -> bool:
        return self.role == PATIENT_ROLE
