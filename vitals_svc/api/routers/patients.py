"""
Patients router - read-only view of patient profiles.

Profiles are written by the identity/profile service; this endpoint lists
the ones with role "patient" so clients can label readings and alerts.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends

from core.auth import get_current_user
from core.dependencies import get_profile_repository
from models import CamelModel, Profile
from repositories import ProfileRepository

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/patients",
    tags=["Patients"],
    dependencies=[Depends(get_current_user)],
)


class PatientListResponse(CamelModel):
    patients: List[Profile]


@router.get(
    "",
    response_model=PatientListResponse,
    summary="List patients",
    description="Profiles with role 'patient', most recently created first."
)
async def list_patients(
    profile_repository: ProfileRepository = Depends(get_profile_repository)
):
    return PatientListResponse(patients=profile_repository.list_patients())
