"""
Read-only repository for user profiles stored at `profile:<id>`.

Profiles are owned by the identity/profile service; this repository never
writes them.
"""
import logging
from datetime import datetime, timezone
from typing import List

from models import Profile
from repositories.base import KeyValueStore, load_entities

logger = logging.getLogger(__name__)

PROFILE_PREFIX = "profile:"

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class ProfileRepository:
    """Profile lookups for analytics and alert enrichment."""

    def __init__(self, store: KeyValueStore):
        self._store = store

    def list_all(self) -> List[Profile]:
        return load_entities(self._store.get_by_prefix(PROFILE_PREFIX), Profile, "profile")

    def list_patients(self) -> List[Profile]:
        """Profiles with role "patient", most recently created first."""
        patients = [p for p in self.list_all() if p.is_patient]
        return sorted(patients, key=lambda p: p.created_at or _EPOCH, reverse=True)
