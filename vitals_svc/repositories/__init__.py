"""
Repository layer for store access.

This module contains all key/prefix store access, encapsulating key layout
and (de)serialization of stored entities.
"""
from repositories.base import KeyNotFoundError, KeyValueStore, SQLiteKeyValueStore
from repositories.memory import InMemoryKeyValueStore
from repositories.vitals_repository import VitalReadingRepository
from repositories.alert_repository import AlertRepository
from repositories.profile_repository import ProfileRepository

__all__ = [
    "KeyNotFoundError",
    "KeyValueStore",
    "SQLiteKeyValueStore",
    "InMemoryKeyValueStore",
    "VitalReadingRepository",
    "AlertRepository",
    "ProfileRepository",
]
