"""
Vital threshold registry - single source of truth for vital-sign bands.

This module provides:
- YAML-based loading and validation of vital_thresholds.yaml
- VitalThreshold dataclass with normal/critical band checks
- Blood pressure string parsing ("120/80")
- Celsius/Fahrenheit conversion for presentation

YAML access is encapsulated here - no other module reads vital_thresholds.yaml.

Usage:
    from core.vital_thresholds import get_threshold

    heart_rate = get_threshold("heart_rate")
    heart_rate.severity(39)      # "critical"
    heart_rate.severity(45)      # "warning"
    heart_rate.severity(105)     # "warning"
    heart_rate.severity(72)      # None
"""
import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

WARNING = "warning"
CRITICAL = "critical"

_BLOOD_PRESSURE_PATTERN = re.compile(r"^\s*(\d{1,3})\s*/\s*(\d{1,3})\s*$")


# =============================================================================
# THRESHOLD DEFINITION
# =============================================================================

@dataclass(frozen=True)
class VitalThreshold:
    """
    Immutable band definition for one vital sign.

    Attributes:
        name: Registry key (heart_rate, oxygen_level, temperature, systolic, diastolic)
        display_name: Human-readable name used in alert messages
        alert_type: AlertType value raised when the vital is out of range
        unit: Measurement unit, appended to values in alert messages
        normal_low / normal_high: Inclusive normal band; None means unbounded
        critical_low / critical_high: Strict critical bounds; None means no critical band
    """
    name: str
    display_name: str
    alert_type: str
    unit: str
    normal_low: Optional[float]
    normal_high: Optional[float]
    critical_low: Optional[float] = None
    critical_high: Optional[float] = None

    def is_normal(self, value: float) -> bool:
        if self.normal_low is not None and value < self.normal_low:
            return False
        if self.normal_high is not None and value > self.normal_high:
            return False
        return True

    def is_critical(self, value: float) -> bool:
        if self.critical_low is not None and value < self.critical_low:
            return True
        if self.critical_high is not None and value > self.critical_high:
            return True
        return False

    def severity(self, value: float) -> Optional[str]:
        """
        Classify a value: None when normal, otherwise "critical" or "warning".

        Critical bounds are checked first so a value never gets both.
        """
        if self.is_critical(value):
            return CRITICAL
        if not self.is_normal(value):
            return WARNING
        return None

    def direction(self, value: float) -> str:
        """'below' or 'above' the normal band (for messages)."""
        if self.normal_low is not None and value < self.normal_low:
            return "below"
        return "above"


# =============================================================================
# YAML LOADING & VALIDATION
# =============================================================================

def _get_config_path() -> Path:
    return Path(__file__).parent / "vital_thresholds.yaml"


def _load_yaml_config() -> Dict[str, Any]:
    config_path = _get_config_path()
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.error("Vital thresholds file not found", extra={"path": str(config_path)})
        raise
    except yaml.YAMLError as e:
        logger.error("Failed to parse vital thresholds", extra={"path": str(config_path), "error": str(e)})
        raise


def _optional_float(raw: Dict[str, Any], key: str, name: str) -> Optional[float]:
    value = raw.get(key)
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Vital '{name}' has non-numeric {key}: {value!r}")


def _parse_threshold(raw: Dict[str, Any], index: int) -> VitalThreshold:
    """
    Validate and parse one YAML entry.

    Raises:
        ValueError: On missing fields, malformed bands, or critical bounds
            that sit inside the normal band.
    """
    for required in ("name", "alert_type", "normal"):
        if required not in raw:
            raise ValueError(f"Vital at index {index} is missing required field: '{required}'")

    name = raw["name"]
    normal = raw["normal"]
    if not isinstance(normal, (list, tuple)) or len(normal) != 2:
        raise ValueError(f"Vital '{name}' has invalid normal band: must be [low, high]")

    band = {"low": normal[0], "high": normal[1]}
    normal_low = _optional_float(band, "low", name)
    normal_high = _optional_float(band, "high", name)
    critical_low = _optional_float(raw, "critical_below", name)
    critical_high = _optional_float(raw, "critical_above", name)

    if normal_low is not None and normal_high is not None and normal_low > normal_high:
        raise ValueError(f"Vital '{name}' has normal low above normal high")
    if critical_low is not None and normal_low is not None and critical_low > normal_low:
        raise ValueError(f"Vital '{name}' has critical_below inside the normal band")
    if critical_high is not None and normal_high is not None and critical_high < normal_high:
        raise ValueError(f"Vital '{name}' has critical_above inside the normal band")

    return VitalThreshold(
        name=name,
        display_name=raw.get("display_name", name.replace("_", " ").capitalize()),
        alert_type=raw["alert_type"],
        unit=raw.get("unit", ""),
        normal_low=normal_low,
        normal_high=normal_high,
        critical_low=critical_low,
        critical_high=critical_high,
    )


@lru_cache(maxsize=1)
def _load_registry() -> Dict[str, VitalThreshold]:
    """Load the registry once per process."""
    config = _load_yaml_config()
    thresholds: Dict[str, VitalThreshold] = {}
    for i, raw in enumerate(config.get("vitals", [])):
        threshold = _parse_threshold(raw, i)
        thresholds[threshold.name] = threshold
    logger.debug("Vital thresholds loaded", extra={"vitals": sorted(thresholds)})
    return thresholds


# =============================================================================
# PUBLIC API
# =============================================================================

def get_threshold(name: str) -> VitalThreshold:
    """
    Get the band definition for a vital.

    Raises:
        KeyError: If the vital is not defined in the registry.
    """
    return _load_registry()[name]


def list_thresholds() -> Tuple[VitalThreshold, ...]:
    return tuple(_load_registry().values())


def parse_blood_pressure(value: Optional[str]) -> Optional[Tuple[int, int]]:
    """
    Parse a "systolic/diastolic" string.

    Returns None for None or anything that is not two slash-separated
    integers, so callers can treat malformed data as absent.

    Examples:
        >>> parse_blood_pressure("120/80")
        (120, 80)
        >>> parse_blood_pressure("high") is None
        True
    """
    if not value:
        return None
    match = _BLOOD_PRESSURE_PATTERN.match(value)
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def celsius_to_fahrenheit(value: float) -> float:
    return value * 9 / 5 + 32


def convert_temperature(value: float, unit: str) -> float:
    """Convert a stored Celsius value to the requested presentation unit ("C" or "F")."""
    if unit.upper() == "F":
        return celsius_to_fahrenheit(value)
    return value
