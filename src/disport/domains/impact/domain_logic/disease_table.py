"""Disease parameter table — reads the YAML constants once at import."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

from disport.domains.impact.domain_logic.impact_models import (
    DEFAULT_BACKGROUND_UTILITY,
    DiseaseParameter,
)

logger = logging.getLogger(__name__)

DEFAULT_TABLE_PATH = Path(__file__).resolve().parent.parent / "data" / "diseases.yaml"


class DiseaseTableError(Exception):
    """Raised when a disease parameter file cannot be used."""


_UNIT_INTERVAL_FIELDS = ("p0", "rrr", "dw", "case_fatality", "background_utility")
_NON_NEGATIVE_FIELDS = ("duration_years", "life_years_lost_if_death")


def _optional_float(entry: Mapping[str, Any], name: str, source: Path) -> float | None:
    value = entry.get(name)
    if value is None:
        return None
    if isinstance(value, bool):
        raise DiseaseTableError(f"{entry.get('key')!r}.{name} is not a number in {source}: {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise DiseaseTableError(
            f"{entry.get('key')!r}.{name} is not a number in {source}: {value!r}"
        ) from exc
    if not math.isfinite(number):
        raise DiseaseTableError(f"{entry.get('key')!r}.{name} must be finite in {source}")
    if name in _UNIT_INTERVAL_FIELDS and not 0.0 <= number <= 1.0:
        raise DiseaseTableError(f"{entry.get('key')!r}.{name} must be in [0, 1] in {source}: {number}")
    if name in _NON_NEGATIVE_FIELDS and number < 0:
        raise DiseaseTableError(f"{entry.get('key')!r}.{name} must not be negative in {source}: {number}")
    return number


def _parse_entry(entry: Any, source: Path) -> DiseaseParameter:
    if not isinstance(entry, Mapping):
        raise DiseaseTableError(f"Disease entry is not a mapping in {source}: {entry!r}")
    key = entry.get("key")
    label = entry.get("label")
    if not key or not label:
        raise DiseaseTableError(f"Disease entry missing key or label in {source}: {entry!r}")

    utility = _optional_float(entry, "background_utility", source)
    return DiseaseParameter(
        key=str(key),
        label=str(label),
        p0=_optional_float(entry, "p0", source),
        rrr=_optional_float(entry, "rrr", source),
        dw=_optional_float(entry, "dw", source),
        duration_years=_optional_float(entry, "duration_years", source),
        case_fatality=_optional_float(entry, "case_fatality", source) or 0.0,
        life_years_lost_if_death=_optional_float(entry, "life_years_lost_if_death", source) or 0.0,
        background_utility=DEFAULT_BACKGROUND_UTILITY if utility is None else utility,
    )


def load_disease_table(path: str | Path = DEFAULT_TABLE_PATH) -> tuple[DiseaseParameter, ...]:
    """Parse a YAML parameter file into an immutable tuple of diseases.

    Raises:
        DiseaseTableError: If the file is missing or malformed, an entry
            lacks ``key`` or ``label``, a key appears twice, or a parameter
            is not a number in its allowed range (probabilities, weights
            and utility in [0, 1]; durations and life-years >= 0).
    """
    path = Path(path)
    if not path.is_file():
        raise DiseaseTableError(f"Disease parameter file not found: {path}")

    with open(path) as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise DiseaseTableError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(data, Mapping):
        raise DiseaseTableError(f"Expected a mapping with a 'diseases' list in {path}")
    entries = data.get("diseases") or []
    if not isinstance(entries, list):
        raise DiseaseTableError(f"'diseases' must be a list in {path}")

    diseases: list[DiseaseParameter] = []
    seen: set[str] = set()
    for entry in entries:
        disease = _parse_entry(entry, path)
        if disease.key in seen:
            raise DiseaseTableError(f"Duplicate disease key in {path}: {disease.key!r}")
        seen.add(disease.key)
        diseases.append(disease)

    logger.info("Loaded %d disease parameters from %s", len(diseases), path)
    return tuple(diseases)


def index_by_key(diseases: tuple[DiseaseParameter, ...]) -> Mapping[str, DiseaseParameter]:
    """Read-only key lookup over a loaded table."""
    return MappingProxyType({d.key: d for d in diseases})


DISEASES: tuple[DiseaseParameter, ...] = load_disease_table()
_BY_KEY = index_by_key(DISEASES)


def all_diseases() -> tuple[DiseaseParameter, ...]:
    """Return every disease in table order."""
    return DISEASES


def get_disease(key: str) -> DiseaseParameter | None:
    """Look up a disease by its stable key."""
    return _BY_KEY.get(key)
