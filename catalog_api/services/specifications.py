"""Best-effort coercion policies for loosely typed import cells.

The raw ``specifications`` cell is classified exactly once into one of four
shapes and then folded into a canonical ``str -> str`` mapping. Nothing in
this module raises.
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Union

logger = logging.getLogger(__name__)

SPECIFICATION_KEYS = (
    "weight",
    "color",
    "dimensions",
    "capacity",
    "material",
    "origin",
    "size",
    "wattage",
    "voltage",
    "specialFeatures",
)


@dataclass(frozen=True)
class Absent:
    pass


@dataclass(frozen=True)
class StructuredMap:
    value: Mapping[str, Any]


@dataclass(frozen=True)
class RawText:
    text: str


@dataclass(frozen=True)
class Other:
    value: Any


SpecificationInput = Union[Absent, StructuredMap, RawText, Other]


def classify_specifications(value: Any) -> SpecificationInput:
    if value is None:
        return Absent()
    if isinstance(value, Mapping):
        return StructuredMap(value)
    if isinstance(value, str):
        if not value.strip():
            return Absent()
        return RawText(value)
    return Other(value)


def _canonical(mapping: Mapping[str, Any]) -> Dict[str, str]:
    result = {}
    for key, value in mapping.items():
        if value is None:
            continue
        result[str(key)] = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)
    return result


def normalize_specs_best_effort(value: Any) -> Dict[str, str]:
    """Coerce a specifications cell into a mapping, falling back to ``{}``."""
    spec = classify_specifications(value)

    if isinstance(spec, Absent):
        return {}
    if isinstance(spec, StructuredMap):
        return _canonical(spec.value)
    if isinstance(spec, RawText):
        try:
            decoded = json.loads(spec.text.strip())
        except ValueError:
            logger.warning("Invalid JSON in specifications: %r", spec.text)
            return {}
        if not isinstance(decoded, dict):
            logger.warning("Specifications JSON is not an object: %r", spec.text)
            return {}
        return _canonical(decoded)

    logger.warning("Skipping unrecognized specifications format: %r", spec.value)
    return {}


def coerce_boolean_strict_true_string(value: Any) -> bool:
    """Only the exact string ``"true"`` is true; anything else is false."""
    return value == "true"
