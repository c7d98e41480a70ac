"""Normalize and validate location fields before they are written to the store."""
import math
from typing import Any, Mapping

from catalog_core.errors import ValidationError
from catalog_core.location import LOCATION_FIELDS

TEXT_FIELDS = ("name", "description", "image_url")
REQUIRED_TEXT_FIELDS = ("name", "description")
COORDINATE_FIELDS = ("x", "y")


def _get_text(fields: Mapping[str, Any], key: str) -> str:
    """Get a text field; anything but a string is rejected."""
    value = fields[key]
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be text", field=key)
    return value


def _get_number(fields: Mapping[str, Any], key: str) -> float:
    """Get a finite number; numeric strings from form inputs are accepted."""
    value = fields[key]
    if isinstance(value, bool):
        raise ValidationError(f"{key} must be numeric", field=key)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be numeric", field=key) from None
    except OverflowError:
        raise ValidationError(f"{key} must be a finite number", field=key) from None
    if not math.isfinite(number):
        raise ValidationError(f"{key} must be a finite number", field=key)
    return number


def round_order(value: float) -> int:
    """Round to the nearest integer (halves up) and clamp to >= 0."""
    return max(0, int(math.floor(value + 0.5)))


def clamp_unit(value: float) -> float:
    """Clamp a coordinate to [0, 1]."""
    return min(1.0, max(0.0, value))


def normalize_location_fields(fields: Mapping[str, Any], *, partial: bool = False) -> dict[str, Any]:
    """
    Return the write payload for a create (partial=False) or update (partial=True).

    Applied in order: name lowercased, order rounded and clamped to >= 0,
    x/y clamped to [0, 1], then empty name/description (after trimming) rejected.
    Only fields present in `fields` are touched on a partial update.
    Raises ValidationError naming the offending field.
    """
    unknown = sorted(set(fields) - set(LOCATION_FIELDS))
    if unknown:
        raise ValidationError(f"unknown field: {unknown[0]}", field=unknown[0])
    if not partial:
        for key in LOCATION_FIELDS:
            if key not in fields:
                raise ValidationError(f"{key} is required", field=key)

    normalized: dict[str, Any] = {}
    for key in TEXT_FIELDS:
        if key in fields:
            normalized[key] = _get_text(fields, key)
    if "name" in normalized:
        normalized["name"] = normalized["name"].lower()
    if "order" in fields:
        normalized["order"] = round_order(_get_number(fields, "order"))
    for key in COORDINATE_FIELDS:
        if key in fields:
            normalized[key] = clamp_unit(_get_number(fields, key))

    for key in REQUIRED_TEXT_FIELDS:
        if key in normalized and not normalized[key].strip():
            raise ValidationError(f"{key} is required", field=key)
    return normalized
