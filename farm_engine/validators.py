"""Input validation for records entering the store."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

import voluptuous as vol

from .exceptions import FieldValidationError
from .models import CropType

__all__ = ["FIELD_SCHEMA", "FIELD_UPDATE_SCHEMA", "validate_field_input"]

NON_EMPTY_STRING = vol.All(str, vol.Strip, vol.Length(min=1))


def _finite(value: float) -> float:
    if not math.isfinite(value):
        raise vol.Invalid("size must be a finite number")
    return value


POSITIVE_SIZE = vol.All(
    vol.Coerce(float),
    _finite,
    vol.Range(min=0, min_included=False, msg="size must be a positive number"),
)

FIELD_SCHEMA = vol.Schema(
    {
        vol.Required("name"): NON_EMPTY_STRING,
        vol.Required("location"): NON_EMPTY_STRING,
        vol.Required("size_decares"): POSITIVE_SIZE,
        vol.Optional("crop_type", default=CropType.WHEAT.value): CropType.parse,
        vol.Optional("has_irrigation", default=False): vol.Boolean(),
    },
    extra=vol.REMOVE_EXTRA,
)

# updates replace the whole field, so nothing falls back to a default
FIELD_UPDATE_SCHEMA = vol.Schema(
    {
        vol.Required("name"): NON_EMPTY_STRING,
        vol.Required("location"): NON_EMPTY_STRING,
        vol.Required("size_decares"): POSITIVE_SIZE,
        vol.Required("crop_type"): CropType.parse,
        vol.Required("has_irrigation"): vol.Boolean(),
    },
    extra=vol.REMOVE_EXTRA,
)


def validate_field_input(data: Mapping[str, Any], *, update: bool = False) -> dict[str, Any]:
    """Return normalised field attributes or raise :class:`FieldValidationError`."""

    schema = FIELD_UPDATE_SCHEMA if update else FIELD_SCHEMA
    try:
        return schema(dict(data))
    except vol.Invalid as err:
        raise FieldValidationError(str(err)) from err
