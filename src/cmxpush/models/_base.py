"""Base model for CMX push payloads.

Every inbound push model inherits from :class:`CmxBaseModel` which
provides:

* ``alias_generator=to_camel`` so the camelCase wire keys map
  automatically to snake_case fields.
* A ``model_validator(mode="before")`` that strips empty values
  (``None``, ``""``, NaN) so the field default is used.
* A ``raw`` dict that captures the original payload.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class CmxBaseModel(BaseModel):
    """Base for push API payload models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    raw: dict[str, Any] = Field(default_factory=dict)
    """Original payload dict."""

    @staticmethod
    def _clean_dict(values: dict[str, Any]) -> dict[str, Any]:
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and not value.strip():
                continue
            if isinstance(value, float) and math.isnan(value):
                continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Strip empty values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        original = dict(values)
        cleaned = CmxBaseModel._clean_dict(original)
        # Keep a caller-supplied raw (kwargs construction); otherwise stash the payload.
        if "raw" not in values:
            cleaned["raw"] = original
        return cleaned
