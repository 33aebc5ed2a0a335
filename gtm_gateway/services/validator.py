"""Request validation for consultation submissions."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pydantic

from gtm_gateway.errors import ValidationError
from gtm_gateway.models.request_models import (
    OPTIONAL_TEXT_FIELDS,
    REQUIRED_FIELDS,
    ConsultationRequest,
)


def validate_consultation_payload(
    payload: Any,
    *,
    confirm_default: bool = False,
) -> ConsultationRequest:
    """Check mandatory fields and build a normalized ``ConsultationRequest``.

    Falsy values (``""``, ``None``, ``0``, ``False``) count as missing for
    mandatory fields and are replaced by defaults for optional ones.

    Raises
    ------
    ValidationError
        When mandatory fields are missing (``missing_fields``) or a present
        value cannot be read as the expected type (``invalid_fields``).
    """
    if not isinstance(payload, Mapping):
        payload = {}

    missing = [name for name in REQUIRED_FIELDS if not payload.get(name)]
    if missing:
        raise ValidationError(missing_fields=missing)

    values: dict[str, Any] = {name: payload[name] for name in REQUIRED_FIELDS}
    for name in OPTIONAL_TEXT_FIELDS:
        values[name] = payload.get(name) or ""
    confirm = payload.get("confirm_new_consultation")
    values["confirm_new_consultation"] = confirm_default if confirm is None else confirm

    try:
        return ConsultationRequest(**values)
    except pydantic.ValidationError as exc:
        invalid = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        raise ValidationError(invalid_fields=invalid) from exc
