"""Helpers shared by partial-update use cases."""

from typing import Any, Dict, Iterable

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from catalog.core.exceptions import ConflictError, raise_if_errors


def collect_changes(request: BaseModel, required_fields: Iterable[str], skip: Iterable[str] = ()) -> Dict[str, Any]:
    """
    Fields the caller actually sent, keyed by attribute name.

    A field omitted from the payload is absent from the result; a field sent
    as null is present with value None. Nulls on required fields are
    rejected together.
    """
    changes = request.model_dump(exclude_unset=True)
    errors = {
        to_camel(field): "This field cannot be cleared"
        for field in required_fields
        if field in changes and changes[field] is None
    }
    raise_if_errors(errors)
    skipped = set(skip)
    return {field: value for field, value in changes.items() if field not in skipped}


def check_version(entity, expected_version, label: str):
    """Reject the write when the caller saw an older version of the entity."""
    if expected_version is not None and expected_version != entity.version:
        raise ConflictError(
            f"{label} with id {entity.id} has version {entity.version}, "
            f"but the update was based on version {expected_version}"
        )
