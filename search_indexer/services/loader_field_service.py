"""Flattening of typed version fields into generic search fields.

Two views of a version's fields are produced:

- loader_fields: field name -> list of serialized values. Several typed
  fields may share a name (the same logical field defined for different
  loaders); their values extend one list instead of overwriting it.
  Array values are flattened into the list, then runs of equal values
  are collapsed.
- raw_fields: field name -> serialized value of the last field with that
  name, used by the legacy side-type derivation.
"""

import json
from typing import Any, Iterable

from ..schemas.records import VersionFieldRecord


def _json_key(value: Any) -> str:
    return json.dumps(value, sort_keys=True)


def _dedup_adjacent(values: list[Any]) -> list[Any]:
    """Drop values equal (by JSON encoding) to their predecessor."""
    result: list[Any] = []
    last_key = None
    for value in values:
        key = _json_key(value)
        if result and key == last_key:
            continue
        result.append(value)
        last_key = key
    return result


def reconcile_loader_fields(
    version_fields: Iterable[VersionFieldRecord],
) -> tuple[dict[str, list[Any]], dict[str, Any]]:
    """
    Build the generic and raw field mappings for a version.

    Args:
        version_fields: The version's typed fields

    Returns:
        Tuple of (loader_fields, raw_fields)
    """
    loader_fields: dict[str, list[Any]] = {}
    raw_fields: dict[str, Any] = {}

    for version_field in version_fields:
        serialized = version_field.serialize_internal()
        raw_fields[version_field.field_name] = serialized

        values = serialized if isinstance(serialized, list) else [serialized]
        loader_fields.setdefault(version_field.field_name, []).extend(values)

    for name, values in loader_fields.items():
        loader_fields[name] = _dedup_adjacent(values)

    return loader_fields, raw_fields
