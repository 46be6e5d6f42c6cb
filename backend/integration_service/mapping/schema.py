"""
Target-schema helpers used to clean mapped rows.

The target schema is plain text, normally a JSON object of
field name → type name.  Its keys form the allow-list for output fields;
the type names are not interpreted.
"""

from __future__ import annotations

import json

from integration_service.core.logging import get_logger
from integration_service.mapping.models import JSONObject

logger = get_logger(__name__)


def parse_target_schema(target_schema: str | None) -> list[str] | None:
    """
    Return the target field names in declaration order.

    Returns None (no allow-list, filtering skipped) when the schema is
    not a JSON object.  Never raises.
    """
    if not target_schema or not target_schema.strip():
        return None

    try:
        parsed = json.loads(target_schema)
    except json.JSONDecodeError as exc:
        logger.warning("Could not parse target schema, output will not be filtered", error=str(exc))
        return None

    if not isinstance(parsed, dict):
        logger.warning(
            "Target schema is not a JSON object, output will not be filtered",
            schema_type=type(parsed).__name__,
        )
        return None

    return list(parsed.keys())


def strip_nulls(mapped: JSONObject) -> JSONObject:
    """Drop top-level fields whose value is null."""
    return {key: value for key, value in mapped.items() if value is not None}


def filter_to_schema(mapped: JSONObject, allowed_fields: list[str] | None) -> JSONObject:
    """
    Keep only allow-listed fields, ordered as the target schema declares them.

    With no allow-list the row is returned unchanged.
    """
    if allowed_fields is None:
        return mapped

    dropped = [key for key in mapped if key not in allowed_fields]
    if dropped:
        logger.debug("Dropping fields not in target schema", fields=dropped)

    return {key: mapped[key] for key in allowed_fields if key in mapped}
