"""Rewrite component schemas into the subset the client generator handles.

Rules, in order, for every schema node:
  1. enum            - drop maxLength/minLength/pattern/format, default type to string
  2. allOf           - merge members into one object (or fall back to a member)
  3. oneOf / anyOf   - keep only the first member
  4. otherwise       - recurse into properties, items, additionalProperties

Rules 2 and 3 replace the node and re-run the whole chain on the
replacement, so a merged schema still gets its enums and nested
composition cleaned up.
"""

from __future__ import annotations

from typing import Any

from .loader import get_schemas
from .merge import is_reference, merge_into

# String-only constraints that conflict with an enum
_ENUM_CONFLICTS = ("maxLength", "minLength", "pattern", "format")


def _normalize_enum(schema: dict[str, Any]) -> None:
    if "enum" not in schema:
        return
    for key in _ENUM_CONFLICTS:
        schema.pop(key, None)
    schema.setdefault("type", "string")


def _collapse_all_of(members: list[Any]) -> Any:
    merged: dict[str, Any] = {"type": "object", "properties": {}}
    for member in members:
        merge_into(merged, member)

    if merged["properties"]:
        return merged

    # Nothing mergeable: use the first concrete member, or a generic object
    for member in members:
        if not is_reference(member):
            return member
    return {"type": "object"}


def _first_alternative(schema: dict[str, Any], key: str) -> tuple[bool, Any]:
    members = schema.get(key)
    if not isinstance(members, list):
        return False, None
    if not members:
        del schema[key]
        return False, None
    return True, members[0]


def simplify_schema(schema: Any) -> Any:
    """Simplify one schema node and everything below it.

    Returns the simplified node, which may be a different object than
    the one passed in; callers must store the result.
    """
    if not isinstance(schema, dict):
        return schema

    _normalize_enum(schema)

    all_of = schema.get("allOf")
    if isinstance(all_of, list):
        return simplify_schema(_collapse_all_of(all_of))

    for key in ("oneOf", "anyOf"):
        found, first = _first_alternative(schema, key)
        if found:
            return simplify_schema(first)

    properties = schema.get("properties")
    if isinstance(properties, dict):
        for name, prop in properties.items():
            properties[name] = simplify_schema(prop)

    if "items" in schema:
        schema["items"] = simplify_schema(schema["items"])

    additional = schema.get("additionalProperties")
    if isinstance(additional, dict):
        schema["additionalProperties"] = simplify_schema(additional)

    return schema


def simplify_components(spec: dict[str, Any]) -> int:
    """Simplify every schema under components/schemas.

    Returns the number of schemas processed.
    """
    schemas = get_schemas(spec)
    for name, schema in schemas.items():
        schemas[name] = simplify_schema(schema)
    return len(schemas)
