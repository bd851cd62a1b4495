"""Fold allOf members into a single object schema.

Precedence is deliberately asymmetric:
  - properties: last member wins on a name collision
  - required:   union, first-seen order, no duplicates
  - other keys: first member wins
"""

from __future__ import annotations

import copy
from typing import Any


def is_reference(schema: Any) -> bool:
    """Check if a schema is a $ref pointer."""
    return isinstance(schema, dict) and "$ref" in schema


def merge_into(target: dict[str, Any], source: Any) -> None:
    """Merge `source` into the accumulator `target` in place."""
    # $ref members can't be merged without resolving them
    if not isinstance(source, dict) or is_reference(source):
        return

    source_props = source.get("properties")
    target_props = target.get("properties")
    if isinstance(source_props, dict) and isinstance(target_props, dict):
        for key, value in source_props.items():
            target_props[key] = copy.deepcopy(value)

    source_required = source.get("required")
    if isinstance(source_required, list):
        target_required = target.setdefault("required", [])
        if isinstance(target_required, list):
            for item in source_required:
                if item not in target_required:
                    target_required.append(copy.deepcopy(item))

    for key, value in source.items():
        if key in ("properties", "required") or key in target:
            continue
        target[key] = copy.deepcopy(value)
