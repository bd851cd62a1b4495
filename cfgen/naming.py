"""Operation ids and Python identifiers.

Operations without an operationId get one built from method + path:

  GET    /zones                          -> get_zones
  GET    /zones/{zone_id}/dns_records    -> get_zones_zone_id_dns_records
  POST   /accounts/{account_id}/workers-ai -> post_accounts_account_id_workers_ai

Existing ids are never touched, so running the pass twice is a no-op.
"""

from __future__ import annotations

import keyword
import re
from typing import Any

from .loader import get_paths

# Keys of a path item that hold operations; everything else is metadata
HTTP_METHODS: tuple[str, ...] = (
    "get", "put", "post", "delete", "options", "head", "patch", "trace",
)


def path_slug(path: str) -> str:
    """Turn a path template into an id fragment."""
    return (
        path.lstrip("/")
        .replace("/", "_")
        .replace("{", "")
        .replace("}", "")
        .replace("-", "_")
    )


def synthesize_operation_id(method: str, path: str) -> str:
    """Build the operationId for an operation that has none."""
    return f"{method}_{path_slug(path)}"


def add_missing_operation_ids(spec: dict[str, Any]) -> int:
    """Give every operation in the document an operationId.

    Returns the number of ids added.
    """
    added = 0
    for path, path_item in get_paths(spec).items():
        if not isinstance(path_item, dict):
            continue
        for method, operation in path_item.items():
            # Skip non-operation fields like parameters, summary, etc.
            if method not in HTTP_METHODS:
                continue
            if not isinstance(operation, dict) or "operationId" in operation:
                continue
            operation["operationId"] = synthesize_operation_id(method, path)
            added += 1
    return added


def _camel_to_snake(name: str) -> str:
    """Convert camelCase or PascalCase to snake_case."""
    s1 = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    return re.sub(r"([a-z\d])([A-Z])", r"\1_\2", s1).lower()


def python_identifier(name: str) -> str:
    """Sanitize an operationId or parameter name into a Python identifier."""
    ident = _camel_to_snake(name)
    ident = re.sub(r"[^a-z0-9_]", "_", ident)
    ident = re.sub(r"_+", "_", ident).strip("_")
    if not ident:
        return "_"
    if ident[0].isdigit():
        ident = f"_{ident}"
    if keyword.iskeyword(ident):
        ident = f"{ident}_"
    return ident
