"""Build Jinja2 template context from the typed OpenAPI document.

Turns every operation into a client method definition and assembles
the full context dict for client.py.j2.
"""

from __future__ import annotations

from typing import Any

from .errors import GenerationFailure
from .model import OpenAPI, Operation
from .naming import python_identifier
from .schema_parser import PATH_PLACEHOLDER, get_response_type, parse_parameters, strip_html

DEFAULT_BASE_URL = "https://api.cloudflare.com/client/v4"

_RETURN_TYPES: dict[str, str] = {
    "array": "list[Any]",
    "object": "Any",
    "text": "str",
    "none": "None",
}

# Names the generated Client class already uses
_RESERVED_NAMES = {"close", "request"}


def _make_description(method: str, path: str, operation: Operation) -> str:
    """Build a method docstring summary line."""
    if operation.summary:
        doc = strip_html(operation.summary)
    elif operation.description:
        doc = strip_html(operation.description).split(". ")[0]
    else:
        doc = f"{method.upper()} {path}"
    doc = doc.rstrip(". ")
    if operation.deprecated:
        doc = f"Deprecated. {doc}"
    return doc


def _path_format(path: str, params: list[dict[str, Any]]) -> str:
    """Rewrite {placeholders} to the argument names used in the method."""
    idents = {p["name"]: p["ident"] for p in params if p["location"] == "path"}
    escaped = path.replace("{", "{{").replace("}", "}}")
    for name, ident in idents.items():
        escaped = escaped.replace("{{" + name + "}}", "{" + ident + "}")
    return escaped


def _deduplicate_method_names(operations: list[dict[str, Any]]) -> None:
    """Ensure all method names are unique by appending a counter if needed."""
    taken: set[str] = set()
    for op in operations:
        name = op["name"]
        if name in _RESERVED_NAMES:
            name = f"{name}_"
        candidate = name
        n = 2
        while candidate in taken:
            candidate = f"{name}_{n}"
            n += 1
        taken.add(candidate)
        op["name"] = candidate


def build_context(doc: OpenAPI) -> dict[str, Any]:
    """Build the full template context from the typed document."""
    operations: list[dict[str, Any]] = []
    owners: dict[str, str] = {}

    for path, path_item in doc.paths.items():
        for method, operation in path_item.operations():
            where = f"{method.upper()} {path}"
            operation_id = operation.operation_id
            if operation_id in owners:
                raise GenerationFailure(
                    f"Duplicate operationId {operation_id!r}: {owners[operation_id]} and {where}"
                )
            owners[operation_id] = where

            params = parse_parameters(doc, path, path_item, operation)
            response_type = get_response_type(doc, operation)

            operations.append({
                "name": python_identifier(operation_id),
                "operation_id": operation_id,
                "method": method,
                "path": path,
                "path_format": _path_format(path, params),
                "params": params,
                "required_params": [p for p in params if p["required"]],
                "optional_params": [p for p in params if not p["required"]],
                "path_params": [p for p in params if p["location"] == "path"],
                "query_params": [p for p in params if p["location"] == "query"],
                "header_params": [p for p in params if p["location"] == "header"],
                "body_param": next((p for p in params if p["location"] == "body"), None),
                "response_type": response_type,
                "return_type": _RETURN_TYPES[response_type],
                "description": _make_description(method, path, operation),
                "tags": operation.tags,
            })

    _deduplicate_method_names(operations)

    base_url = doc.servers[0].url if doc.servers else DEFAULT_BASE_URL
    if PATH_PLACEHOLDER.search(base_url):
        base_url = DEFAULT_BASE_URL

    return {
        "operations": operations,
        "operation_count": len(operations),
        "schema_names": sorted(doc.components.schemas),
        "api_title": doc.info.title,
        "api_version": doc.info.version,
        "base_url": base_url,
    }
