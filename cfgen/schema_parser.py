"""Extract parameter and return types from the typed OpenAPI document.

Handles:
- Path parameters ({zone_id}, {account_id}), including undeclared ones
- Query and header parameters
- Path-item parameters shared by every operation on the path
- $ref resolution for schemas and parameters
- Composition left in inline (non-component) schemas
- JSON request bodies as a single `body` argument
"""

from __future__ import annotations

import re
from typing import Any

from .errors import GenerationFailure
from .loader import ref_name
from .model import OpenAPI, Operation, Parameter, PathItem, Reference, Schema
from .naming import python_identifier

PATH_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")

_SCALAR_TYPES: dict[str, str] = {
    "string": "str",
    "integer": "int",
    "number": "float",
    "boolean": "bool",
}


def strip_html(text: str) -> str:
    """Strip HTML tags and collapse whitespace."""
    text = re.sub(r"<[^>]+>", "", text)
    text = re.sub(r"\s+", " ", text).strip()
    return text


def resolve_ref(doc: OpenAPI, ref: str) -> Schema | None:
    """Resolve a component schema $ref; None for anything else."""
    name = ref_name(ref)
    if name is None:
        return None
    return doc.components.schemas.get(name)


def resolve_schema_type(
    doc: OpenAPI,
    schema: Schema | None,
    _seen: frozenset[str] = frozenset(),
) -> str:
    """Resolve a schema to a Python type string."""
    if schema is None:
        return "Any"

    if schema.ref is not None:
        if schema.ref in _seen:
            return "Any"
        resolved = resolve_ref(doc, schema.ref)
        return resolve_schema_type(doc, resolved, _seen | {schema.ref})

    if schema.all_of:
        return "dict"

    for members in (schema.one_of, schema.any_of):
        if members:
            for sub in members:
                t = resolve_schema_type(doc, sub, _seen)
                if t != "Any":
                    return t
            return "Any"

    if schema.enum is not None:
        return _SCALAR_TYPES.get(schema.type or "string", "Any")

    if schema.type in _SCALAR_TYPES:
        return _SCALAR_TYPES[schema.type]
    if schema.type == "array":
        return f"list[{resolve_schema_type(doc, schema.items, _seen)}]"
    if schema.type == "object" or schema.properties:
        return "dict"

    return "Any"


def _resolve_parameter(doc: OpenAPI, param: Reference | Parameter, where: str) -> Parameter:
    if isinstance(param, Parameter):
        return param
    name = ref_name(param.ref, "parameters")
    resolved = doc.components.parameters.get(name) if name is not None else None
    if resolved is None:
        raise GenerationFailure(f"{where}: unresolvable parameter reference {param.ref!r}")
    return resolved


def _describe(doc: OpenAPI, param: Parameter) -> str:
    description = strip_html(param.description or "")
    schema = param.schema_
    if schema is not None and schema.ref is not None:
        schema = resolve_ref(doc, schema.ref)
    if schema is not None and schema.enum:
        values = ", ".join(str(v) for v in schema.enum)
        description = f"{description} (values: {values})" if description else f"Values: {values}"
    return description


def _unique_ident(name: str, taken: set[str]) -> str:
    ident = python_identifier(name)
    if ident == "self":
        ident = "self_"
    candidate = ident
    n = 2
    while candidate in taken:
        candidate = f"{ident}_{n}"
        n += 1
    taken.add(candidate)
    return candidate


def _json_body_schema(doc: OpenAPI, operation: Operation) -> tuple[bool, Schema | None] | None:
    body = operation.request_body
    if body is None:
        return None
    if isinstance(body, Reference):
        name = ref_name(body.ref, "requestBodies")
        body = doc.components.request_bodies.get(name) if name is not None else None
        if body is None:
            return None
    for content_type, media in body.content.items():
        if content_type == "application/json" or content_type.endswith("+json"):
            return body.required, media.schema_
    return None


def parse_parameters(
    doc: OpenAPI,
    path: str,
    path_item: PathItem,
    operation: Operation,
) -> list[dict[str, Any]]:
    """Parse all arguments for one operation, required ones first."""
    where = f"{operation.operation_id} ({path})"

    merged: dict[tuple[str, str], Parameter] = {}
    for raw in [*path_item.parameters, *operation.parameters]:
        param = _resolve_parameter(doc, raw, where)
        merged[(param.name, param.in_)] = param

    declared = {name for name, location in merged if location == "path"}
    for placeholder in PATH_PLACEHOLDER.findall(path):
        if placeholder not in declared:
            merged[(placeholder, "path")] = Parameter.model_validate(
                {"name": placeholder, "in": "path", "required": True}
            )

    taken: set[str] = set()
    params: list[dict[str, Any]] = []
    for param in merged.values():
        if param.in_ == "cookie":
            continue
        is_required = param.required or param.in_ == "path"
        default = param.schema_.default if param.schema_ is not None else None
        params.append({
            "name": param.name,
            "ident": _unique_ident(param.name, taken),
            "type": resolve_schema_type(doc, param.schema_) if param.schema_ else "str",
            "required": is_required,
            "default": None if is_required else default,
            "description": _describe(doc, param),
            "location": param.in_,
        })

    body = _json_body_schema(doc, operation)
    if body is not None:
        body_required, body_schema = body
        params.append({
            "name": "body",
            "ident": _unique_ident("body", taken),
            "type": resolve_schema_type(doc, body_schema),
            "required": body_required,
            "default": None,
            "description": "Request body (JSON)",
            "location": "body",
        })

    params.sort(key=lambda p: not p["required"])
    return params


def get_response_type(doc: OpenAPI, operation: Operation) -> str:
    """Determine the response type of an operation."""
    for status, response in operation.responses.items():
        if not status.startswith("2"):
            continue
        if isinstance(response, Reference):
            name = ref_name(response.ref, "responses")
            response = doc.components.responses.get(name) if name is not None else None
            if response is None:
                return "object"
        if not response.content:
            return "none"
        for content_type, media in response.content.items():
            if content_type == "application/json" or content_type.endswith("+json"):
                schema = media.schema_
                if schema is not None and schema.ref is not None:
                    schema = resolve_ref(doc, schema.ref) or schema
                if schema is not None and schema.type == "array":
                    return "array"
                return "object"
        return "text"
    return "none"
