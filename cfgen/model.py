"""Typed OpenAPI 3.x model.

The patched JSON tree is validated against these models before code
generation. Anything the models can't represent (a 3.1 type list, a
missing operationId, a non-list enum) surfaces as SchemaTypeMismatch
pointing at the patched schema on disk.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, Iterator, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import SchemaTypeMismatch
from .naming import HTTP_METHODS

SchemaType = Literal["string", "number", "integer", "boolean", "array", "object"]
ParameterLocation = Literal["query", "header", "path", "cookie"]


class _Node(BaseModel):
    # Unknown keys (descriptions, x-* extensions) are kept, not rejected
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Reference(_Node):
    """A $ref object."""

    ref: str = Field(alias="$ref")


class Schema(_Node):
    """A JSON Schema fragment."""

    ref: str | None = Field(default=None, alias="$ref")
    type: SchemaType | None = None
    format: str | None = None
    title: str | None = None
    description: str | None = None
    enum: list[Any] | None = None
    nullable: bool = False
    read_only: bool = Field(default=False, alias="readOnly")
    default: Any = None
    properties: dict[str, Schema] = {}
    required: list[str] = []
    items: Schema | None = None
    additional_properties: bool | Schema | None = Field(default=None, alias="additionalProperties")
    all_of: list[Schema] | None = Field(default=None, alias="allOf")
    one_of: list[Schema] | None = Field(default=None, alias="oneOf")
    any_of: list[Schema] | None = Field(default=None, alias="anyOf")


class MediaType(_Node):
    schema_: Schema | None = Field(default=None, alias="schema")


class Parameter(_Node):
    name: str
    in_: ParameterLocation = Field(alias="in")
    required: bool = False
    description: str | None = None
    schema_: Schema | None = Field(default=None, alias="schema")


class RequestBody(_Node):
    description: str | None = None
    required: bool = False
    content: dict[str, MediaType] = {}


class Response(_Node):
    description: str = ""
    content: dict[str, MediaType] = {}


# Try $ref first; the concrete models would accept a bare $ref as an extra key
ParameterOrRef = Annotated[Union[Reference, Parameter], Field(union_mode="left_to_right")]
RequestBodyOrRef = Annotated[Union[Reference, RequestBody], Field(union_mode="left_to_right")]
ResponseOrRef = Annotated[Union[Reference, Response], Field(union_mode="left_to_right")]


class Operation(_Node):
    operation_id: str = Field(alias="operationId")
    summary: str | None = None
    description: str | None = None
    tags: list[str] = []
    deprecated: bool = False
    parameters: list[ParameterOrRef] = []
    request_body: RequestBodyOrRef | None = Field(default=None, alias="requestBody")
    responses: dict[str, ResponseOrRef] = {}


class PathItem(_Node):
    summary: str | None = None
    description: str | None = None
    parameters: list[ParameterOrRef] = []
    get: Operation | None = None
    put: Operation | None = None
    post: Operation | None = None
    delete: Operation | None = None
    options: Operation | None = None
    head: Operation | None = None
    patch: Operation | None = None
    trace: Operation | None = None

    def operations(self) -> Iterator[tuple[str, Operation]]:
        """Yield (method, operation) pairs in a fixed method order."""
        for method in HTTP_METHODS:
            operation = getattr(self, method)
            if operation is not None:
                yield method, operation


class Components(_Node):
    schemas: dict[str, Schema] = {}
    parameters: dict[str, Parameter] = {}
    request_bodies: dict[str, RequestBody] = Field(default={}, alias="requestBodies")
    responses: dict[str, Response] = {}


class Info(_Node):
    title: str
    version: str
    description: str | None = None


class Server(_Node):
    url: str
    description: str | None = None


class OpenAPI(_Node):
    openapi: str
    info: Info
    servers: list[Server] = []
    paths: dict[str, PathItem] = {}
    components: Components = Components()

    @field_validator("openapi")
    @classmethod
    def _check_version(cls, value: str) -> str:
        if not value.startswith("3."):
            raise ValueError(f"unsupported OpenAPI version {value!r}, expected 3.x")
        return value


def _format_errors(error: ValidationError, limit: int = 20) -> str:
    lines = []
    for item in error.errors()[:limit]:
        location = "/".join(str(part) for part in item["loc"])
        lines.append(f"  {location}: {item['msg']}")
    remaining = error.error_count() - limit
    if remaining > 0:
        lines.append(f"  ... and {remaining} more")
    return "\n".join(lines)


def validate_document(spec: dict[str, Any], patched_path: Path | None = None) -> OpenAPI:
    """Validate the patched tree against the typed model."""
    try:
        return OpenAPI.model_validate(spec)
    except ValidationError as e:
        raise SchemaTypeMismatch(patched_path, _format_errors(e)) from e
