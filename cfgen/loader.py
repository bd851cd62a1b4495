"""Fetch and parse the Cloudflare OpenAPI schema.

Downloads the document over HTTP (or reads a local copy) and extracts
paths, operations, schemas.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import httpx

from .errors import FetchFailure, ParseFailure

SCHEMA_URL = "https://developers.cloudflare.com/api/openapi.json"
DEFAULT_TIMEOUT = 60.0


def schema_url() -> str:
    return os.environ.get("CFGEN_SCHEMA_URL", SCHEMA_URL)


def fetch_timeout() -> float:
    value = os.environ.get("CFGEN_TIMEOUT", DEFAULT_TIMEOUT)
    try:
        return float(value)
    except ValueError as e:
        raise FetchFailure(f"CFGEN_TIMEOUT must be a number of seconds, got {value!r}") from e


def fetch_schema(url: str | None = None, client: httpx.Client | None = None) -> str:
    """Download the schema and return its raw text.

    Any transport error or non-2xx status is fatal.
    """
    url = url or schema_url()
    try:
        if client is None:
            with httpx.Client(timeout=fetch_timeout(), follow_redirects=True) as own:
                resp = own.get(url)
        else:
            resp = client.get(url)
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise FetchFailure(
            f"GET {url} returned {e.response.status_code}"
        ) from e
    except httpx.HTTPError as e:
        raise FetchFailure(f"GET {url} failed: {e}") from e
    return resp.text


def parse_schema(text: str) -> dict[str, Any]:
    """Parse the raw schema text into a JSON tree."""
    try:
        spec = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseFailure(f"Failed to parse schema JSON: {e}") from e
    if not isinstance(spec, dict):
        raise ParseFailure(
            f"Failed to parse schema JSON: root is {type(spec).__name__}, expected object"
        )
    return spec


def read_schema(path: Path) -> str:
    """Read a local copy of the schema."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise FetchFailure(f"Failed to read schema from {path}: {e}") from e


def load_spec(path: Path) -> dict[str, Any]:
    """Load a schema document from disk."""
    return parse_schema(read_schema(path))


def get_paths(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract paths from the document."""
    paths = spec.get("paths")
    return paths if isinstance(paths, dict) else {}


def get_schemas(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract component schemas from the document."""
    components = spec.get("components")
    if not isinstance(components, dict):
        return {}
    schemas = components.get("schemas")
    return schemas if isinstance(schemas, dict) else {}


def ref_name(ref: str, section: str = "schemas") -> str | None:
    """Return the component name a local $ref points at, if any."""
    prefix = f"#/components/{section}/"
    if not ref.startswith(prefix):
        return None
    return ref[len(prefix):].replace("~1", "/").replace("~0", "~")
