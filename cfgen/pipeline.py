"""One-shot build: fetch, patch, validate, generate.

Artifacts written to the output directory:
  openapi.json          - the schema exactly as downloaded
  openapi_patched.json  - after operationId synthesis and simplification
  cloudflare_api.py     - the generated client

The raw and patched schemas are kept so a failed generation can be
diagnosed by diffing them.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx

from .codegen import generate, write_output
from .context_builder import build_context
from .loader import fetch_schema, parse_schema, read_schema, schema_url
from .model import validate_document
from .naming import add_missing_operation_ids
from .simplify import simplify_components

OUTPUT_DIR = Path(__file__).parent.parent / "generated"
RAW_SCHEMA_NAME = "openapi.json"
PATCHED_SCHEMA_NAME = "openapi_patched.json"
CLIENT_NAME = "cloudflare_api.py"


def output_dir() -> Path:
    override = os.environ.get("CFGEN_OUT_DIR")
    return Path(override) if override else OUTPUT_DIR


@dataclass
class PatchReport:
    operation_ids_added: int
    schemas_simplified: int


@dataclass
class BuildResult:
    raw_path: Path
    patched_path: Path
    client_path: Path
    patch: PatchReport
    operation_count: int


def patch_spec(spec: dict[str, Any]) -> PatchReport:
    """Apply every schema patch to the tree in place."""
    added = add_missing_operation_ids(spec)
    simplified = simplify_components(spec)
    return PatchReport(operation_ids_added=added, schemas_simplified=simplified)


def dump_spec(spec: dict[str, Any]) -> str:
    """Pretty-print the tree; key order is preserved so output is stable."""
    return json.dumps(spec, indent=2, ensure_ascii=False) + "\n"


def patch_file(source: Path, destination: Path) -> PatchReport:
    """Patch a local schema file without generating a client."""
    spec = parse_schema(read_schema(source))
    report = patch_spec(spec)
    write_output(destination, dump_spec(spec))
    return report


def build(
    out_dir: Path | None = None,
    url: str | None = None,
    source: Path | None = None,
    client: httpx.Client | None = None,
) -> BuildResult:
    """Run the whole build and return the artifact locations.

    `source` reads the schema from a local file instead of downloading it.
    """
    out_dir = Path(out_dir) if out_dir is not None else output_dir()

    if source is not None:
        text = read_schema(source)
    else:
        text = fetch_schema(url or schema_url(), client=client)
    raw_path = write_output(out_dir / RAW_SCHEMA_NAME, text)

    spec = parse_schema(text)
    report = patch_spec(spec)
    patched_path = write_output(out_dir / PATCHED_SCHEMA_NAME, dump_spec(spec))

    doc = validate_document(spec, patched_path)
    context = build_context(doc)
    client_path = generate(context, out_dir / CLIENT_NAME)

    return BuildResult(
        raw_path=raw_path,
        patched_path=patched_path,
        client_path=client_path,
        patch=report,
        operation_count=context["operation_count"],
    )
