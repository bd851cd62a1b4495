"""Shared fixtures: a trimmed-down Cloudflare schema and a fake schema server."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx
import pytest

FIXTURES = Path(__file__).parent / "fixtures"
SCHEMA_FILE = FIXTURES / "cloudflare_openapi.json"
SCHEMA_URL = "https://schemas.test/api/openapi.json"


@pytest.fixture
def raw_schema() -> str:
    """The fixture schema exactly as it would come off the wire."""
    return SCHEMA_FILE.read_text(encoding="utf-8")


@pytest.fixture
def spec(raw_schema) -> dict[str, Any]:
    """A fresh, mutable parse of the fixture schema."""
    return json.loads(raw_schema)


@pytest.fixture
def schema_client(raw_schema):
    """httpx.Client whose transport serves the fixture schema at SCHEMA_URL.

    Any other URL returns 404.
    """
    def handler(request: httpx.Request) -> httpx.Response:
        if str(request.url) == SCHEMA_URL:
            return httpx.Response(200, text=raw_schema)
        return httpx.Response(404, text="not found")

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        yield client
