"""Tests for the end-to-end build pipeline."""

import json
from pathlib import Path

import pytest

from cfgen.errors import FetchFailure, ParseFailure, SchemaTypeMismatch, WriteFailure
from cfgen.pipeline import (
    CLIENT_NAME,
    PATCHED_SCHEMA_NAME,
    RAW_SCHEMA_NAME,
    build,
    dump_spec,
    output_dir,
    patch_file,
    patch_spec,
)

FIXTURES = Path(__file__).parent / "fixtures"
SCHEMA_FILE = FIXTURES / "cloudflare_openapi.json"
SCHEMA_URL = "https://schemas.test/api/openapi.json"


class TestPatchSpec:

    def test_report(self, spec):
        report = patch_spec(spec)
        assert report.operation_ids_added == 6
        assert report.schemas_simplified == len(spec["components"]["schemas"])

    def test_deterministic_output(self, raw_schema):
        outputs = []
        for _ in range(2):
            spec = json.loads(raw_schema)
            patch_spec(spec)
            outputs.append(dump_spec(spec))
        assert outputs[0] == outputs[1]

    def test_dump_is_pretty(self, spec):
        text = dump_spec(spec)
        assert text.startswith('{\n  "openapi": "3.0.3",')
        assert text.endswith("}\n")


class TestBuild:

    def test_artifacts_written(self, tmp_path, schema_client, raw_schema):
        result = build(tmp_path, url=SCHEMA_URL, client=schema_client)

        assert result.raw_path == tmp_path / RAW_SCHEMA_NAME
        assert result.raw_path.read_text(encoding="utf-8") == raw_schema

        assert result.patched_path == tmp_path / PATCHED_SCHEMA_NAME
        patched = json.loads(result.patched_path.read_text(encoding="utf-8"))
        assert patched["paths"]["/zones"]["post"]["operationId"] == "post_zones"
        assert patched["components"]["schemas"]["dns-record-list"] == {"type": "object"}

        assert result.client_path == tmp_path / CLIENT_NAME
        assert "def list_zones(" in result.client_path.read_text(encoding="utf-8")
        assert result.operation_count == 8
        assert result.patch.operation_ids_added == 6

    def test_local_source(self, tmp_path, raw_schema):
        result = build(tmp_path, source=SCHEMA_FILE)
        assert result.raw_path.read_text(encoding="utf-8") == raw_schema
        assert result.client_path.exists()

    def test_fetch_failure_writes_nothing(self, tmp_path, schema_client):
        with pytest.raises(FetchFailure):
            build(tmp_path, url="https://schemas.test/missing.json", client=schema_client)
        assert list(tmp_path.iterdir()) == []

    def test_parse_failure_keeps_raw(self, tmp_path):
        source = tmp_path / "broken.json"
        source.write_text("<html>not json</html>")
        out = tmp_path / "out"
        with pytest.raises(ParseFailure):
            build(out, source=source)
        assert (out / RAW_SCHEMA_NAME).read_text() == "<html>not json</html>"
        assert not (out / PATCHED_SCHEMA_NAME).exists()

    def test_type_mismatch_points_at_patched_schema(self, tmp_path, spec):
        spec["components"]["schemas"]["nullable-name"] = {"type": ["string", "null"]}
        source = tmp_path / "schema.json"
        source.write_text(json.dumps(spec))
        out = tmp_path / "out"
        with pytest.raises(SchemaTypeMismatch) as exc:
            build(out, source=source)
        assert exc.value.patched_path == out / PATCHED_SCHEMA_NAME
        assert exc.value.patched_path.exists()
        assert not (out / CLIENT_NAME).exists()

    def test_write_failure(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        with pytest.raises(WriteFailure):
            build(blocker / "out", source=SCHEMA_FILE)

    def test_out_dir_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CFGEN_OUT_DIR", str(tmp_path / "env-out"))
        assert output_dir() == tmp_path / "env-out"
        result = build(source=SCHEMA_FILE)
        assert result.client_path == tmp_path / "env-out" / CLIENT_NAME


class TestPatchFile:

    def test_patches_without_generating(self, tmp_path):
        destination = tmp_path / "patched.json"
        report = patch_file(SCHEMA_FILE, destination)
        assert report.operation_ids_added == 6
        patched = json.loads(destination.read_text(encoding="utf-8"))
        assert patched["components"]["schemas"]["zone-status"]["type"] == "string"
        assert list(tmp_path.iterdir()) == [destination]
