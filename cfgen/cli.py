"""CLI entry point for cfgen."""

from pathlib import Path

import click

from cfgen.errors import CodegenError
from cfgen.loader import schema_url
from cfgen.pipeline import build, output_dir, patch_file


@click.group()
def main():
    """cfgen: patch the Cloudflare OpenAPI schema and generate a Python client."""
    pass


@main.command("build")
@click.option("--url", default=None, help="Schema URL (default: $CFGEN_SCHEMA_URL or the Cloudflare docs).")
@click.option("--source", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Read the schema from a local file instead of downloading it.")
@click.option("-o", "--out-dir", default=None, type=click.Path(file_okay=False, path_type=Path), help="Output directory (default: $CFGEN_OUT_DIR or generated/).")
def build_cmd(url: str | None, source: Path | None, out_dir: Path | None):
    """Full pipeline: fetch -> patch -> validate -> generate client."""
    out_dir = out_dir or output_dir()
    if source is None:
        click.echo(f"Downloading OpenAPI schema from {url or schema_url()}...")
    else:
        click.echo(f"Reading OpenAPI schema from {source}...")

    try:
        result = build(out_dir, url=url, source=source)
    except CodegenError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"  Raw schema saved to {result.raw_path}")
    click.echo(f"  Added {result.patch.operation_ids_added} missing operation ids")
    click.echo(f"  Simplified {result.patch.schemas_simplified} component schemas")
    click.echo(f"  Patched schema saved to {result.patched_path}")
    click.echo(f"Done! Generated {result.operation_count} operations in {result.client_path}")


@main.command("patch")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(dir_okay=False, path_type=Path), help="Output file for the patched schema.")
def patch_cmd(source: Path, output: Path):
    """Patch a local schema file without generating code."""
    try:
        report = patch_file(source, output)
    except CodegenError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Added {report.operation_ids_added} missing operation ids")
    click.echo(f"Simplified {report.schemas_simplified} component schemas")
    click.echo(f"Patched schema saved to {output}")
