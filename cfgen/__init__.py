"""Patch the Cloudflare OpenAPI schema and generate a Python client from it."""
