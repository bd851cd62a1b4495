"""Fatal build failures.

Every failure aborts the build; nothing here is retried.
"""

from __future__ import annotations

from pathlib import Path


class CodegenError(Exception):
    """Base class for all build failures."""


class FetchFailure(CodegenError):
    """The schema could not be downloaded."""


class ParseFailure(CodegenError):
    """The fetched text is not a JSON object."""


class SchemaTypeMismatch(CodegenError):
    """The patched document does not fit the typed OpenAPI model."""

    def __init__(self, patched_path: Path | None, detail: str):
        self.patched_path = patched_path
        self.detail = detail
        message = f"Patched schema does not match the OpenAPI model:\n{detail}"
        if patched_path is not None:
            message += f"\nPatched schema saved at: {patched_path}"
        super().__init__(message)


class GenerationFailure(CodegenError):
    """The client generator rejected the document."""


class WriteFailure(CodegenError):
    """An artifact could not be written."""
