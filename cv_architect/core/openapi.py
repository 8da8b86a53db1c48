"""OpenAPI metadata customization.

Adds tag descriptions and documents the shared error envelope so clients
see the same ``{"error": {...}}`` shape the global handlers produce.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

TAGS_METADATA = [
    {"name": "CV", "description": "CV analysis against an optional job description."},
    {"name": "Headshot", "description": "Professional photo feedback."},
    {"name": "History", "description": "The last 20 analyses, newest first."},
    {"name": "Dashboard", "description": "Dashboard state, tabs and form actions."},
    {"name": "Report", "description": "Printable audit reports."},
    {"name": "Documents", "description": "Word-compatible .doc downloads."},
    {"name": "Health", "description": "Liveness checks."},
]

ERROR_ENVELOPE_SCHEMA = {
    "type": "object",
    "properties": {
        "error": {
            "type": "object",
            "properties": {
                "code": {"type": "string"},
                "message": {"type": "string"},
                "request_id": {"type": "string", "nullable": True},
                "details": {"type": "object"},
            },
            "required": ["code", "message"],
        }
    },
}


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch OpenAPI generation to add tag metadata and the error schema."""

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema
        schema = original_openapi()

        components = schema.setdefault("components", {})
        components.setdefault("schemas", {}).setdefault("ErrorResponse", ERROR_ENVELOPE_SCHEMA)

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        for tag in TAGS_METADATA:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        app.openapi_schema = schema
        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
