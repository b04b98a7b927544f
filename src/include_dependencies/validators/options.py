"""JSON-schema validation for the plugin's ``custom`` option blocks."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from jsonschema import Draft202012Validator

RESOLUTION_OPTIONS_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "shouldUseLocalNodeModules": {"type": "boolean"},
        "shouldIgnorePackageJsonDependencies": {"type": "boolean"},
        "packagesToBeIgnored": {
            "type": "array",
            "items": {"type": "string", "minLength": 1},
        },
    },
}

PLUGIN_OPTIONS_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "enableCaching": {"type": "boolean"},
    },
}


def _format_errors(errors: Iterable) -> str:
    messages = []
    for error in errors:
        pointer = "/".join(str(p) for p in error.path)
        messages.append(f"- {pointer or '<root>'}: {error.message}")
    return "\n".join(messages)


def validate_options(document: Any, schema: dict[str, Any]) -> None:
    """Raise ValueError listing every schema violation in ``document``."""
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(document), key=lambda e: list(e.path))
    if errors:
        raise ValueError("\n" + _format_errors(errors))
