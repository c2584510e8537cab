"""
I/O helpers for request/response schemas.

PURPOSE: Central place for JSON schema loading and validation used by the
         orchestration pipeline, plus readable error strings for API responses.
CONTEXT: Schemas ship inside the package (vault_advisor/schemas/) so validation
         works the same from a checkout, an installed wheel or a Lambda bundle.
"""

from __future__ import annotations

import json
import pathlib
from functools import lru_cache
from typing import Any, Dict

from jsonschema import Draft7Validator, ValidationError, validate

from vault_advisor.errors import RequestValidationError

SCHEMA_DIR = pathlib.Path(__file__).resolve().parent / "schemas"


# -------------------- Schema loading utilities -------------------- #

@lru_cache(maxsize=64)
def _load_schema_cached(abs_path: str) -> Dict[str, Any]:
    """
    Read and parse a JSON schema file, caching it to avoid repeated disk I/O.

    parameters:
    - abs_path: str – full absolute path to the schema file.
    """
    return json.loads(pathlib.Path(abs_path).read_text(encoding="utf-8"))


def load_schema(name: str) -> Dict[str, Any]:
    """
    Load a schema by file name from the package schema directory, or by path.

    parameters:
    - name: str – e.g. "project_request.schema.json", or an absolute/relative path.

    raises:
    - FileNotFoundError – if the schema cannot be located.
    - json.JSONDecodeError – if the file is not valid JSON.
    """
    p = SCHEMA_DIR / name
    if not p.exists():
        p = pathlib.Path(name)
        if not p.exists():
            raise FileNotFoundError(f"Schema not found: {name}")
    return _load_schema_cached(str(p.resolve()))


# -------------------- Validation helpers -------------------- #

def error_to_string(err: Exception) -> str:
    """
    Convert exceptions into readable strings for user-facing error messages.

    notes:
    - ValidationError messages include a pointer path showing where validation failed.
    """
    if isinstance(err, ValidationError):
        path = "$" + "".join(f"[{repr(p)}]" if isinstance(p, int) else f".{p}" for p in err.path)
        return f"{err.message} at {path}"
    return f"{type(err).__name__}: {err}"


def validate_with_schema(instance: Any, schema_name: str) -> None:
    """
    Validate an incoming payload, reporting the first (best-match) error.

    raises:
    - RequestValidationError – carries the error_to_string() message.
    """
    schema = load_schema(schema_name)
    try:
        validate(instance, schema, cls=Draft7Validator)
    except ValidationError as e:
        raise RequestValidationError(error_to_string(e)) from e


def validate_recommend_and_project_request(payload: Dict[str, Any]) -> None:
    validate_with_schema(payload, "recommend_and_project_request.schema.json")


def validate_recommend_request(payload: Dict[str, Any]) -> None:
    validate_with_schema(payload, "recommend_request.schema.json")


def validate_project_request(payload: Dict[str, Any]) -> None:
    validate_with_schema(payload, "project_request.schema.json")


def validate_recommend_and_project_response(result: Dict[str, Any]) -> None:
    """
    Check the orchestrator's own output. A failure here is a bug, so the plain
    jsonschema ValidationError propagates rather than becoming a 400.
    """
    Draft7Validator(load_schema("recommend_and_project_response.schema.json")).validate(result)


__all__ = [
    "load_schema",
    "error_to_string",
    "validate_with_schema",
    "validate_recommend_and_project_request",
    "validate_recommend_request",
    "validate_project_request",
    "validate_recommend_and_project_response",
]
