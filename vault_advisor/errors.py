"""
Exceptions raised across the orchestration boundary.

PURPOSE: Give each user-facing failure an HTTP status and a JSON body so the
         FastAPI app and the Lambda router report them the same way.
CONTEXT: The analysis chain itself never raises for business reasons; these are
         raised by pipeline.py (bad requests, no vault after the fallback
         cascade) and by the vault source tool.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional


class VaultAdvisorError(Exception):
    """Base class; status_code is the HTTP status the error maps to."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.message, "success": False}


class RequestValidationError(VaultAdvisorError):
    status_code = 400


class NoSuitableVaultError(VaultAdvisorError):
    """
    No vault survived the recommendation and every fallback step.

    attributes:
    - fallback_options: list[str] – alternatives the UI can offer the user.
    - api_calls: list[dict] – internal call log gathered before giving up.
    """

    status_code = 404

    def __init__(
        self,
        message: str = "No suitable vaults found",
        fallback_options: Optional[List[str]] = None,
        api_calls: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(message)
        self.fallback_options = list(fallback_options or [])
        self.api_calls = list(api_calls or [])

    def to_body(self) -> Dict[str, Any]:
        body = super().to_body()
        body["fallbackOptions"] = self.fallback_options
        if self.api_calls:
            body["apiCalls"] = self.api_calls
        return body


class VaultSourceError(VaultAdvisorError):
    status_code = 502
