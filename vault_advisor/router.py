from typing import Any, Callable, Dict, Optional, Tuple

from vault_advisor import pipeline
from vault_advisor.errors import VaultAdvisorError

Handler = Callable[[Dict[str, Any], Dict[str, str]], Dict[str, Any]]

ROUTES: Dict[Tuple[str, str], Handler] = {
    ("POST", "/api/defindex/recommend-and-project"): lambda body, q: pipeline.run_recommend_and_project(body),
    ("POST", "/api/defindex/recommend"): lambda body, q: pipeline.run_recommend(body),
    ("POST", "/api/defindex/project"): lambda body, q: pipeline.run_projection(body),
    ("GET", "/api/defindex/project"): lambda body, q: pipeline.projection_scenarios(),
    ("GET", "/api/defindex/vaults"): lambda body, q: pipeline.list_vaults(q.get("network")),
    ("GET", "/health"): lambda body, q: {"status": "ok"},
}

# Generic 500 messages per route; the real error only goes to the logs.
FAILURE_MESSAGES = {
    "/api/defindex/recommend-and-project": "Failed to generate vault recommendation",
    "/api/defindex/recommend": "Failed to generate recommendations",
    "/api/defindex/project": "Failed to calculate projections",
    "/api/defindex/vaults": "Failed to fetch vault data",
}


def route(method: str, path: str, body: Dict[str, Any], query: Optional[Dict[str, str]] = None) -> Tuple[int, Dict[str, Any]]:
    """
    Dispatch one request to the pipeline and map errors to HTTP statuses.

    returns:
    - (status_code, body): 404 for unknown routes, the error's own status for
      VaultAdvisorError; anything else propagates to the caller.
    """
    handler = ROUTES.get((method.upper(), path.rstrip("/") or "/"))
    if handler is None:
        return 404, {"error": f"No route for {method} {path}", "success": False}
    try:
        return 200, handler(body, query or {})
    except VaultAdvisorError as e:
        return e.status_code, e.to_body()


def failure_body(path: str) -> Dict[str, Any]:
    """Body for an unexpected error on a route: a generic message, never the exception."""
    key = path.rstrip("/")
    body: Dict[str, Any] = {"error": FAILURE_MESSAGES.get(key, "Internal error"), "success": False}
    if key == "/api/defindex/recommend-and-project":
        body["apiCalls"] = [{
            "method": "ERROR",
            "path": key,
            "purpose": "Combined recommendation failed",
            "status": "failed",
        }]
    return body
