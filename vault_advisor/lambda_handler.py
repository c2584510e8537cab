"""
AWS Lambda handler: routes API Gateway proxy events to the vault advisor pipeline.

PURPOSE:
- Entry point for AWS Lambda behind API Gateway (REST v1 or HTTP API v2 events).
- Normalises the incoming event, dispatches by method + path through router.route,
  and returns an API Gateway compatible response.

CONTEXT:
- Every log line carries request_id and correlation_id (bound via contextvars) so
  one request can be followed across services in CloudWatch.
"""

from __future__ import annotations
import json
import time
import traceback
import uuid
from typing import Any, Dict, Tuple

from vault_advisor.logging_setup import bind_request, configure_logging
from vault_advisor.router import failure_body, route

log = configure_logging()


def _response(body: Dict[str, Any], status_code: int = 200) -> Dict[str, Any]:
    """Wrap a dict into {"statusCode", "headers", "body": "<json-string>"}."""
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def _method_and_path(event: Dict[str, Any]) -> Tuple[str, str]:
    """REST API events carry httpMethod/path; HTTP API v2 events carry requestContext.http."""
    http = (event.get("requestContext") or {}).get("http") or {}
    method = event.get("httpMethod") or http.get("method") or "POST"
    path = event.get("path") or event.get("rawPath") or http.get("path") or "/api/defindex/recommend-and-project"
    return method.upper(), path


def handler(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    """
    Lambda entry point.

    flow:
    1) Bind request/correlation IDs for traceability.
    2) Parse the JSON body; an unparseable body is a 400.
    3) Route to the pipeline; VaultAdvisorErrors map to their own status (400/404).
    4) Any other exception is logged with a short traceback and returned as a
       generic 500 with success=false.
    """
    t0 = time.time()
    event = event or {}
    headers = event.get("headers") or {}

    request_id = getattr(context, "aws_request_id", None) or str(uuid.uuid4())
    correlation_id = headers.get("x-correlation-id") or str(uuid.uuid4())
    bind_request(request_id, correlation_id)

    method, path = _method_and_path(event)
    log.info("request.received", method=method, path=path)

    raw = event.get("body")
    try:
        body = json.loads(raw) if isinstance(raw, str) and raw else (raw or {})
    except json.JSONDecodeError as e:
        log.warning("request.body_parse_failed", error=str(e))
        return _response({"error": "Request body is not valid JSON", "success": False}, 400)

    query = event.get("queryStringParameters") or {}
    try:
        status, result = route(method, path, body, query)
    except Exception as e:
        latency_ms = round((time.time() - t0) * 1000, 1)
        log.error(
            "response.error",
            error=f"{type(e).__name__}: {e}",
            traceback=traceback.format_exc(limit=2),
            latency_ms=latency_ms,
        )
        return _response(failure_body(path), 500)

    latency_ms = round((time.time() - t0) * 1000, 1)
    if status >= 400:
        log.warning("response.rejected", status=status, error=result.get("error"), latency_ms=latency_ms)
    else:
        log.info("response.success", status=status, latency_ms=latency_ms)
    return _response(result, status)
