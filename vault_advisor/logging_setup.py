"""
Structured logging setup for the vault advisor (Lambda, API and CLI).

PURPOSE:
- Emit one JSON object per log line on stdout so CloudWatch Insights (or any log
  shipper) can query fields such as vault, risk_tolerance or latency_ms.
- Let request-scoped fields (request_id, correlation_id) ride along on every line
  through structlog's contextvars, so library modules only call
  structlog.get_logger(__name__) and never pass ids around.

example log entry:
{
  "event": "recommend.fallback",
  "level": "info",
  "timestamp": "2026-10-18T13:00:00Z",
  "service": "StellarVaultAdvisor",
  "env": "dev",
  "request_id": "req-123",
  "step": "widen_risk"
}
"""

from __future__ import annotations
import logging
import os
import sys
import structlog

from vault_advisor.config import get_settings


def configure_logging():
    """
    Configure structlog + stdlib logging and return a logger bound with service metadata.

    behaviour:
    - Level comes from LOG_LEVEL (default INFO); unknown names fall back to INFO.
    - Safe to call more than once: basicConfig is a no-op after the first call and
      structlog.configure simply replaces the processor chain.
    """
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    settings = get_settings()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level, logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger().bind(service=settings.service_name, env=settings.env)


def bind_request(request_id: str, correlation_id: str) -> None:
    """Attach request ids to every log line emitted while handling this request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, correlation_id=correlation_id)
