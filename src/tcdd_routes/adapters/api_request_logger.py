"""Logging of booking-service traffic when TCDD_LOG_REQUESTS is enabled."""

import json
import logging
import os
from typing import Any

logger = logging.getLogger(__name__)

SENSITIVE_HEADERS = {"authorization", "cookie", "unit-id"}
MAX_LOGGED_BODY_CHARS = 500


def should_log_requests() -> bool:
    """Check if traffic logging is enabled via the TCDD_LOG_REQUESTS environment variable."""
    return os.getenv("TCDD_LOG_REQUESTS", "").lower() == "true"


def redact_headers(headers: dict[str, str]) -> dict[str, str]:
    """Mask credentials before they reach a log line."""
    return {k: "***REDACTED***" if k.lower() in SENSITIVE_HEADERS else v for k, v in headers.items()}


def log_api_request(
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    payload: Any = None,
) -> None:
    """Log an outgoing request.

    Args:
        method: HTTP method (GET, POST).
        url: Request URL.
        headers: Request headers; credentials are redacted.
        payload: JSON body, if any.
    """
    if not should_log_requests():
        return

    log_parts = [f"{method} {url}"]
    if headers:
        log_parts.append(f"Headers: {json.dumps(redact_headers(headers), indent=2)}")
    if payload is not None:
        log_parts.append(f"Payload: {json.dumps(payload, indent=2, ensure_ascii=False)}")

    logger.info("TCDD request:\n" + "\n".join(log_parts))


def log_api_response(method: str, url: str, status: int, elapsed_seconds: float, body: str = "") -> None:
    """Log the status, latency and (truncated) body of a response."""
    if not should_log_requests():
        return

    snippet = body[:MAX_LOGGED_BODY_CHARS] if body else "(not captured)"
    logger.info(f"TCDD response: {method} {url} -> {status} in {elapsed_seconds:.2f}s\n{snippet}")
