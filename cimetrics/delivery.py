"""Delivery of metrics records to the ingestion endpoint."""

from __future__ import annotations

import json
import socket
from typing import Any
from urllib import error, request

from cimetrics.errors import DeliveryError

DEFAULT_TIMEOUT_SECONDS = 30.0


def render_payload(record: dict[str, Any]) -> str:
    return json.dumps(record, indent=2)


def _is_timeout(exc: BaseException) -> bool:
    if isinstance(exc, (TimeoutError, socket.timeout)):
        return True
    reason = getattr(exc, "reason", None)
    return isinstance(reason, (TimeoutError, socket.timeout))


def send_metrics(
    api_url: str,
    api_key: str,
    record: dict[str, Any],
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> int:
    """POST ``record`` as JSON and return the response status.

    Raises:
        DeliveryError: On a non-success response, a transport failure or a
            timeout. The request is not retried.
    """
    body = render_payload(record).encode("utf-8")
    req = request.Request(  # noqa: S310
        api_url,
        data=body,
        headers={
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        },
        method="POST",
    )
    try:
        with request.urlopen(req, timeout=timeout) as resp:  # noqa: S310
            status = resp.status
    except error.HTTPError as exc:
        detail = exc.read().decode("utf-8", errors="replace").strip()
        cause = f"{exc.reason} - {detail}" if detail else str(exc.reason)
        raise DeliveryError(api_url, cause=cause, status=exc.code) from exc
    except (error.URLError, TimeoutError, socket.timeout, OSError) as exc:
        reason = str(getattr(exc, "reason", exc))
        if _is_timeout(exc):
            raise DeliveryError(api_url, cause=reason, timed_out=True, timeout=timeout) from exc
        raise DeliveryError(api_url, cause=reason) from exc
    if status >= 300:
        raise DeliveryError(api_url, cause="unexpected response", status=status)
    return status
