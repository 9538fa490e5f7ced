"""Error types raised by cimetrics.

Classification and aggregation never raise for data-quality issues; these
cover operational failures only.
"""

from __future__ import annotations


class MetricsError(Exception):
    """Base class for failures that abort a metrics invocation."""


class InputError(MetricsError):
    """Raised when a required identifier is missing or malformed."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"Invalid {field}: {message}")
        self.field = field


class RunNotFoundError(MetricsError):
    """Raised when the target run does not exist or is not visible to the token."""

    def __init__(self, repository: str, run_id: int) -> None:
        super().__init__(
            f"Workflow run {run_id} not found in {repository}. "
            "Check that the run id is correct and that the token has "
            "'actions: read' permission on the repository."
        )
        self.repository = repository
        self.run_id = run_id


class ProviderError(MetricsError):
    """Raised when the CI provider API fails for any reason other than not-found."""

    def __init__(self, url: str, cause: Exception, status: int | None = None) -> None:
        detail = f"HTTP {status}" if status is not None else str(cause)
        super().__init__(f"GitHub API request failed for {url}: {detail}")
        self.url = url
        self.status = status
        self.__cause__ = cause


class DeliveryError(MetricsError):
    """Raised when the metrics record cannot be delivered to the ingestion endpoint."""

    def __init__(
        self,
        endpoint: str,
        cause: str | None = None,
        status: int | None = None,
        timed_out: bool = False,
        timeout: float | None = None,
    ) -> None:
        parts = [f"Failed to send metrics to {endpoint}"]
        if status is not None:
            parts.append(f"HTTP {status}")
        if cause:
            parts.append(cause)
        if timed_out:
            parts.append(f"request timed out after {timeout:g}s" if timeout else "request timed out")
        super().__init__(" - ".join(parts))
        self.endpoint = endpoint
        self.status = status
        self.timed_out = timed_out


class ConfigValidationError(MetricsError):
    """Raised when merged settings fail schema validation."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []
