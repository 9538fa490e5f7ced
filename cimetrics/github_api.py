"""GitHub Actions API client used to fetch runs and jobs."""

from __future__ import annotations

import http.client
import json
import sys
import time
from typing import Any
from urllib import error, request

from cimetrics.errors import ProviderError, RunNotFoundError
from cimetrics.models import RawJob, RawPipelineRun

DEFAULT_API_URL = "https://api.github.com"
JOBS_PER_PAGE = 100


class GitHubAPI:
    """GitHub API client with retry logic."""

    def __init__(self, token: str, api_url: str = DEFAULT_API_URL, debug: bool = False):
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.debug = debug

    def get(self, url: str, retries: int = 3, backoff: float = 2.0, timeout: int = 30) -> dict[str, Any]:
        """GET a JSON object, retrying transient failures.

        Client errors (4xx) are raised immediately as ``urllib.error.HTTPError``.
        """
        attempt = 0
        while True:
            try:
                req = request.Request(  # noqa: S310
                    url,
                    headers={
                        "Authorization": f"Bearer {self.token}",
                        "Accept": "application/vnd.github+json",
                        "X-GitHub-Api-Version": "2022-11-28",
                    },
                )
                if self.debug:
                    print(f"[debug] GET {url}", file=sys.stderr)
                with request.urlopen(req, timeout=timeout) as resp:  # noqa: S310
                    data = json.loads(resp.read().decode())
                    return data if isinstance(data, dict) else {}
            except error.HTTPError as exc:
                if exc.code < 500:
                    raise
                attempt += 1
                if attempt > retries:
                    raise
                self._wait(url, attempt, retries, backoff, exc)
            except (error.URLError, http.client.HTTPException, OSError, json.JSONDecodeError) as exc:
                attempt += 1
                if attempt > retries:
                    raise
                self._wait(url, attempt, retries, backoff, exc)

    def _wait(self, url: str, attempt: int, retries: int, backoff: float, exc: Exception) -> None:
        sleep_for = backoff * attempt
        print(f"Retry {attempt}/{retries} for {url}: {exc} (sleep {sleep_for}s)", file=sys.stderr)
        time.sleep(sleep_for)

    def get_workflow_run(self, repository: str, run_id: int) -> RawPipelineRun:
        url = f"{self.api_url}/repos/{repository}/actions/runs/{run_id}"
        try:
            data = self.get(url)
        except error.HTTPError as exc:
            if exc.code == 404:
                raise RunNotFoundError(repository, run_id) from exc
            raise ProviderError(url, exc, status=exc.code) from exc
        except (error.URLError, http.client.HTTPException, OSError, json.JSONDecodeError) as exc:
            raise ProviderError(url, exc) from exc
        return RawPipelineRun.from_api(data)

    def list_jobs(self, repository: str, run_id: int) -> list[RawJob]:
        """List every job of the run's latest attempt, across pages, in API order."""
        jobs: list[RawJob] = []
        page = 1
        while True:
            url = (
                f"{self.api_url}/repos/{repository}/actions/runs/{run_id}/jobs"
                f"?filter=latest&per_page={JOBS_PER_PAGE}&page={page}"
            )
            try:
                data = self.get(url)
            except error.HTTPError as exc:
                raise ProviderError(url, exc, status=exc.code) from exc
            except (error.URLError, http.client.HTTPException, OSError, json.JSONDecodeError) as exc:
                raise ProviderError(url, exc) from exc
            batch = data.get("jobs") or []
            jobs.extend(RawJob.from_api(item) for item in batch if isinstance(item, dict))
            total = data.get("total_count")
            if not batch or len(batch) < JOBS_PER_PAGE:
                break
            if isinstance(total, int) and len(jobs) >= total:
                break
            page += 1
        return jobs
