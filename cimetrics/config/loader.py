"""
cimetrics - Settings Loader

Merges settings from multiple sources with proper precedence:
  1. Command line flags (highest priority)
  2. GitHub Actions inputs (INPUT_* environment variables)
  3. YAML settings file (--config, or .ci-metrics.yml when present)
  4. Built-in defaults (lowest priority)
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from cimetrics.config.normalize import normalize_settings
from cimetrics.errors import ConfigValidationError, InputError
from cimetrics.github_api import DEFAULT_API_URL
from cimetrics.record_schema import SETTINGS_SCHEMA, validate_against
from cimetrics.utils.env import read_env

DEFAULT_CONFIG_FILE = ".ci-metrics.yml"

DEFAULT_SETTINGS: dict[str, Any] = {
    "api_url": "",
    "api_key": "",
    "workflow_run_id": None,
    "dry_run": False,
    "debug": False,
    "job_name": None,
    "runner_name": None,
    "timeout_seconds": 30.0,
    "github_api_url": DEFAULT_API_URL,
}

# Setting name -> action input environment variable.
INPUT_ENV = {
    "api_url": "INPUT_API_URL",
    "api_key": "INPUT_API_KEY",
    "workflow_run_id": "INPUT_WORKFLOW_RUN_ID",
    "dry_run": "INPUT_DRY_RUN",
    "debug": "INPUT_DEBUG",
    "job_name": "INPUT_JOB_NAME",
    "timeout_seconds": "INPUT_TIMEOUT_SECONDS",
}


@dataclass(frozen=True)
class Settings:
    api_url: str
    api_key: str
    workflow_run_id: str | None
    dry_run: bool
    debug: bool
    job_name: str | None
    runner_name: str | None
    timeout_seconds: float
    github_api_url: str


@dataclass(frozen=True)
class RunContext:
    """What the runner environment says about the invoking run."""

    repository: str | None
    run_id: str | None
    ref: str
    head_ref: str
    job: str | None
    runner_name: str | None
    token: str | None
    api_url: str | None
    output_path: Path | None


def deep_merge(base: dict, override: dict) -> dict:
    """
    Deep merge two dictionaries. Override values take precedence.
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_yaml_file(path: Path) -> dict:
    """Load a YAML file, return empty dict if not found."""
    if not path.exists():
        return {}

    with open(path, encoding="utf-8") as f:
        content = yaml.safe_load(f)
        return content if content else {}


def _settings_file(config_path: Path | None, cwd: Path) -> dict[str, Any]:
    if config_path is not None:
        if not config_path.exists():
            raise InputError("config", f"settings file not found: {config_path}")
        source = config_path
    else:
        source = cwd / DEFAULT_CONFIG_FILE
    try:
        data = load_yaml_file(source)
    except yaml.YAMLError as exc:
        raise InputError("config", f"{source} is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise InputError("config", f"{source} must contain a mapping")
    return data


def _env_inputs(env: Mapping[str, str]) -> dict[str, Any]:
    inputs: dict[str, Any] = {}
    for key, env_name in INPUT_ENV.items():
        value = read_env(env, env_name)
        if value is not None:
            inputs[key] = value
    return inputs


def load_settings(
    env: Mapping[str, str],
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
    cwd: Path | None = None,
) -> Settings:
    """
    Load and merge settings for an invocation.

    Args:
        env: Environment mapping (usually os.environ)
        config_path: Optional explicit YAML settings file
        overrides: Values from command line flags; None entries are ignored
        cwd: Directory searched for the default settings file

    Returns:
        Validated Settings
    """
    settings = dict(DEFAULT_SETTINGS)
    settings = deep_merge(settings, normalize_settings(_settings_file(config_path, cwd or Path.cwd())))
    settings = deep_merge(settings, normalize_settings(_env_inputs(env)))
    if overrides:
        cli_values = {key: value for key, value in overrides.items() if value is not None}
        settings = deep_merge(settings, normalize_settings(cli_values))

    errors = validate_against(settings, SETTINGS_SCHEMA)
    if errors:
        print("Settings validation failed:", file=sys.stderr)
        for message in errors:
            print(f"  - {message}", file=sys.stderr)
        raise ConfigValidationError("Settings validation failed", errors=errors)

    run_id = settings.get("workflow_run_id")
    return Settings(
        api_url=settings["api_url"],
        api_key=settings["api_key"],
        workflow_run_id=str(run_id) if run_id is not None else None,
        dry_run=bool(settings["dry_run"]),
        debug=bool(settings["debug"]),
        job_name=settings.get("job_name"),
        runner_name=settings.get("runner_name"),
        timeout_seconds=float(settings["timeout_seconds"]),
        github_api_url=settings["github_api_url"],
    )


def load_context(env: Mapping[str, str]) -> RunContext:
    output = read_env(env, "GITHUB_OUTPUT")
    return RunContext(
        repository=read_env(env, "GITHUB_REPOSITORY"),
        run_id=read_env(env, "GITHUB_RUN_ID"),
        ref=read_env(env, "GITHUB_REF") or "",
        head_ref=read_env(env, "GITHUB_HEAD_REF") or "",
        job=read_env(env, "GITHUB_JOB"),
        runner_name=read_env(env, "RUNNER_NAME"),
        token=read_env(env, "GITHUB_TOKEN"),
        api_url=read_env(env, "GITHUB_API_URL"),
        output_path=Path(output) if output else None,
    )
