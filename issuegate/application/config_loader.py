from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from issuegate.application.settings import GateSettings
from issuegate.domain.constants import CONFIG_DIRNAME, CONFIG_FILENAME


class ConfigLoadError(Exception):
    def __init__(self, message: str, *, path: Path | None = None, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.cause = cause

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.message}: {self.path}"


# Environment variable -> settings key. GITHUB_* are set by the workflow runner.
_ENV_KEYS: dict[str, str] = {
    "GITHUB_REPOSITORY": "repository",
    "GITHUB_RUN_ID": "run_id",
    "GITHUB_ACTOR": "workflow_initiator",
    "GITHUB_SERVER_URL": "server_url",
    "GITHUB_API_URL": "api_url",
    "ISSUEGATE_APPROVERS": "approvers",
    "ISSUEGATE_MINIMUM_APPROVALS": "minimum_approvals",
    "ISSUEGATE_DISALLOWED_USERS": "disallowed_users",
}


def _defaults() -> dict[str, Any]:
    return {
        "approvers": [],
        "minimum_approvals": 0,
        "disallowed_users": [],
        "fail_on_denial": True,
    }


def _deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """
    Deep-merge mapping keys. For non-dict values, overlay wins.
    """
    merged: dict[str, Any] = dict(base)
    for k, v in overlay.items():
        if isinstance(v, dict) and isinstance(merged.get(k), dict):
            merged[k] = _deep_merge(merged[k], v)  # type: ignore[arg-type]
        else:
            merged[k] = v
    return merged


def _load_yaml_mapping(path: Path, *, required: bool = False) -> dict[str, Any]:
    """
    Load YAML file and ensure root is a mapping.
    """
    # Protect against TOCTOU race conditions.
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        if required:
            raise ConfigLoadError("Config file not found", path=path, cause=e) from e
        return {}
    except Exception as e:  # pragma: no cover
        raise ConfigLoadError("Failed to read config file", path=path, cause=e) from e

    try:
        data = yaml.safe_load(raw)
    except Exception as e:
        raise ConfigLoadError("Malformed YAML", path=path, cause=e) from e

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigLoadError("YAML root must be a mapping", path=path)

    return data


def _env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    """Collect non-empty settings from the environment."""
    overrides: dict[str, Any] = {}
    for env_key, settings_key in _ENV_KEYS.items():
        value = environ.get(env_key, "").strip()
        if value:
            overrides[settings_key] = value
    return overrides


def load_config(
    *,
    project_root: Path | None = None,
    user_home: Path | None = None,
    config_file: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """
    Load and merge config with precedence (highest wins):
    CLI args (handled in CLI) > environment > explicit file > project > user > defaults.

    Files:
      - user:     user_home/.issuegate/config.yml
      - project:  project_root/.issuegate/config.yml
      - explicit: config_file (must exist)
    """
    project_root = project_root or Path.cwd()
    user_home = user_home or Path.home()
    environ = environ if environ is not None else {}

    cfg: dict[str, Any] = _defaults()
    cfg = _deep_merge(cfg, _load_yaml_mapping(user_home / CONFIG_DIRNAME / CONFIG_FILENAME))
    cfg = _deep_merge(cfg, _load_yaml_mapping(project_root / CONFIG_DIRNAME / CONFIG_FILENAME))
    if config_file is not None:
        cfg = _deep_merge(cfg, _load_yaml_mapping(config_file, required=True))
    cfg = _deep_merge(cfg, _env_overrides(environ))

    return cfg


def load_settings(
    overrides: dict[str, Any] | None = None,
    **kwargs: Any,
) -> GateSettings:
    """Load config (see load_config) and validate it into GateSettings.

    Args:
        overrides: Highest-precedence values (CLI options); None values are ignored
        **kwargs: Passed through to load_config

    Raises:
        ConfigLoadError: If a config file is unreadable or malformed
        pydantic.ValidationError: If the merged config is invalid
    """
    cfg = load_config(**kwargs)
    if overrides:
        cfg = _deep_merge(cfg, {k: v for k, v in overrides.items() if v is not None})
    return GateSettings.model_validate(cfg)
