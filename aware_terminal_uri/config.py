"""Codec configuration loaded from defaults, YAML files and the environment."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .errors import TerminalUriConfigError
from .models import TERMINAL_DEFAULT_ICON, TERMINAL_DEFAULT_LOCATION, PaneLocation

logger = logging.getLogger(__name__)

URI_SCHEME = "aware"
URI_HOST = "terminal-view"
URI_PREFIX = f"{URI_SCHEME}://{URI_HOST}"

ENV_PREFIX = "AWARE_TERMINAL_URI_"
_ENV_FIELDS = ("scheme", "host", "default_location", "default_icon")
_SCHEME_PATTERN = re.compile(r"^[a-z][a-z0-9+.-]*$")


class TerminalUriConfig(BaseModel):
    """Namespace and cosmetic defaults used by a codec instance."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    scheme: str = URI_SCHEME
    host: str = URI_HOST
    default_location: PaneLocation = TERMINAL_DEFAULT_LOCATION
    default_icon: str = TERMINAL_DEFAULT_ICON

    @field_validator("scheme")
    @classmethod
    def _validate_scheme(cls, value: str) -> str:
        if not _SCHEME_PATTERN.match(value):
            raise ValueError(f"Invalid URI scheme '{value}'.")
        return value

    @field_validator("host")
    @classmethod
    def _validate_host(cls, value: str) -> str:
        if not value or any(char in value for char in "/?#"):
            raise ValueError(f"Invalid URI host '{value}'.")
        return value

    @property
    def prefix(self) -> str:
        return f"{self.scheme}://{self.host}"


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise TerminalUriConfigError(f"Unable to read config file '{path}': {exc}") from exc
    try:
        loaded = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise TerminalUriConfigError(f"Invalid YAML in config file '{path}': {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise TerminalUriConfigError(f"Config file '{path}' must contain a mapping.")
    return loaded


def _env_overrides(environ: Mapping[str, str]) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    for name in _ENV_FIELDS:
        value = environ.get(f"{ENV_PREFIX}{name.upper()}")
        if value:
            overrides[name] = value
    return overrides


def load_config(
    path: Optional[Path | str] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> TerminalUriConfig:
    """Resolve config: defaults, then the YAML file, then environment overrides."""
    payload: Dict[str, Any] = {}
    if path is not None:
        payload.update(_read_yaml(Path(path).expanduser()))
        logger.debug("Loaded terminal URI config from %s", path)

    overrides = _env_overrides(os.environ if environ is None else environ)
    if overrides:
        logger.debug("Applying terminal URI config overrides from environment: %s", sorted(overrides))
        payload.update(overrides)

    try:
        return TerminalUriConfig.model_validate(payload)
    except ValidationError as exc:
        raise TerminalUriConfigError(f"Invalid terminal URI config: {exc}") from exc


DEFAULT_CONFIG = TerminalUriConfig()


__all__ = [
    "DEFAULT_CONFIG",
    "ENV_PREFIX",
    "TerminalUriConfig",
    "URI_HOST",
    "URI_PREFIX",
    "URI_SCHEME",
    "load_config",
]
