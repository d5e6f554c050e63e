"""Runtime configuration for the generative-AI provider."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from functools import cache
from pathlib import Path
from typing import Any

import yaml

_LOGGER = logging.getLogger(__name__)

__all__ = ["CONFIG_FILE", "DEFAULTS", "FarmAIConfig", "load_config"]

CONFIG_FILE = Path(__file__).resolve().with_name("farm_config.yaml")

DEFAULTS: dict[str, Any] = {
    "api_key": "",
    "model": "gemini-3-flash-preview",
    "base_url": "https://generativelanguage.googleapis.com/v1beta",
    "timeout": 30.0,
    "default_location": "Ankara, Çankaya",
}

_ENV_KEYS = {
    "model": "GEMINI_MODEL",
    "base_url": "GEMINI_BASE_URL",
    "timeout": "GEMINI_TIMEOUT",
}


@cache
def load_config(path: str | Path = CONFIG_FILE) -> dict[str, Any]:
    """Return ``DEFAULTS`` updated with the values stored in ``path``.

    A missing or malformed file yields the defaults.
    """

    merged = dict(DEFAULTS)
    try:
        with open(path, encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except FileNotFoundError:
        return merged
    except yaml.YAMLError as err:
        _LOGGER.warning("Ignoring unreadable config %s: %s", path, err)
        return merged
    if isinstance(data, Mapping):
        merged.update({key: value for key, value in data.items() if key in DEFAULTS})
    return merged


@dataclass(slots=True, frozen=True)
class FarmAIConfig:
    """Settings used to reach the Gemini API.

    An empty ``api_key`` puts the provider in offline mode.
    """

    api_key: str = ""
    model: str = DEFAULTS["model"]
    base_url: str = DEFAULTS["base_url"]
    timeout: float = DEFAULTS["timeout"]
    default_location: str = DEFAULTS["default_location"]

    @property
    def online(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(
        cls,
        env: Mapping[str, str] | None = None,
        path: str | Path = CONFIG_FILE,
    ) -> FarmAIConfig:
        """Build the configuration from the YAML defaults and the environment."""

        env = os.environ if env is None else env
        values = dict(load_config(path))
        values["api_key"] = env.get("GEMINI_API_KEY") or env.get("API_KEY") or values["api_key"] or ""
        for key, env_key in _ENV_KEYS.items():
            if env.get(env_key):
                values[key] = env[env_key]
        try:
            timeout = float(values["timeout"])
        except (TypeError, ValueError):
            _LOGGER.warning("Invalid timeout %r, using %s", values["timeout"], DEFAULTS["timeout"])
            timeout = DEFAULTS["timeout"]
        return cls(
            api_key=str(values["api_key"]).strip(),
            model=str(values["model"]),
            base_url=str(values["base_url"]).rstrip("/"),
            timeout=timeout,
            default_location=str(values["default_location"]),
        )
