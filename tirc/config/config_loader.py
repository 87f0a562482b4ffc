"""Configuration loading utilities."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..constants import DEFAULT_CONFIG_FILE
from ..errors.internal import ConfigError
from .model import ClientConfig


class ConfigLoader:
    """Builds a ``ClientConfig`` from a JSON file and explicit overrides.

    Values given as overrides (typically command-line flags) win over the
    file; anything left unset falls back to the model defaults.
    """

    def __init__(self, config_file: str | os.PathLike[str] | None = None) -> None:
        """Initialize ConfigLoader.

        Args:
            config_file: Path to the JSON file. Defaults to ``TIRC_CONF_FILE``
                or ``tirc.conf``.
        """
        self.config_file = Path(
            config_file or os.environ.get("TIRC_CONF_FILE", DEFAULT_CONFIG_FILE)
        )

    def load_raw(self) -> dict[str, Any]:
        """Read the configuration file; a missing file yields an empty dict.

        Raises:
            ConfigError: The file exists but is not a JSON object.
        """
        try:
            with self.config_file.open(encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logging.getLogger("tirc").debug(
                f"No configuration file at {self.config_file}, using defaults"
            )
            return {}
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(
                f"Cannot read configuration file {self.config_file}: {e}",
                data={"path": str(self.config_file)},
            ) from e
        if not isinstance(data, dict):
            raise ConfigError(
                f"Configuration file {self.config_file} must contain a JSON object",
                data={"path": str(self.config_file)},
            )
        return data

    def get_configuration(
        self, overrides: Mapping[str, Any] | None = None
    ) -> ClientConfig:
        """Load, merge and validate the configuration.

        Raises:
            ConfigError: The merged values fail validation.
        """
        raw = self.load_raw()
        raw.update({k: v for k, v in (overrides or {}).items() if v is not None})
        try:
            return ClientConfig.from_dict(raw)
        except ValidationError as e:
            raise ConfigError(
                f"Invalid configuration: {e.error_count()} error(s)",
                data={"errors": e.errors(include_url=False)},
            ) from e


def get_configuration(
    overrides: Mapping[str, Any] | None = None,
    config_file: str | os.PathLike[str] | None = None,
) -> ClientConfig:
    return ConfigLoader(config_file).get_configuration(overrides)
