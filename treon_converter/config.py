"""Configuration loader for the YAML config format.

Parses YAML files with the following top-level sections::

    converter:        # converter settings (log_level, vibration_exclude)
    sinks:            # list of sink configs passed to the sink factory

Example:

.. code-block:: yaml

    converter:
      log_level: INFO
      vibration_exclude: [Kurtosis]

    sinks:
      - type: console
        fmt: text
      - type: file
        path: ./output
        format: csv
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from treon_converter.converter import PayloadConverter

__all__ = ["ConverterYAMLConfig", "load_yaml_config"]

logger = logging.getLogger("treon_converter.config")


class ConverterYAMLConfig(BaseModel):
    """Parsed representation of the full YAML configuration.

    Attributes:
        vibration_exclude: Raw vibration metric names to skip.
        sink_configs: Raw dicts passed to the sink factory.
        log_level: Logging level string.
    """

    vibration_exclude: list[str] = Field(default_factory=list)
    sink_configs: list[dict[str, Any]] = Field(default_factory=list)
    log_level: str = "INFO"

    def build_converter(self) -> PayloadConverter:
        return PayloadConverter(vibration_exclude=self.vibration_exclude)


def load_yaml_config(path: str | Path) -> ConverterYAMLConfig:
    """Load and validate a YAML configuration file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open("r") as fh:
        raw: dict[str, Any] = yaml.safe_load(fh) or {}

    conv_section = raw.get("converter") or {}
    exclude = conv_section.get("vibration_exclude") or []
    if isinstance(exclude, str):
        exclude = [exclude]

    config = ConverterYAMLConfig(
        vibration_exclude=[str(name) for name in exclude],
        sink_configs=raw.get("sinks") or [],
        log_level=str(conv_section.get("log_level", "INFO")).upper(),
    )

    logger.info(
        "Loaded config: %d excluded vibration metrics, %d sinks",
        len(config.vibration_exclude),
        len(config.sink_configs),
    )
    return config
