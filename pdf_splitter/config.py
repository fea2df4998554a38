from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import InvalidConfiguration
from .types import DetectionConfig, SplitConfiguration
from .utils import load_json


@dataclass(frozen=True)
class SplitterConfig:
    split: SplitConfiguration = field(default_factory=SplitConfiguration)
    detection: DetectionConfig = field(default_factory=DetectionConfig)


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise InvalidConfiguration(f"config section '{name}' must be an object")
    return section


def _number(section: dict[str, Any], key: str, default: float) -> float:
    value = section.get(key, default)
    # bool is an int subclass; true/false is not a number here.
    if isinstance(value, bool):
        raise InvalidConfiguration(f"{key} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise InvalidConfiguration(f"{key} must be a number, got {value!r}") from e


def _flag(section: dict[str, Any], key: str, default: bool) -> bool:
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise InvalidConfiguration(f"{key} must be true or false, got {value!r}")
    return value


def parse_config(data: Any) -> SplitterConfig:
    if not isinstance(data, dict):
        raise InvalidConfiguration("config root must be an object")

    split = _section(data, "split")
    detection = _section(data, "detection")

    defaults = SplitterConfig()
    return SplitterConfig(
        split=SplitConfiguration(
            pages_per_chunk=split.get("pages_per_chunk", defaults.split.pages_per_chunk),
            remove_blank_pages=_flag(split, "remove_blank_pages", defaults.split.remove_blank_pages),
        ),
        detection=DetectionConfig(
            scale=_number(detection, "scale", defaults.detection.scale),
            brightness_threshold=_number(
                detection, "brightness_threshold", defaults.detection.brightness_threshold
            ),
            max_samples=detection.get("max_samples", defaults.detection.max_samples),
        ),
    )


def load_config(config_path: str | Path | None = None) -> SplitterConfig:
    if config_path is None:
        return SplitterConfig()
    try:
        data = load_json(config_path)
    except (OSError, ValueError) as e:
        raise InvalidConfiguration(f"failed to read config {config_path}: {e}") from e
    return parse_config(data)
