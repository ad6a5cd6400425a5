# ABOUTME: Loads tool configuration from a TOML file.
# ABOUTME: Supplies default directories, marker overrides and report settings.

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .behaviors import BehaviorTag

LOG_DIR_ENV = "AI_ASSIST_STATS_LOG_DIR"
DEFAULT_SECONDARY_QUERY_DIVISOR = 3


@dataclass(frozen=True)
class StatsConfig:
    """Settings read from the config file."""

    log_dir: Optional[Path] = None
    output_dir: Optional[Path] = None
    markers: dict[BehaviorTag, list[str]] = field(default_factory=dict)
    secondary_query_divisor: int = DEFAULT_SECONDARY_QUERY_DIVISOR


def _default_config_path() -> Path:
    """Return the default config location."""
    return Path.home() / ".config" / "ai-assist-stats" / "config.toml"


def _parse_markers(raw: object) -> Optional[dict[BehaviorTag, list[str]]]:
    if not isinstance(raw, dict):
        return None
    markers: dict[BehaviorTag, list[str]] = {}
    for key, value in raw.items():
        try:
            tag = BehaviorTag(key)
        except ValueError:
            return None
        if tag is BehaviorTag.TOTAL_RECORDS:
            return None
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list) or not all(isinstance(v, str) and v for v in value):
            return None
        markers[tag] = list(value)
    return markers


def _optional_path(raw: object) -> Optional[Path]:
    if isinstance(raw, str) and raw:
        return Path(raw).expanduser()
    return None


def load_config(config_path: Optional[Path] = None) -> StatsConfig:
    """Load configuration from a TOML file.

    Args:
        config_path: Path to config file. If None, uses the default location
                     (~/.config/ai-assist-stats/config.toml).

    Returns:
        StatsConfig. Returns the default config if the file doesn't exist,
        can't be decoded, or holds values of the wrong type.
    """
    if config_path is None:
        config_path = _default_config_path()

    if not config_path.exists():
        return StatsConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError:
        return StatsConfig()

    for key in ("log_dir", "output_dir"):
        if key in data and not isinstance(data[key], str):
            return StatsConfig()

    markers = _parse_markers(data.get("markers", {}))
    if markers is None:
        return StatsConfig()

    divisor = data.get("secondary_query_divisor", DEFAULT_SECONDARY_QUERY_DIVISOR)
    if isinstance(divisor, bool) or not isinstance(divisor, int) or divisor <= 0:
        return StatsConfig()

    return StatsConfig(
        log_dir=_optional_path(data.get("log_dir")),
        output_dir=_optional_path(data.get("output_dir")),
        markers=markers,
        secondary_query_divisor=divisor,
    )


def resolve_log_dir(cli_log_dir: Optional[str], config: StatsConfig) -> Path:
    """Resolve the log directory.

    Priority:
    1. CLI --log-dir flag (if provided)
    2. AI_ASSIST_STATS_LOG_DIR environment variable
    3. log_dir from the config file
    4. The current working directory
    """
    if cli_log_dir is not None:
        return Path(cli_log_dir).expanduser()

    env_dir = os.environ.get(LOG_DIR_ENV, "").strip()
    if env_dir:
        return Path(env_dir).expanduser()

    if config.log_dir is not None:
        return config.log_dir

    return Path.cwd()


def resolve_output_dir(
    cli_output_dir: Optional[str], config: StatsConfig, log_dir: Path
) -> Path:
    """Resolve the report directory, defaulting to the log directory."""
    if cli_output_dir is not None:
        return Path(cli_output_dir).expanduser()
    if config.output_dir is not None:
        return config.output_dir
    return log_dir
