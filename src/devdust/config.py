"""Configuration management for devdust."""

import copy
import json
import re
from datetime import datetime
from pathlib import Path

from dateutil import parser as date_parser

from devdust.models import DAY, HOUR, MINUTE, MONTH, WEEK, YEAR

CONFIG_DIR = Path.home() / ".devdust"
CONFIG_FILE = CONFIG_DIR / "config.json"

DEFAULT_CONFIG = {
    "paths": [],
    "follow_symlinks": False,
    "same_filesystem": False,
    "older": None,
    "format": "pretty",
}

AGE_UNITS = {
    "m": MINUTE,
    "h": HOUR,
    "d": DAY,
    "w": WEEK,
    "M": MONTH,
    "y": YEAR,
}

AGE_PATTERN = re.compile(r"^(\d+)([A-Za-z])$")


def load_config(config_file: Path | None = None) -> dict:
    """Load configuration, merging with defaults.

    Args:
        config_file: File to read instead of ~/.devdust/config.json

    Returns:
        Configuration dictionary
    """
    config_file = config_file or CONFIG_FILE
    if not config_file.exists():
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(config_file) as f:
            user_config = json.load(f)
        if not isinstance(user_config, dict):
            return copy.deepcopy(DEFAULT_CONFIG)
        # Merge with defaults
        config = copy.deepcopy(DEFAULT_CONFIG)
        config.update(user_config)
        return config
    except (json.JSONDecodeError, IOError):
        return copy.deepcopy(DEFAULT_CONFIG)


def save_config(config: dict, config_file: Path | None = None) -> None:
    """Persist configuration.

    Args:
        config: Configuration dictionary to save
        config_file: File to write instead of ~/.devdust/config.json
    """
    config_file = config_file or CONFIG_FILE
    config_file.parent.mkdir(parents=True, exist_ok=True)
    with open(config_file, "w") as f:
        json.dump(config, f, indent=2)


def parse_age_filter(value: str, now: datetime | None = None) -> int:
    """Parse an age filter into seconds.

    Accepts a number followed by a unit (m, h, d, w, M or y, e.g. "30d",
    "2w", "6M") or an absolute date such as "2024-01-31", meaning
    "untouched since then".

    Args:
        value: Age filter as typed by the user
        now: Reference time for absolute dates (defaults to now)

    Returns:
        Minimum age in seconds

    Raises:
        ValueError: If the value cannot be understood
    """
    value = value.strip()
    if not value:
        raise ValueError("Age filter cannot be empty")
    if value.isdigit():
        raise ValueError(f"Missing unit in '{value}'. Use m, h, d, w, M, or y")

    match = AGE_PATTERN.match(value)
    if match:
        number, unit = match.groups()
        if unit not in AGE_UNITS:
            raise ValueError(f"Invalid unit: {unit}. Use m, h, d, w, M, or y")
        return int(number) * AGE_UNITS[unit]

    try:
        since = date_parser.parse(value)
    except (date_parser.ParserError, OverflowError) as e:
        raise ValueError(f"Invalid age filter: {value}") from e

    if since.tzinfo is not None:
        since = since.astimezone().replace(tzinfo=None)

    now = now or datetime.now()
    seconds = int((now - since).total_seconds())
    if seconds < 0:
        raise ValueError(f"Date is in the future: {value}")
    return seconds
