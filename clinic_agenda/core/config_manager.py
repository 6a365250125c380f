# File: clinic_agenda/core/config_manager.py
"""
Centralized configuration management for the clinic agenda engine.
Loads settings from environment variables and an optional JSON file.
"""

import os
import json
from pathlib import Path
from typing import Any, Dict, Optional

import pytz
from dotenv import load_dotenv

from clinic_agenda.models.config import GridConfig
from clinic_agenda.utils.logger import setup_logger

# Load environment variables
load_dotenv()

logger = setup_logger(__name__)


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, default))


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, default))


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'y', 'on')


class Config:
    """Application configuration singleton."""

    # Base directories
    BASE_DIR = Path(__file__).parent.parent.parent  # Go up 3 levels from clinic_agenda/core/
    CONFIG_DIR = BASE_DIR / "config"

    # Files
    GRID_CONFIG_FILE = Path(os.getenv("AGENDA_GRID_CONFIG", CONFIG_DIR / "grid.json"))

    # Working window
    START_HOUR = _env_int("AGENDA_START_HOUR", 7)
    END_HOUR = _env_int("AGENDA_END_HOUR", 21)
    SLOT_MINUTES = _env_int("AGENDA_SLOT_MINUTES", 15)

    # Rendering
    PIXELS_PER_HOUR = _env_float("AGENDA_PIXELS_PER_HOUR", 80)
    MIN_VISUAL_HEIGHT = _env_float("AGENDA_MIN_VISUAL_HEIGHT", 40)
    DEFAULT_EVENT_DURATION = _env_int("AGENDA_DEFAULT_EVENT_DURATION", 30)

    # Clinic wall-clock. Aware timestamps are normalized into this zone.
    TARGET_TIMEZONE = os.getenv("TIMEZONE", "Europe/Madrid")

    # Availability search
    LUNCH_START = os.getenv("AGENDA_LUNCH_START", "13:00")
    LUNCH_END = os.getenv("AGENDA_LUNCH_END", "15:00")
    MAX_AVAILABILITY_RESULTS = _env_int("AGENDA_MAX_AVAILABILITY_RESULTS", 5)

    # Cancelled events release their slot unless this is switched on
    INCLUDE_CANCELLED = _env_bool("AGENDA_INCLUDE_CANCELLED", False)

    @classmethod
    def grid_config(cls) -> GridConfig:
        """Build the grid configuration from the current settings."""
        return GridConfig(
            start_hour=cls.START_HOUR,
            end_hour=cls.END_HOUR,
            slot_minutes=cls.SLOT_MINUTES,
            pixels_per_hour=cls.PIXELS_PER_HOUR,
            min_visual_height=cls.MIN_VISUAL_HEIGHT,
        )

    @classmethod
    def load_grid_config(cls, path: Optional[Path] = None) -> GridConfig:
        """
        Load grid configuration from a JSON file, falling back to the
        environment-derived values for any key the file leaves out.
        """
        config_path = Path(path) if path else cls.GRID_CONFIG_FILE
        if not config_path.exists():
            raise FileNotFoundError(f"Grid config file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            data: Dict[str, Any] = json.load(f)

        merged = {**cls.grid_config().to_dict(), **data}
        logger.debug(f"Loaded grid config from {config_path}")
        return GridConfig.from_dict(merged)

    @classmethod
    def timezone(cls):
        """Return the clinic timezone as a pytz timezone."""
        return pytz.timezone(cls.TARGET_TIMEZONE)

    @classmethod
    def validate(cls) -> bool:
        """Validate that all configuration values are usable."""
        errors = []

        try:
            cls.grid_config()
        except ValueError as e:
            errors.append(str(e))

        try:
            pytz.timezone(cls.TARGET_TIMEZONE)
        except pytz.UnknownTimeZoneError:
            errors.append(f"Unknown timezone: {cls.TARGET_TIMEZONE}")

        for name in ("LUNCH_START", "LUNCH_END"):
            value = getattr(cls, name)
            parts = value.split(':')
            if len(parts) != 2 or not all(p.isdigit() for p in parts):
                errors.append(f"{name} must be HH:MM, got {value!r}")

        if cls.DEFAULT_EVENT_DURATION <= 0:
            errors.append("DEFAULT_EVENT_DURATION must be positive")

        if errors:
            for error in errors:
                logger.error(f"Configuration Error: {error}")
            return False

        return True
