"""
Environment based configuration.

Values are read from the process environment (and a `.env` file, if present)
every time one of the getters is called, so tests and long running processes
can change them without re-importing the module.
"""

import logging
import os

# load envs
from dotenv import load_dotenv
load_dotenv()

logger = logging.getLogger(__name__)


MIN_AREA_RATIO = 0.15
MAX_AREA_RATIO = 0.98
CANNY_LOW = 50
CANNY_HIGH = 200
MIN_SCORE = 0.5
DEFAULT_MARGIN = 0.10
MAX_OUTPUT_DIMENSION = 1800
MIN_INTERVAL = 0.3
MAX_FAILURES = 30
LOG_LEVEL = "WARNING"


def _read(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning("Invalid value %r for %s, using default %r", raw, name, default)
        return default


def env_float(name: str, default: float) -> float:
    return _read(name, default, float)


def env_int(name: str, default: int) -> int:
    return _read(name, default, int)


def min_area_ratio() -> float:
    return env_float("SCANNER_MIN_AREA_RATIO", MIN_AREA_RATIO)


def max_area_ratio() -> float:
    return env_float("SCANNER_MAX_AREA_RATIO", MAX_AREA_RATIO)


def canny_thresholds() -> tuple:
    return env_int("SCANNER_CANNY_LOW", CANNY_LOW), env_int("SCANNER_CANNY_HIGH", CANNY_HIGH)


def min_score() -> float:
    return env_float("SCANNER_MIN_SCORE", MIN_SCORE)


def default_margin() -> float:
    return env_float("SCANNER_DEFAULT_MARGIN", DEFAULT_MARGIN)


def max_output_dimension():
    """Maximum rectified side in pixels, or None when the cap is disabled (0)."""
    value = env_int("SCANNER_MAX_OUTPUT_DIMENSION", MAX_OUTPUT_DIMENSION)
    return value if value > 0 else None


def min_interval() -> float:
    return env_float("SCANNER_MIN_INTERVAL", MIN_INTERVAL)


def max_failures() -> int:
    return env_int("SCANNER_MAX_FAILURES", MAX_FAILURES)


def log_level() -> str:
    return os.getenv("SCANNER_LOG_LEVEL", LOG_LEVEL).upper()
