"""Harness-wide defaults, overridable through ``GAME_CONFORMANCE_*`` environment variables.

All durations are milliseconds unless the name says otherwise.
"""

import os


def _get_int_env(key: str, default: int) -> int:
    """Get integer from environment variable with fallback to default."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float_env(key: str, default: float) -> float:
    """Get float from environment variable with fallback to default."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_bool_env(key: str, default: bool) -> bool:
    """Get boolean from environment variable (1/true/yes/on) with fallback to default."""
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


DEFAULT_BASE_URL = os.getenv("GAME_CONFORMANCE_BASE_URL", "http://localhost:8080")

NAVIGATION_TIMEOUT_MS = _get_int_env("GAME_CONFORMANCE_NAVIGATION_TIMEOUT_MS", 30000)
NETWORK_IDLE_TIMEOUT_MS = _get_int_env("GAME_CONFORMANCE_NETWORK_IDLE_TIMEOUT_MS", 10000)
SETTLE_WINDOW_MS = _get_int_env("GAME_CONFORMANCE_SETTLE_WINDOW_MS", 2000)
ACTION_TIMEOUT_MS = _get_int_env("GAME_CONFORMANCE_ACTION_TIMEOUT_MS", 5000)
SCENARIO_TIMEOUT_MS = _get_int_env("GAME_CONFORMANCE_SCENARIO_TIMEOUT_MS", 60000)

INTER_ACTION_DELAY_MS = _get_int_env("GAME_CONFORMANCE_INTER_ACTION_DELAY_MS", 400)

STRESS_POINTER_EVENTS = _get_int_env("GAME_CONFORMANCE_STRESS_POINTER_EVENTS", 20)
STRESS_KEY_PRESSES = _get_int_env("GAME_CONFORMANCE_STRESS_KEY_PRESSES", 10)
STRESS_INTERVAL_MS = _get_int_env("GAME_CONFORMANCE_STRESS_INTERVAL_MS", 50)
STRESS_FINAL_SETTLE_MS = _get_int_env("GAME_CONFORMANCE_STRESS_FINAL_SETTLE_MS", 1000)

MOBILE_VIEWPORT_WIDTH = _get_int_env("GAME_CONFORMANCE_MOBILE_VIEWPORT_WIDTH", 375)
MOBILE_VIEWPORT_HEIGHT = _get_int_env("GAME_CONFORMANCE_MOBILE_VIEWPORT_HEIGHT", 667)
MOBILE_HAS_TOUCH = _get_bool_env("GAME_CONFORMANCE_MOBILE_HAS_TOUCH", True)
DESKTOP_VIEWPORT_WIDTH = _get_int_env("GAME_CONFORMANCE_DESKTOP_VIEWPORT_WIDTH", 1280)
DESKTOP_VIEWPORT_HEIGHT = _get_int_env("GAME_CONFORMANCE_DESKTOP_VIEWPORT_HEIGHT", 720)

PERSISTENCE_SETTLE_MS = _get_int_env("GAME_CONFORMANCE_PERSISTENCE_SETTLE_MS", 1000)
STORAGE_PROBE_KEY = os.getenv("GAME_CONFORMANCE_STORAGE_PROBE_KEY", "_probe_")
STORAGE_PROBE_VALUE = "1"

MAX_CONCURRENT_GAMES = _get_int_env("GAME_CONFORMANCE_MAX_CONCURRENT_GAMES", 4)

SERVER_PROBE_TIMEOUT_SECONDS = _get_float_env("GAME_CONFORMANCE_SERVER_PROBE_TIMEOUT_SECONDS", 5.0)
SERVER_PROBE_MAX_ATTEMPTS = _get_int_env("GAME_CONFORMANCE_SERVER_PROBE_MAX_ATTEMPTS", 5)
RETRY_BASE_DELAY_SECONDS = _get_float_env("GAME_CONFORMANCE_RETRY_BASE_DELAY_SECONDS", 0.5)
RETRY_MAX_DELAY_SECONDS = _get_float_env("GAME_CONFORMANCE_RETRY_MAX_DELAY_SECONDS", 8.0)
RETRY_EXPONENTIAL_BASE = _get_int_env("GAME_CONFORMANCE_RETRY_EXPONENTIAL_BASE", 2)
