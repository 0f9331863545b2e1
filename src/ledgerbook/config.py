"""Environment-driven settings for ledgerbook."""

import logging
import os
from functools import lru_cache
from typing import Optional


class Settings:
    def __init__(
        self,
        reminder_hour: int,
        max_day_span: int,
        log_level: str,
    ) -> None:
        self.reminder_hour = reminder_hour
        self.max_day_span = max_day_span
        self.log_level = log_level


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got '{raw}'")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    reminder_hour = _int_env("LEDGERBOOK_REMINDER_HOUR", 9)
    if not 0 <= reminder_hour <= 23:
        raise ValueError(f"LEDGERBOOK_REMINDER_HOUR must be between 0 and 23, got {reminder_hour}")
    return Settings(
        reminder_hour=reminder_hour,
        max_day_span=_int_env("LEDGERBOOK_MAX_DAY_SPAN", 90),
        log_level=os.getenv("LEDGERBOOK_LOG_LEVEL", "WARNING").upper(),
    )


def configure_logging(verbose: bool = False, level: Optional[str] = None) -> None:
    """Configure root logging once for the command line entry point."""
    if verbose:
        resolved = logging.DEBUG
    else:
        resolved = logging.getLevelName(level or get_settings().log_level)
        if not isinstance(resolved, int):
            resolved = logging.WARNING
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
