"""
Configuration settings for the helper library.

**Conceptual**: The helpers themselves are pure functions, but two ambient
knobs are worth controlling from the environment without code changes:
  - how chatty logging is when the command line entry point runs;
  - whether "today" is frozen to a fixed date (reproducible reports, tests,
    replaying a past run of an age calculation).

Settings are a frozen dataclass validated in `__post_init__`, loaded from
environment variables (and a `.env` file at the project root via
python-dotenv), and cached behind `get_settings()`.
"""

import logging
import os
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from project root (no-op if the file does not exist)
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

VALID_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class HelpersSettings:
    """
    Settings for the helper library.

    Attributes:
        log_level: Standard logging level name used by the command line entry
                   point (default "WARNING").
        frozen_today: When set, the default clock reports this date (at
                      midnight UTC) as "today". None means use the system clock.
    """
    log_level: str = "WARNING"
    frozen_today: Optional[date] = None

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.log_level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"CORE_HELPERS_LOG_LEVEL must be one of {', '.join(VALID_LOG_LEVELS)}, "
                f"got: {self.log_level}"
            )

    @property
    def log_level_number(self) -> int:
        """Numeric logging level matching `log_level`."""
        return logging.getLevelName(self.log_level)

    @classmethod
    def from_env(cls) -> "HelpersSettings":
        """
        Load settings from environment variables.

        **Environment variables**:
          - CORE_HELPERS_LOG_LEVEL (optional): logging level name, case-insensitive.
            Defaults to "WARNING".
          - CORE_HELPERS_FROZEN_TODAY (optional): ISO date (YYYY-MM-DD) to use
            as "today". Unset or empty means the real clock.

        Returns:
            HelpersSettings loaded from the environment.

        Raises:
            ValueError: If a variable is set to an invalid value.

        Usage example:
            >>> # In .env file:
            >>> # CORE_HELPERS_FROZEN_TODAY=2024-12-31
            >>>
            >>> settings = HelpersSettings.from_env()
            >>> settings.frozen_today
            datetime.date(2024, 12, 31)
        """
        log_level = os.getenv("CORE_HELPERS_LOG_LEVEL", "WARNING").strip().upper()
        frozen_today_str = os.getenv("CORE_HELPERS_FROZEN_TODAY", "").strip()

        frozen_today = None
        if frozen_today_str:
            try:
                frozen_today = date.fromisoformat(frozen_today_str)
            except ValueError:
                raise ValueError(
                    f"CORE_HELPERS_FROZEN_TODAY must be an ISO date (YYYY-MM-DD), "
                    f"got: {frozen_today_str}"
                )

        return cls(log_level=log_level, frozen_today=frozen_today)


_default_settings: Optional[HelpersSettings] = None


def get_settings() -> HelpersSettings:
    """
    Get the settings singleton, loading it from the environment on first use.

    Tests can bypass the singleton by constructing HelpersSettings directly, or
    call `reset_settings()` after changing environment variables.
    """
    global _default_settings

    if _default_settings is None:
        _default_settings = HelpersSettings.from_env()

    return _default_settings


def reset_settings():
    """
    Reset the settings singleton (for testing).

    **Testing pattern**:
      ```python
      def test_frozen_today(monkeypatch):
          monkeypatch.setenv("CORE_HELPERS_FROZEN_TODAY", "2024-12-31")
          reset_settings()
          assert get_settings().frozen_today == date(2024, 12, 31)
      ```
    """
    global _default_settings
    _default_settings = None
