from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Mapping
import os


DINKUS = "* * *"


def _coerce_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    if isinstance(value, (int, float)):
        return bool(value)
    return default


def _coerce_optional_int(value: Any) -> int | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class Settings:
    # Splitting
    delimiter: str = DINKUS
    delimiter_is_regex: bool = False

    # Randomness; None means an unseeded generator
    seed: int | None = None

    # Persistence
    state_path: str | None = None

    # Logging
    log_level: str = "INFO"
    log_dir: str | None = None

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> "Settings":
        return cls(
            delimiter=env.get("STORYSHUFFLER_DELIMITER", cls.delimiter),
            delimiter_is_regex=_coerce_bool(env.get("STORYSHUFFLER_DELIMITER_IS_REGEX"), cls.delimiter_is_regex),
            seed=_coerce_optional_int(env.get("STORYSHUFFLER_SEED")),
            state_path=env.get("STORYSHUFFLER_STATE_PATH") or None,
            log_level=env.get("STORYSHUFFLER_LOG_LEVEL", cls.log_level).upper(),
            log_dir=env.get("LOG_DIR") or None,
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings.from_env(os.environ)
