"""
Runtime settings read from the environment.
The dev server loads .env files with python-dotenv before this is first used.
"""
import os
from dataclasses import dataclass


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class ConfigError(RuntimeError):
    """A gateway environment variable holds a value that cannot be parsed."""


def _env_number(name: str, default: str, cast):
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except ValueError:
        raise ConfigError(f"{name}={raw!r} is not a valid {cast.__name__}") from None


@dataclass(frozen=True)
class Settings:
    timeout_sec: float = 60.0
    default_max_tokens: int = 4096
    stream_chunk_size: int = 5
    stream_chars_per_sec: float = 30.0
    log_level: str = "INFO"
    log_json: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            timeout_sec=_env_number("GATEWAY_TIMEOUT_SEC", "60", float),
            default_max_tokens=_env_number("DEFAULT_MAX_TOKENS", "4096", int),
            stream_chunk_size=_env_number("STREAM_CHUNK_SIZE", "5", int),
            stream_chars_per_sec=_env_number("STREAM_CHARS_PER_SEC", "30", float),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_json=_env_bool("LOG_JSON"),
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
