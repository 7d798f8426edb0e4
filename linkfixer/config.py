"""Configuration for Link Fixer, read from environment variables."""
import logging
import os

from .errors import ConfigurationError

DEFAULT_POLL_INTERVAL_MS = 500
DEFAULT_CLIPBOARD_TIMEOUT = 2.0  # seconds
DEFAULT_LOG_LEVEL = 'INFO'

BACKEND_NAMES = ('auto', 'windows', 'macos', 'wayland', 'xclip', 'xsel', 'pyperclip')

_TRUTHY = {'1', 'true', 'yes', 'on'}


class Config:
    """Runtime configuration."""

    def __init__(self, environ=None):
        env = os.environ if environ is None else environ
        self.poll_interval_ms: int = _positive_int(env, 'LINKFIXER_POLL_INTERVAL_MS', DEFAULT_POLL_INTERVAL_MS)
        self.clipboard_timeout: float = _positive_float(env, 'LINKFIXER_CLIPBOARD_TIMEOUT', DEFAULT_CLIPBOARD_TIMEOUT)
        self.log_level: int = _log_level(env.get('LINKFIXER_LOG_LEVEL', DEFAULT_LOG_LEVEL))
        self.tray_enabled: bool = env.get('LINKFIXER_NO_TRAY', '').strip().lower() not in _TRUTHY
        self.backend: str = env.get('LINKFIXER_BACKEND', 'auto').strip().lower() or 'auto'
        if self.backend not in BACKEND_NAMES:
            raise ConfigurationError(
                f'LINKFIXER_BACKEND must be one of {", ".join(BACKEND_NAMES)}, got {self.backend!r}'
            )
        self.disabled_rules: frozenset[str] = frozenset(
            name.strip().lower()
            for name in env.get('LINKFIXER_DISABLED_RULES', '').split(',')
            if name.strip()
        )


def _positive_int(env, key, default) -> int:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigurationError(f'{key} must be an integer, got {raw!r}', e)
    if value <= 0:
        raise ConfigurationError(f'{key} must be positive, got {value}')
    return value


def _positive_float(env, key, default) -> float:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigurationError(f'{key} must be a number, got {raw!r}', e)
    if value <= 0:
        raise ConfigurationError(f'{key} must be positive, got {value}')
    return value


def _log_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        raise ConfigurationError(f'LINKFIXER_LOG_LEVEL is not a logging level: {name!r}')
    return level
