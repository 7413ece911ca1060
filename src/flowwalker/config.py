"""Settings resolution and XDG paths.

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.flowwalker/`` on macOS and Windows. Only the data directory is
  used, for crash logs. See :func:`get_data_dir`.
* **Precedence resolution** -- :func:`resolve_settings` merges CLI
  arguments, environment variables, and defaults into the effective
  :class:`~flowwalker.models.WalkerSettings`.

The request timeout, success marker and preview length are fixed on the
model and deliberately have no CLI or environment override.
"""

from __future__ import annotations

import os
import platform
from pathlib import Path
from typing import Optional

from flowwalker.exceptions import ConfigError, InvalidUsageError
from flowwalker.models import WalkerSettings

_APP_NAME = "flowwalker"

ENV_START_URL = "FLOWWALKER_START_URL"
ENV_INSECURE = "FLOWWALKER_INSECURE"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/flowwalker/`` (default
    ``~/.local/share/flowwalker/``). On macOS/Windows: ``~/.flowwalker/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_DATA_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".local" / "share"
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Precedence resolution ---


def _env_flag(name: str) -> Optional[bool]:
    """Parse a boolean environment variable, or return None when unset."""
    raw = os.environ.get(name)
    if raw is None:
        return None
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ConfigError(
        f"Invalid value for {name}: {raw!r} (expected one of 1/0, true/false, yes/no, on/off)"
    )


def _is_http_url(url: str) -> bool:
    return url.startswith(("http://", "https://"))


def resolve_settings(
    cli_start_url: Optional[str] = None,
    cli_insecure: bool = False,
) -> WalkerSettings:
    """Resolve the effective settings for one run.

    Precedence (high to low):
        1. CLI arguments (``cli_start_url``, ``cli_insecure``)
        2. Environment variables (``FLOWWALKER_START_URL``, ``FLOWWALKER_INSECURE``)
        3. Defaults on :class:`~flowwalker.models.WalkerSettings`

    Raises:
        InvalidUsageError: If ``cli_start_url`` is not an absolute http(s) URL.
        ConfigError: If an environment variable holds an unparseable value.
    """
    overrides: dict[str, object] = {}

    if cli_start_url:
        if not _is_http_url(cli_start_url):
            raise InvalidUsageError(
                f"START_URL must be an absolute http(s) URL: {cli_start_url}"
            )
        overrides["start_url"] = cli_start_url
    else:
        env_start_url = os.environ.get(ENV_START_URL)
        if env_start_url:
            if not _is_http_url(env_start_url):
                raise ConfigError(
                    f"{ENV_START_URL} must be an absolute http(s) URL: {env_start_url}"
                )
            overrides["start_url"] = env_start_url

    if cli_insecure:
        overrides["verify_ssl"] = False
    else:
        insecure = _env_flag(ENV_INSECURE)
        if insecure is not None:
            overrides["verify_ssl"] = not insecure

    return WalkerSettings(**overrides)
