# src/easypost_shipping/config/env.py
from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Optional, Tuple

from easypost_shipping.models.env_cfg import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, EnvCfg

try:
    from dotenv import dotenv_values, find_dotenv, load_dotenv  # type: ignore
except Exception as e:  # pragma: no cover
    raise RuntimeError(
        "Missing dependency 'python-dotenv'. Install it with:\n"
        "  pip install python-dotenv"
    ) from e


class EnvError(RuntimeError):
    """Raised when required environment variables are missing."""


REQUIRED_KEYS: Tuple[str, ...] = ("EASYPOST_API_KEY",)


def load_project_dotenv(start: Optional[Path] = None, *, override: bool = False) -> Path:
    """
    Load the nearest `.env` (python-dotenv's search first, then upward from `start`).
    Existing process values win unless `override=True`.
    Returns the resolved path that was loaded, or Path() when none was found.
    """
    found = find_dotenv(filename=".env", usecwd=True)
    dotenv_path = Path(found) if found else Path()

    if not found:
        start_path = Path.cwd() if start is None else Path(start)
        for p in (start_path, *start_path.parents):
            if (p / ".env").is_file():
                dotenv_path = p / ".env"
                break

    if not dotenv_path.is_file():
        return Path()

    load_dotenv(dotenv_path=dotenv_path, override=override)
    return dotenv_path.resolve()


def env(name: str, *, default: Optional[str] = None, required: bool = False, cast=None):
    """
    Test-friendly accessor.

    - `required=True` and missing -> KeyError(name).
    - `cast` is applied to the raw string; cast errors propagate.
    """
    raw = os.getenv(name)
    if raw is None:
        if required:
            raise KeyError(name)
        return default
    return cast(raw) if cast is not None else raw


def load_env(
    dotenv_path: Optional[Path] = None,
    *,
    override: bool = False,
    required_keys: Tuple[str, ...] = (),
    strict: bool = False,
) -> Dict[str, str]:
    """
    Load a .env file into the process environment and return the pairs it holds.

    With `dotenv_path=None` the nearest project .env is used. When `strict`
    is set, every name in `required_keys` must be present afterwards.
    """
    loaded: Dict[str, str] = {}
    path = Path(dotenv_path) if dotenv_path else load_project_dotenv(override=override)

    if dotenv_path and path.is_file():
        load_dotenv(dotenv_path=path, override=override)
    if path and path.is_file():
        loaded = {k: v for k, v in dotenv_values(path).items() if v is not None}

    if strict and required_keys:
        missing = [k for k in required_keys if not os.getenv(k)]
        if missing:
            raise EnvError(
                f"Missing required environment variable(s): {', '.join(missing)}")

    return loaded


def get_app_env(dotenv_path: Path | str | None = ".env", *, strict: bool = True) -> EnvCfg:
    """
    Return the typed configuration for talking to the service.

    `dotenv_path=None` searches for the project .env instead of a fixed file.
    Process env is never overridden, so CI/host settings win over the file.
    """
    load_env(
        Path(dotenv_path) if dotenv_path else None,
        override=False,
        required_keys=REQUIRED_KEYS,
        strict=strict,
    )

    try:
        timeout = env("EASYPOST_TIMEOUT", default=DEFAULT_TIMEOUT, cast=int)
    except ValueError as e:
        raise EnvError(f"EASYPOST_TIMEOUT must be an integer: {e}") from e

    return EnvCfg(
        EASYPOST_API_KEY=os.getenv("EASYPOST_API_KEY", ""),
        EASYPOST_BASE_URL=os.getenv("EASYPOST_BASE_URL") or DEFAULT_BASE_URL,
        EASYPOST_TIMEOUT=timeout,
    )


__all__ = [
    "EnvError",
    "REQUIRED_KEYS",
    "load_project_dotenv",
    "load_env",
    "env",
    "get_app_env",
]
