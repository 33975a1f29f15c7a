from __future__ import annotations
from dataclasses import dataclass

DEFAULT_BASE_URL = "https://api.easypost.com/v2"
DEFAULT_TIMEOUT = 30


@dataclass(frozen=True)
class EnvCfg:
    """Settings get_app_env() hands to the requester."""
    EASYPOST_API_KEY: str = ""
    EASYPOST_BASE_URL: str = DEFAULT_BASE_URL
    EASYPOST_TIMEOUT: int = DEFAULT_TIMEOUT
