"""
Client configuration defaults and environment loading.
"""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from .errors import XeroMLConfigError


DEFAULT_BASE_URL = "https://api.xeroml.com"
DEFAULT_TIMEOUT = 30.0  # seconds


class ClientConfig(BaseModel):
    """Resolved settings for a XeroML client."""
    model_config = ConfigDict(frozen=True)

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT


def load_config(
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
) -> ClientConfig:
    """
    Resolve client settings from arguments, then the environment.

    Reads XEROML_API_KEY, XEROML_BASE_URL and XEROML_TIMEOUT (seconds),
    loading a .env file first if one is present. Explicit arguments win.
    """
    load_dotenv()

    api_key = api_key or os.getenv("XEROML_API_KEY", "")
    if not api_key:
        raise XeroMLConfigError("XeroML: api_key is required (set XEROML_API_KEY).")

    base_url = base_url or os.getenv("XEROML_BASE_URL") or DEFAULT_BASE_URL

    if timeout is None:
        raw_timeout = os.getenv("XEROML_TIMEOUT")
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                raise XeroMLConfigError(
                    f"XeroML: XEROML_TIMEOUT must be a number of seconds, got {raw_timeout!r}."
                )
        else:
            timeout = DEFAULT_TIMEOUT

    return ClientConfig(api_key=api_key, base_url=base_url, timeout=timeout)
