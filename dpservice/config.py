"""
Configuration for the dpservice client.

Loads configuration from environment variables (and an optional ``.env``
file in the working directory) with sensible defaults.
"""

import os
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or value.strip() == "":
        return None
    return float(value)


def _bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Client configuration."""

    ENV_PATH: Path = Path(os.getenv("DPSERVICE_ENV_FILE", ".env"))
    if ENV_PATH.exists():
        load_dotenv(ENV_PATH)

    # dpservice gRPC endpoint
    ADDRESS: str = os.getenv("DPSERVICE_ADDRESS", "localhost:1337")
    INSECURE: bool = _bool(os.getenv("DPSERVICE_INSECURE", "true"))

    # Per-call deadline in seconds; unset means no deadline
    TIMEOUT: Optional[float] = _optional_float(os.getenv("DPSERVICE_TIMEOUT"))

    # Logging Configuration
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = os.getenv(
        "LOG_LEVEL", "INFO"
    )  # type: ignore

    # Client identity sent by get_version()
    CLIENT_NAME: str = os.getenv("DPSERVICE_CLIENT_NAME", "dpservice-py")
    CLIENT_PROTOCOL: str = "v1"
    VERSION: str = "0.1.0"


# Global config instance
config = Config()
