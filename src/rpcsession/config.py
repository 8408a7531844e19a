"""
Configuration for rpcsession.

Values come from ``RPCSESSION_*`` environment variables (a ``.env`` file in the
working directory is loaded first) and fall back to the defaults below.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

ENV_PREFIX = "RPCSESSION_"

DEFAULT_URL = "ws://localhost:9076/app/engineData"


class SessionConfig(BaseModel):
    """Settings used by ``create_session`` and the CLI."""

    url: str = DEFAULT_URL
    delta: bool = False
    suspend_on_close: bool = False
    open_timeout: float = Field(default=10.0, gt=0)
    reopen_timeout: float = Field(default=5.0, gt=0)
    max_retries: int = Field(default=0, ge=0)  # 0 = no automatic retry of aborted requests
    log_level: str = "WARNING"


def load_config(env_file: str | None = ".env", **overrides) -> SessionConfig:
    """
    Build a SessionConfig from the environment.

    Args:
        env_file: Path of a dotenv file to load first; None skips it.
        **overrides: Explicit values that win over the environment.

    Returns:
        The validated configuration.
    """
    if env_file:
        load_dotenv(env_file, override=False)

    values = {}
    for name in SessionConfig.model_fields:
        raw = os.getenv(f"{ENV_PREFIX}{name.upper()}")
        if raw is not None and raw != "":
            values[name] = raw
    values.update({k: v for k, v in overrides.items() if v is not None})
    return SessionConfig.model_validate(values)


CONFIG = load_config(env_file=None)
