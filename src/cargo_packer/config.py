"""Runtime settings; loads .env locally via python-dotenv."""

from __future__ import annotations

import logging
import os
from typing import Optional, get_args

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from cargo_packer.models import AlgorithmName

logger = logging.getLogger(__name__)

# Load .env only when present (e.g. local dev); does not override existing env
load_dotenv()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

DEFAULT_ALGORITHM = "constrained"


class Settings(BaseModel):
    log_level: str = Field(default="INFO", description="Root log level for the package")
    debug: bool = Field(default=False, description="Force DEBUG logging")
    default_algorithm: AlgorithmName = DEFAULT_ALGORITHM
    cors_origin_regex: Optional[str] = Field(
        default=None,
        description="Origins allowed to call the HTTP API; None disables CORS")

    @property
    def effective_level(self) -> int:
        if self.debug:
            return logging.DEBUG
        return _LEVELS.get(self.log_level.strip().upper(), logging.INFO)


def _default_algorithm() -> str:
    name = os.getenv("CARGO_PACKER_DEFAULT_ALGORITHM", DEFAULT_ALGORITHM).strip()
    if name not in get_args(AlgorithmName):
        logger.warning(
            f"Unknown CARGO_PACKER_DEFAULT_ALGORITHM '{name}', using '{DEFAULT_ALGORITHM}'. "
            f"Valid: {list(get_args(AlgorithmName))}"
        )
        return DEFAULT_ALGORITHM
    return name


def get_settings() -> Settings:
    """Read settings from the environment each call (tests patch env vars)."""
    return Settings(
        log_level=os.getenv("CARGO_PACKER_LOG_LEVEL", "INFO"),
        debug=os.getenv("CARGO_PACKER_DEBUG", "0") == "1",
        default_algorithm=_default_algorithm(),
        cors_origin_regex=os.getenv("CARGO_PACKER_CORS_ORIGIN_REGEX") or None,
    )


def configure_logging(settings: Optional[Settings] = None) -> None:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.effective_level, format=LOG_FORMAT)
    logging.getLogger("cargo_packer").setLevel(settings.effective_level)
