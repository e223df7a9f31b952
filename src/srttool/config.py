"""Configuration management via environment variables."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .srt import DEFAULT_ENCODING


@dataclass
class Config:
    """Application configuration loaded from environment."""

    offset: str | None = None
    encoding: str = DEFAULT_ENCODING
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        load_dotenv()
        return cls(
            offset=os.getenv("SRTTOOL_OFFSET") or None,
            encoding=os.getenv("SRTTOOL_ENCODING", DEFAULT_ENCODING),
            log_level=os.getenv("SRTTOOL_LOG_LEVEL", "WARNING").upper(),
        )

    def has_offset(self) -> bool:
        """Check if a default offset is configured."""
        return bool(self.offset)
