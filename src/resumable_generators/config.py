"""Configuration management for resumable generators."""

import logging
import os
from dataclasses import dataclass
from enum import Enum

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class ExhaustionPolicy(str, Enum):
    """What a resume call does once the body has run to its end."""

    ERROR = "error"
    SENTINEL = "sentinel"


@dataclass
class GeneratorConfig:
    """Runtime behaviour shared by every generator a factory creates."""

    after_exhaustion: ExhaustionPolicy = ExhaustionPolicy.ERROR
    max_dispatch_hops: int = 10_000
    check_types: bool = True
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate configuration after initialization."""
        try:
            self.after_exhaustion = ExhaustionPolicy(self.after_exhaustion)
        except ValueError:
            choices = ", ".join(p.value for p in ExhaustionPolicy)
            raise ValueError(
                f"after_exhaustion must be one of {choices}, got {self.after_exhaustion!r}"
            ) from None
        if self.max_dispatch_hops <= 0:
            raise ValueError("max_dispatch_hops must be positive")
        self.log_level = self.log_level.upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown log level: {self.log_level}")

    @classmethod
    def default(cls) -> "GeneratorConfig":
        """Create default configuration."""
        return cls()

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        """Load generator configuration from environment variables."""
        return cls(
            after_exhaustion=os.getenv("RESUMABLE_AFTER_EXHAUSTION", "error").lower(),
            max_dispatch_hops=int(os.getenv("RESUMABLE_MAX_DISPATCH_HOPS", "10000")),
            check_types=os.getenv("RESUMABLE_CHECK_TYPES", "true").lower() == "true",
            log_level=os.getenv("RESUMABLE_LOG_LEVEL", "INFO"),
        )


def get_generator_config() -> GeneratorConfig:
    """Get generator configuration."""
    return GeneratorConfig.from_env()
