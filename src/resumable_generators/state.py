"""Per-instance generator state."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .positions import START, ResumePosition


class GeneratorStatus(str, Enum):
    """Lifecycle of one generator instance."""

    CREATED = "created"
    SUSPENDED = "suspended"
    RUNNING = "running"
    EXHAUSTED = "exhausted"
    TORN_DOWN = "torn_down"


@dataclass
class GeneratorState:
    """
    Everything that survives between resume calls.

    ``body`` is the definition instance; its attributes are the cross-call
    locals of the generator. The state is owned by exactly one generator.
    """

    body: Any
    position: ResumePosition = START
    status: GeneratorStatus = GeneratorStatus.CREATED
    resume_count: int = 0
    yield_count: int = 0
