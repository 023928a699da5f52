"""Resumable generators - explicit state-machine generators with deterministic cleanup."""

__version__ = "0.1.0"

from .cleanup import CleanupRegistry
from .config import ExhaustionPolicy, GeneratorConfig, get_generator_config
from .definition import GeneratorDefinition, entry, on_teardown, resumes
from .errors import (
    CleanupAlreadyRegisteredError,
    DispatchLimitExceeded,
    DuplicateCleanupError,
    GeneratorDefinitionError,
    GeneratorError,
    GeneratorExhaustedError,
    InvalidStepError,
    MissingArmError,
    PositionCollisionError,
    ReentrantResumeError,
    ResumeArgumentError,
    ResumeError,
    UnknownPositionError,
    UseAfterTeardownError,
    YieldTypeError,
)
from .factory import GeneratorFactory, generator_factory
from .machine import GeneratorIterator, ResumableGenerator, SharedGenerator
from .positions import EXHAUSTED, START, check_positions, is_exhausted
from .protocols import GeneratorProtocol, LoggerProtocol
from .shape import GeneratorShape
from .state import GeneratorState, GeneratorStatus
from .steps import finish, goto, yield_

__all__ = [
    # Positions
    "START",
    "EXHAUSTED",
    "is_exhausted",
    "check_positions",
    # Yield protocol
    "yield_",
    "goto",
    "finish",
    # Definitions
    "GeneratorDefinition",
    "entry",
    "resumes",
    "on_teardown",
    # State machine
    "ResumableGenerator",
    "GeneratorIterator",
    "SharedGenerator",
    "GeneratorState",
    "GeneratorStatus",
    "GeneratorShape",
    "CleanupRegistry",
    # Factory
    "GeneratorFactory",
    "generator_factory",
    # Config
    "GeneratorConfig",
    "ExhaustionPolicy",
    "get_generator_config",
    # Protocols
    "GeneratorProtocol",
    "LoggerProtocol",
    # Errors
    "GeneratorError",
    "GeneratorDefinitionError",
    "PositionCollisionError",
    "MissingArmError",
    "UnknownPositionError",
    "DuplicateCleanupError",
    "CleanupAlreadyRegisteredError",
    "ResumeError",
    "UseAfterTeardownError",
    "GeneratorExhaustedError",
    "ReentrantResumeError",
    "DispatchLimitExceeded",
    "InvalidStepError",
    "ResumeArgumentError",
    "YieldTypeError",
]
