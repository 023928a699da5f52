"""Exception hierarchy for resumable generators."""


class GeneratorError(Exception):
    """Base class for every error raised by this package."""


# Definition-time errors


class GeneratorDefinitionError(GeneratorError, TypeError):
    """A generator definition is malformed and cannot be instantiated."""


class PositionCollisionError(GeneratorDefinitionError):
    """Two yield sites share one resume position."""


class MissingArmError(GeneratorDefinitionError):
    """A resume position (or the entry point) has no arm to resume into."""


class UnknownPositionError(GeneratorDefinitionError):
    """A position does not belong to the generator's Position enumeration."""


class DuplicateCleanupError(GeneratorDefinitionError):
    """More than one teardown action was declared."""


# Registry errors


class CleanupAlreadyRegisteredError(GeneratorError, RuntimeError):
    """A cleanup action was registered on a registry that already holds one."""


# Resume-time errors


class ResumeError(GeneratorError, RuntimeError):
    """A resume call violated the generator's contract."""


class UseAfterTeardownError(ResumeError):
    """Resume was called on a generator that has already been torn down."""


class GeneratorExhaustedError(ResumeError):
    """Resume was called again after the body ran to its end."""


class ReentrantResumeError(ResumeError):
    """Resume was called while the same generator was already running."""


class DispatchLimitExceeded(ResumeError):
    """A single resume call jumped between arms more often than allowed."""


class InvalidStepError(ResumeError):
    """An arm returned something other than a step."""


class ResumeArgumentError(GeneratorError, TypeError):
    """Per-call arguments do not match the generator's declared parameters."""


class YieldTypeError(GeneratorError, TypeError):
    """A yielded value does not match the generator's declared return type."""
