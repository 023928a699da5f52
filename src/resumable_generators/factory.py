"""Generator factory: one isolated state machine per creation call."""

import logging
from typing import Any, Optional, Type

from .cleanup import CleanupRegistry
from .config import GeneratorConfig
from .definition import GeneratorDefinition
from .errors import GeneratorDefinitionError
from .machine import ResumableGenerator
from .protocols import LoggerProtocol
from .shape import GeneratorShape


class GeneratorFactory:
    """
    Creates generators from a ``GeneratorDefinition`` subclass.

    Every ``create`` call builds a new body, a new state and a new cleanup
    registry; nothing mutable is shared between the generators it returns.
    """

    def __init__(
        self,
        definition: Type[GeneratorDefinition],
        config: Optional[GeneratorConfig] = None,
        logger: Optional[LoggerProtocol] = None,
    ):
        """
        Initialize factory.

        Args:
            definition: Generator body class
            config: Configuration passed to every generator (defaults to environment)
            logger: Logger instance (defaults to module logger)
        """
        if not (isinstance(definition, type) and issubclass(definition, GeneratorDefinition)):
            raise GeneratorDefinitionError(
                f"{definition!r} is not a GeneratorDefinition subclass"
            )
        if definition is GeneratorDefinition or not definition._arms:
            raise GeneratorDefinitionError(
                f"{definition.__qualname__} is abstract and cannot be instantiated"
            )
        self.definition = definition
        self.shape = GeneratorShape.of(definition)
        self.config = config or GeneratorConfig.from_env()
        self._logger = logger or logging.getLogger(__name__)
        self._created = 0

    @property
    def created(self) -> int:
        """Number of generators this factory has produced."""
        return self._created

    def create(self, *args: Any, **kwargs: Any) -> ResumableGenerator:
        """
        Create a fresh generator.

        Args:
            *args: Creation parameters forwarded to the body's ``__init__``
            **kwargs: Keyword creation parameters

        Returns:
            A generator positioned at START
        """
        body = self.definition(*args, **kwargs)
        generator = ResumableGenerator(
            body,
            registry=CleanupRegistry(self.definition.__qualname__, self._logger),
            shape=self.shape,
            config=self.config,
            logger=self._logger,
        )
        self._created += 1
        self._logger.debug(f"Created {generator.name} with shape {self.shape.describe()}")
        return generator

    __call__ = create


def generator_factory(
    definition: Type[GeneratorDefinition],
    config: Optional[GeneratorConfig] = None,
    logger: Optional[LoggerProtocol] = None,
) -> GeneratorFactory:
    """Get a factory for ``definition``."""
    return GeneratorFactory(definition, config=config, logger=logger)
