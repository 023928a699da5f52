"""Cleanup registry: zero or one deferred action, fired at most once."""

import logging
from typing import Callable, Optional

from .errors import CleanupAlreadyRegisteredError
from .protocols import LoggerProtocol

CleanupAction = Callable[[], None]


class CleanupRegistry:
    """
    Holds the optional teardown action of one generator.

    Single Responsibility: guarantee the action runs no more than once,
    whoever triggers teardown first.
    """

    def __init__(self, name: str = "generator", logger: Optional[LoggerProtocol] = None):
        """
        Initialize an empty registry.

        Args:
            name: Label used in log messages
            logger: Logger instance (defaults to module logger)
        """
        self.name = name
        self._action: Optional[CleanupAction] = None
        self._fired = False
        self._logger = logger or logging.getLogger(__name__)

    @property
    def action(self) -> Optional[CleanupAction]:
        return self._action

    @property
    def fired(self) -> bool:
        return self._fired

    def register(self, action: CleanupAction) -> None:
        """
        Register the teardown action.

        Args:
            action: Zero-argument callable releasing the generator's resources

        Raises:
            CleanupAlreadyRegisteredError: If an action is already registered
            TypeError: If ``action`` is not callable
        """
        if not callable(action):
            raise TypeError(f"Cleanup action must be callable, got {action!r}")
        if self._action is not None:
            raise CleanupAlreadyRegisteredError(
                f"{self.name} already has a cleanup action registered"
            )
        if self._fired:
            raise CleanupAlreadyRegisteredError(f"{self.name} has already been torn down")
        self._action = action

    def run(self) -> bool:
        """
        Fire the action if it has not fired yet.

        The registry is marked as fired before the action runs, so an action
        that raises is still never invoked a second time.

        Returns:
            True if this call performed teardown, False if it already happened
        """
        if self._fired:
            return False
        self._fired = True

        action, self._action = self._action, None
        if action is None:
            self._logger.debug(f"{self.name}: teardown with no cleanup action")
            return True

        self._logger.debug(f"{self.name}: running cleanup action")
        action()
        return True
