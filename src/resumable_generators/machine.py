"""The generator state machine.

Each resume call re-enters the body through the arm registered for the
stored position, so nothing has to be suspended: the position and the
body's attributes are the whole execution state.
"""

import itertools
import logging
import threading
import weakref
from enum import Enum
from typing import Any, Iterator, Optional

from .cleanup import CleanupRegistry
from .config import ExhaustionPolicy, GeneratorConfig
from .definition import GeneratorDefinition
from .errors import (
    DispatchLimitExceeded,
    GeneratorExhaustedError,
    InvalidStepError,
    ReentrantResumeError,
    ResumeArgumentError,
    UnknownPositionError,
    UseAfterTeardownError,
)
from .positions import EXHAUSTED, START, ResumePosition, belongs_to
from .protocols import LoggerProtocol
from .shape import GeneratorShape
from .state import GeneratorState, GeneratorStatus
from .steps import Finish, Jump, Suspend

_instance_ids = itertools.count(1)


class ResumableGenerator:
    """
    A callable that produces one value per call and remembers where it stopped.

    Teardown happens on ``close()``, on leaving a ``with`` block, or when the
    generator is garbage collected, whichever comes first. The cleanup action
    fires exactly once in every case.

    Not thread safe: one owner drives a generator at a time. Wrap it in
    ``SharedGenerator`` if several threads must call it.
    """

    def __init__(
        self,
        body: GeneratorDefinition,
        registry: Optional[CleanupRegistry] = None,
        shape: Optional[GeneratorShape] = None,
        config: Optional[GeneratorConfig] = None,
        logger: Optional[LoggerProtocol] = None,
    ):
        """
        Wrap a freshly constructed body.

        Args:
            body: Definition instance holding the cross-call locals
            registry: Cleanup registry owned by this generator
            shape: Calling convention (defaults to the one the body declares)
            config: Runtime configuration
            logger: Logger instance (defaults to module logger)
        """
        self._definition = type(body)
        self._name = f"{self._definition.__qualname__}#{next(_instance_ids)}"
        self._state = GeneratorState(body=body)
        self._shape = shape or GeneratorShape.of(self._definition)
        self._config = config or GeneratorConfig.from_env()
        self._logger = logger or logging.getLogger(__name__)

        self._registry = registry or CleanupRegistry(self._name, self._logger)
        action = body.teardown_action()
        if action is not None:
            self._registry.register(action)
        # the callback must not reference self, or the generator is never collected
        self._finalizer = weakref.finalize(self, self._registry.run)

    def __repr__(self) -> str:
        return f"<ResumableGenerator {self._name} {self._state.status.value} at {self._state.position!r}>"

    @property
    def name(self) -> str:
        return self._name

    @property
    def status(self) -> GeneratorStatus:
        return self._state.status

    @property
    def position(self) -> ResumePosition:
        return self._state.position

    @property
    def shape(self) -> GeneratorShape:
        return self._shape

    @property
    def exhausted(self) -> bool:
        return self._state.status is GeneratorStatus.EXHAUSTED

    @property
    def closed(self) -> bool:
        return self._state.status is GeneratorStatus.TORN_DOWN

    @property
    def resume_count(self) -> int:
        return self._state.resume_count

    def __call__(self, *params: Any) -> Any:
        return self.resume(*params)

    def resume(self, *params: Any) -> Any:
        """
        Run the body from the stored position to its next yield.

        Args:
            *params: Per-call parameters, visible to every arm run by this call

        Returns:
            The yielded value, or ``EXHAUSTED`` when the body ran to its end

        Raises:
            UseAfterTeardownError: If the generator has been torn down
            GeneratorExhaustedError: If the body already finished (error policy)
            ReentrantResumeError: If the body is already running
            ResumeArgumentError: If ``params`` do not match the declared shape
        """
        state = self._state
        if state.status is GeneratorStatus.TORN_DOWN:
            raise UseAfterTeardownError(f"{self._name} was resumed after teardown")
        if state.status is GeneratorStatus.RUNNING:
            raise ReentrantResumeError(f"{self._name} is already running")
        if state.status is GeneratorStatus.EXHAUSTED:
            if self._config.after_exhaustion is ExhaustionPolicy.SENTINEL:
                return EXHAUSTED
            raise GeneratorExhaustedError(f"{self._name} was resumed after it finished")

        self._shape.check_arguments(params, self._config.check_types)

        state.status = GeneratorStatus.RUNNING
        state.resume_count += 1
        try:
            return self._dispatch(params)
        except Exception as e:
            self._logger.error(
                f"{self._name}: body failed at {state.position!r}: {e}", exc_info=True
            )
            raise
        finally:
            # an exception leaves the body unresumable
            if state.status is GeneratorStatus.RUNNING:
                state.status = GeneratorStatus.EXHAUSTED
                state.position = EXHAUSTED

    def _dispatch(self, params) -> Any:
        state = self._state
        body = state.body
        position = state.position

        for _ in range(self._config.max_dispatch_hops + 1):
            arm_name = self._definition.arm_for(position)
            self._logger.debug(f"{self._name}: resuming {arm_name} at {position!r}")
            step = getattr(body, arm_name)(*params)

            if step is None or isinstance(step, Finish):
                state.status = GeneratorStatus.EXHAUSTED
                state.position = EXHAUSTED
                self._logger.debug(
                    f"{self._name}: exhausted after {state.yield_count} value(s)"
                )
                return EXHAUSTED

            if isinstance(step, Suspend):
                self._check_position(step.position, arm_name)
                self._shape.check_value(step.value, self._config.check_types)
                state.position = step.position
                state.status = GeneratorStatus.SUSPENDED
                state.yield_count += 1
                return step.value

            if isinstance(step, Jump):
                if step.position is not START:
                    self._check_position(step.position, arm_name)
                position = step.position
                continue

            raise InvalidStepError(
                f"{self._name}: {arm_name} returned {step!r}; "
                "expected yield_(), goto() or finish()"
            )

        raise DispatchLimitExceeded(
            f"{self._name}: more than {self._config.max_dispatch_hops} jumps "
            "without yielding in one resume call"
        )

    def _check_position(self, position: Enum, arm_name: str) -> None:
        positions = self._definition.Position
        if positions is None or not belongs_to(position, positions):
            raise UnknownPositionError(
                f"{self._name}: {arm_name} targets {position!r}, "
                f"which is not a member of {self._definition.__qualname__}.Position"
            )

    def close(self) -> None:
        """
        Tear the generator down.

        Fires the cleanup action if it has not fired yet. Safe to call more
        than once; any later resume raises ``UseAfterTeardownError``.
        """
        status = self._state.status
        if status is GeneratorStatus.TORN_DOWN:
            return
        if status is GeneratorStatus.RUNNING:
            raise ReentrantResumeError(f"{self._name} cannot be torn down while running")

        self._state.status = GeneratorStatus.TORN_DOWN
        self._logger.debug(f"{self._name}: torn down from {status.value}")
        self._finalizer()

    def __enter__(self):
        """Enter context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager and tear the generator down."""
        self.close()

    def __iter__(self) -> Iterator[Any]:
        if self._shape.params:
            raise ResumeArgumentError(
                f"{self._name} takes per-call arguments {self._shape.describe()} "
                "and cannot be iterated"
            )
        return GeneratorIterator(self)


class GeneratorIterator:
    """Iterator protocol adapter for zero-parameter generators."""

    def __init__(self, generator: ResumableGenerator):
        self._generator = generator
        self._done = False

    def __iter__(self):
        return self

    def __next__(self) -> Any:
        # once finished, keep raising StopIteration instead of resuming again
        if self._done or self._generator.exhausted:
            self._done = True
            raise StopIteration
        value = self._generator.resume()
        if value is EXHAUSTED:
            self._done = True
            raise StopIteration
        return value


class SharedGenerator:
    """
    Serialises access to one generator shared between threads.

    Every resume and the teardown run under a single lock, so at most one
    thread executes the body at a time.
    """

    def __init__(self, generator: ResumableGenerator):
        self._generator = generator
        self._lock = threading.Lock()

    @property
    def generator(self) -> ResumableGenerator:
        return self._generator

    def __call__(self, *params: Any) -> Any:
        return self.resume(*params)

    def resume(self, *params: Any) -> Any:
        with self._lock:
            return self._generator.resume(*params)

    def close(self) -> None:
        with self._lock:
            self._generator.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
