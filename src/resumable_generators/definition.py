"""Generator bodies written as one arm per resume position.

A body subclasses ``GeneratorDefinition``. Cross-call locals live on
``self`` and are set up in ``__init__`` from the creation parameters. The
code that runs after each yield site is an arm: a method decorated with
``@resumes(Position.X)``. The code that runs on the first resume is the
``@entry`` arm. Example::

    class CountTo(GeneratorDefinition):
        returns = int

        class Position(Enum):
            AFTER_YIELD = auto()

        def __init__(self, limit):
            self.limit = limit
            self.count = 1

        @entry
        def check(self):
            if self.count > self.limit:
                return finish()
            return yield_(self.count, at=self.Position.AFTER_YIELD)

        @resumes(Position.AFTER_YIELD)
        def advance(self):
            self.count += 1
            return goto(START)

Every arm is checked when the class is created, so a missing arm or two
yield sites sharing a position is an error before any instance exists.
"""

from enum import Enum
from typing import Any, Callable, ClassVar, Dict, List, Optional, Tuple, Type

from .errors import (
    DuplicateCleanupError,
    MissingArmError,
    PositionCollisionError,
    UnknownPositionError,
)
from .positions import START, ResumePosition, belongs_to, check_positions

_ARM_ATTR = "__resume_position__"
_TEARDOWN_ATTR = "__teardown__"


def entry(func: Callable) -> Callable:
    """Mark ``func`` as the arm that runs on the first resume."""
    setattr(func, _ARM_ATTR, START)
    return func


def resumes(position: Enum) -> Callable[[Callable], Callable]:
    """Mark the decorated method as the continuation of ``position``."""
    if not isinstance(position, Enum):
        raise UnknownPositionError(f"resumes() expects a Position member, got {position!r}")

    def decorator(func: Callable) -> Callable:
        setattr(func, _ARM_ATTR, position)
        return func

    return decorator


def on_teardown(func: Callable) -> Callable:
    """Mark ``func`` as the generator's cleanup action."""
    setattr(func, _TEARDOWN_ATTR, True)
    return func


def _class_attributes(cls: type) -> Dict[str, Any]:
    # later classes in the MRO override earlier ones, matching normal lookup
    attributes: Dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        attributes.update(vars(klass))
    return attributes


class GeneratorDefinition:
    """
    Base class of every resumable generator body.

    Class attributes:
        Position: Enum of yield sites (omit when the body never yields)
        params: Types of the per-call parameters, in order
        returns: Type of the yielded values
    """

    Position: ClassVar[Optional[Type[Enum]]] = None
    params: ClassVar[Tuple[Any, ...]] = ()
    returns: ClassVar[Any] = object

    _arms: ClassVar[Dict[ResumePosition, str]] = {}
    _teardown: ClassVar[Optional[str]] = None

    def __init_subclass__(cls, abstract: bool = False, **kwargs):
        super().__init_subclass__(**kwargs)
        if abstract:
            return
        cls._arms, cls._teardown = cls._collect_arms()

    @classmethod
    def _collect_arms(cls) -> Tuple[Dict[ResumePosition, str], Optional[str]]:
        positions = cls.Position
        if positions is not None:
            check_positions(positions)

        arms: Dict[ResumePosition, str] = {}
        teardowns: List[str] = []
        for name, attr in _class_attributes(cls).items():
            if getattr(attr, _TEARDOWN_ATTR, False):
                teardowns.append(name)

            position = getattr(attr, _ARM_ATTR, None)
            if position is None:
                continue
            if position is not START and (positions is None or not belongs_to(position, positions)):
                raise UnknownPositionError(
                    f"{cls.__qualname__}.{name} resumes at {position!r}, "
                    f"which is not a member of {cls.__qualname__}.Position"
                )
            if position in arms:
                raise PositionCollisionError(
                    f"{cls.__qualname__}: {arms[position]} and {name} "
                    f"both resume at {position!r}"
                )
            arms[position] = name

        if START not in arms:
            raise MissingArmError(f"{cls.__qualname__} has no @entry arm")
        if positions is not None:
            missing = [member.name for member in positions if member not in arms]
            if missing:
                raise MissingArmError(
                    f"{cls.__qualname__} has no arm for: {', '.join(missing)}"
                )
        if len(teardowns) > 1:
            raise DuplicateCleanupError(
                f"{cls.__qualname__} declares more than one teardown: {', '.join(teardowns)}"
            )

        return arms, (teardowns[0] if teardowns else None)

    @classmethod
    def arm_for(cls, position: ResumePosition) -> str:
        """Name of the method that continues from ``position``."""
        try:
            return cls._arms[position]
        except KeyError:
            raise UnknownPositionError(
                f"{cls.__qualname__} has no arm for {position!r}"
            ) from None

    @classmethod
    def yield_sites(cls) -> List[Enum]:
        """All declared resume positions, in declaration order."""
        return list(cls.Position) if cls.Position is not None else []

    @classmethod
    def factory(cls, config=None, logger=None):
        """Return a ``GeneratorFactory`` producing instances of this body."""
        from .factory import GeneratorFactory

        return GeneratorFactory(cls, config=config, logger=logger)

    def teardown_action(self) -> Optional[Callable[[], None]]:
        """The bound cleanup method, if the body declares one."""
        if self._teardown is None:
            return None
        return getattr(self, self._teardown)
