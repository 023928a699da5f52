"""Resume positions and the sentinels that bracket them."""

from enum import Enum
from typing import Any, List, Type, Union

from .errors import PositionCollisionError, UnknownPositionError


class Sentinel(Enum):
    """Markers that are never confused with a yielded value."""

    START = "start"
    EXHAUSTED = "exhausted"

    def __repr__(self) -> str:
        return self.name


START = Sentinel.START
EXHAUSTED = Sentinel.EXHAUSTED

# START or a member of a definition's Position enum
ResumePosition = Union[Sentinel, Enum]


def is_exhausted(value: Any) -> bool:
    """Return True if ``value`` is the exhaustion sentinel."""
    return value is EXHAUSTED


def aliased_members(positions: Type[Enum]) -> List[str]:
    """List member names that are aliases of another member.

    ``Enum`` silently turns a repeated value into an alias, which would make
    two yield sites resume at the same place.
    """
    return [
        name
        for name, member in positions.__members__.items()
        if member.name != name
    ]


def check_positions(positions: Type[Enum]) -> None:
    """
    Validate a Position enumeration.

    Args:
        positions: Enum class whose members label the yield sites of a body

    Raises:
        PositionCollisionError: If two members share a value
        UnknownPositionError: If ``positions`` is not an Enum class
    """
    if not (isinstance(positions, type) and issubclass(positions, Enum)):
        raise UnknownPositionError(
            f"Position must be an Enum subclass, got {positions!r}"
        )
    aliases = aliased_members(positions)
    if aliases:
        raise PositionCollisionError(
            f"{positions.__qualname__} has colliding positions: {', '.join(aliases)}"
        )


def belongs_to(position: Any, positions: Type[Enum]) -> bool:
    """Return True if ``position`` is a member of ``positions``."""
    return isinstance(position, positions)
