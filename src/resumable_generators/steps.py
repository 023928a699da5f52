"""The yield protocol.

An arm never suspends itself. It returns a step telling the state machine
what to do next:

- ``yield_(value, at=Position.X)`` stores ``Position.X`` and hands ``value``
  back to the caller of the current resume.
- ``goto(Position.X)`` keeps going inside the same resume call, starting at
  the arm for ``Position.X``. Loops and branches that cross a yield site are
  written this way.
- ``finish()`` (or returning ``None``) ends the body.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


@dataclass(frozen=True)
class Suspend:
    """Hand ``value`` to the caller and resume at ``position`` next time."""

    value: Any
    position: Enum


@dataclass(frozen=True)
class Jump:
    """Continue at ``position`` within the current resume call."""

    position: Enum


@dataclass(frozen=True)
class Finish:
    """The body ran to its end."""


FINISHED = Finish()

Step = Union[Suspend, Jump, Finish]


def yield_(value: Any, at: Enum) -> Suspend:
    """Yield ``value`` and record ``at`` as the resume position."""
    return Suspend(value=value, position=at)


def goto(at: Enum) -> Jump:
    """Transfer control to the arm for ``at`` without yielding."""
    return Jump(position=at)


def finish() -> Finish:
    """End the body; the current resume returns the exhaustion sentinel."""
    return FINISHED
