"""Calling convention of a generator: per-call parameter types and yielded type."""

import types
from dataclasses import dataclass
from typing import Any, Sequence, Tuple

from .errors import ResumeArgumentError, YieldTypeError
from .positions import EXHAUSTED


def _checkable(expected: Any) -> bool:
    # typing constructs (Any, List[int], list[int], ...) are accepted unchecked
    if isinstance(expected, tuple):
        return all(_checkable(item) for item in expected)
    return isinstance(expected, type) and not isinstance(expected, types.GenericAlias) and expected is not Any


def _type_name(expected: Any) -> str:
    if isinstance(expected, tuple):
        return " | ".join(_type_name(item) for item in expected)
    return getattr(expected, "__qualname__", repr(expected))


@dataclass(frozen=True)
class GeneratorShape:
    """
    Declared shape of a generator.

    Two generators with equal shapes can be used interchangeably by callers.
    """

    params: Tuple[Any, ...] = ()
    returns: Any = object

    @classmethod
    def of(cls, definition: type) -> "GeneratorShape":
        """Read the shape declared on a ``GeneratorDefinition`` subclass."""
        return cls(params=tuple(definition.params), returns=definition.returns)

    def describe(self) -> str:
        params = ", ".join(_type_name(p) for p in self.params)
        return f"({params}) -> {_type_name(self.returns)}"

    def check_arguments(self, args: Sequence[Any], check_types: bool = True) -> None:
        """
        Validate per-call arguments against the declared parameters.

        Args:
            args: Positional arguments passed to resume
            check_types: Also check each argument's type where possible

        Raises:
            ResumeArgumentError: If arity or types do not match
        """
        if len(args) != len(self.params):
            raise ResumeArgumentError(
                f"expected {len(self.params)} per-call argument(s) for {self.describe()}, "
                f"got {len(args)}"
            )
        if not check_types:
            return
        for index, (arg, expected) in enumerate(zip(args, self.params)):
            if _checkable(expected) and not isinstance(arg, expected):
                raise ResumeArgumentError(
                    f"per-call argument {index} must be {_type_name(expected)}, "
                    f"got {type(arg).__qualname__}"
                )

    def check_value(self, value: Any, check_types: bool = True) -> None:
        """
        Validate a yielded value against the declared return type.

        Raises:
            YieldTypeError: If the value is the exhaustion sentinel or has the wrong type
        """
        if value is EXHAUSTED:
            raise YieldTypeError("the exhaustion sentinel cannot be yielded as a value")
        if check_types and _checkable(self.returns) and not isinstance(value, self.returns):
            raise YieldTypeError(
                f"yielded value must be {_type_name(self.returns)}, "
                f"got {type(value).__qualname__}"
            )
