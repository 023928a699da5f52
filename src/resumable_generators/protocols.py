"""Protocol definitions for dependency inversion."""

from typing import Any, Protocol


class GeneratorProtocol(Protocol):
    """Calling convention shared by every resumable generator."""

    def __call__(self, *params: Any) -> Any:
        """Resume the body and return the next value or the exhaustion sentinel."""
        ...

    def close(self) -> None:
        """Tear the generator down, firing its cleanup action once."""
        ...


class LoggerProtocol(Protocol):
    """Protocol for logging."""

    def info(self, message: str) -> None:
        """Log info message."""
        ...

    def debug(self, message: str) -> None:
        """Log debug message."""
        ...

    def warning(self, message: str) -> None:
        """Log warning message."""
        ...

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log error message."""
        ...
