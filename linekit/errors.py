"""Errors raised while reading a line."""


class ReadlineError(Exception):
    """Base class for line-editing errors."""


class EofError(ReadlineError, EOFError):
    """End of input (Ctrl-D on an empty line)."""

    def __init__(self, message: str = "EOF") -> None:
        super().__init__(message)


class ReadlineInterrupted(ReadlineError):
    """Interrupt signal (Ctrl-C)."""

    def __init__(self, message: str = "Interrupted") -> None:
        super().__init__(message)


class WindowResized(ReadlineError):
    """The terminal window changed size."""

    def __init__(self, message: str = "WindowResized") -> None:
        super().__init__(message)