"""Building blocks for interactive line editors: configuration, history, completion, highlighting and hints."""

__version__ = "0.1.0"

__all__ = [
    "config",
    "errors",
    "history",
    "file_history",
    "completion",
    "highlight",
    "hint",
]