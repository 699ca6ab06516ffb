"""User preferences for the line editor."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, replace
from enum import Enum, auto


class BellStyle(Enum):
    """Beep, flash or nothing."""

    AUDIBLE = auto()
    NONE = auto()
    VISIBLE = auto()

    @classmethod
    def default(cls) -> BellStyle:
        """Audible on unix-like systems, silent on Windows."""
        return cls.NONE if sys.platform.startswith("win") else cls.AUDIBLE


class HistoryDuplicates(Enum):
    """History filter."""

    ALWAYS_ADD = auto()
    IGNORE_CONSECUTIVE = auto()


class CompletionType(Enum):
    """Tab completion style."""

    CIRCULAR = auto()
    LIST = auto()


class EditMode(Enum):
    """Style of editing / standard keymaps."""

    EMACS = auto()
    VI = auto()


class ColorMode(Enum):
    """Colorization mode."""

    ENABLED = auto()
    FORCED = auto()
    DISABLED = auto()


class Behavior(Enum):
    """Whether the editor uses stdio or prefers the terminal."""

    STDIO = auto()
    PREFER_TERM = auto()


_EMACS_KEYSEQ_TIMEOUT = -1
_VI_KEYSEQ_TIMEOUT = 500


@dataclass(frozen=True)
class Config:
    """Immutable set of editor preferences."""

    max_history_size: int = 100
    history_duplicates: HistoryDuplicates = HistoryDuplicates.IGNORE_CONSECUTIVE
    history_ignore_space: bool = False
    completion_type: CompletionType = CompletionType.CIRCULAR
    completion_prompt_limit: int = 100
    keyseq_timeout: int = _EMACS_KEYSEQ_TIMEOUT
    edit_mode: EditMode = EditMode.EMACS
    auto_add_history: bool = False
    bell_style: BellStyle = field(default_factory=BellStyle.default)
    color_mode: ColorMode = ColorMode.ENABLED
    behavior: Behavior = Behavior.STDIO
    tab_stop: int = 8
    indent_size: int = 2
    check_cursor_position: bool = False
    enable_bracketed_paste: bool = True

    @staticmethod
    def builder() -> Builder:
        """Return a builder starting from the default configuration."""
        return Builder()


class Builder:
    """Chainable builder for :class:`Config`."""

    def __init__(self) -> None:
        self._config = Config()

    def _set(self, **changes: object) -> Builder:
        self._config = replace(self._config, **changes)
        return self

    @staticmethod
    def _check_size(name: str, value: int) -> int:
        if value < 0:
            raise ValueError(f"{name} must not be negative: {value}")
        return value

    def max_history_size(self, max_size: int) -> Builder:
        """Set the maximum number of history entries."""
        return self._set(
            max_history_size=self._check_size("max_history_size", max_size)
        )

    def history_ignore_dups(self, yes: bool) -> Builder:
        """Ignore lines matching the previous history entry, or not."""
        duplicates = (
            HistoryDuplicates.IGNORE_CONSECUTIVE if yes else HistoryDuplicates.ALWAYS_ADD
        )
        return self._set(history_duplicates=duplicates)

    def history_ignore_space(self, yes: bool) -> Builder:
        """Ignore lines beginning with a space, or not."""
        return self._set(history_ignore_space=yes)

    def completion_type(self, completion_type: CompletionType) -> Builder:
        """Set the completion style."""
        return self._set(completion_type=completion_type)

    def completion_prompt_limit(self, completion_prompt_limit: int) -> Builder:
        """Set how many candidates are listed before asking the user."""
        return self._set(
            completion_prompt_limit=self._check_size(
                "completion_prompt_limit", completion_prompt_limit
            )
        )

    def keyseq_timeout(self, keyseq_timeout_ms: int) -> Builder:
        """Set the timeout (ms) for ambiguous key sequences; -1 means none."""
        return self._set(keyseq_timeout=keyseq_timeout_ms)

    def edit_mode(self, edit_mode: EditMode) -> Builder:
        """Choose Emacs or Vi mode; also resets the key sequence timeout."""
        timeout = _VI_KEYSEQ_TIMEOUT if edit_mode is EditMode.VI else _EMACS_KEYSEQ_TIMEOUT
        return self._set(edit_mode=edit_mode, keyseq_timeout=timeout)

    def auto_add_history(self, yes: bool) -> Builder:
        """Add every nonblank accepted line to the history, or not."""
        return self._set(auto_add_history=yes)

    def bell_style(self, bell_style: BellStyle) -> Builder:
        """Set the bell style."""
        return self._set(bell_style=bell_style)

    def color_mode(self, color_mode: ColorMode) -> Builder:
        """Force colorization on or off."""
        return self._set(color_mode=color_mode)

    def behavior(self, behavior: Behavior) -> Builder:
        """Choose whether stdio is used."""
        return self._set(behavior=behavior)

    def tab_stop(self, tab_stop: int) -> Builder:
        """Set the horizontal space taken by a tab."""
        return self._set(tab_stop=self._check_size("tab_stop", tab_stop))

    def check_cursor_position(self, yes: bool) -> Builder:
        """Check the cursor is leftmost before showing the prompt, or not."""
        return self._set(check_cursor_position=yes)

    def indent_size(self, indent_size: int) -> Builder:
        """Set the indentation size for indent/dedent commands."""
        return self._set(indent_size=self._check_size("indent_size", indent_size))

    def bracketed_paste(self, enabled: bool) -> Builder:
        """Enable or disable bracketed paste."""
        return self._set(enable_bracketed_paste=enabled)

    def build(self) -> Config:
        """Return the configuration built so far."""
        return self._config