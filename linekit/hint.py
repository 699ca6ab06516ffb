"""Hints: suggestions shown to the right of the cursor as the user types."""

from __future__ import annotations

from dataclasses import dataclass

from linekit.history import History, SearchDirection


@dataclass(frozen=True)
class Hint:
    """A hint whose displayed text is also what gets inserted."""

    text: str

    def display(self) -> str:
        """Text to display while the hint is active."""
        return self.text

    def completion(self) -> str | None:
        """Text to insert when the hint is accepted, or None."""
        return self.text


class Hinter:
    """Provides hints; the default offers none."""

    def hint(
        self,
        line: str,
        pos: int,
        history: History,
        history_index: int | None = None,
    ) -> Hint | None:
        """Return the hint for ``line`` with the cursor at ``pos``, or None."""
        return None


class HistoryHinter(Hinter):
    """Suggests the rest of the latest history entry starting with the input."""

    def hint(
        self,
        line: str,
        pos: int,
        history: History,
        history_index: int | None = None,
    ) -> Hint | None:
        if not line or pos < len(line):
            return None
        if history_index is None:
            history_index = len(history)
        if history_index == len(history):
            start = max(history_index - 1, 0)
        else:
            start = history_index
        found = history.starts_with(line, start, SearchDirection.REVERSE)
        if found is None or found.entry == line:
            return None
        return Hint(found.entry[pos:])