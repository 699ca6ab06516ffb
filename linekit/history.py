"""History navigation and in-memory storage."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum, auto

from linekit.config import Config, HistoryDuplicates


class SearchDirection(Enum):
    """Search direction."""

    FORWARD = auto()
    REVERSE = auto()


@dataclass(frozen=True)
class SearchResult:
    """A history entry found by a lookup or a search."""

    entry: str
    idx: int
    pos: int


class History(ABC):
    """Interface for navigating and storing history."""

    @abstractmethod
    def get(
        self, index: int, direction: SearchDirection = SearchDirection.FORWARD
    ) -> SearchResult | None:
        """Return the entry at ``index`` (from 0), or None if out of range."""

    @abstractmethod
    def add(self, line: str) -> bool:
        """Add a new entry; return whether it was kept."""

    @abstractmethod
    def __len__(self) -> int:
        """Return the number of entries."""

    @abstractmethod
    def set_max_len(self, length: int) -> None:
        """Set the maximum number of entries, keeping the latest ones."""

    @abstractmethod
    def set_ignore_dups(self, yes: bool) -> None:
        """Ignore consecutive duplicates, or not."""

    @abstractmethod
    def set_ignore_space(self, yes: bool) -> None:
        """Ignore lines beginning with whitespace, or not."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every entry held in memory."""

    @abstractmethod
    def search(
        self, term: str, start: int, direction: SearchDirection
    ) -> SearchResult | None:
        """Find the nearest entry containing ``term``, ``start`` inclusive."""

    @abstractmethod
    def starts_with(
        self, term: str, start: int, direction: SearchDirection
    ) -> SearchResult | None:
        """Find the nearest entry beginning with ``term``, ``start`` inclusive."""


class MemHistory(History):
    """Transient in-memory history."""

    def __init__(
        self,
        max_len: int = 100,
        ignore_space: bool = False,
        ignore_dups: bool = True,
    ) -> None:
        if max_len < 0:
            raise ValueError(f"max_len must not be negative: {max_len}")
        self._entries: deque[str] = deque()
        self._max_len = max_len
        self._ignore_space = ignore_space
        self._ignore_dups = ignore_dups

    @classmethod
    def with_config(cls, config: Config) -> MemHistory:
        """Build a history from the size and filters of ``config``."""
        return cls(
            max_len=config.max_history_size,
            ignore_space=config.history_ignore_space,
            ignore_dups=config.history_duplicates is HistoryDuplicates.IGNORE_CONSECUTIVE,
        )

    @property
    def max_len(self) -> int:
        """Maximum number of entries kept."""
        return self._max_len

    @property
    def ignore_space(self) -> bool:
        """Whether lines beginning with whitespace are ignored."""
        return self._ignore_space

    @property
    def ignore_dups(self) -> bool:
        """Whether consecutive duplicates are ignored."""
        return self._ignore_dups

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> str:
        return self._entries[index]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def get(
        self, index: int, direction: SearchDirection = SearchDirection.FORWARD
    ) -> SearchResult | None:
        if not 0 <= index < len(self._entries):
            return None
        return SearchResult(entry=self._entries[index], idx=index, pos=0)

    def _ignored(self, line: str) -> bool:
        if self._max_len == 0:
            return True
        if not line or (self._ignore_space and line[0].isspace()):
            return True
        return bool(self._ignore_dups and self._entries and self._entries[-1] == line)

    def add(self, line: str) -> bool:
        if self._ignored(line):
            return False
        if len(self._entries) >= self._max_len:
            self._entries.popleft()
        self._entries.append(line)
        return True

    def set_max_len(self, length: int) -> None:
        if length < 0:
            raise ValueError(f"length must not be negative: {length}")
        self._max_len = length
        while len(self._entries) > length:
            self._entries.popleft()

    def set_ignore_dups(self, yes: bool) -> None:
        self._ignore_dups = yes

    def set_ignore_space(self, yes: bool) -> None:
        self._ignore_space = yes

    def clear(self) -> None:
        self._entries.clear()

    def _search_match(
        self,
        term: str,
        start: int,
        direction: SearchDirection,
        test: Callable[[str], int | None],
    ) -> SearchResult | None:
        if not term or start < 0 or start >= len(self._entries):
            return None
        if direction is SearchDirection.REVERSE:
            indices = range(start, -1, -1)
        else:
            indices = range(start, len(self._entries))
        for idx in indices:
            entry = self._entries[idx]
            cursor = test(entry)
            if cursor is not None:
                return SearchResult(entry=entry, idx=idx, pos=cursor)
        return None

    def search(
        self, term: str, start: int, direction: SearchDirection
    ) -> SearchResult | None:
        def contains(entry: str) -> int | None:
            found = entry.find(term)
            return None if found < 0 else found

        return self._search_match(term, start, direction, contains)

    def starts_with(
        self, term: str, start: int, direction: SearchDirection
    ) -> SearchResult | None:
        def anchored(entry: str) -> int | None:
            return len(term) if entry.startswith(term) else None

        return self._search_match(term, start, direction, anchored)