"""History persisted to a file, on top of the in-memory history."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from linekit.config import Config, HistoryDuplicates
from linekit.history import History, MemHistory, SearchDirection, SearchResult

try:
    import fcntl
except ImportError:  # not available on every platform
    fcntl = None  # type: ignore[assignment]

_log = logging.getLogger(__name__)

FILE_VERSION_V2 = "#V2"
"""First line of multiline-aware history files."""

_PRIVATE_UMASK = 0o177
_PRIVATE_MODE = 0o600


@dataclass
class _PathInfo:
    """Last path used by load or save, its modification time and entry count."""

    path: Path
    modified: int
    size: int


@contextmanager
def _locked(file: BinaryIO, exclusive: bool) -> Iterator[BinaryIO]:
    """Hold an advisory lock on ``file`` where the platform offers one."""
    if fcntl is None:
        yield file
        return
    fcntl.flock(file.fileno(), fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH)
    try:
        yield file
    finally:
        fcntl.flock(file.fileno(), fcntl.LOCK_UN)


def _escape(entry: str) -> str:
    return entry.replace("\\", "\\\\").replace("\n", "\\n")


def _unescape(line: str) -> str:
    """Undo the escaping of a V2 line; a badly escaped line is kept as is."""
    if "\\" not in line:
        return line
    parts: list[str] = []
    rest = line
    while (i := rest.find("\\")) >= 0:
        parts.append(rest[:i])
        escaped = rest[i + 1 : i + 2]
        if escaped == "n":
            parts.append("\n")
        elif escaped == "\\":
            parts.append("\\")
        else:
            _log.warning("bad escaped line: %s", line)
            return line
        rest = rest[i + 2 :]
    parts.append(rest)
    return "".join(parts)


def _modified(file: BinaryIO) -> int:
    file.flush()
    return os.fstat(file.fileno()).st_mtime_ns


class FileHistory(History):
    """History kept in memory and stored in a file on demand."""

    def __init__(
        self,
        max_len: int = 100,
        ignore_space: bool = False,
        ignore_dups: bool = True,
    ) -> None:
        self._mem = MemHistory(
            max_len=max_len, ignore_space=ignore_space, ignore_dups=ignore_dups
        )
        self._new_entries = 0
        self._path_info: _PathInfo | None = None

    @classmethod
    def with_config(cls, config: Config) -> FileHistory:
        """Build a history from the size and filters of ``config``."""
        return cls(
            max_len=config.max_history_size,
            ignore_space=config.history_ignore_space,
            ignore_dups=config.history_duplicates is HistoryDuplicates.IGNORE_CONSECUTIVE,
        )

    @property
    def max_len(self) -> int:
        """Maximum number of entries kept."""
        return self._mem.max_len

    @property
    def new_entries(self) -> int:
        """Number of entries added and not saved yet."""
        return self._new_entries

    def __len__(self) -> int:
        return len(self._mem)

    def __getitem__(self, index: int) -> str:
        return self._mem[index]

    def __iter__(self) -> Iterator[str]:
        return iter(self._mem)

    def get(
        self, index: int, direction: SearchDirection = SearchDirection.FORWARD
    ) -> SearchResult | None:
        return self._mem.get(index, direction)

    def add(self, line: str) -> bool:
        if not self._mem.add(line):
            return False
        self._new_entries = min(self._new_entries + 1, len(self))
        return True

    def set_max_len(self, length: int) -> None:
        self._mem.set_max_len(length)
        self._new_entries = min(self._new_entries, length)

    def set_ignore_dups(self, yes: bool) -> None:
        self._mem.set_ignore_dups(yes)

    def set_ignore_space(self, yes: bool) -> None:
        self._mem.set_ignore_space(yes)

    def clear(self) -> None:
        self._mem.clear()
        self._new_entries = 0

    def search(
        self, term: str, start: int, direction: SearchDirection
    ) -> SearchResult | None:
        return self._mem.search(term, start, direction)

    def starts_with(
        self, term: str, start: int, direction: SearchDirection
    ) -> SearchResult | None:
        return self._mem.starts_with(term, start, direction)

    def _save_to(self, file: BinaryIO, append: bool) -> None:
        if os.name == "posix":
            os.fchmod(file.fileno(), _PRIVATE_MODE)
        entries = list(self._mem)
        chunks: list[str] = []
        if append:
            entries = entries[max(len(entries) - self._new_entries, 0) :]
        else:
            chunks.append(FILE_VERSION_V2 + "\n")
        chunks.extend(_escape(entry) + "\n" for entry in entries)
        file.write("".join(chunks).encode("utf-8"))
        file.flush()

    def _load_from(self, file: BinaryIO) -> bool:
        """Add the file's entries; return whether later saves may just append."""
        text = file.read().decode("utf-8")
        lines = text.split("\n")
        if text.endswith("\n"):
            lines.pop()
        lines = [line[:-1] if line.endswith("\r") else line for line in lines]
        v2 = False
        if lines:
            first, *lines = lines
            if first == FILE_VERSION_V2:
                v2 = True
            else:
                self.add(first)
        appendable = v2
        for line in lines:
            if not line:
                continue
            if v2:
                line = _unescape(line)
            appendable = self.add(line) and appendable
        self._new_entries = 0
        return appendable

    def _update_path(self, path: Path, file: BinaryIO, size: int) -> None:
        modified = _modified(file)
        self._path_info = _PathInfo(path=path, modified=modified, size=size)
        _log.debug("PathInfo(%s, %s, %s)", path, modified, size)

    def _can_just_append(self, path: Path, file: BinaryIO) -> bool:
        info = self._path_info
        if info is None:
            return False
        if info.path != path:
            _log.debug("cannot append: %s <> %s", info.path, path)
            return False
        modified = _modified(file)
        max_len = self._mem.max_len
        if (
            info.modified != modified
            or max_len <= info.size
            or max_len < info.size + self._new_entries
        ):
            _log.debug(
                "cannot append: %s <> %s or %s < %s + %s",
                info.modified,
                modified,
                max_len,
                info.size,
                self._new_entries,
            )
            return False
        return True

    def save(self, path: str | os.PathLike[str]) -> None:
        """Write the whole history to ``path``, replacing its content."""
        if len(self) == 0 or self._new_entries == 0:
            return
        target = Path(path)
        old_umask = os.umask(_PRIVATE_UMASK) if os.name == "posix" else None
        try:
            file = open(target, "wb")
        finally:
            if old_umask is not None:
                os.umask(old_umask)
        with file, _locked(file, exclusive=True):
            self._save_to(file, append=False)
            self._new_entries = 0
            self._update_path(target, file, len(self))

    def append(self, path: str | os.PathLike[str]) -> None:
        """Add the entries not saved yet to ``path``, trimming it if needed."""
        if len(self) == 0 or self._new_entries == 0:
            return
        target = Path(path)
        if not target.exists() or self._new_entries == self._mem.max_len:
            self.save(target)
            return
        with open(target, "r+b") as file, _locked(file, exclusive=True):
            if self._can_just_append(target, file):
                assert self._path_info is not None
                file.seek(0, os.SEEK_END)
                self._save_to(file, append=True)
                size = self._path_info.size + self._new_entries
                self._new_entries = 0
                self._update_path(target, file, size)
                return
            other = FileHistory(
                max_len=self._mem.max_len,
                ignore_space=self._mem.ignore_space,
                ignore_dups=self._mem.ignore_dups,
            )
            file.seek(0)
            other._load_from(file)
            entries = list(self._mem)
            for entry in entries[max(len(entries) - self._new_entries, 0) :]:
                other.add(entry)
            file.seek(0)
            file.truncate(0)
            other._save_to(file, append=False)
            self._update_path(target, file, len(other))
            self._new_entries = 0

    def load(self, path: str | os.PathLike[str]) -> None:
        """Add the entries stored in ``path``; raise OSError if unreadable."""
        target = Path(path)
        with open(target, "rb") as file, _locked(file, exclusive=False):
            before = len(self)
            if self._load_from(file):
                self._update_path(target, file, len(self) - before)
            else:
                # discard the old format on the next save
                self._path_info = None