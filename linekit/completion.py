"""Tab-completion: candidates, word extraction and file name completion."""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path

_WINDOWS = os.name == "nt"
_CASE_INSENSITIVE_FS = _WINDOWS or sys.platform == "darwin"

DOUBLE_QUOTES_ESCAPE_CHAR: str | None = "\\"

if _WINDOWS:
    # no backslash, so that Windows paths can be completed
    DEFAULT_BREAK_CHARS = " \t\n\"'`@$><=;|&{(\0"
    ESCAPE_CHAR: str | None = None
    DOUBLE_QUOTES_SPECIAL_CHARS = '"'
else:
    DEFAULT_BREAK_CHARS = " \t\n\"\\'`@$><=;|&{(\0"
    ESCAPE_CHAR = "\\"
    # inside double quotes, only these need escaping
    DOUBLE_QUOTES_SPECIAL_CHARS = '"$\\`'


@dataclass(frozen=True)
class Pair:
    """Completion candidate with distinct display and replacement texts."""

    display: str
    replacement: str


Candidate = str | Pair


def _replacement(candidate: Candidate) -> str:
    return candidate.replacement if isinstance(candidate, Pair) else candidate


def _display(candidate: Candidate) -> str:
    return candidate.display if isinstance(candidate, Pair) else candidate


class Quote(Enum):
    """Kind of quote."""

    DOUBLE = auto()
    SINGLE = auto()
    NONE = auto()


class Completer:
    """Provides completion candidates; the default offers none."""

    def complete(self, line: str, pos: int) -> tuple[int, list[Candidate]]:
        """Return the start of the word at ``pos`` and its candidates."""
        return 0, []


class FilenameCompleter(Completer):
    """Completer for file and folder names."""

    def __init__(
        self,
        break_chars: str = DEFAULT_BREAK_CHARS,
        double_quotes_special_chars: str = DOUBLE_QUOTES_SPECIAL_CHARS,
    ) -> None:
        self.break_chars = break_chars
        self.double_quotes_special_chars = double_quotes_special_chars

    def complete_path(self, line: str, pos: int) -> tuple[int, list[Pair]]:
        """Return the start of the partial path at ``pos`` and the matches."""
        unclosed = find_unclosed_quote(line[:pos])
        if unclosed is not None:
            idx, quote = unclosed
            start = idx + 1
            if quote is Quote.DOUBLE:
                path = unescape(line[start:pos], DOUBLE_QUOTES_ESCAPE_CHAR)
                esc_char = DOUBLE_QUOTES_ESCAPE_CHAR
                break_chars = self.double_quotes_special_chars
            else:
                path = line[start:pos]
                esc_char = None
                break_chars = self.break_chars
        else:
            start, word = extract_word(line, pos, ESCAPE_CHAR, self.break_chars)
            path = unescape(word, ESCAPE_CHAR)
            esc_char = ESCAPE_CHAR
            break_chars = self.break_chars
            quote = Quote.NONE
        matches = _filename_complete(path, esc_char, break_chars, quote)
        matches.sort(key=lambda pair: pair.display)
        return start, matches

    def complete(self, line: str, pos: int) -> tuple[int, list[Pair]]:
        return self.complete_path(line, pos)


def unescape(text: str, esc_char: str | None) -> str:
    """Remove escape characters from ``text``."""
    if esc_char is None or esc_char not in text:
        return text
    result: list[str] = []
    chars = iter(text)
    for ch in chars:
        if ch != esc_char:
            result.append(ch)
            continue
        following = next(chars, None)
        if following is not None:
            if _WINDOWS and following != '"':
                result.append(esc_char)
            result.append(following)
        elif _WINDOWS:
            result.append(ch)
    return "".join(result)


def escape(text: str, esc_char: str | None, break_chars: str, quote: Quote) -> str:
    """Escape every character of ``break_chars`` in ``text`` with ``esc_char``."""
    if quote is Quote.SINGLE:
        return text  # no escape in single quotes
    if not any(c in break_chars for c in text):
        return text
    if esc_char is None:
        if _WINDOWS and quote is Quote.NONE:
            return '"' + text  # force double quote
        return text
    return "".join(esc_char + c if c in break_chars else c for c in text)


def extract_word(
    line: str, pos: int, esc_char: str | None, break_chars: str
) -> tuple[int, str]:
    """Find backward from ``pos`` the start of a word; return it with the word."""
    line = line[:pos]
    start: int | None = None
    for i in range(len(line) - 1, -1, -1):
        c = line[i]
        if esc_char is not None and start is not None:
            if c == esc_char:
                start = None  # escaped break char
                continue
            break
        if c in break_chars:
            start = i + 1
            if esc_char is None:
                break
    if start is None:
        return 0, line
    return start, line[start:]


def longest_common_prefix(candidates: Sequence[Candidate]) -> str | None:
    """Return the longest common prefix of the candidates' replacements."""
    if not candidates:
        return None
    replacements = [_replacement(c) for c in candidates]
    if len(replacements) == 1:
        return replacements[0]
    prefix = os.path.commonprefix(replacements)
    return prefix or None


class _ScanMode(Enum):
    DOUBLE_QUOTE = auto()
    ESCAPE = auto()
    ESCAPE_IN_DOUBLE_QUOTE = auto()
    NORMAL = auto()
    SINGLE_QUOTE = auto()


def find_unclosed_quote(s: str) -> tuple[int, Quote] | None:
    """Return the position and kind of an unclosed quote in ``s``, if any."""
    mode = _ScanMode.NORMAL
    quote_index = 0
    for index, char in enumerate(s):
        if mode is _ScanMode.DOUBLE_QUOTE:
            if char == '"':
                mode = _ScanMode.NORMAL
            elif char == "\\":
                mode = _ScanMode.ESCAPE_IN_DOUBLE_QUOTE
        elif mode is _ScanMode.ESCAPE:
            mode = _ScanMode.NORMAL
        elif mode is _ScanMode.ESCAPE_IN_DOUBLE_QUOTE:
            mode = _ScanMode.DOUBLE_QUOTE
        elif mode is _ScanMode.NORMAL:
            if char == '"':
                mode = _ScanMode.DOUBLE_QUOTE
                quote_index = index
            elif char == "\\" and not _WINDOWS:
                mode = _ScanMode.ESCAPE
            elif char == "'" and not _WINDOWS:
                mode = _ScanMode.SINGLE_QUOTE
                quote_index = index
        elif char == "'":  # single quote: no escapes inside
            mode = _ScanMode.NORMAL
    if mode in (_ScanMode.DOUBLE_QUOTE, _ScanMode.ESCAPE_IN_DOUBLE_QUOTE):
        return quote_index, Quote.DOUBLE
    if mode is _ScanMode.SINGLE_QUOTE:
        return quote_index, Quote.SINGLE
    return None


def _normalize(s: str) -> str:
    return s.lower() if _CASE_INSENSITIVE_FS else s


def _resolve_dir(dir_name: str) -> Path:
    dir_path = Path(dir_name)
    parts = dir_path.parts
    if parts and parts[0] == "~":
        return Path.home().joinpath(*parts[1:])
    if not dir_path.is_absolute():
        try:
            return Path.cwd() / dir_path
        except OSError:
            return dir_path
    return dir_path


def _filename_complete(
    path: str, esc_char: str | None, break_chars: str, quote: Quote
) -> list[Pair]:
    sep = os.sep
    idx = path.rfind(sep)
    if idx >= 0:
        dir_name, file_name = path[: idx + 1], path[idx + 1 :]
    else:
        dir_name, file_name = "", path

    directory = _resolve_dir(dir_name)
    if not directory.exists():
        return []

    wanted = _normalize(file_name)
    entries: list[Pair] = []
    try:
        with os.scandir(directory) as scan:
            for entry in scan:
                name = entry.name
                if not _normalize(name).startswith(wanted):
                    continue
                try:
                    is_dir = entry.is_dir(follow_symlinks=True)
                    os.stat(entry.path)
                except OSError:
                    continue  # permission denied and the like
                replacement = dir_name + name + (sep if is_dir else "")
                entries.append(
                    Pair(
                        display=name,
                        replacement=escape(replacement, esc_char, break_chars, quote),
                    )
                )
    except OSError:
        pass
    return entries