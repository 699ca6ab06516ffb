"""Syntax highlighting with ANSI colors."""

from __future__ import annotations

from linekit.config import CompletionType

_OPENS = "{[("
_CLOSES = "}])"
_MATCHING = {"{": "}", "}": "{", "[": "]", "]": "[", "(": ")", ")": "("}
_BRACKET_STYLE = "\x1b[1;34m{}\x1b[0m"


def _styled(style: str | None, text: str) -> str:
    """Wrap ``text`` in the SGR ``style`` if one is given."""
    if not style or not text:
        return text
    return f"\x1b[{style}m{text}\x1b[m"


class Highlighter:
    """Colors the edited line, prompt, hint and candidates.

    By default no style is set and every text is returned unchanged.
    A highlighted text must keep the display width of the original one.
    """

    prompt_style: str | None = None
    hint_style: str | None = None
    candidate_style: str | None = None

    def highlight(self, line: str, pos: int) -> str:
        """Return ``line`` highlighted for a cursor at ``pos``."""
        return line

    def highlight_prompt(self, prompt: str, default: bool) -> str:
        """Return ``prompt`` highlighted; only the default prompt is styled."""
        return _styled(self.prompt_style if default else None, prompt)

    def highlight_hint(self, hint: str) -> str:
        """Return ``hint`` highlighted."""
        return _styled(self.hint_style, hint)

    def highlight_candidate(self, candidate: str, completion: CompletionType) -> str:
        """Return a completion ``candidate`` highlighted."""
        return _styled(self.candidate_style, candidate)

    def highlight_char(self, line: str, pos: int) -> bool:
        """Tell whether ``line`` needs a new highlight for a cursor at ``pos``."""
        return False


class MatchingBracketHighlighter(Highlighter):
    """Highlights the bracket matching the one typed or under the cursor."""

    def __init__(self) -> None:
        self._bracket: tuple[str, int] | None = None

    def highlight(self, line: str, pos: int) -> str:
        if len(line) <= 1 or self._bracket is None:
            return line
        bracket, bracket_pos = self._bracket
        found = find_matching_bracket(line, bracket_pos, bracket)
        if found is None:
            return line
        matching, idx = found
        return line[:idx] + _BRACKET_STYLE.format(matching) + line[idx + 1 :]

    def highlight_char(self, line: str, pos: int) -> bool:
        self._bracket = check_bracket(line, pos)
        return self._bracket is not None


def find_matching_bracket(line: str, pos: int, bracket: str) -> tuple[str, int] | None:
    """Find the bracket matching ``bracket`` found at ``pos`` in ``line``."""
    matching = matching_bracket(bracket)
    unmatched = 1
    if is_open_bracket(bracket):
        indices = range(pos + 1, len(line))
    else:
        indices = range(pos - 1, -1, -1)
    for idx in indices:
        char = line[idx]
        if char == matching:
            unmatched -= 1
            if unmatched == 0:
                return matching, idx
        elif char == bracket:
            unmatched += 1
    return None


def check_bracket(line: str, pos: int) -> tuple[str, int] | None:
    """Return a bracket under or just before the cursor that may have a match."""
    if not line:
        return None
    if pos >= len(line):
        pos = len(line) - 1  # before cursor
        char = line[pos]
        return (char, pos) if is_close_bracket(char) else None
    under_cursor = True
    while True:
        char = line[pos]
        if is_close_bracket(char):
            return None if pos == 0 else (char, pos)
        if is_open_bracket(char):
            return None if pos + 1 == len(line) else (char, pos)
        if under_cursor and pos > 0:
            under_cursor = False
            pos -= 1  # or before cursor
        else:
            return None


def matching_bracket(bracket: str) -> str:
    """Return the bracket matching ``bracket``, or ``bracket`` itself."""
    return _MATCHING.get(bracket, bracket)


def is_open_bracket(bracket: str) -> bool:
    """Tell whether ``bracket`` is an opening bracket."""
    return len(bracket) == 1 and bracket in _OPENS


def is_close_bracket(bracket: str) -> bool:
    """Tell whether ``bracket`` is a closing bracket."""
    return len(bracket) == 1 and bracket in _CLOSES