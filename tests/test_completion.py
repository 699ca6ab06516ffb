import os

import pytest

from linekit.completion import (
    DEFAULT_BREAK_CHARS,
    Completer,
    FilenameCompleter,
    Pair,
    Quote,
    escape,
    extract_word,
    find_unclosed_quote,
    longest_common_prefix,
    unescape,
)


def test_extract_word_quoted():
    line = "ls '/usr/local/b"
    assert extract_word(line, len(line), "\\", DEFAULT_BREAK_CHARS) == (4, "/usr/local/b")


def test_extract_word_escaped_space():
    line = "ls /User\\ Information"
    assert extract_word(line, len(line), "\\", DEFAULT_BREAK_CHARS) == (
        3,
        "/User\\ Information",
    )


def test_extract_word_empty_line():
    assert extract_word("", 0, "\\", DEFAULT_BREAK_CHARS) == (0, "")


def test_extract_word_without_break():
    assert extract_word("abc", 3, None, DEFAULT_BREAK_CHARS) == (0, "abc")


def test_unescape_without_escape_is_unchanged():
    assert unescape("/usr/local/b", "\\") == "/usr/local/b"


def test_unescape_platform_case():
    if os.name == "nt":
        text = "c:\\users\\All Users\\"
        expected = text
    else:
        text = "/User\\ Information"
        expected = "/User Information"
    assert unescape(text, "\\") == expected


def test_unescape_no_escape_char():
    assert unescape("a\\ b", None) == "a\\ b"


def test_escape_nothing_to_escape():
    assert escape("/usr/local/b", "\\", DEFAULT_BREAK_CHARS, Quote.NONE) == "/usr/local/b"


def test_escape_space():
    assert (
        escape("/User Information", "\\", DEFAULT_BREAK_CHARS, Quote.NONE)
        == "/User\\ Information"
    )


def test_escape_single_quote_untouched():
    assert escape("a b", "\\", DEFAULT_BREAK_CHARS, Quote.SINGLE) == "a b"


def test_escape_double_quote_without_escape_char():
    assert escape("a b", None, DEFAULT_BREAK_CHARS, Quote.DOUBLE) == "a b"


def test_escape_adds_one_char_per_break_char():
    text = "a b;c"
    result = escape(text, "\\", DEFAULT_BREAK_CHARS, Quote.NONE)
    assert len(result) == len(text) + 2
    assert result.replace("\\", "") == text


def test_longest_common_prefix_cases():
    candidates = []
    assert longest_common_prefix(candidates) is None
    candidates.append("User")
    assert longest_common_prefix(candidates) == "User"
    candidates.append("Users")
    assert longest_common_prefix(candidates) == "User"
    candidates.append("")
    assert longest_common_prefix(candidates) is None
    assert longest_common_prefix(["fée", "fête"]) == "f"


def test_longest_common_prefix_pairs_use_replacement():
    pairs = [Pair(display="x", replacement="User"), Pair(display="y", replacement="Users")]
    assert longest_common_prefix(pairs) == "User"


def test_find_unclosed_quote_cases():
    assert find_unclosed_quote("ls /etc") is None
    assert find_unclosed_quote('ls "User Information') == (3, Quote.DOUBLE)
    assert find_unclosed_quote('ls "/User Information" /etc') is None
    assert find_unclosed_quote('"c:\\users\\All Users\\') == (0, Quote.DOUBLE)


def test_default_completer_offers_nothing():
    assert Completer().complete("anything", 3) == (0, [])


@pytest.fixture
def tree(tmp_path, monkeypatch):
    (tmp_path / "alpha.txt").write_text("a")
    (tmp_path / "alpine").mkdir()
    (tmp_path / "beta").write_text("b")
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_complete_relative(tree):
    start, matches = FilenameCompleter().complete_path("cat al", 6)
    assert start == 4
    assert matches == [
        Pair(display="alpha.txt", replacement="alpha.txt"),
        Pair(display="alpine", replacement="alpine" + os.sep),
    ]


def test_complete_matches_complete_path(tree):
    completer = FilenameCompleter()
    assert completer.complete("cat al", 6) == completer.complete_path("cat al", 6)


def test_complete_missing_directory(tree):
    line = "cat nope" + os.sep + "x"
    assert FilenameCompleter().complete_path(line, len(line)) == (4, [])


def test_complete_absolute(tree):
    prefix = str(tree) + os.sep
    line = "ls " + prefix + "be"
    start, matches = FilenameCompleter().complete_path(line, len(line))
    assert start == 3
    assert matches == [Pair(display="beta", replacement=prefix + "beta")]


def test_complete_in_double_quotes(tree):
    line = 'cat "al'
    start, matches = FilenameCompleter().complete_path(line, len(line))
    assert start == 5
    assert [m.display for m in matches] == ["alpha.txt", "alpine"]


def test_complete_results_sorted(tree):
    _, matches = FilenameCompleter().complete_path("", 0)
    displays = [m.display for m in matches]
    assert displays == sorted(displays)
    assert set(displays) == {"alpha.txt", "alpine", "beta"}