# linekit

Building blocks for interactive line editors and REPLs.

## Modules

- `linekit.config`: editor preferences. `Config` is a frozen dataclass;
  `Config.builder()` returns a chainable `Builder` whose `build()` gives the
  finished `Config`. The enums are `EditMode`, `CompletionType`, `BellStyle`,
  `ColorMode`, `Behavior` and `HistoryDuplicates`. Choosing
  `EditMode.VI` sets the key sequence timeout to 500 ms, `EditMode.EMACS`
  to -1 (none). Negative sizes raise `ValueError`.
- `linekit.errors`: `ReadlineError` and its kinds `EofError` (also an
  `EOFError`), `ReadlineInterrupted` and `WindowResized`.
- `linekit.history`: the `History` interface, `SearchDirection`,
  `SearchResult` and the in-memory `MemHistory`. `MemHistory` supports
  `len()`, indexing and iteration, drops the oldest entry when full, can
  ignore empty lines, lines starting with whitespace and consecutive
  duplicates, and offers plain (`search`) and anchored (`starts_with`)
  searches in either direction.
- `linekit.file_history`: `FileHistory`, which keeps entries in memory and
  can `save`, `append` to and `load` history files. Files start with a
  `#V2` line; newlines and backslashes in entries are escaped. Older files
  without that line are read as plain lines. On POSIX systems files are
  created readable and writable by their owner only, and are locked while
  being read or written.
- `linekit.completion`: the `Completer` interface, `Pair` candidates,
  `Quote`, `FilenameCompleter` and the helpers `extract_word`, `escape`,
  `unescape`, `find_unclosed_quote` and `longest_common_prefix`.
- `linekit.highlight`: the `Highlighter` interface (optional
  `prompt_style`, `hint_style` and `candidate_style` SGR codes) and
  `MatchingBracketHighlighter`, with the bracket helpers
  `find_matching_bracket`, `check_bracket`, `matching_bracket`,
  `is_open_bracket` and `is_close_bracket`.
- `linekit.hint`: `Hint`, the `Hinter` interface and `HistoryHinter`, which
  suggests the rest of the latest history entry that starts with the input.

## Install

```
pip install .
```

## Example

```python
from linekit.config import Config, EditMode
from linekit.file_history import FileHistory
from linekit.hint import HistoryHinter

config = Config.builder().history_ignore_space(True).edit_mode(EditMode.VI).build()
history = FileHistory.with_config(config)
history.add("git status")
history.add("git commit")
history.save("history.txt")

hinter = HistoryHinter()
hint = hinter.hint("git s", 5, history, len(history))
print(hint.display())   # "tatus"
```

A completer gives back the start of the word and the candidates for it:

```python
from linekit.completion import FilenameCompleter

start, candidates = FilenameCompleter().complete("ls /us", 6)
for pair in candidates:
    print(pair.display, pair.replacement)
```

## What it does not do

linekit holds the parts around a line editor, not the editor itself: there
is no terminal input loop, no `readline()` function, no key bindings or
command handling, and no screen rendering. The errors in `linekit.errors`
are provided for such a loop to raise; nothing in the package raises them.

## Tests

```
pip install .[test]
pytest
```