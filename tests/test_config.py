import dataclasses
import sys

import pytest

from linekit.config import (
    Behavior,
    BellStyle,
    Builder,
    ColorMode,
    CompletionType,
    Config,
    EditMode,
    HistoryDuplicates,
)


def test_defaults():
    config = Config()
    assert config.max_history_size == 100
    assert config.history_duplicates is HistoryDuplicates.IGNORE_CONSECUTIVE
    assert config.history_ignore_space is False
    assert config.completion_type is CompletionType.CIRCULAR
    assert config.completion_prompt_limit == 100
    assert config.keyseq_timeout == -1
    assert config.edit_mode is EditMode.EMACS
    assert config.auto_add_history is False
    assert config.color_mode is ColorMode.ENABLED
    assert config.behavior is Behavior.STDIO
    assert config.tab_stop == 8
    assert config.indent_size == 2
    assert config.check_cursor_position is False
    assert config.enable_bracketed_paste is True


def test_default_bell_style_depends_on_platform():
    expected = BellStyle.NONE if sys.platform.startswith("win") else BellStyle.AUDIBLE
    assert Config().bell_style is expected


def test_builder_without_changes_equals_default():
    assert Config.builder().build() == Config()


def test_builder_chain():
    config = (
        Config.builder()
        .history_ignore_space(True)
        .completion_type(CompletionType.LIST)
        .edit_mode(EditMode.EMACS)
        .auto_add_history(True)
        .build()
    )
    assert config.history_ignore_space is True
    assert config.completion_type is CompletionType.LIST
    assert config.edit_mode is EditMode.EMACS
    assert config.auto_add_history is True


def test_vi_mode_sets_timeout():
    config = Config.builder().edit_mode(EditMode.VI).build()
    assert config.edit_mode is EditMode.VI
    assert config.keyseq_timeout == 500


def test_emacs_mode_resets_timeout():
    config = Config.builder().edit_mode(EditMode.VI).edit_mode(EditMode.EMACS).build()
    assert config.keyseq_timeout == -1


def test_explicit_timeout_after_mode_wins():
    config = Config.builder().edit_mode(EditMode.VI).keyseq_timeout(42).build()
    assert config.keyseq_timeout == 42


def test_history_ignore_dups():
    off = Config.builder().history_ignore_dups(False).build()
    assert off.history_duplicates is HistoryDuplicates.ALWAYS_ADD
    on = Config.builder().history_ignore_dups(False).history_ignore_dups(True).build()
    assert on.history_duplicates is HistoryDuplicates.IGNORE_CONSECUTIVE


@pytest.mark.parametrize(
    ("method", "value", "attribute"),
    [
        ("max_history_size", 7, "max_history_size"),
        ("completion_prompt_limit", 5, "completion_prompt_limit"),
        ("tab_stop", 4, "tab_stop"),
        ("indent_size", 4, "indent_size"),
        ("check_cursor_position", True, "check_cursor_position"),
        ("bracketed_paste", False, "enable_bracketed_paste"),
        ("bell_style", BellStyle.VISIBLE, "bell_style"),
        ("color_mode", ColorMode.DISABLED, "color_mode"),
        ("behavior", Behavior.PREFER_TERM, "behavior"),
    ],
)
def test_setter_round_trip(method, value, attribute):
    builder = Builder()
    getattr(builder, method)(value)
    assert getattr(builder.build(), attribute) == value


@pytest.mark.parametrize(
    "method", ["max_history_size", "completion_prompt_limit", "tab_stop", "indent_size"]
)
def test_negative_sizes_rejected(method):
    with pytest.raises(ValueError):
        getattr(Builder(), method)(-1)


def test_built_config_is_immutable():
    config = Config.builder().build()
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.tab_stop = 3
    assert config.tab_stop == 8


def test_builder_changes_after_build_do_not_leak():
    builder = Config.builder()
    first = builder.build()
    builder.tab_stop(3)
    assert first.tab_stop == 8
    assert builder.build().tab_stop == 3