from __future__ import annotations

import pytest

from guardian_tui.reflow import wrap

SAMPLES = [
    "a very long sentence with many words",
    "The quick brown fox jumps over the lazy dog while the cat watches on.",
    "Supercalifragilisticexpialidocious is a word that does not fit anywhere",
    "spaces    in   a   row   should   not   break   anything   at   all",
    "First paragraph is short.\nSecond paragraph is rather a lot longer than the first one.",
    "Ünïcödé wörds shöuld bé cöuntéd as chäräctérs nöt as bytés, ça va?",
    "",
]


@pytest.mark.parametrize("text", SAMPLES)
def test_no_line_exceeds_width(text):
    for width in (1, 2, 5, 7, 10, 13, 20, 80):
        for line in wrap(text, width).split("\n"):
            assert len(line) <= width, (width, line)


@pytest.mark.parametrize("text", SAMPLES)
def test_short_text_is_unchanged(text):
    width = len(text) + 1
    assert wrap(text, width) == text


def test_text_exactly_width_is_unchanged():
    assert wrap("abcdefghij", 10) == "abcdefghij"


@pytest.mark.parametrize("width", [0, -1, -10])
def test_non_positive_width_is_rejected(width):
    with pytest.raises(ValueError):
        wrap("anything", width)


def _unwrap(wrapped: str) -> str:
    out = ""
    for line in wrapped.split("\n"):
        if line.endswith("-"):
            out += line[:-1]
        else:
            out += line + " "
    return out[:-1]


def test_breaks_fall_on_original_spaces():
    assert wrap("The quick brown fox jumps over the lazy dog", 20) == (
        "The quick brown fox\njumps over the lazy\ndog"
    )


def test_breaks_are_spaces_or_hyphenated_splits():
    text = "a very long sentence with many words"
    wrapped = wrap(text, 10)
    assert wrapped == "a very lo-\nng senten-\nce with m-\nany words"
    assert _unwrap(wrapped) == text


def test_forced_split_inserts_hyphen():
    assert wrap("abcdefghijklmnopqrstuvwxyz", 10) == "abcdefghi-\njklmnopqr-\nstuvwxyz"


def test_only_nearest_whitespace_is_converted():
    # Candidate position 10 is the second of two spaces; only it becomes a break.
    assert wrap("abcdefghi  jklmnop", 10) == "abcdefghi \njklmnop"


def test_existing_line_breaks_are_kept():
    assert wrap("short\nlines\nhere", 5) == "short\nlines\nhere"


def test_width_one_splits_every_character_without_hyphens():
    assert wrap("abc", 1) == "a\nb\nc"


def test_wide_characters_are_not_split_internally():
    text = "日本語のテキストを折り返す"
    wrapped = wrap(text, 5)
    assert wrapped.replace("-\n", "") == text


def test_space_at_candidate_is_used_for_narrow_widths():
    # width // 5 is 0 here, yet the candidate position itself is still checked.
    assert wrap("ab cd", 2) == "ab\ncd"
