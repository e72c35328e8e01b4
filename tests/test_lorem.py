import random

import pytest

from tmplparse.lorem import LOREM_PARAGRAPHS, LOREM_WORDS, WORDS, lipsum, lorem


def test_lorem_words_start():
    assert lorem(1, "w") == "Lorem"
    assert lorem(3, "w") == "Lorem ipsum dolor"


def test_lorem_words_count_and_wrap():
    words = lorem(len(LOREM_WORDS) + 2, "w").split(" ")
    assert len(words) == len(LOREM_WORDS) + 2
    assert words[-2:] == LOREM_WORDS[:2]


def test_lorem_paragraphs():
    text = lorem(2, "b")
    assert text.split("\n") == LOREM_PARAGRAPHS[:2]


def test_lorem_paragraphs_wrap():
    lines = lorem(len(LOREM_PARAGRAPHS) + 1, "b").split("\n")
    assert lines[-1] == LOREM_PARAGRAPHS[0]


def test_lorem_html_paragraphs():
    lines = lorem(3, "p").split("\n")
    assert lines == [f"<p>{p}</p>" for p in LOREM_PARAGRAPHS[:3]]


def test_lorem_zero_count_is_empty():
    assert lorem(0, "w") == ""


def test_lorem_unsupported_method():
    with pytest.raises(ValueError, match="unsupported method: x"):
        lorem(1, "x")


def _plain(word):
    return word.rstrip(",.").lower()


def test_lipsum_is_deterministic_with_seed():
    random.seed(42)
    first = lipsum(3, False, 20, 100)
    random.seed(42)
    second = lipsum(3, False, 20, 100)
    assert first == second


def test_lipsum_structure():
    random.seed(7)
    paragraphs = lipsum(4, False, 10, 60).split("\n\n")
    assert len(paragraphs) == 4
    for paragraph in paragraphs:
        words = paragraph.split(" ")
        assert len(words) == 50
        assert paragraph.endswith(".")
        assert words[0][0].isupper()
        assert all(_plain(w) in WORDS for w in words)
        assert all(_plain(a) != _plain(b) for a, b in zip(words, words[1:]))


def test_lipsum_capitalizes_after_fullstop():
    random.seed(3)
    words = lipsum(1, False, 0, 200).split(" ")
    for prev, word in zip(words, words[1:]):
        if prev.endswith("."):
            assert word[0].isupper()


def test_lipsum_html():
    random.seed(1)
    lines = lipsum(2, True, 5, 25).split("\n")
    assert len(lines) == 2
    assert all(line.startswith("<p>") and line.endswith(".<p>") for line in lines)


def test_lipsum_empty_paragraph():
    assert lipsum(1, False, 5, 5) == "."