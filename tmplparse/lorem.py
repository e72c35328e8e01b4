"""Placeholder text generators."""

from __future__ import annotations

import random

_AMET = "Lorem ipsum dolor sit amet, "
_SADIPSCING = (
    "consetetur sadipscing elitr, sed diam nonumy eirmod tempor invidunt "
    "ut labore et dolore magna aliquyam erat"
)
_LONG_SENTENCE = _AMET + _SADIPSCING + ", sed diam voluptua."
_AT_VERO = "At vero eos et accusam et justo duo dolores et ea rebum."
_STET = (
    "Stet clita kasd gubergren, no sea takimata sanctus est "
    "Lorem ipsum dolor sit amet."
)
_DUIS = (
    "Duis autem vel eum iriure dolor in hendrerit in vulputate velit "
    "esse molestie consequat, vel illum dolore eu feugiat nulla facilisis"
)
_DUIS_LONG = _DUIS + (
    " at vero eros et accumsan et iusto odio dignissim qui blandit "
    "praesent luptatum zzril delenit augue duis dolore te feugait "
    "nulla facilisi."
)
_CONSECTETUER = _AMET + (
    "consectetuer adipiscing elit, sed diam nonummy nibh euismod "
    "tincidunt ut laoreet dolore magna aliquam erat volutpat."
)
_UT_WISI = (
    "Ut wisi enim ad minim veniam, quis nostrud exerci tation "
    "ullamcorper suscipit lobortis nisl ut aliquip ex ea commodo "
    "consequat."
)

_PARAGRAPHS = (
    " ".join(
        [
            "Lorem ipsum dolor sit amet, consectetur adipisici elit, "
            "sed eiusmod tempor incidunt ut labore et dolore magna aliqua.",
            "Ut enim ad minim veniam, quis nostrud exercitation ullamco "
            "laboris nisi ut aliquid ex ea commodi consequat.",
            "Quis aute iure reprehenderit in voluptate velit esse cillum "
            "dolore eu fugiat nulla pariatur.",
            "Excepteur sint obcaecat cupiditat non proident, sunt in culpa "
            "qui officia deserunt mollit anim id est laborum.",
        ]
    ),
    " ".join([_DUIS_LONG, _CONSECTETUER]),
    " ".join([_UT_WISI, _DUIS_LONG]),
    " ".join(
        [
            "Nam liber tempor cum soluta nobis eleifend option congue "
            "nihil imperdiet doming id quod mazim placerat facer possim "
            "assum.",
            _CONSECTETUER,
            _UT_WISI,
        ]
    ),
    _DUIS + ".",
    " ".join(
        [
            _AT_VERO,
            _STET,
            _LONG_SENTENCE,
            _AT_VERO,
            _STET,
            _AMET
            + "consetetur sadipscing elitr, At accusam aliquyam diam diam "
            "dolore dolores duo eirmod eos erat, et nonumy sed tempor et et "
            "invidunt justo labore Stet clita ea et gubergren, kasd magna "
            "no rebum.",
            "sanctus sea sed takimata ut vero voluptua.",
            "est Lorem ipsum dolor sit amet.",
            _AMET + _SADIPSCING + ".",
        ]
    ),
    " ".join(
        [
            "C" + _SADIPSCING[1:] + ", sed diam voluptua.",
            _AT_VERO,
            _STET,
            _LONG_SENTENCE,
            _AT_VERO,
            _STET,
            _LONG_SENTENCE,
            _AT_VERO,
            _STET,
        ]
    ),
)

LOREM_IPSUM = "\n".join(_PARAGRAPHS)

# Vocabulary for random paragraphs, grouped by initial letter.
_VOCABULARY = """
a ac accumsan ad adipiscing aenean aliquam aliquet amet ante aptent arcu at
auctor augue
bibendum blandit
class commodo condimentum congue consectetuer consequat conubia convallis cras
cubilia cum curabitur curae cursus
dapibus diam dictum dictumst dignissim dis dolor donec dui duis
egestas eget eleifend elementum elit enim erat eros est et etiam eu euismod
facilisi facilisis fames faucibus felis fermentum feugiat fringilla fusce
gravida
habitant habitasse hac hendrerit hymenaeos
iaculis id imperdiet in inceptos integer interdum ipsum
justo
lacinia lacus laoreet lectus leo libero ligula litora lobortis lorem luctus
maecenas magna magnis malesuada massa mattis mauris metus mi molestie mollis
montes morbi mus
nam nascetur natoque nec neque netus nibh nisi nisl non nonummy nostra nulla
nullam nunc
odio orci ornare
parturient pede pellentesque penatibus per pharetra phasellus placerat platea
porta porttitor posuere potenti praesent pretium primis proin pulvinar purus
quam quis quisque
rhoncus ridiculus risus rutrum
sagittis sapien scelerisque sed sem semper senectus sit sociis sociosqu
sodales sollicitudin suscipit suspendisse
taciti tellus tempor tempus tincidunt torquent tortor tristique turpis
ullamcorper ultrices ultricies urna ut
varius vehicula vel velit venenatis vestibulum vitae vivamus viverra volutpat
vulputate
"""

LOREM_PARAGRAPHS = list(_PARAGRAPHS)
LOREM_WORDS = LOREM_IPSUM.split()
WORDS = _VOCABULARY.split()


def lorem(count: int, method: str) -> str:
    """Return predictable lorem ipsum text.

    ``method`` is ``"b"`` for plain paragraphs, ``"w"`` for words and
    ``"p"`` for HTML paragraphs; the text wraps around when exhausted.
    """
    indices = range(max(count, 0))
    if method == "b":
        return "\n".join(LOREM_PARAGRAPHS[i % len(LOREM_PARAGRAPHS)] for i in indices)
    if method == "w":
        return " ".join(LOREM_WORDS[i % len(LOREM_WORDS)] for i in indices)
    if method == "p":
        return "\n".join(
            f"<p>{LOREM_PARAGRAPHS[i % len(LOREM_PARAGRAPHS)]}</p>" for i in indices
        )
    raise ValueError(f"unsupported method: {method}")


def _paragraph(min_words: int, max_words: int) -> str:
    next_capitalized = True
    last_comma = last_fullstop = 0
    last = ""
    words = []
    for j in range(min_words, max_words):
        word = random.choice(WORDS)
        while word == last:
            word = random.choice(WORDS)
        last = word

        if next_capitalized:
            word = word.title()
            next_capitalized = False

        if j - (3 + random.randrange(5)) > last_comma:
            last_comma = j
            last_fullstop += 2
            word += ","
        elif j - (10 + random.randrange(10)) > last_fullstop:
            last_comma = last_fullstop = j
            word += "."
            next_capitalized = True

        words.append(word)

    text = " ".join(words)
    if text.endswith(","):
        return text[:-1] + "."
    if not text.endswith("."):
        return text + "."
    return text


def lipsum(n: int, html: bool, min_words: int, max_words: int) -> str:
    """Return ``n`` random lorem ipsum paragraphs.

    Each paragraph holds ``max_words - min_words`` words.
    """
    paragraphs = [_paragraph(min_words, max_words) for _ in range(max(n, 0))]
    if not html:
        return "\n\n".join(paragraphs)
    return "\n".join(f"<p>{p}<p>" for p in paragraphs)