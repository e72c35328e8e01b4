import pytest

from tmplparse.lexer import Lexer, LexerConfig, lex
from tmplparse.stream import TokenStream
from tmplparse.tokens import Token, TokenType as T

EOF = (T.EOF, "")
VAR_BEGIN = (T.VARIABLE_BEGIN, "{{")
VAR_END = (T.VARIABLE_END, "}}")
BLOCK_BEGIN = (T.BLOCK_BEGIN, "{%")
BLOCK_BEGIN_TRIM = (T.BLOCK_BEGIN, "{%-")
BLOCK_END = (T.BLOCK_END, "%}")
BLOCK_END_TRIM = (T.BLOCK_END, "-%}")
LPAREN = (T.LPAREN, "(")
RPAREN = (T.RPAREN, ")")
LBRACE = (T.LBRACE, "{")
RBRACE = (T.RBRACE, "}")
LBRACKET = (T.LBRACKET, "[")
RBRACKET = (T.RBRACKET, "]")
SPACE = (T.WHITESPACE, " ")


def data(text):
    return (T.DATA, text)


def name(text):
    return (T.NAME, text)


def string(text):
    return (T.STRING, text)


def error(text):
    return (T.ERROR, text)


LEXER_CASES = [
    ("empty", "", [EOF]),
    ("data", "Hello World", [data("Hello World"), EOF]),
    ("comment", "{# a comment #}", [
        (T.COMMENT_BEGIN, "{#"), data(" a comment "), (T.COMMENT_END, "#}"), EOF,
    ]),
    ("mixed comment", "Hello, {# comment #}World", [
        data("Hello, "), (T.COMMENT_BEGIN, "{#"), data(" comment "),
        (T.COMMENT_END, "#}"), data("World"), EOF,
    ]),
    ("simple variable", "{{ foo }}", [
        VAR_BEGIN, SPACE, name("foo"), SPACE, VAR_END, EOF,
    ]),
    ("basic math expression", "{{ (a - b) + c }}", [
        VAR_BEGIN, SPACE,
        LPAREN, name("a"), SPACE, (T.SUB, "-"), SPACE, name("b"), RPAREN,
        SPACE, (T.ADD, "+"), SPACE, name("c"),
        SPACE, VAR_END, EOF,
    ]),
    ("blocks", "Hello.  {% if true %}World{% else %}Nobody{% endif %}", [
        data("Hello.  "),
        BLOCK_BEGIN, SPACE, name("if"), SPACE, name("true"), SPACE, BLOCK_END,
        data("World"),
        BLOCK_BEGIN, SPACE, name("else"), SPACE, BLOCK_END,
        data("Nobody"),
        BLOCK_BEGIN, SPACE, name("endif"), SPACE, BLOCK_END,
        EOF,
    ]),
    ("blocks with trim control",
     "Hello.  {%- if true -%}World{%- else -%}Nobody{%- endif -%}", [
         data("Hello.  "),
         BLOCK_BEGIN_TRIM, SPACE, name("if"), SPACE, name("true"), SPACE, BLOCK_END_TRIM,
         data("World"),
         BLOCK_BEGIN_TRIM, SPACE, name("else"), SPACE, BLOCK_END_TRIM,
         data("Nobody"),
         BLOCK_BEGIN_TRIM, SPACE, name("endif"), SPACE, BLOCK_END_TRIM,
         EOF,
     ]),
    ("ignore tags in comment", "<html>{# ignore {% tags %} in comments ##}</html>", [
        data("<html>"),
        (T.COMMENT_BEGIN, "{#"),
        data(" ignore {% tags %} in comments #"),
        (T.COMMENT_END, "#}"),
        data("</html>"),
        EOF,
    ]),
    ("mixed content",
     "{# comment #}{% if foo -%} bar {%- elif baz %} bing{%endif    %}", [
         (T.COMMENT_BEGIN, "{#"), data(" comment "), (T.COMMENT_END, "#}"),
         BLOCK_BEGIN, SPACE, name("if"), SPACE, name("foo"), SPACE, BLOCK_END_TRIM,
         data(" bar "),
         BLOCK_BEGIN_TRIM, SPACE, name("elif"), SPACE, name("baz"), SPACE, BLOCK_END,
         data(" bing"),
         BLOCK_BEGIN, name("endif"), (T.WHITESPACE, "    "), BLOCK_END,
         EOF,
     ]),
    ("mixed tokens with doubles", "{{ +--+ /+//,|*/**=>>=<=< == }}", [
        VAR_BEGIN, SPACE,
        (T.ADD, "+"), (T.SUB, "-"), (T.SUB, "-"), (T.ADD, "+"),
        SPACE,
        (T.DIV, "/"), (T.ADD, "+"), (T.FLOORDIV, "//"),
        (T.COMMA, ","),
        (T.PIPE, "|"),
        (T.MUL, "*"),
        (T.DIV, "/"),
        (T.POW, "**"),
        (T.ASSIGN, "="),
        (T.GT, ">"),
        (T.GTEQ, ">="),
        (T.LTEQ, "<="),
        (T.LT, "<"),
        SPACE,
        (T.EQ, "=="),
        SPACE, VAR_END, EOF,
    ]),
    ("delimiters", "{{ ([{}]()) }}", [
        VAR_BEGIN, SPACE,
        LPAREN, LBRACKET, LBRACE, RBRACE, RBRACKET, LPAREN, RPAREN, RPAREN,
        SPACE, VAR_END, EOF,
    ]),
    ("unbalanced delimiters", "{{ ([{]) }}", [
        VAR_BEGIN, SPACE, LPAREN, LBRACKET, LBRACE,
        error('Unbalanced delimiters, expected "}", got "]"'),
    ]),
    ("unexpected delimiter", "{{ ()) }}", [
        VAR_BEGIN, SPACE, LPAREN, RPAREN,
        error('Unexpected delimiter ")"'),
    ]),
    ("unbalance over end block", "{{ ({a:b, {a:b}}) }}", [
        VAR_BEGIN, SPACE,
        LPAREN,
        LBRACE, name("a"), (T.COLON, ":"), name("b"), (T.COMMA, ","),
        SPACE,
        LBRACE, name("a"), (T.COLON, ":"), name("b"), RBRACE, RBRACE,
        RPAREN,
        SPACE, VAR_END, EOF,
    ]),
    ("string with double quote", '{{ "Hello, " + "World" }}', [
        VAR_BEGIN, SPACE, string("Hello, "), SPACE, (T.ADD, "+"), SPACE,
        string("World"), SPACE, VAR_END, EOF,
    ]),
    ("string with simple quote", "{{ 'Hello, ' + 'World' }}", [
        VAR_BEGIN, SPACE, string("Hello, "), SPACE, (T.ADD, "+"), SPACE,
        string("World"), SPACE, VAR_END, EOF,
    ]),
    ("single quotes inside double quotes string", "{{ \"'quoted' test\" }}", [
        VAR_BEGIN, SPACE, string("'quoted' test"), SPACE, VAR_END, EOF,
    ]),
    ("escaped string", r'{{ "Hello, \"World\"" }}', [
        VAR_BEGIN, SPACE, string('Hello, "World"'), SPACE, VAR_END, EOF,
    ]),
    ("escaped string mixed", r'''{{ "Hello,\n \'World\'" }}''', [
        VAR_BEGIN, SPACE, string(r"Hello,\n 'World'"), SPACE, VAR_END, EOF,
    ]),
    ("if statement", "{% if 5.5 == 5.500000 %}5.5 is 5.500000{% endif %}", [
        BLOCK_BEGIN, SPACE, name("if"), SPACE,
        (T.FLOAT, "5.5"), SPACE, (T.EQ, "=="), SPACE, (T.FLOAT, "5.500000"),
        SPACE, BLOCK_END,
        data("5.5 is 5.500000"),
        BLOCK_BEGIN, SPACE, name("endif"), SPACE, BLOCK_END,
        EOF,
    ]),
    ("logical 'and' expression", '{{ a is defined and a == "x" }}', [
        VAR_BEGIN,
        SPACE, name("a"), SPACE, (T.IS, "is"), SPACE, name("defined"),
        SPACE, (T.AND, "and"),
        SPACE, name("a"), SPACE, (T.EQ, "=="), SPACE, string("x"), SPACE,
        VAR_END, EOF,
    ]),
    ("logical 'or' expression", '{{ a is defined or a == "x" }}', [
        VAR_BEGIN,
        SPACE, name("a"), SPACE, (T.IS, "is"), SPACE, name("defined"),
        SPACE, (T.OR, "or"),
        SPACE, name("a"), SPACE, (T.EQ, "=="), SPACE, string("x"), SPACE,
        VAR_END, EOF,
    ]),
    ("logical 'not' expression", "{{ not a }}", [
        VAR_BEGIN, SPACE, (T.NOT, "not"), SPACE, name("a"), SPACE, VAR_END, EOF,
    ]),
]

CASE_IDS = [case[0] for case in LEXER_CASES]


def pairs(tokens):
    return [(tok.type, tok.val) for tok in tokens]


def stream_result(stream):
    out = []
    while not stream.at_end():
        tok = stream.current()
        out.append((tok.type, tok.val))
        stream.next()
    return out


def as_stream_result(expected):
    out = []
    for kind, val in expected:
        if kind is T.ERROR:
            break
        if kind not in (T.WHITESPACE, T.EOF):
            out.append((kind, val))
    return out


@pytest.mark.parametrize("name_, text, expected", LEXER_CASES, ids=CASE_IDS)
def test_lexer(name_, text, expected):
    assert pairs(Lexer(text).tokens()) == expected


@pytest.mark.parametrize("name_, text, expected", LEXER_CASES, ids=CASE_IDS)
def test_lex(name_, text, expected):
    assert stream_result(lex(text)) == as_stream_result(expected)


@pytest.mark.parametrize("name_, text, expected", LEXER_CASES, ids=CASE_IDS)
def test_stream_slice(name_, text, expected):
    tokens = list(Lexer(text))
    assert stream_result(TokenStream(tokens)) == as_stream_result(expected)


def test_regexp_clashing_delimiters():
    config = LexerConfig(
        variable_start_string="[[",
        variable_end_string="]]",
        block_start_string="[%",
        block_end_string="%]",
        comment_start_string="[#",
        comment_end_string="#]",
    )
    tokens = list(Lexer("[[ variable ]][% block %][# comment #]", config))
    expected = as_stream_result([
        (T.VARIABLE_BEGIN, "[["), SPACE, name("variable"), SPACE, (T.VARIABLE_END, "]]"),
        (T.BLOCK_BEGIN, "[%"), SPACE, name("block"), SPACE, (T.BLOCK_END, "%]"),
        (T.COMMENT_BEGIN, "[#"), data(" comment "), (T.COMMENT_END, "#]"),
        EOF,
    ])
    assert stream_result(TokenStream(tokens)) == expected


POSITIONS_CASE = "Hello\n{#\n    Multiline comment\n#}\nWorld\n"


def test_lexer_position():
    assert list(Lexer(POSITIONS_CASE).tokens()) == [
        Token(T.DATA, "Hello\n", 0, 1, 1, False),
        Token(T.COMMENT_BEGIN, "{#", 6, 2, 1, False),
        Token(T.DATA, "\n    Multiline comment\n", 8, 2, 3, False),
        Token(T.COMMENT_END, "#}", 31, 4, 1, False),
        Token(T.DATA, "\nWorld\n", 33, 4, 3, False),
        Token(T.EOF, "", 40, 6, 1, False),
    ]


def test_raw_block_keeps_content_as_data():
    text = "{% raw %}{{ x }}{% endraw %}"
    assert pairs(Lexer(text)) == [
        BLOCK_BEGIN, SPACE, name("raw"), SPACE, BLOCK_END,
        data("{{ x }}"),
        BLOCK_BEGIN, SPACE, name("endraw"), SPACE, BLOCK_END,
        EOF,
    ]


def test_raw_block_without_end():
    assert pairs(Lexer("{% raw %}abc")) == [
        BLOCK_BEGIN, SPACE, name("raw"), SPACE, BLOCK_END,
        error("Unable to find raw closing statement"),
    ]


def test_unclosed_comment():
    assert pairs(Lexer("{# abc")) == [
        (T.COMMENT_BEGIN, "{#"), error("unclosed comment"),
    ]


def test_unterminated_string_reports_near_context():
    assert pairs(Lexer('{{ "ab\ncd')) == [VAR_BEGIN, SPACE, error("ab\n")]


def test_unterminated_expression_ends_with_error():
    tokens = pairs(Lexer("{{ foo"))
    assert tokens[:3] == [VAR_BEGIN, SPACE, name("foo")]
    assert tokens[-1][0] is T.ERROR
    assert len(tokens) == 4


def test_lone_exclamation_is_an_error():
    tokens = pairs(Lexer("{{ a ! b }}"))
    assert error('Unexpected "!"') in tokens
    assert stream_result(lex("{{ a ! b }}")) == [VAR_BEGIN, name("a")]


def test_not_equal_operator():
    assert pairs(Lexer("{{ a != b }}")) == [
        VAR_BEGIN, SPACE, name("a"), SPACE, (T.NE, "!="), SPACE, name("b"),
        SPACE, VAR_END, EOF,
    ]


def test_keyword_prefixes_are_identifiers():
    assert stream_result(lex("{{ index or nothing }}")) == [
        VAR_BEGIN, name("index"), (T.OR, "or"), name("nothing"), VAR_END,
    ]


def test_number_followed_by_letters_is_a_name():
    assert stream_result(lex("{{ 1abc }}")) == [VAR_BEGIN, name("1abc"), VAR_END]


def test_tokens_can_be_read_twice():
    lexer = Lexer("Hi {{ name }}!")
    first = pairs(lexer.tokens())
    assert first == pairs(lexer)
    assert first == [data("Hi "), VAR_BEGIN, SPACE, name("name"), SPACE, VAR_END,
                     data("!"), EOF]


def test_trimmed_variable_delimiters():
    assert pairs(Lexer("{{- x -}}")) == [
        (T.VARIABLE_BEGIN, "{{-"), SPACE, name("x"), SPACE,
        (T.VARIABLE_END, "-}}"), EOF,
    ]