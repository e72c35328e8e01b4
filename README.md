# tmplparse

`tmplparse` reads Jinja-style templates and turns them into a syntax tree.
It gives you the tokens and the nodes, so that you can inspect, check or
render templates yourself.

Supported syntax:

- `{{ expression }}` output, with an optional inline `if ... else ...`
- `{% name args %}` statement blocks, parsed by statement parsers you register
- `{# comment #}` comments
- `-` trim markers on every delimiter (`{{-`, `-%}` and so on)

## Installation

```
pip install .
```

Add the `test` extra to get the test tools as well:

```
pip install ".[test]"
```

## Parsing a template

```python
from tmplparse.parser import parse
from tmplparse import nodes

template = parse("Hello {{ user.name|upper if user else 'stranger' }}!")
for node in template.nodes:
    print(type(node).__name__)        # Data, Output, Data

output = template.nodes[1]
assert isinstance(output, nodes.Output)
assert isinstance(output.expression, nodes.FilteredExpression)
```

Operators bind in this order, from loosest to tightest:

1. `or`
2. `and`
3. `not`
4. comparisons (`==`, `!=`, `<`, `<=`, `>`, `>=`) and `in`
5. `+` and `-`
6. `~`
7. `*`, `/`, `//` and `%`
8. unary `+` and `-`
9. `**`

Literals (strings, integers, floats, `true`/`True`, `false`/`False`,
`None`/`nil`), names, attribute access (`a.b`, `a.0`), indexing (`a["k"]`),
calls (`f(1, x=2)`), lists, tuples and dicts are supported. Filters are
written as `value|filter(args)`. Tests are written as `value is test arg` or
`value is not test`.

Syntax errors raise `tmplparse.cursor.TemplateSyntaxError`. When the
offending token is known, the message gives its line, column and value, and
the exception exposes `token`, `line` and `col`.

## Statements

`tmplparse.parser.parse` registers no statements, so any `{% ... %}` tag
raises `TemplateSyntaxError` there. To handle statements, build a `Parser`
with a mapping from statement names to parser functions. Each function
receives the template parser and a second `Parser` over the block's own
arguments, and returns the object stored in `StatementBlock.stmt`. To collect
the body up to a closing tag, call `Parser.wrap_until("endname")`; it returns
the `Wrapper` node and a `Parser` over the closing tag's arguments.

```python
from tmplparse.lexer import LexerConfig, lex
from tmplparse.parser import Parser

def parse_if(parser, args):
    condition = args.parse_expression()
    body, _ = parser.wrap_until("endif")
    return condition, body

config = LexerConfig()
parser = Parser("page", lex("{% if x %}yes{% endif %}", config), config,
                {"if": parse_if})
template = parser.parse()
block = template.nodes[0]          # a StatementBlock named "if"
```

## Tokens only

```python
from tmplparse.lexer import Lexer, LexerConfig, lex

for token in Lexer("{{ a + 1 }}", LexerConfig()):
    print(token)

stream = lex("{% if x %}yes{% endif %}")
```

`LexerConfig` sets the delimiters; for example `[[ ]]`, `[% %]` and `[# #]`
can replace the default braces. `TokenStream` (in `tmplparse.stream`) skips
whitespace tokens, offers one token of lookahead and one step of backup.
`tmplparse.tokens.readable_position` turns an offset into a line and column.

## Helpers

- `tmplparse.text`: `escape`, `iri_encode` and `ellipsis`
- `tmplparse.lorem`: `lorem` (predictable text) and `lipsum` (random
  paragraphs)

## What it does not do

`tmplparse` does not render templates, evaluate expressions, load template
files or provide built-in statements, filters or tests. It stops at the
syntax tree.

## Running the tests

```
pytest
```