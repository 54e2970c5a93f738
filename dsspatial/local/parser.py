"""Parser for serialized call expressions.

Accepts the subset of the evaluator's syntax that the serializer emits:

    call  := NAME "(" [arg ("," arg)*] ")"
    arg   := NAME | STRING | NUMBER | TRUE | FALSE | NULL | "c(" [STRING ("," STRING)*] ")"
"""

import re

from dsspatial.models.call import Argument, CallExpression, Literal, StringVector, Symbol

_TOKEN_PATTERN = re.compile(
    r"""
    (?P<ws>\s+)
    |(?P<string>'[^']*'|"[^"]*")
    |(?P<number>-?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)
    |(?P<name>(?:[A-Za-z]|\.(?![0-9]))[A-Za-z0-9._]*)
    |(?P<punct>[(),])
    """,
    re.VERBOSE,
)

_KEYWORDS: dict[str, Literal] = {
    "TRUE": Literal(True),
    "FALSE": Literal(False),
    "NULL": Literal(None),
}


def _tokenize(text: str) -> list[tuple[str, str]]:
    tokens = []
    pos = 0
    while pos < len(text):
        match = _TOKEN_PATTERN.match(text, pos)
        if match is None:
            msg = f"Unexpected character {text[pos]!r} at position {pos} in {text!r}"
            raise ValueError(msg)
        kind = match.lastgroup
        if kind != "ws":
            tokens.append((kind, match.group()))
        pos = match.end()
    return tokens


class _Parser:
    def __init__(self, text: str):
        self.text = text
        self.tokens = _tokenize(text)
        self.pos = 0

    def _peek(self) -> tuple[str, str] | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _next(self) -> tuple[str, str]:
        token = self._peek()
        if token is None:
            msg = f"Unexpected end of expression in {self.text!r}"
            raise ValueError(msg)
        self.pos += 1
        return token

    def _expect(self, value: str) -> None:
        kind, text = self._next()
        if text != value:
            msg = f"Expected {value!r} but found {text!r} in {self.text!r}"
            raise ValueError(msg)

    def parse(self) -> CallExpression:
        kind, function = self._next()
        if kind != "name":
            msg = f"Expected a function name but found {function!r} in {self.text!r}"
            raise ValueError(msg)
        args = self._arguments()
        if self._peek() is not None:
            msg = f"Trailing input after call in {self.text!r}"
            raise ValueError(msg)
        return CallExpression(function, tuple(args))

    def _arguments(self) -> list[Argument]:
        self._expect("(")
        args: list[Argument] = []
        if self._peek() == ("punct", ")"):
            self._next()
            return args
        while True:
            args.append(self._argument())
            _, text = self._next()
            if text == ")":
                return args
            if text != ",":
                msg = f"Expected ',' or ')' but found {text!r} in {self.text!r}"
                raise ValueError(msg)

    def _argument(self) -> Argument:
        kind, text = self._next()
        if kind == "string":
            return Literal(text[1:-1])
        if kind == "number":
            number = float(text)
            if number.is_integer() and re.fullmatch(r"-?\d+", text):
                return Literal(int(text))
            return Literal(number)
        if kind == "name":
            if text in _KEYWORDS:
                return _KEYWORDS[text]
            if text == "c" and self._peek() == ("punct", "("):
                return self._vector()
            return Symbol(text)
        msg = f"Unexpected token {text!r} in {self.text!r}"
        raise ValueError(msg)

    def _vector(self) -> StringVector:
        values = []
        for arg in self._arguments():
            if not isinstance(arg, Literal) or not isinstance(arg.value, str):
                msg = f"Only character vectors are supported in {self.text!r}"
                raise ValueError(msg)
            values.append(arg.value)
        return StringVector(tuple(values))


def parse_call(text: str) -> CallExpression:
    """Parse a serialized call expression.

    Args:
        text: Expression such as ``coordinatesDS(D, c('Lon','Lat'))``

    Returns:
        Structured CallExpression

    Raises:
        ValueError: If the text is not a single well-formed call
    """
    return _Parser(text).parse()
