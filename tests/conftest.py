import re

import pytest

from motioncast.cursor.telemetry import Trajectory

_TOKEN = re.compile(r"\s*(?:(\d+(?:\.\d*)?|\.\d+)|([A-Za-z_]\w*)|(.))")


def _tokenize(text):
    tokens = []
    for number, name, op in _TOKEN.findall(text):
        if number:
            tokens.append(("num", float(number)))
        elif name:
            tokens.append(("name", name))
        elif op.strip():
            tokens.append(("op", op))
    tokens.append(("end", None))
    return tokens


class _Evaluator:
    """Recursive-descent evaluator for the overlay/zoompan expression subset."""

    FUNCTIONS = {
        "if": lambda c, a, b: a if c else b,
        "lt": lambda a, b: 1.0 if a < b else 0.0,
        "between": lambda v, lo, hi: 1.0 if lo <= v <= hi else 0.0,
    }

    def __init__(self, text, variables):
        self.tokens = _tokenize(text)
        self.pos = 0
        self.variables = variables

    def peek(self):
        return self.tokens[self.pos]

    def take(self, kind=None, value=None):
        token = self.tokens[self.pos]
        if kind and token[0] != kind or value is not None and token[1] != value:
            raise SyntaxError(f"unexpected {token!r} at {self.pos}")
        self.pos += 1
        return token

    def parse(self):
        value = self.expr()
        self.take("end")
        return value

    def expr(self):
        value = self.term()
        while self.peek() in (("op", "+"), ("op", "-")):
            op = self.take()[1]
            rhs = self.term()
            value = value + rhs if op == "+" else value - rhs
        return value

    def term(self):
        value = self.unary()
        while self.peek() in (("op", "*"), ("op", "/")):
            op = self.take()[1]
            rhs = self.unary()
            value = value * rhs if op == "*" else value / rhs
        return value

    def unary(self):
        if self.peek() == ("op", "-"):
            self.take()
            return -self.unary()
        return self.atom()

    def atom(self):
        kind, value = self.take()
        if kind == "num":
            return value
        if kind == "op" and value == "(":
            inner = self.expr()
            self.take("op", ")")
            return inner
        if kind == "name":
            if self.peek() == ("op", "("):
                self.take()
                args = [self.expr()]
                while self.peek() == ("op", ","):
                    self.take()
                    args.append(self.expr())
                self.take("op", ")")
                return self.FUNCTIONS[value](*args)
            return self.variables[value]
        raise SyntaxError(f"unexpected {value!r}")


@pytest.fixture
def evaluate():
    """evaluate(expr, t=..., n=...) -> float"""

    def _evaluate(text, **variables):
        return _Evaluator(text, variables).parse()

    return _evaluate


@pytest.fixture
def three_point_trajectory():
    return Trajectory.from_points([(0, 0, 0), (100, 0, 500), (100, 100, 1000)])
