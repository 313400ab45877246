"""Step condition language.

A small, restricted boolean-expression language for declarative automation
steps. Conditions are parsed into an AST once (cached per source string) and
evaluated fresh against two names:

- ``steps``: outcomes of earlier steps, keyed by step id
- ``context``: the execution context

Supported::

    steps['s1'].result === 'ok'
    steps.s1.status == "completed" && !(context.workspace.agents.length > 3)
    'builder' in steps.s2.result.roles or steps.s3?.status != 'skipped'

Literals: numbers, quoted strings, ``true``/``false``/``null``/``undefined``
(and the Python spellings ``True``/``False``/``None``), list literals.
Operators: ``.`` ``?.`` ``[]`` member access, ``!``/``not``, unary ``-``,
``===`` ``!==`` ``==`` ``!=`` ``<`` ``<=`` ``>`` ``>=`` ``in``,
``&&``/``and``, ``||``/``or``, parentheses.

There are no calls, no assignments and no access to names starting with ``_``.
Any parse or evaluation problem raises :class:`ConditionError`.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Union

from automation_engine.errors import ConditionError, ConditionSyntaxError

_OPERATORS = (
    "===",
    "!==",
    "==",
    "!=",
    "<=",
    ">=",
    "&&",
    "||",
    "?.",
    "<",
    ">",
    "!",
    ".",
    "[",
    "]",
    "(",
    ")",
    ",",
    "-",
)

_KEYWORD_LITERALS: dict[str, Any] = {
    "true": True,
    "false": False,
    "null": None,
    "undefined": None,
    "True": True,
    "False": False,
    "None": None,
}

_COMPARISON_OPS = frozenset({"===", "!==", "==", "!=", "<", "<=", ">", ">=", "in"})


@dataclass(frozen=True, slots=True)
class Token:
    kind: str  # "number" | "string" | "ident" | "op" | "eof"
    value: Any
    pos: int


class Tokenizer:
    """Split a condition into tokens."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.length = len(text)

    def tokens(self) -> list[Token]:
        out: list[Token] = []
        while True:
            self._skip_whitespace()
            if self.pos >= self.length:
                out.append(Token("eof", None, self.pos))
                return out
            out.append(self._next())

    def _next(self) -> Token:
        char = self.text[self.pos]
        start = self.pos

        if char in "'\"":
            return Token("string", self._read_string(char), start)
        if char.isdigit() or (char == "." and self._peek(1).isdigit()):
            return Token("number", self._read_number(), start)
        if char.isalpha() or char in "_$":
            while self.pos < self.length and (
                self.text[self.pos].isalnum() or self.text[self.pos] in "_$"
            ):
                self.pos += 1
            return Token("ident", self.text[start : self.pos], start)

        for op in _OPERATORS:
            if self.text.startswith(op, self.pos):
                self.pos += len(op)
                return Token("op", op, start)

        raise ConditionSyntaxError(f"Unexpected character {char!r}", start)

    def _peek(self, offset: int) -> str:
        idx = self.pos + offset
        return self.text[idx] if idx < self.length else ""

    def _read_string(self, quote: str) -> str:
        start = self.pos
        self.pos += 1
        result: list[str] = []
        while self.pos < self.length:
            char = self.text[self.pos]
            if char == quote:
                self.pos += 1
                return "".join(result)
            if char == "\\":
                self.pos += 1
                if self.pos >= self.length:
                    break
                escaped = self.text[self.pos]
                result.append({"n": "\n", "t": "\t", "r": "\r"}.get(escaped, escaped))
            else:
                result.append(char)
            self.pos += 1
        raise ConditionSyntaxError("Unterminated string", start)

    def _read_number(self) -> int | float:
        start = self.pos
        while self.pos < self.length and (self.text[self.pos].isdigit() or self.text[self.pos] == "."):
            self.pos += 1
        if self.pos < self.length and self.text[self.pos] in "eE":
            self.pos += 1
            if self.pos < self.length and self.text[self.pos] in "+-":
                self.pos += 1
            while self.pos < self.length and self.text[self.pos].isdigit():
                self.pos += 1
        token = self.text[start : self.pos]
        try:
            if "." in token or "e" in token.lower():
                return float(token)
            return int(token)
        except ValueError:
            raise ConditionSyntaxError(f"Malformed number {token!r}", start) from None

    def _skip_whitespace(self) -> None:
        while self.pos < self.length and self.text[self.pos].isspace():
            self.pos += 1


# --- AST --------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Literal:
    value: Any


@dataclass(frozen=True, slots=True)
class Name:
    name: str


@dataclass(frozen=True, slots=True)
class Member:
    target: Node
    key: Node
    optional: bool = False


@dataclass(frozen=True, slots=True)
class ListExpr:
    items: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class Unary:
    op: str  # "!" | "-"
    operand: Node


@dataclass(frozen=True, slots=True)
class BoolOp:
    op: str  # "&&" | "||"
    left: Node
    right: Node


@dataclass(frozen=True, slots=True)
class Compare:
    op: str
    left: Node
    right: Node


Node = Union[Literal, Name, Member, ListExpr, Unary, BoolOp, Compare]


class Parser:
    """Recursive-descent parser producing a :data:`Node` tree."""

    def __init__(self, text: str) -> None:
        self.tokens = Tokenizer(text).tokens()
        self.index = 0

    def parse(self) -> Node:
        if self._current.kind == "eof":
            raise ConditionSyntaxError("Empty condition", 0)
        node = self._parse_or()
        if self._current.kind != "eof":
            raise ConditionSyntaxError(
                f"Unexpected token {self._current.value!r}", self._current.pos
            )
        return node

    @property
    def _current(self) -> Token:
        return self.tokens[self.index]

    def _advance(self) -> Token:
        token = self.tokens[self.index]
        if token.kind != "eof":
            self.index += 1
        return token

    def _at_op(self, *ops: str) -> bool:
        tok = self._current
        return tok.kind == "op" and tok.value in ops

    def _at_word(self, *words: str) -> bool:
        tok = self._current
        return tok.kind == "ident" and tok.value in words

    def _expect_op(self, op: str) -> Token:
        if not self._at_op(op):
            raise ConditionSyntaxError(
                f"Expected {op!r}, found {self._current.value!r}", self._current.pos
            )
        return self._advance()

    def _parse_or(self) -> Node:
        node = self._parse_and()
        while self._at_op("||") or self._at_word("or"):
            self._advance()
            node = BoolOp("||", node, self._parse_and())
        return node

    def _parse_and(self) -> Node:
        node = self._parse_not()
        while self._at_op("&&") or self._at_word("and"):
            self._advance()
            node = BoolOp("&&", node, self._parse_not())
        return node

    def _parse_not(self) -> Node:
        if self._at_op("!") or self._at_word("not"):
            self._advance()
            return Unary("!", self._parse_not())
        return self._parse_comparison()

    def _parse_comparison(self) -> Node:
        left = self._parse_unary()
        tok = self._current
        if (tok.kind == "op" and tok.value in _COMPARISON_OPS) or self._at_word("in"):
            self._advance()
            right = self._parse_unary()
            return Compare(tok.value, left, right)
        return left

    def _parse_unary(self) -> Node:
        if self._at_op("-"):
            self._advance()
            return Unary("-", self._parse_unary())
        return self._parse_access()

    def _parse_access(self) -> Node:
        node = self._parse_primary()
        while True:
            if self._at_op(".", "?."):
                optional = self._advance().value == "?."
                name = self._advance()
                if name.kind != "ident":
                    raise ConditionSyntaxError("Expected property name", name.pos)
                node = Member(node, Literal(name.value), optional)
            elif self._at_op("["):
                self._advance()
                key = self._parse_or()
                self._expect_op("]")
                node = Member(node, key)
            else:
                return node

    def _parse_primary(self) -> Node:
        tok = self._advance()

        if tok.kind in ("number", "string"):
            return Literal(tok.value)
        if tok.kind == "ident":
            if tok.value in _KEYWORD_LITERALS:
                return Literal(_KEYWORD_LITERALS[tok.value])
            return Name(tok.value)
        if tok.kind == "op" and tok.value == "(":
            node = self._parse_or()
            self._expect_op(")")
            return node
        if tok.kind == "op" and tok.value == "[":
            items: list[Node] = []
            if not self._at_op("]"):
                items.append(self._parse_or())
                while self._at_op(","):
                    self._advance()
                    items.append(self._parse_or())
            self._expect_op("]")
            return ListExpr(tuple(items))
        if tok.kind == "eof":
            raise ConditionSyntaxError("Unexpected end of condition", tok.pos)
        raise ConditionSyntaxError(f"Unexpected token {tok.value!r}", tok.pos)


@lru_cache(maxsize=256)
def parse_condition(source: str) -> Node:
    """Parse ``source`` into an AST. Results are cached per source string."""

    return Parser(source).parse()


# --- Evaluation -------------------------------------------------------------


def _truthy(value: Any) -> bool:
    # Empty containers are truthy, as in the scripting language conditions are
    # written in; only "nothing", false, zero, NaN and "" are falsy.
    if value is None or value is False:
        return False
    if isinstance(value, int | float) and not isinstance(value, bool):
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    if isinstance(value, str):
        return value != ""
    return True


def _equals(left: Any, right: Any) -> bool:
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return bool(left == right)


def _member(target: Any, key: Any, optional: bool) -> Any:
    if target is None:
        if optional:
            return None
        raise ConditionError(f"Cannot read property {key!r} of undefined")

    if isinstance(key, str) and key.startswith("_"):
        raise ConditionError(f"Access to private member {key!r} is not allowed")

    if isinstance(target, Mapping):
        return target.get(key)

    if isinstance(target, Sequence):
        if key == "length":
            return len(target)
        if isinstance(key, int) and not isinstance(key, bool):
            return target[key] if -len(target) <= key < len(target) else None
        if isinstance(key, float) and key.is_integer():
            return _member(target, int(key), optional)
        return None

    if not isinstance(key, str):
        raise ConditionError(f"Invalid property key {key!r}")
    if key == "length" and hasattr(target, "__len__"):
        return len(target)
    return getattr(target, key, None)


def _compare(op: str, left: Any, right: Any) -> bool:
    if op in ("===", "=="):
        return _equals(left, right)
    if op in ("!==", "!="):
        return not _equals(left, right)
    try:
        if op == "<":
            return bool(left < right)
        if op == "<=":
            return bool(left <= right)
        if op == ">":
            return bool(left > right)
        if op == ">=":
            return bool(left >= right)
        if op == "in":
            if isinstance(right, Mapping):
                return left in right.keys()
            return left in right
    except TypeError as e:
        raise ConditionError(f"Cannot apply {op!r} to {left!r} and {right!r}") from e
    raise ConditionError(f"Unknown operator {op!r}")


def _evaluate(node: Node, scope: Mapping[str, Any]) -> Any:
    if isinstance(node, Literal):
        return node.value
    if isinstance(node, Name):
        if node.name not in scope:
            raise ConditionError(f"{node.name} is not defined")
        return scope[node.name]
    if isinstance(node, Member):
        target = _evaluate(node.target, scope)
        return _member(target, _evaluate(node.key, scope), node.optional)
    if isinstance(node, ListExpr):
        return [_evaluate(item, scope) for item in node.items]
    if isinstance(node, Unary):
        value = _evaluate(node.operand, scope)
        if node.op == "!":
            return not _truthy(value)
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise ConditionError(f"Cannot negate {value!r}")
        return -value
    if isinstance(node, BoolOp):
        left = _evaluate(node.left, scope)
        if node.op == "&&":
            return _evaluate(node.right, scope) if _truthy(left) else left
        return left if _truthy(left) else _evaluate(node.right, scope)
    if isinstance(node, Compare):
        return _compare(node.op, _evaluate(node.left, scope), _evaluate(node.right, scope))
    raise ConditionError(f"Unsupported expression node {type(node).__name__}")


def evaluate_condition(source: str, *, steps: Mapping[str, Any], context: Any) -> bool:
    """Evaluate ``source`` to a boolean.

    Raises:
        ConditionError: The condition is malformed or could not be evaluated.
    """

    try:
        node = parse_condition(source)
        return _truthy(_evaluate(node, {"steps": steps, "context": context}))
    except ConditionError:
        raise
    except Exception as e:
        # Host objects may raise from properties or comparisons, and deeply
        # nested sources can exhaust the parser's recursion limit.
        raise ConditionError(str(e) or type(e).__name__) from e
