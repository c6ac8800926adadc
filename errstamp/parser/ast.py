from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass(frozen=True)
class Located:
    line: int
    column: int


class Node:
    loc: Located


class Expr(Node):
    loc: Located


class Stmt(Node):
    loc: Located


@dataclass
class Program:
    body: List[Stmt]
    filename: Optional[str] = None


# --- expressions ---


@dataclass
class Identifier(Expr):
    loc: Located
    name: str


@dataclass
class StringLiteral(Expr):
    loc: Located
    value: str
    # Source text including quotes. Synthesized literals leave this unset and
    # the printer quotes `value` itself.
    raw: Optional[str] = None


@dataclass
class NumberLiteral(Expr):
    loc: Located
    raw: str


@dataclass
class KeywordLiteral(Expr):
    """`true`, `false`, `null` and `this`."""

    loc: Located
    word: str


@dataclass
class TemplateLiteral(Expr):
    """
    Backtick string. `quasis` holds the raw text chunks (escapes untouched) and
    always has exactly one more element than `exprs`.
    """

    loc: Located
    quasis: List[str]
    exprs: List[Expr]


@dataclass
class ArrayLiteral(Expr):
    loc: Located
    elements: List[Expr]


@dataclass
class Property(Node):
    loc: Located
    key: str
    value: Expr
    shorthand: bool = False


@dataclass
class Spread(Expr):
    loc: Located
    value: Expr


@dataclass
class ObjectLiteral(Expr):
    loc: Located
    properties: List[Union[Property, Spread]]


@dataclass
class Paren(Expr):
    loc: Located
    expr: Expr


@dataclass
class Member(Expr):
    loc: Located
    obj: Expr
    prop: str


@dataclass
class Index(Expr):
    loc: Located
    obj: Expr
    index: Expr


@dataclass
class Call(Expr):
    loc: Located
    callee: Expr
    args: List[Expr]


@dataclass
class New(Expr):
    """
    `new Callee(args)`. `args` is None for the argument-less form `new Callee`,
    which is distinct from `new Callee()` (an empty list).
    """

    loc: Located
    callee: Expr
    args: Optional[List[Expr]]


@dataclass
class Unary(Expr):
    """Prefix operators, including the keyword ones (`typeof`, `await`, ...)."""

    loc: Located
    op: str
    operand: Expr


@dataclass
class Update(Expr):
    """Postfix `x++` / `x--`."""

    loc: Located
    op: str
    operand: Expr


@dataclass
class Binary(Expr):
    loc: Located
    op: str
    left: Expr
    right: Expr


@dataclass
class Conditional(Expr):
    loc: Located
    test: Expr
    consequent: Expr
    alternate: Expr


@dataclass
class Assign(Expr):
    loc: Located
    op: str
    target: Expr
    value: Expr


@dataclass
class Arrow(Expr):
    loc: Located
    params: List[str]
    body: Union["Block", Expr]
    is_async: bool = False


@dataclass
class FunctionExpr(Expr):
    loc: Located
    name: Optional[str]
    params: List[str]
    body: "Block"
    is_async: bool = False


# --- statements ---


@dataclass
class Block(Stmt):
    loc: Located
    body: List[Stmt]


@dataclass
class Declarator(Node):
    loc: Located
    name: str
    init: Optional[Expr] = None


@dataclass
class VarDecl(Stmt):
    loc: Located
    kind: str  # "const" | "let" | "var"
    declarations: List[Declarator] = field(default_factory=list)


@dataclass
class FunctionDecl(Stmt):
    loc: Located
    name: str
    params: List[str]
    body: Block
    is_async: bool = False


@dataclass
class IfStmt(Stmt):
    loc: Located
    test: Expr
    consequent: Stmt
    alternate: Optional[Stmt] = None


@dataclass
class WhileStmt(Stmt):
    loc: Located
    test: Expr
    body: Stmt


@dataclass
class TryStmt(Stmt):
    loc: Located
    block: Block
    param: Optional[str] = None
    handler: Optional[Block] = None
    finalizer: Optional[Block] = None


@dataclass
class ThrowStmt(Stmt):
    loc: Located
    value: Expr


@dataclass
class ReturnStmt(Stmt):
    loc: Located
    value: Optional[Expr] = None


@dataclass
class BreakStmt(Stmt):
    loc: Located


@dataclass
class ContinueStmt(Stmt):
    loc: Located


@dataclass
class ExprStmt(Stmt):
    loc: Located
    expr: Expr
