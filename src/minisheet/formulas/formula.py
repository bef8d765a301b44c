"""Parsed formula value: an operation plus its ordered argument cells."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Op(str, Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    SUM = "sum"
    AVG = "avg"


BINARY_OPS = frozenset({Op.ADD, Op.SUB, Op.MUL, Op.DIV})
RANGE_FUNCTIONS = frozenset({Op.SUM, Op.AVG})


class Formula(BaseModel):
    """Immutable formula owned by the cell that parsed it."""

    model_config = ConfigDict(frozen=True)

    op: Op
    args: tuple[str, ...]

    def __str__(self) -> str:
        return f"op: {self.op.value}, args: {','.join(self.args)}"
