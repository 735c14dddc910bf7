"""Process-wide runtime data handed down by the embedding application."""

from __future__ import annotations

from typing import Any, Callable, NamedTuple, Sequence

from pydantic import BaseModel, ConfigDict, Field

NativeFunction = Callable[..., Any]


class NativeFunctionRecord(NamedTuple):
    address: str
    module_name: str
    function_name: str
    function: NativeFunction


NativeFunctionTable = Sequence[NativeFunctionRecord]


class GasCost(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    instruction_gas: int = Field(..., ge=0)
    memory_gas: int = Field(..., ge=0)


class CostTable(BaseModel):
    """Gas cost schedule for bytecode instructions and native functions."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    instruction_table: tuple[GasCost, ...] = ()
    native_table: tuple[GasCost, ...] = ()

    @classmethod
    def zero(cls) -> "CostTable":
        return cls()


__all__ = [
    "NativeFunction",
    "NativeFunctionRecord",
    "NativeFunctionTable",
    "GasCost",
    "CostTable",
]
