from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Union


SymbolTable = Dict[str, int]


class AssemblyError(Exception):
    def __init__(self, message: str, line_no: Optional[int] = None, text: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.line_no = line_no
        self.text = text


@dataclass(frozen=True)
class Literal:
    value: int


@dataclass(frozen=True)
class Symbol:
    name: str


AddressOrLabel = Union[Literal, Symbol]


@dataclass(frozen=True)
class AddressInstruction:
    operand: AddressOrLabel
    line_no: int = field(default=0, compare=False)
    text: str = field(default="", compare=False)

    occupies_slot = True


@dataclass(frozen=True)
class ComputeInstruction:
    destination: int
    operation: int
    jump: int
    line_no: int = field(default=0, compare=False)
    text: str = field(default="", compare=False)

    occupies_slot = True


@dataclass(frozen=True)
class LabelDeclaration:
    name: str
    line_no: int = field(default=0, compare=False)
    text: str = field(default="", compare=False)

    occupies_slot = False


@dataclass(frozen=True)
class NoOp:
    line_no: int = field(default=0, compare=False)
    text: str = field(default="", compare=False)

    occupies_slot = False


Instruction = Union[AddressInstruction, ComputeInstruction, LabelDeclaration, NoOp]


@dataclass
class Assembly:
    instructions: List[Instruction]
    symbols: SymbolTable
    words: List[str] = field(default_factory=list)
    predefined: Set[str] = field(default_factory=set)

    def label_names(self) -> List[str]:
        return [instr.name for instr in self.instructions if isinstance(instr, LabelDeclaration)]

    def variable_names(self) -> List[str]:
        labels = set(self.label_names())
        return [
            name
            for name in self.symbols
            if name not in labels and name not in self.predefined
        ]

    def symbol_kind(self, name: str) -> str:
        if name in self.predefined:
            return "predefined"
        if name in set(self.label_names()):
            return "label"
        return "variable"

    @property
    def slot_count(self) -> int:
        return sum(1 for instr in self.instructions if instr.occupies_slot)
