from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class SymbolDef:
    name: str
    address: int
    description: str


PREDEFINED_SYMBOLS: Dict[str, SymbolDef] = {}


def register_symbol(defn: SymbolDef) -> None:
    PREDEFINED_SYMBOLS[defn.name] = defn


def get_predefined_symbol(name: str) -> Optional[SymbolDef]:
    return PREDEFINED_SYMBOLS.get(name)


def get_predefined_symbols() -> List[SymbolDef]:
    return list(PREDEFINED_SYMBOLS.values())


register_symbol(SymbolDef("SP", 0x0000, "Stack pointer"))
register_symbol(SymbolDef("LCL", 0x0001, "Base of the current local segment"))
register_symbol(SymbolDef("ARG", 0x0002, "Base of the current argument segment"))
register_symbol(SymbolDef("THIS", 0x0003, "Base of the current this segment"))
register_symbol(SymbolDef("THAT", 0x0004, "Base of the current that segment"))
for _index in range(16):
    register_symbol(SymbolDef(f"R{_index}", _index, f"Virtual register {_index}"))
del _index
register_symbol(SymbolDef("SCREEN", 0x4000, "Base of the screen memory map"))
register_symbol(SymbolDef("KBD", 0x6000, "Keyboard memory map"))


# Ordered so that no mnemonic is shadowed by a shorter one sharing its prefix.
OPERATIONS: Dict[str, int] = {
    "D+1": 0b0011111,
    "A+1": 0b0110111,
    "M+1": 0b1110111,
    "D-1": 0b0001110,
    "A-1": 0b0110010,
    "M-1": 0b1110010,
    "D+A": 0b0000010,
    "D+M": 0b1000010,
    "D-A": 0b0010011,
    "D-M": 0b1010011,
    "A-D": 0b0000111,
    "M-D": 0b1000111,
    "D&A": 0b0000000,
    "D&M": 0b1000000,
    "D|A": 0b0010101,
    "D|M": 0b1010101,
    "0": 0b0101010,
    "1": 0b0111111,
    "-1": 0b0111010,
    "D": 0b0001100,
    "A": 0b0110000,
    "M": 0b1110000,
    "!D": 0b0001101,
    "!A": 0b0110001,
    "!M": 0b1110001,
    "-D": 0b0001111,
    "-A": 0b0110011,
    "-M": 0b1110011,
}

DESTINATION_BITS: Dict[str, int] = {"A": 0b100, "D": 0b010, "M": 0b001}

JUMPS: Dict[str, int] = {
    "JGT": 1,
    "JEQ": 2,
    "JGE": 3,
    "JLT": 4,
    "JNE": 5,
    "JLE": 6,
    "JMP": 7,
}


def destination_bits(letters: str) -> int:
    return sum(DESTINATION_BITS[letter] for letter in letters)
