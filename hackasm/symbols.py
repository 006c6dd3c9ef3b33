from __future__ import annotations

import logging
from typing import Iterable

from hackasm.model import AddressInstruction, AssemblyError, Instruction, LabelDeclaration, Symbol, SymbolTable
from hackasm.tables import get_predefined_symbols


logger = logging.getLogger(__name__)

VARIABLE_BASE = 0x0010
MAX_ADDRESS = 0x7FFF


class DuplicateLabelError(AssemblyError):
    def __init__(self, symbol: str, line_no: int, text: str) -> None:
        super().__init__(f"Duplicate label: {symbol} is already defined", line_no, text)
        self.symbol = symbol


class AddressOverflowError(AssemblyError):
    def __init__(self, symbol: str, address: int, line_no: int, text: str) -> None:
        super().__init__(
            f"Address overflow: {symbol} would be placed at {address}, above 0x{MAX_ADDRESS:04X}",
            line_no,
            text,
        )
        self.symbol = symbol
        self.address = address


def default_symbols() -> SymbolTable:
    return {defn.name: defn.address for defn in get_predefined_symbols()}


def bind_labels(symbols: SymbolTable, instructions: Iterable[Instruction]) -> None:
    """Bind every label declaration to the address of the instruction that follows it."""
    instruction_pointer = 0
    for instr in instructions:
        if isinstance(instr, LabelDeclaration):
            if instr.name in symbols:
                raise DuplicateLabelError(instr.name, instr.line_no, instr.text)
            if instruction_pointer > MAX_ADDRESS:
                raise AddressOverflowError(instr.name, instruction_pointer, instr.line_no, instr.text)
            symbols[instr.name] = instruction_pointer
            logger.debug("label %s -> %d", instr.name, instruction_pointer)
        elif instr.occupies_slot:
            instruction_pointer += 1


def allocate_variables(symbols: SymbolTable, instructions: Iterable[Instruction]) -> None:
    """Give each unknown symbolic operand the next free RAM address, starting at 16."""
    next_address = VARIABLE_BASE
    for instr in instructions:
        if not isinstance(instr, AddressInstruction) or not isinstance(instr.operand, Symbol):
            continue
        name = instr.operand.name
        if name in symbols:
            continue
        if next_address > MAX_ADDRESS:
            raise AddressOverflowError(name, next_address, instr.line_no, instr.text)
        symbols[name] = next_address
        logger.debug("variable %s -> %d", name, next_address)
        next_address += 1


def resolve_symbols(instructions: Iterable[Instruction]) -> SymbolTable:
    instructions = list(instructions)
    symbols = default_symbols()
    bind_labels(symbols, instructions)
    allocate_variables(symbols, instructions)
    return symbols
