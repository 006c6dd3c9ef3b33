from __future__ import annotations

import logging
from typing import Iterable, List, Mapping, Optional

from hackasm.model import AddressInstruction, ComputeInstruction, Instruction, Literal


logger = logging.getLogger(__name__)

WORD_BITS = 16
COMPUTE_PREFIX = 0b111


class UnresolvedSymbolError(RuntimeError):
    def __init__(self, symbol: str, line_no: int = 0) -> None:
        super().__init__(f"Symbol {symbol} was not resolved before encoding (line {line_no})")
        self.symbol = symbol
        self.line_no = line_no


def format_word(value: int) -> str:
    if not 0 <= value < (1 << WORD_BITS):
        raise ValueError(f"{value} does not fit in a {WORD_BITS}-bit word")
    return f"{value:0{WORD_BITS}b}"


def encode_instruction(instr: Instruction, symbols: Mapping[str, int]) -> Optional[int]:
    if isinstance(instr, AddressInstruction):
        operand = instr.operand
        if isinstance(operand, Literal):
            return operand.value
        try:
            return symbols[operand.name]
        except KeyError:
            raise UnresolvedSymbolError(operand.name, instr.line_no) from None
    if isinstance(instr, ComputeInstruction):
        word = COMPUTE_PREFIX
        word = (word << 7) | instr.operation
        word = (word << 3) | instr.destination
        word = (word << 3) | instr.jump
        return word
    return None


def encode_program(instructions: Iterable[Instruction], symbols: Mapping[str, int]) -> List[str]:
    words: List[str] = []
    for instr in instructions:
        value = encode_instruction(instr, symbols)
        if value is not None:
            words.append(format_word(value))
    logger.debug("encoded %d machine words", len(words))
    return words
