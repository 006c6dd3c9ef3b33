from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

from hackasm.model import (
    AddressInstruction,
    AddressOrLabel,
    AssemblyError,
    ComputeInstruction,
    Instruction,
    LabelDeclaration,
    Literal,
    NoOp,
    Symbol,
)
from hackasm.tables import JUMPS, OPERATIONS, destination_bits


logger = logging.getLogger(__name__)

MAX_LITERAL = 1 << 15


class ParseError(AssemblyError):
    def __init__(self, message: str, line_no: int, text: str, column: int = 1) -> None:
        super().__init__(message, line_no, text)
        self.column = column


NAME_PATTERN = r"[\w:$.]+"
LABEL_RE = re.compile(r"\((" + NAME_PATTERN + r")\)")
ADDRESS_RE = re.compile(r"@(" + NAME_PATTERN + r")")
DECIMAL_RE = re.compile(r"[0-9]+")
DESTINATION_RE = re.compile(r"(A?M?D?)=")
JUMP_RE = re.compile(r";(" + "|".join(JUMPS) + r")")
TRAILER_RE = re.compile(r"[ \t]*(//.*)?")
INDENT_RE = re.compile(r"[ \t]*")


def _split_lines(text: str) -> List[str]:
    lines = text.split("\n")
    # a final line break terminates the last line rather than opening a new one
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _parse_operand(token: str) -> AddressOrLabel:
    if DECIMAL_RE.fullmatch(token):
        value = int(token)
        if value < MAX_LITERAL:
            return Literal(value)
        logger.debug("operand %s is out of literal range, treating it as a symbol", token)
    return Symbol(token)


def _match_operation(line: str, pos: int) -> Optional[Tuple[str, int]]:
    for mnemonic, code in OPERATIONS.items():
        if line.startswith(mnemonic, pos):
            return mnemonic, code
    return None


def _parse_compute(line: str, pos: int, line_no: int) -> Tuple[ComputeInstruction, int]:
    destination = 0
    match = DESTINATION_RE.match(line, pos)
    if match:
        destination = destination_bits(match.group(1))
        pos = match.end()

    operation = _match_operation(line, pos)
    if operation is None:
        fragment = line[pos:].strip() or "end of line"
        raise ParseError(
            f"Expected a label, an address or a compute operation, found '{fragment}'",
            line_no,
            line,
            pos + 1,
        )
    mnemonic, code = operation
    pos += len(mnemonic)

    jump = 0
    match = JUMP_RE.match(line, pos)
    if match:
        jump = JUMPS[match.group(1)]
        pos = match.end()

    instr = ComputeInstruction(
        destination=destination,
        operation=code,
        jump=jump,
        line_no=line_no,
        text=line,
    )
    return instr, pos


def _parse_line(line: str, line_no: int) -> Instruction:
    pos = INDENT_RE.match(line).end()
    if pos == len(line) or line.startswith("//", pos):
        return NoOp(line_no=line_no, text=line)

    instr: Instruction
    match = LABEL_RE.match(line, pos)
    if match:
        instr = LabelDeclaration(match.group(1), line_no=line_no, text=line)
        pos = match.end()
    else:
        match = ADDRESS_RE.match(line, pos)
        if match:
            instr = AddressInstruction(_parse_operand(match.group(1)), line_no=line_no, text=line)
            pos = match.end()
        else:
            instr, pos = _parse_compute(line, pos, line_no)

    if TRAILER_RE.fullmatch(line, pos) is None:
        raise ParseError(
            f"Expected end of line after instruction, found '{line[pos:].strip()}'",
            line_no,
            line,
            pos + 1,
        )
    return instr


def parse_assembly(text: str) -> List[Instruction]:
    instructions: List[Instruction] = []
    for idx, raw_line in enumerate(_split_lines(text), start=1):
        instructions.append(_parse_line(raw_line, idx))
    logger.debug(
        "parsed %d lines into %d instructions",
        len(instructions),
        sum(1 for instr in instructions if instr.occupies_slot),
    )
    return instructions
