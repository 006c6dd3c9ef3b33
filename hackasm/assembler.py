from __future__ import annotations

import logging
from typing import List

from hackasm.encoder import encode_program
from hackasm.model import Assembly
from hackasm.parser import parse_assembly
from hackasm.symbols import resolve_symbols
from hackasm.tables import PREDEFINED_SYMBOLS


logger = logging.getLogger(__name__)


def assemble_source(text: str) -> Assembly:
    """Run the parse, resolve and encode stages over a whole source text.

    Raises the first ParseError or DuplicateLabelError encountered; nothing is
    encoded unless every earlier stage succeeded.
    """
    instructions = parse_assembly(text)
    symbols = resolve_symbols(instructions)
    logger.debug("resolved %d symbols", len(symbols))
    words = encode_program(instructions, symbols)
    return Assembly(
        instructions=instructions,
        symbols=symbols,
        words=words,
        predefined=set(PREDEFINED_SYMBOLS),
    )


def assemble(text: str) -> List[str]:
    return assemble_source(text).words
