from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from hackasm.assembler import assemble_source
from hackasm.model import Assembly, AssemblyError
from hackasm.parser import ParseError
from hackasm.tables import get_predefined_symbols


logger = logging.getLogger(__name__)

__version__ = "0.1.0"

AUTO_OUTPUT = "auto"


@dataclass(frozen=True)
class AssemblerOptions:
    input_path: Optional[Path]
    output_path: Optional[Path] = None
    show_symbols: bool = False
    list_defaults: bool = False
    verbose: bool = False


def _existing_file(value: str) -> Path:
    path = Path(value).expanduser()
    if not path.exists():
        raise argparse.ArgumentTypeError(f"{value}: no such file")
    if not path.is_file():
        raise argparse.ArgumentTypeError(f"{value}: input is not a valid file")
    return path


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hackasm",
        description="Translate Hack assembly into 16-bit Hack machine code.",
    )
    parser.add_argument("input", nargs="?", type=_existing_file, help="Path to the input .asm file.")
    parser.add_argument(
        "-o",
        "--output",
        help=f"Write machine code to this file instead of stdout ('{AUTO_OUTPUT}' writes <input>.hack).",
    )
    parser.add_argument(
        "-s", "--symbols", action="store_true", help="Print the resolved symbol table to stderr."
    )
    parser.add_argument(
        "--list-defaults", action="store_true", help="List the predefined symbols and exit."
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_options(argv: Optional[List[str]] = None) -> AssemblerOptions:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    if args.input is None and not args.list_defaults:
        parser.error("the following arguments are required: input")
    output_path = None
    if args.output == AUTO_OUTPUT and args.input is not None:
        output_path = args.input.with_suffix(".hack")
    elif args.output:
        output_path = Path(args.output).expanduser()
    return AssemblerOptions(
        input_path=args.input,
        output_path=output_path,
        show_symbols=args.symbols,
        list_defaults=args.list_defaults,
        verbose=args.verbose,
    )


def configure_logging(verbose: bool, console: Console) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def format_error(exc: AssemblyError) -> str:
    kind = "Parse error" if isinstance(exc, ParseError) else "Error"
    if exc.line_no:
        location = f"line {exc.line_no}"
        if isinstance(exc, ParseError):
            location += f", column {exc.column}"
        return f"{kind} ({location}): {exc.message}"
    return f"{kind}: {exc.message}"


def defaults_table() -> Table:
    table = Table(title="Predefined symbols", box=box.SIMPLE)
    table.add_column("Symbol")
    table.add_column("Address", justify="right")
    table.add_column("Hex", justify="right")
    table.add_column("Description")
    for defn in get_predefined_symbols():
        table.add_row(defn.name, str(defn.address), f"0x{defn.address:04X}", defn.description)
    return table


def symbols_table(assembly: Assembly) -> Table:
    table = Table(title="Symbol table", box=box.SIMPLE)
    table.add_column("Symbol")
    table.add_column("Address", justify="right")
    table.add_column("Hex", justify="right")
    table.add_column("Kind")
    for name, address in assembly.symbols.items():
        table.add_row(name, str(address), f"0x{address:04X}", assembly.symbol_kind(name))
    return table


def write_words(words: List[str], output_path: Optional[Path]) -> None:
    payload = "".join(f"{word}\n" for word in words)
    if output_path is None:
        sys.stdout.write(payload)
        return
    output_path.write_text(payload, encoding="utf-8")
    logger.info("Wrote %d instructions to %s", len(words), output_path)


def run(options: AssemblerOptions, console: Console) -> int:
    if options.list_defaults:
        Console().print(defaults_table())
        return 0

    if options.input_path is None:
        sys.stderr.write("Error: no input file given\n")
        return 2
    logger.debug("Reading %s", options.input_path)
    try:
        source = options.input_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        sys.stderr.write(f"Error: cannot read {options.input_path}: {exc}\n")
        return 1

    try:
        assembly = assemble_source(source)
    except AssemblyError as exc:
        sys.stderr.write(format_error(exc) + "\n")
        return 1

    try:
        write_words(assembly.words, options.output_path)
    except OSError as exc:
        sys.stderr.write(f"Error: cannot write {options.output_path}: {exc}\n")
        return 1
    if options.show_symbols:
        console.print(symbols_table(assembly))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    options = parse_options(argv)
    console = Console(stderr=True)
    configure_logging(options.verbose, console)
    return run(options, console)


if __name__ == "__main__":
    sys.exit(main())
