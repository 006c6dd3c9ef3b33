import pytest

from hackasm.model import AddressInstruction, ComputeInstruction, LabelDeclaration, Literal, NoOp, Symbol
from hackasm.parser import parse_assembly
from hackasm.symbols import (
    MAX_ADDRESS,
    VARIABLE_BASE,
    AddressOverflowError,
    DuplicateLabelError,
    allocate_variables,
    bind_labels,
    default_symbols,
    resolve_symbols,
)


def test_default_symbols_contain_registers_and_io_maps():
    symbols = default_symbols()
    assert len(symbols) == 23
    assert symbols["SP"] == symbols["R0"] == 0
    assert symbols["THAT"] == symbols["R4"] == 4
    assert symbols["R15"] == 15
    assert symbols["SCREEN"] == 0x4000
    assert symbols["KBD"] == 0x6000


def test_labels_bind_to_next_instruction_pointer():
    instructions = [
        NoOp(),
        LabelDeclaration("START"),
        AddressInstruction(Symbol("END")),
        ComputeInstruction(0, 0b0101010, 7),
        LabelDeclaration("MIDDLE"),
        NoOp(),
        AddressInstruction(Literal(3)),
        LabelDeclaration("END"),
    ]
    symbols = {}
    bind_labels(symbols, instructions)
    assert symbols == {"START": 0, "MIDDLE": 2, "END": 3}


def test_duplicate_label_is_rejected():
    with pytest.raises(DuplicateLabelError) as exc:
        resolve_symbols(parse_assembly("(L)\n(L)\n"))
    assert exc.value.symbol == "L"
    assert exc.value.line_no == 2
    assert "L" in exc.value.message


def test_label_shadowing_predefined_symbol_is_duplicate():
    with pytest.raises(DuplicateLabelError):
        resolve_symbols(parse_assembly("(SCREEN)\n@SCREEN\n"))


def test_variables_are_allocated_in_order_of_first_use():
    symbols = resolve_symbols(parse_assembly("@foo\n@bar\n@foo\n"))
    assert symbols["foo"] == VARIABLE_BASE == 16
    assert symbols["bar"] == 17
    assert len(symbols) == 25


def test_labels_take_priority_over_variables():
    symbols = resolve_symbols(parse_assembly("@loop\n@x\n0;JMP\n(loop)\n@x\n"))
    assert symbols["loop"] == 3
    assert symbols["x"] == 16


def test_numeric_operands_never_enter_the_table():
    symbols = resolve_symbols(parse_assembly("@5\n@32767\n"))
    assert symbols == default_symbols()


def test_out_of_range_literal_is_allocated_as_variable():
    symbols = resolve_symbols(parse_assembly("@40000\n"))
    assert symbols["40000"] == 16


def test_symbols_are_case_sensitive():
    symbols = resolve_symbols(parse_assembly("@sp\n@SP\n"))
    assert symbols["sp"] == 16
    assert symbols["SP"] == 0


def test_allocate_variables_leaves_existing_entries_untouched():
    symbols = {"known": 99}
    allocate_variables(symbols, [AddressInstruction(Symbol("known")), AddressInstruction(Symbol("new"))])
    assert symbols == {"known": 99, "new": 16}


def test_label_at_last_rom_address_is_accepted():
    instructions = [ComputeInstruction(0, 0b0101010, 0)] * MAX_ADDRESS + [LabelDeclaration("LAST")]
    symbols = {}
    bind_labels(symbols, instructions)
    assert symbols["LAST"] == 0x7FFF


def test_label_past_rom_end_is_rejected():
    instructions = [ComputeInstruction(0, 0b0101010, 0)] * (MAX_ADDRESS + 1) + [
        LabelDeclaration("FAR", line_no=32769, text="(FAR)")
    ]
    with pytest.raises(AddressOverflowError) as exc:
        bind_labels({}, instructions)
    assert exc.value.symbol == "FAR"
    assert exc.value.address == 0x8000
    assert exc.value.line_no == 32769


def test_variable_allocation_stops_at_last_ram_address():
    names = [f"v{i}" for i in range(MAX_ADDRESS - VARIABLE_BASE + 1)]
    instructions = [AddressInstruction(Symbol(name)) for name in names]
    symbols = {}
    allocate_variables(symbols, instructions)
    assert symbols[names[-1]] == 0x7FFF

    with pytest.raises(AddressOverflowError) as exc:
        allocate_variables({}, instructions + [AddressInstruction(Symbol("extra"), line_no=9)])
    assert exc.value.symbol == "extra"
    assert exc.value.line_no == 9
