from pathlib import Path

import pytest

from hackasm import tables


@pytest.fixture(autouse=True)
def _restore_predefined_symbols():
    saved = dict(tables.PREDEFINED_SYMBOLS)
    yield
    tables.PREDEFINED_SYMBOLS.clear()
    tables.PREDEFINED_SYMBOLS.update(saved)


@pytest.fixture
def write_asm(tmp_path: Path):
    def _write(text: str, name: str = "Prog.asm") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
