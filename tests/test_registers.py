import pytest

from xostools.xsm.registers import NAMES, RegisterFile
from xostools.xsm.word import NUM_REG


def test_register_count():
    regs = RegisterFile()
    assert len(regs) == NUM_REG
    assert len(regs.names()) == NUM_REG


def test_code_is_case_insensitive():
    regs = RegisterFile()
    assert regs.code("r0") == 0
    assert regs.code("ip") == NAMES.index("IP")
    assert regs.code("Ptbr") == NAMES.index("PTBR")


def test_unknown_register():
    regs = RegisterFile()
    assert regs.code("R99") is None
    assert regs.get("R99") is None
    assert regs.get_string("XYZ") is None


def test_get_returns_same_word():
    regs = RegisterFile()
    assert regs.get("sp") is regs.get("SP")


def test_int_round_trip():
    regs = RegisterFile()
    regs.store_int("R3", 42)
    assert regs.get_int("r3") == 42
    assert regs.get_string("R3") == "42"


def test_string_round_trip():
    regs = RegisterFile()
    regs.store_string("P1", "hello")
    assert regs.get_string("P1") == "hello"
    assert regs.get("P1").is_string()


def test_registers_are_independent():
    regs = RegisterFile()
    regs.store_int("R0", 1)
    regs.store_int("R1", 2)
    assert (regs.get_int("R0"), regs.get_int("R1")) == (1, 2)


def test_missing_register_raises():
    regs = RegisterFile()
    with pytest.raises(KeyError):
        regs.get_int("Q1")
    with pytest.raises(KeyError):
        regs.store_int("Q1", 1)


@pytest.mark.parametrize(
    "name, allowed",
    [
        ("R5", True),
        ("BP", True),
        ("SP", True),
        ("P0", False),
        ("P3", False),
        ("PTBR", False),
        ("EIP", True),
        ("XYZ", False),
    ],
)
def test_user_mode_allowed(name, allowed):
    assert RegisterFile().user_mode_allowed(name) is allowed