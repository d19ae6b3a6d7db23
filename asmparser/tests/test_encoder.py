# asmparser/tests/test_encoder.py
import pytest
from asmparser.asm_consts import MIPS_OPCODES
from asmparser.asm_encoder import binary_to_hex, encode, to_binary
from asmparser.asm_model import BaseOffset, Immediate, Instruction, LabelRef, Register


def make(mnemonic, *operands, address=0):
    return Instruction(MIPS_OPCODES.lookup(mnemonic), tuple(operands), address)


T0, T1, T2, SP = Register(8, "$t0"), Register(9, "$t1"), Register(10, "$t2"), Register(29, "$sp")


def test_to_binary_twos_complement():
    assert to_binary(5, 6) == "000101"
    assert to_binary(-1, 16) == "1" * 16
    assert to_binary(-32768, 16) == "1" + "0" * 15
    assert to_binary(31, 5) == "11111"


def test_binary_to_hex():
    assert binary_to_hex("0" * 32) == "0x00000000"
    assert binary_to_hex("00100000000010000000000001100100") == "0x20080064"


def test_encode_r_type_field_order():
    encoding = encode(make("sub", ("rd", T0), ("rs", T1), ("rt", T2)))
    # opcode | rs | rt | rd | shamt | funct
    assert encoding == "000000" "01001" "01010" "01000" "00000" "100010"


def test_encode_r_type_shift_amount():
    encoding = encode(make("sll", ("rd", T0), ("rt", T1), ("shamt", Immediate(2))))
    assert encoding == "000000" "00000" "01001" "01000" "00010" "000000"


def test_encode_i_type_memory_operand():
    encoding = encode(make("lw", ("rt", T0), ("mem", BaseOffset(-4, SP))))
    assert encoding == "100011" "11101" "01000" "1111111111111100"


def test_encode_i_type_resolved_branch():
    encoding = encode(make("bne", ("rs", T0), ("rt", T1), ("label", LabelRef("top", -3))))
    assert encoding == "000101" "01000" "01001" "1111111111111101"


def test_encode_regimm_variant_uses_implied_rt():
    encoding = encode(make("bgezal", ("rs", T0), ("label", Immediate(1))))
    assert encoding == "000001" "01000" "10001" "0000000000000001"


def test_encode_j_type():
    encoding = encode(make("jal", ("target", LabelRef("func", 0x3ffffff))))
    assert encoding == "000011" + "1" * 26


def test_encode_rejects_unresolved_label():
    with pytest.raises(ValueError):
        encode(make("j", ("target", LabelRef("nowhere"))))


@pytest.mark.parametrize("mnemonic", ["add", "addi", "j", "lw", "beq", "syscall", "jalr"])
def test_encodings_are_32_bits(mnemonic):
    descriptor = MIPS_OPCODES.lookup(mnemonic)
    operands = []
    for role in descriptor.templates[0]:
        if role in ("rd", "rs", "rt"):
            operands.append((role, T0))
        elif role == "mem":
            operands.append((role, BaseOffset(0, SP)))
        else:
            operands.append((role, Immediate(1)))
    encoding = encode(Instruction(descriptor, tuple(operands), 0))
    assert len(encoding) == 32
    assert set(encoding) <= {"0", "1"}
