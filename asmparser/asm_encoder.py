# asmparser/asm_encoder.py
import logging

from asmparser.asm_consts import I_TYPE, J_TYPE, R_TYPE
from asmparser.asm_model import BaseOffset, Immediate, LabelRef, Register

logger = logging.getLogger(__name__)

WORD_BITS = 32


def to_binary(value, width):
    """Two's-complement bit string of value over exactly width bits."""
    return format(value & ((1 << width) - 1), f"0{width}b")


def binary_to_hex(bits):
    return f"0x{int(bits, 2):0{len(bits) // 4}x}"


def _field_values(instruction):
    """Collects rs/rt/rd/shamt/imm/target from the operands and implied fields."""
    vals = dict(instruction.descriptor.implied)
    for role, op in instruction.operands:
        if isinstance(op, Register):
            vals[role] = op.number
        elif isinstance(op, BaseOffset):
            vals["imm"] = op.offset
            vals["rs"] = op.base.number
        elif isinstance(op, LabelRef):
            if op.resolved is None:
                raise ValueError(f"Unresolved label '{op.name}' reached the encoder")
            vals["imm" if role == "label" else "target"] = op.resolved
        elif isinstance(op, Immediate):
            vals["imm" if role == "label" else role] = op.value
    return vals


def encode_r_type(instruction):
    vals = _field_values(instruction)
    # Format: opcode(6) rs(5) rt(5) rd(5) shamt(5) funct(6)
    return (to_binary(instruction.descriptor.opcode, 6)
            + to_binary(vals.get("rs", 0), 5)
            + to_binary(vals.get("rt", 0), 5)
            + to_binary(vals.get("rd", 0), 5)
            + to_binary(vals.get("shamt", 0), 5)
            + to_binary(instruction.descriptor.funct, 6))


def encode_i_type(instruction):
    vals = _field_values(instruction)
    # Format: opcode(6) rs(5) rt(5) immediate(16)
    return (to_binary(instruction.descriptor.opcode, 6)
            + to_binary(vals.get("rs", 0), 5)
            + to_binary(vals.get("rt", 0), 5)
            + to_binary(vals.get("imm", 0), 16))


def encode_j_type(instruction):
    vals = _field_values(instruction)
    # Format: opcode(6) address(26)
    return to_binary(instruction.descriptor.opcode, 6) + to_binary(vals.get("target", 0), 26)


ENCODERS = {
    R_TYPE: encode_r_type,
    I_TYPE: encode_i_type,
    J_TYPE: encode_j_type,
}


def encode(instruction):
    """Returns the 32-character binary encoding of a bound, resolved instruction."""
    encoding = ENCODERS[instruction.format](instruction)
    logger.debug(f"Encoded '{instruction}' at {instruction.address} as {encoding}")
    return encoding
