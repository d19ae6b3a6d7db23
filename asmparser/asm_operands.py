# asmparser/asm_operands.py
import re
import logging

from asmparser.asm_errors import ArityError, OperandKindError, RangeError, UnknownOpcodeError
from asmparser.asm_model import BaseOffset, Immediate, Instruction, LabelRef, Register
from asmparser.asm_tokenizer import LABEL_NAME_RE

logger = logging.getLogger(__name__)

IMM_BITS = 16
SHAMT_BITS = 5
TARGET_BITS = 26

REGISTER_ROLES = ("rd", "rs", "rt")
NUMBER_RE = re.compile(r'[+-]?[0-9]+')
MEM_OPERAND_RE = re.compile(r'([^()]*)\(([^()]+)\)')


def is_number_string(s):
    """True if s is a signed decimal integer: optional sign, then digits only."""
    return bool(NUMBER_RE.fullmatch(s))


def cvt_num_string_to_number(s):
    """Converts a string like '-231' to -231. Assumes is_number_string(s)."""
    return int(s, 10)


def significant_digits(s):
    return len(s.lstrip("+-").lstrip("0"))


def field_range(bits, signed=True):
    if signed:
        return -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    return 0, (1 << bits) - 1


def _range_error(bits, signed, line_num, token, text, what):
    min_val, max_val = field_range(bits, signed)
    kind = "signed" if signed else "unsigned"
    return RangeError(f"{what} '{token}' out of range for {bits}-bit {kind} value ({min_val} to {max_val})",
                      line_num, token, text)


def check_range(value, bits, signed, line_num, token, text, what="Immediate"):
    min_val, max_val = field_range(bits, signed)
    if not (min_val <= value <= max_val):
        raise _range_error(bits, signed, line_num, token, text, what)
    return value


def parse_number(num_str, bits, signed, line_num, text, what="Immediate"):
    """Converts a decimal literal and range-checks it against a bits-wide field."""
    # Literals longer than the widest field bound never reach int()
    if significant_digits(num_str) > len(str(1 << bits)):
        raise _range_error(bits, signed, line_num, num_str, text, what)
    return check_range(cvt_num_string_to_number(num_str), bits, signed, line_num, num_str, text, what)


class OperandBinder:
    """Turns raw operand strings into the typed operands of an Instruction."""

    def __init__(self, registers, opcodes):
        self.registers = registers
        self.opcodes = opcodes

    def bind(self, tokens, address):
        line_num, text = tokens.line_num, tokens.text
        descriptor = self.opcodes.lookup(tokens.mnemonic)
        if descriptor is None:
            raise UnknownOpcodeError(f"Unknown instruction: '{tokens.mnemonic}'",
                                     line_num, tokens.mnemonic, text)

        template = descriptor.template_for(len(tokens.operands))
        if template is None:
            expected = " or ".join(str(n) for n in descriptor.arities)
            raise ArityError(f"Incorrect operand count for '{descriptor.mnemonic}'. "
                             f"Expected {expected}, got {len(tokens.operands)}.",
                             line_num, tokens.mnemonic, text)

        operands = []
        for role, op_str in zip(template, tokens.operands):
            operands.append((role, self._bind_operand(role, op_str, line_num, text)))

        instruction = Instruction(descriptor, tuple(operands), address, line_num, text, tokens.label)
        logger.debug(f"Bound line {line_num} at address {address}: {instruction}")
        return instruction

    def _bind_operand(self, role, op_str, line_num, text):
        if role in REGISTER_ROLES:
            return self._parse_register(op_str, line_num, text)
        if role == "shamt":
            return Immediate(self._parse_immediate(op_str, line_num, text, bits=SHAMT_BITS, signed=False))
        if role == "imm":
            return Immediate(self._parse_immediate(op_str, line_num, text, bits=IMM_BITS, signed=True))
        if role == "mem":
            return self._parse_memory_operand(op_str, line_num, text)
        if role == "label":
            return self._parse_target(op_str, line_num, text, bits=IMM_BITS, signed=True)
        if role == "target":
            return self._parse_target(op_str, line_num, text, bits=TARGET_BITS, signed=False)
        raise ValueError(f"Unknown operand role '{role}'")

    def _parse_register(self, reg_str, line_num, text):
        """Converts register name ($t0, $3, etc.) to a Register operand."""
        code = self.registers.lookup(reg_str)
        if code is None:
            if is_number_string(reg_str):
                raise OperandKindError(f"Expected a register, got immediate '{reg_str}'", line_num, reg_str, text)
            raise OperandKindError(f"Invalid register name: '{reg_str}'", line_num, reg_str, text)
        return Register(code, self.registers.name_of(code))

    def _parse_immediate(self, imm_str, line_num, text, bits=IMM_BITS, signed=True):
        if not is_number_string(imm_str):
            if imm_str in self.registers:
                raise OperandKindError(f"Expected an immediate, got register '{imm_str}'", line_num, imm_str, text)
            raise OperandKindError(f"Invalid immediate value: '{imm_str}'", line_num, imm_str, text)
        return parse_number(imm_str, bits, signed, line_num, text)

    def _parse_memory_operand(self, operand_str, line_num, text):
        """Parses 'offset($register)' into a BaseOffset."""
        match = MEM_OPERAND_RE.fullmatch(operand_str)
        if not match:
            raise OperandKindError(f"Invalid memory operand format: '{operand_str}'. Expected 'offset($reg)'.",
                                   line_num, operand_str, text)
        offset_str, reg_str = match.groups()
        if not is_number_string(offset_str):
            raise OperandKindError(f"Invalid memory offset '{offset_str}' in '{operand_str}'",
                                   line_num, offset_str, text)
        offset = parse_number(offset_str, IMM_BITS, True, line_num, text, what="Offset")
        return BaseOffset(offset, self._parse_register(reg_str, line_num, text))

    def _parse_target(self, target_str, line_num, text, bits, signed):
        """Branch or jump target: a label name, or a literal displacement/address."""
        if is_number_string(target_str):
            value = parse_number(target_str, bits, signed, line_num, text, what="Target")
            return Immediate(value)
        if target_str in self.registers:
            raise OperandKindError(f"Expected a label, got register '{target_str}'", line_num, target_str, text)
        if not LABEL_NAME_RE.fullmatch(target_str):
            raise OperandKindError(f"Invalid label reference: '{target_str}'", line_num, target_str, text)
        return LabelRef(target_str)
