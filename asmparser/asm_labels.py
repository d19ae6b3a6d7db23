# asmparser/asm_labels.py
import logging
from types import MappingProxyType

from asmparser.asm_errors import DuplicateLabelError, UndefinedLabelError
from asmparser.asm_model import LabelRef
from asmparser.asm_operands import IMM_BITS, TARGET_BITS, check_range

logger = logging.getLogger(__name__)


class LabelResolver:
    """Collects label definitions during the first pass.

    Addresses are instruction positions: a label names the address of the
    next instruction to be assembled.
    """

    def __init__(self):
        self._labels = {}

    def define(self, name, address, line_num=None, text=""):
        if name in self._labels:
            raise DuplicateLabelError(f"Duplicate label definition: {name}", line_num, name, text)
        self._labels[name] = address
        logger.debug(f"Pass 1: Label '{name}' defined at address {address}")

    def __contains__(self, name):
        return name in self._labels

    def freeze(self):
        """Read-only snapshot of the label table, handed to the second pass."""
        return MappingProxyType(dict(self._labels))


def resolve_labels(instruction, labels):
    """Returns a copy of instruction with every label reference resolved.

    Branch targets ("label" role) become a displacement relative to the
    following instruction; jump targets ("target" role) an absolute address.
    """
    resolved_ops = []
    for role, op in instruction.operands:
        if isinstance(op, LabelRef) and op.resolved is None:
            if op.name not in labels:
                raise UndefinedLabelError(f"Undefined label: '{op.name}'",
                                          instruction.line_num, op.name, instruction.text)
            target_addr = labels[op.name]
            if role == "label":
                value = target_addr - (instruction.address + 1)
                check_range(value, IMM_BITS, True, instruction.line_num, op.name, instruction.text,
                            what="Branch target")
                logger.debug(f"Branch '{instruction.mnemonic}' to '{op.name}' ({target_addr}) "
                             f"from {instruction.address}. Displacement = {value}")
            else:
                value = check_range(target_addr, TARGET_BITS, False, instruction.line_num, op.name,
                                    instruction.text, what="Jump target")
                logger.debug(f"Jump '{instruction.mnemonic}' to '{op.name}' at address {value}")
            op = LabelRef(op.name, value)
        resolved_ops.append((role, op))
    return instruction.with_operands(resolved_ops)
