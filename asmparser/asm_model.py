# asmparser/asm_model.py
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Tuple, Union

from asmparser.asm_consts import OpcodeDescriptor


@dataclass(frozen=True)
class Register:
    number: int
    name: str

    def render(self) -> str:
        return self.name


@dataclass(frozen=True)
class Immediate:
    value: int

    def render(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class LabelRef:
    name: str
    resolved: Optional[int] = None  # displacement for branches, address for jumps

    def render(self) -> str:
        return self.name


@dataclass(frozen=True)
class BaseOffset:
    offset: int
    base: Register

    def render(self) -> str:
        return f"{self.offset}({self.base.name})"


Operand = Union[Register, Immediate, LabelRef, BaseOffset]


@dataclass(frozen=True)
class TokenizedLine:
    line_num: int
    text: str
    label: Optional[str] = None
    mnemonic: Optional[str] = None
    operands: Tuple[str, ...] = ()

    @property
    def is_label_only(self):
        return self.mnemonic is None


@dataclass(frozen=True)
class Instruction:
    """One assembled statement.

    ``operands`` pairs each operand with the template role it fills
    (rd, rs, rt, shamt, imm, mem, label, target). ``address`` is the
    statement's position in the program, counted in instructions.
    """
    descriptor: OpcodeDescriptor
    operands: Tuple[Tuple[str, Operand], ...]
    address: int
    line_num: int = 0
    text: str = ""
    label: Optional[str] = None
    encoding: Optional[str] = None

    @property
    def mnemonic(self):
        return self.descriptor.mnemonic

    @property
    def format(self):
        return self.descriptor.format

    def operand(self, role):
        for operand_role, operand in self.operands:
            if operand_role == role:
                return operand
        return None

    @property
    def is_resolved(self):
        return all(not isinstance(op, LabelRef) or op.resolved is not None
                   for _, op in self.operands)

    def with_operands(self, operands) -> Instruction:
        return replace(self, operands=tuple(operands))

    def with_encoding(self, encoding) -> Instruction:
        return replace(self, encoding=encoding)

    def assembly_line(self):
        """Canonical re-rendering: lowercase mnemonic, ', ' between operands."""
        if not self.operands:
            return self.mnemonic
        return f"{self.mnemonic} " + ", ".join(op.render() for _, op in self.operands)

    def __str__(self):
        return self.assembly_line()
