# asmparser/asm_consts.py
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional, Tuple

# Instruction format classes
R_TYPE = "R"
I_TYPE = "I"
J_TYPE = "J"

# MIPS Register Map (Name to Number)
REGISTER_MAP = {
    "$zero": 0, "$0": 0,
    "$at": 1, "$1": 1,
    "$v0": 2, "$2": 2,
    "$v1": 3, "$3": 3,
    "$a0": 4, "$4": 4,
    "$a1": 5, "$5": 5,
    "$a2": 6, "$6": 6,
    "$a3": 7, "$7": 7,
    "$t0": 8, "$8": 8,
    "$t1": 9, "$9": 9,
    "$t2": 10, "$10": 10,
    "$t3": 11, "$11": 11,
    "$t4": 12, "$12": 12,
    "$t5": 13, "$13": 13,
    "$t6": 14, "$14": 14,
    "$t7": 15, "$15": 15,
    "$s0": 16, "$16": 16,
    "$s1": 17, "$17": 17,
    "$s2": 18, "$18": 18,
    "$s3": 19, "$19": 19,
    "$s4": 20, "$20": 20,
    "$s5": 21, "$21": 21,
    "$s6": 22, "$22": 22,
    "$s7": 23, "$23": 23,
    "$t8": 24, "$24": 24,
    "$t9": 25, "$25": 25,
    "$k0": 26, "$26": 26,
    "$k1": 27, "$27": 27,
    "$gp": 28, "$28": 28,
    "$sp": 29, "$29": 29,
    "$fp": 30, "$30": 30,
    "$ra": 31, "$31": 31,
}

# --- Operand templates, by format ---
# Roles: rd/rs/rt are registers, shamt a 5-bit shift amount, imm a 16-bit
# immediate, mem an offset($base) pair, label a branch target, target a jump target.
R_TYPE_FORMATS = {
    # rd, rs, rt
    "add": [("rd", "rs", "rt")], "addu": [("rd", "rs", "rt")], "sub": [("rd", "rs", "rt")],
    "subu": [("rd", "rs", "rt")], "and": [("rd", "rs", "rt")], "or": [("rd", "rs", "rt")],
    "xor": [("rd", "rs", "rt")], "nor": [("rd", "rs", "rt")], "slt": [("rd", "rs", "rt")],
    "sltu": [("rd", "rs", "rt")],
    # rd, rt, rs
    "sllv": [("rd", "rt", "rs")], "srlv": [("rd", "rt", "rs")], "srav": [("rd", "rt", "rs")],
    # rd, rt, shamt
    "sll": [("rd", "rt", "shamt")], "srl": [("rd", "rt", "shamt")], "sra": [("rd", "rt", "shamt")],
    # rs
    "jr": [("rs",)], "mthi": [("rs",)], "mtlo": [("rs",)],
    # rd
    "mfhi": [("rd",)], "mflo": [("rd",)],
    # rs, rt
    "mult": [("rs", "rt")], "multu": [("rs", "rt")], "div": [("rs", "rt")], "divu": [("rs", "rt")],
    # jalr: rd, rs (or just rs, rd defaults to $ra)
    "jalr": [("rd", "rs"), ("rs",)],
    "syscall": [()],
    "break": [()],
}

I_TYPE_FORMATS = {
    # rt, rs, imm
    "addi": [("rt", "rs", "imm")], "addiu": [("rt", "rs", "imm")], "slti": [("rt", "rs", "imm")],
    "sltiu": [("rt", "rs", "imm")], "andi": [("rt", "rs", "imm")], "ori": [("rt", "rs", "imm")],
    "xori": [("rt", "rs", "imm")],
    # rt, imm(rs)
    "lw": [("rt", "mem")], "sw": [("rt", "mem")], "lb": [("rt", "mem")],
    "lbu": [("rt", "mem")], "lh": [("rt", "mem")], "lhu": [("rt", "mem")],
    "sb": [("rt", "mem")], "sh": [("rt", "mem")],
    # rt, imm
    "lui": [("rt", "imm")],
    # rs, rt, label
    "beq": [("rs", "rt", "label")], "bne": [("rs", "rt", "label")],
    # rs, label
    "blez": [("rs", "label")], "bgtz": [("rs", "label")], "bltz": [("rs", "label")], "bgez": [("rs", "label")],
    "bltzal": [("rs", "label")], "bgezal": [("rs", "label")],
}

J_TYPE_FORMATS = {
    "j": [("target",)], "jal": [("target",)],
}

R_TYPE_FUNCT = {
    "add": 0x20, "addu": 0x21, "sub": 0x22, "subu": 0x23,
    "and": 0x24, "or": 0x25, "xor": 0x26, "nor": 0x27,
    "slt": 0x2a, "sltu": 0x2b,
    "sll": 0x00, "srl": 0x02, "sra": 0x03,
    "sllv": 0x04, "srlv": 0x06, "srav": 0x07,
    "jr": 0x08, "jalr": 0x09,
    "syscall": 0x0c, "break": 0x0d,
    "mfhi": 0x10, "mthi": 0x11, "mflo": 0x12, "mtlo": 0x13,
    "mult": 0x18, "multu": 0x19, "div": 0x1a, "divu": 0x1b,
}

I_TYPE_OPCODE = {
    "addi": 0x8, "addiu": 0x9, "slti": 0xa, "sltiu": 0xb,
    "andi": 0xc, "ori": 0xd, "xori": 0xe, "lui": 0xf,
    "lw": 0x23, "lb": 0x20, "lh": 0x21, "lbu": 0x24, "lhu": 0x25,
    "sw": 0x2b, "sb": 0x28, "sh": 0x29,
    "beq": 0x4, "bne": 0x5,
    "blez": 0x6, "bgtz": 0x7,
    # REGIMM (opcode 0x1): rt field selects the variant
    "bltz": 0x1, "bgez": 0x1, "bltzal": 0x1, "bgezal": 0x1,
}

J_TYPE_OPCODE = {
    "j": 0x2, "jal": 0x3,
}

# Field values fixed by the mnemonic rather than by an operand
IMPLIED_FIELDS = {
    "bltz": {"rt": 0x00}, "bgez": {"rt": 0x01},
    "bltzal": {"rt": 0x10}, "bgezal": {"rt": 0x11},
    "jalr": {"rd": 31},
}


@dataclass(frozen=True)
class OpcodeDescriptor:
    mnemonic: str
    format: str
    opcode: int
    funct: int = 0
    templates: Tuple[Tuple[str, ...], ...] = ((),)
    implied: Tuple[Tuple[str, int], ...] = ()

    @property
    def arities(self):
        return sorted({len(t) for t in self.templates})

    def template_for(self, operand_count):
        """Returns the operand template with the given arity, or None."""
        for template in self.templates:
            if len(template) == operand_count:
                return template
        return None


class RegisterTable:
    """Read-only register name -> 5-bit code lookup."""

    def __init__(self, register_map=None):
        register_map = REGISTER_MAP if register_map is None else register_map
        self._codes = MappingProxyType({k.lower(): v for k, v in register_map.items()})
        names = {}
        for name, code in self._codes.items():
            # Prefer symbolic names ($t0) over numeric ones ($8)
            if code not in names or names[code][1:].isdigit():
                names[code] = name
        self._names = MappingProxyType(names)

    def lookup(self, name) -> Optional[int]:
        return self._codes.get(name.lower())

    def name_of(self, code):
        return self._names.get(code, f"${code}")

    def __contains__(self, name):
        return self.lookup(name) is not None


class OpcodeTable:
    """Read-only mnemonic -> OpcodeDescriptor lookup."""

    def __init__(self, descriptors=None):
        if descriptors is None:
            descriptors = build_mips_descriptors()
        self._descriptors = MappingProxyType({d.mnemonic: d for d in descriptors})

    def lookup(self, mnemonic) -> Optional[OpcodeDescriptor]:
        return self._descriptors.get(mnemonic.lower())

    def __contains__(self, mnemonic):
        return self.lookup(mnemonic) is not None

    def __len__(self):
        return len(self._descriptors)

    @property
    def max_operands(self):
        return max((max(d.arities) for d in self._descriptors.values()), default=0)


def build_mips_descriptors():
    descriptors = []
    for mnemonic, funct in R_TYPE_FUNCT.items():
        descriptors.append(OpcodeDescriptor(
            mnemonic, R_TYPE, 0x0, funct,
            tuple(R_TYPE_FORMATS[mnemonic]), tuple(IMPLIED_FIELDS.get(mnemonic, {}).items())))
    for mnemonic, opcode in I_TYPE_OPCODE.items():
        descriptors.append(OpcodeDescriptor(
            mnemonic, I_TYPE, opcode, 0,
            tuple(I_TYPE_FORMATS[mnemonic]), tuple(IMPLIED_FIELDS.get(mnemonic, {}).items())))
    for mnemonic, opcode in J_TYPE_OPCODE.items():
        descriptors.append(OpcodeDescriptor(
            mnemonic, J_TYPE, opcode, 0, tuple(J_TYPE_FORMATS[mnemonic])))
    return descriptors


MIPS_REGISTERS = RegisterTable()
MIPS_OPCODES = OpcodeTable()
