# asmparser/asm_parser.py
"""Two-pass MIPS assembler.

The Assembler reads a sequence of assembly lines, checks their syntax and
keeps one encoded Instruction per statement. The first pass tokenizes each
line, binds operands and records label addresses; the second pass resolves
label references against the frozen label table and encodes every
instruction to a 32-bit binary string.

Errors never abort the run: each failing line is recorded in ``errors`` and
``is_format_correct()`` turns false for the whole file.
"""
import logging
from types import MappingProxyType

from asmparser.asm_consts import MIPS_OPCODES, MIPS_REGISTERS
from asmparser.asm_encoder import binary_to_hex, encode
from asmparser.asm_errors import AssemblerError
from asmparser.asm_labels import LabelResolver, resolve_labels
from asmparser.asm_operands import OperandBinder
from asmparser.asm_tokenizer import get_tokens

logger = logging.getLogger(__name__)


class Assembler:
    def __init__(self, lines=(), registers=None, opcodes=None):
        self.registers = MIPS_REGISTERS if registers is None else registers
        self.opcodes = MIPS_OPCODES if opcodes is None else opcodes
        self.binder = OperandBinder(self.registers, self.opcodes)
        self.state = "idle"  # idle, pass1, pass2, done, failed
        self.labels = MappingProxyType({})
        self.errors = []
        self._instructions = []  # encoded Instructions, program order
        self._assembly_lines = {}  # encoding -> canonical assembly line
        self._index = 0
        self._format_correct = True
        if isinstance(lines, str):
            lines = lines.splitlines()
        self.assemble(lines)

    @classmethod
    def from_file(cls, filename, **kwargs):
        """Assembles a text file of MIPS assembly instructions."""
        with open(filename, encoding="utf-8") as f:
            return cls(f.read().splitlines(), **kwargs)

    def _add_error(self, error):
        """Records an error, preventing duplicates for the same line/message."""
        self._format_correct = False
        if any(err['line'] == error.line_num and err['message'] == error.message for err in self.errors):
            return
        logger.warning(f"{error.__class__.__name__}: {error} ('{error.text.strip()}')")
        self.errors.append(error.to_dict())

    def first_pass(self, lines):
        """Pass 1: tokenize, bind operands and build the label table.

        Returns the bound (unresolved) instructions.
        """
        self.state = "pass1"
        logger.debug("--- Starting First Pass ---")
        resolver = LabelResolver()
        bound = []
        address = 0
        for i, line in enumerate(lines):
            line_num = i + 1
            try:
                tokens = get_tokens(line, line_num, self.opcodes.max_operands)
            except AssemblerError as e:
                self._add_error(e)
                # The label still names this position so references to it resolve
                if e.label is not None:
                    try:
                        resolver.define(e.label, address, line_num, e.text)
                    except AssemblerError as dup:
                        self._add_error(dup)
                continue
            if tokens is None:
                continue

            if tokens.label is not None:
                try:
                    resolver.define(tokens.label, address, line_num, tokens.text)
                except AssemblerError as e:
                    self._add_error(e)
            if tokens.is_label_only:
                continue

            # A statement takes its address even when binding fails, so
            # later labels keep their positions.
            try:
                bound.append(self.binder.bind(tokens, address))
            except AssemblerError as e:
                self._add_error(e)
            address += 1

        self.labels = resolver.freeze()
        logger.debug(f"--- First Pass Complete: {address} statements, {len(self.labels)} labels ---")
        return bound

    def second_pass(self, bound):
        """Pass 2: resolve label references and encode."""
        self.state = "pass2"
        logger.debug("--- Starting Second Pass ---")
        for instruction in bound:
            try:
                resolved = resolve_labels(instruction, self.labels)
            except AssemblerError as e:
                self._add_error(e)
                continue
            encoding = encode(resolved)
            encoded = resolved.with_encoding(encoding)
            self._instructions.append(encoded)
            # First statement producing a given encoding keeps the mapping
            self._assembly_lines.setdefault(encoding, encoded.assembly_line())
        logger.debug("--- Second Pass Complete ---")

    def assemble(self, lines):
        logger.info("Starting assembly process...")
        self.labels = MappingProxyType({})
        self.errors = []
        self._instructions = []
        self._assembly_lines = {}
        self._index = 0
        self._format_correct = True

        bound = self.first_pass(lines)
        self.second_pass(bound)

        if self._format_correct:
            self.state = "done"
            logger.info(f"Assembly successful: {len(self._instructions)} instructions.")
        else:
            self.state = "failed"
            logger.warning(f"Assembly completed with {len(self.errors)} errors.")

    def is_format_correct(self):
        """True if every line of the input was syntactically correct."""
        return self._format_correct

    def get_next_instruction(self):
        """Returns the next encoded Instruction, or None past the end."""
        if self._index >= len(self._instructions):
            return None
        instruction = self._instructions[self._index]
        self._index += 1
        return instruction

    def get_assembly_line(self, encoding):
        return self._assembly_lines.get(encoding)

    @property
    def instructions(self):
        return tuple(self._instructions)

    def __iter__(self):
        return iter(self._instructions)

    def __len__(self):
        return len(self._instructions)

    def to_dict(self):
        machine_code = []
        for instruction in self._instructions:
            machine_code.append({
                "address": instruction.address,
                "bin": instruction.encoding,
                "hex": binary_to_hex(instruction.encoding),
                "dec": str(int(instruction.encoding, 2)),  # Unsigned decimal representation
                "assembly": instruction.assembly_line(),
            })
        return {
            "is_format_correct": self._format_correct,
            "machine_code": machine_code,
            "errors": list(self.errors),
            "labels": dict(self.labels),
        }
