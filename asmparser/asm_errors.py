# asmparser/asm_errors.py
"""Syntax errors raised while assembling a single line."""


class AssemblerError(Exception):
    """Base class. Carries the line number, offending token and source text."""

    def __init__(self, message, line_num=None, token=None, text="", label=None):
        super().__init__(message)
        self.message = message
        self.line_num = line_num
        self.token = token
        self.text = text
        # Label defined on the failing line, if it was read before the error
        self.label = label

    def __str__(self):
        if self.line_num is None:
            return self.message
        return f"Line {self.line_num}: {self.message}"

    def to_dict(self):
        return {"line": self.line_num, "message": self.message, "text": self.text}


class LexicalError(AssemblerError):
    """Malformed token structure (delimiters, parentheses, whitespace)."""


class ArityError(AssemblerError):
    """Operand count does not match the opcode."""


class OperandKindError(AssemblerError):
    """Operand of the wrong kind, e.g. an immediate where a register is expected."""


class UnknownOpcodeError(OperandKindError):
    pass


class RangeError(AssemblerError):
    """Immediate or displacement does not fit its field."""


class UndefinedLabelError(AssemblerError):
    pass


class DuplicateLabelError(AssemblerError):
    pass
