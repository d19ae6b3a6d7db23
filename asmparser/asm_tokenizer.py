# asmparser/asm_tokenizer.py
import re
import logging

from asmparser.asm_errors import LexicalError
from asmparser.asm_model import TokenizedLine

logger = logging.getLogger(__name__)

COMMENT_CHAR = '#'
LABEL_NAME_RE = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')
MNEMONIC_RE = re.compile(r'[A-Za-z][A-Za-z0-9_.]*')
# offset(register): exactly one pair of parentheses, closing the operand
PAREN_OPERAND_RE = re.compile(r'[^()]*\([^()]+\)')


def strip_comment(line):
    return line.split(COMMENT_CHAR, 1)[0]


def _check_parentheses(operand, line_num, text):
    if '(' not in operand and ')' not in operand:
        return
    if not PAREN_OPERAND_RE.fullmatch(operand):
        raise LexicalError(f"Unbalanced or misplaced parentheses in operand '{operand}'",
                           line_num, operand, text)


def _split_operands(operands_str, line_num, text, max_operands):
    """Splits the text after the mnemonic on commas and checks each piece."""
    if not operands_str:
        return ()
    pieces = [piece.strip() for piece in operands_str.split(',')]
    if not all(pieces):
        raise LexicalError("Missing operand between delimiters", line_num, operands_str, text)
    if len(pieces) > max_operands:
        raise LexicalError(f"Too many operands: found {len(pieces)}, no instruction takes more than {max_operands}",
                           line_num, operands_str, text)
    for piece in pieces:
        if any(c.isspace() for c in piece):
            raise LexicalError(f"Unexpected whitespace in operand '{piece}' (missing comma?)",
                               line_num, piece, text)
        _check_parentheses(piece, line_num, text)
    return tuple(pieces)


def get_tokens(line, line_num=0, max_operands=3):
    """Splits one source line into label, mnemonic and raw operand strings.

    Returns None for blank and comment-only lines. A line holding only
    ``name:`` comes back with ``mnemonic=None``. Raises LexicalError on
    malformed structure; operand meaning is not checked here.
    """
    text = line.rstrip('\r\n')
    body = strip_comment(text).strip()
    if not body:
        return None

    label = None
    if ':' in body:
        head, _, body = body.partition(':')
        head = head.strip()
        if not LABEL_NAME_RE.fullmatch(head):
            raise LexicalError(f"Invalid label name: '{head}'", line_num, head, text)
        label = head
        body = body.strip()
        if ':' in body:
            raise LexicalError("Only one label may be defined per line", line_num, body, text, label)

    if not body:
        logger.debug(f"Line {line_num}: label-only line '{label}'")
        return TokenizedLine(line_num, text, label)

    try:
        parts = body.split(None, 1)
        mnemonic = parts[0]
        if not MNEMONIC_RE.fullmatch(mnemonic):
            raise LexicalError(f"Invalid mnemonic: '{mnemonic}'", line_num, mnemonic, text)
        operands = _split_operands(parts[1] if len(parts) > 1 else "", line_num, text, max_operands)
    except LexicalError as e:
        e.label = label
        raise

    return TokenizedLine(line_num, text, label, mnemonic.lower(), operands)
