# asmparser/tests/test_tokenizer.py
import pytest
from asmparser.asm_errors import LexicalError
from asmparser.asm_tokenizer import get_tokens, strip_comment


def test_strip_comment():
    assert strip_comment("add $t0, $t1, $t2 # sum") == "add $t0, $t1, $t2 "
    assert strip_comment("# only a comment") == ""


@pytest.mark.parametrize("line", ["", "   ", "\t\t", "# comment", "   # indented comment"])
def test_blank_and_comment_lines_produce_nothing(line):
    assert get_tokens(line, 1) is None


def test_instruction_tokens():
    tokens = get_tokens("  ADD $t0,$t1 ,  $t2  ", 7)
    assert tokens.line_num == 7
    assert tokens.label is None
    assert tokens.mnemonic == "add"
    assert tokens.operands == ("$t0", "$t1", "$t2")


def test_memory_operand_kept_whole():
    tokens = get_tokens("lw $t0, -8($sp)", 1)
    assert tokens.operands == ("$t0", "-8($sp)")


def test_no_operands():
    tokens = get_tokens("syscall", 1)
    assert tokens.mnemonic == "syscall"
    assert tokens.operands == ()


def test_label_only_line():
    tokens = get_tokens("loop:   # top of loop", 3)
    assert tokens.is_label_only
    assert tokens.label == "loop"
    assert tokens.mnemonic is None


def test_label_with_instruction():
    tokens = get_tokens("end: jr $ra", 1)
    assert tokens.label == "end"
    assert tokens.mnemonic == "jr"
    assert tokens.operands == ("$ra",)
    assert not tokens.is_label_only


def test_text_keeps_original_line():
    tokens = get_tokens("add $t0, $t1, $t2 # sum\n", 1)
    assert tokens.text == "add $t0, $t1, $t2 # sum"


# --- Lexical Errors ---

@pytest.mark.parametrize("line, message", [
    ("add $t0,, $t1", "Missing operand between delimiters"),
    ("add , $t0, $t1", "Missing operand between delimiters"),
    ("add $t0, $t1, $t2,", "Missing operand between delimiters"),
    ("add $t0 $t1, $t2", "Unexpected whitespace in operand '$t0 $t1'"),
    ("lw $t0, 4 ($sp)", "Unexpected whitespace in operand '4 ($sp)'"),
    ("lw $t0, 4($sp", "Unbalanced or misplaced parentheses"),
    ("lw $t0, 4$sp)", "Unbalanced or misplaced parentheses"),
    ("lw $t0, 4(($sp))", "Unbalanced or misplaced parentheses"),
    ("lw $t0, 4($sp)x", "Unbalanced or misplaced parentheses"),
    ("lw $t0, 4()", "Unbalanced or misplaced parentheses"),
    ("add $1, $2, $3, $4", "Too many operands: found 4"),
    ("add,$t0 $t1", "Invalid mnemonic: 'add,$t0'"),
    ("9lives: add $t0, $t1, $t2", "Invalid label name: '9lives'"),
    (": add $t0, $t1, $t2", "Invalid label name: ''"),
    ("a: b: add $t0, $t1, $t2", "Only one label may be defined per line"),
])
def test_lexical_errors(line, message):
    with pytest.raises(LexicalError) as excinfo:
        get_tokens(line, 12)
    assert message in excinfo.value.message
    assert excinfo.value.line_num == 12
    assert excinfo.value.text == line
    assert str(excinfo.value).startswith("Line 12: ")


def test_max_operands_is_configurable():
    with pytest.raises(LexicalError):
        get_tokens("op a, b", 1, max_operands=1)
    assert get_tokens("op a", 1, max_operands=1).operands == ("a",)


@pytest.mark.parametrize("line", [
    "bad: add $t0,, $t1",
    "bad: add $t0 $t1, $t2",
    "bad: add,$t0 $t1",
    "bad: b: add $t0, $t1, $t2",
])
def test_lexical_error_keeps_line_label(line):
    with pytest.raises(LexicalError) as excinfo:
        get_tokens(line, 3)
    assert excinfo.value.label == "bad"


def test_lexical_error_without_label():
    with pytest.raises(LexicalError) as excinfo:
        get_tokens("add $t0,, $t1", 3)
    assert excinfo.value.label is None
