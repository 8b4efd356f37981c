from __future__ import annotations

import io
from pathlib import Path

import pytest

from stackscript.api import run_file, run_source
from stackscript.engine import ExecutionResult, HaltReason, Interpreter, execute
from stackscript.lexer import tokenize, tokenize_executable
from stackscript.values import Integer, Text, trunc_div, trunc_mod, wrap_i32

LOOP = "1 .dup .print .newline 1 .+ .dup 11 .swap .>? -10 .cjump ~end~ .print .newline"


def _run(src: str) -> tuple[ExecutionResult, str]:
    out = io.StringIO()
    result = run_source(src=src, out=out)
    return result, out.getvalue()


def test_hello_world_prints_and_leaves_empty_stack():
    result, out = _run("~Hello, world!~ .print .newline")
    assert out == "Hello, world!\n"
    assert result.stack == ()
    assert result.halt_reason == HaltReason.END
    assert result.steps == 3


@pytest.mark.parametrize(
    ("src", "expected"),
    [
        ("3 4 .+", [7]),
        ("10 3 .-", [7]),
        ("6 7 .*", [42]),
        ("10 3 ./", [3]),
        ("10 3 .mod", [1]),
        ("-7 2 ./", [-3]),
        ("-7 2 .mod", [-1]),
        ("7 -2 ./", [-3]),
        ("7 -2 .mod", [1]),
        ("5 5 .=?", [1]),
        ("5 4 .=?", [0]),
        ("5 3 .>?", [1]),
        ("3 5 .>?", [0]),
        ("3 3 .>?", [0]),
    ],
)
def test_arithmetic_and_comparison(src: str, expected: list[int]):
    result, out = _run(src)
    assert result.stack_values == expected
    assert all(isinstance(v, Integer) for v in result.stack)
    assert out == ""


def test_arithmetic_wraps_to_32_bits():
    assert _run("2147483647 1 .+")[0].stack_values == [-2147483648]
    assert _run("-2147483648 1 .-")[0].stack_values == [2147483647]
    assert _run("65536 65536 .*")[0].stack_values == [0]
    assert _run("-2147483648 -1 ./")[0].stack_values == [-2147483648]
    assert _run("-2147483648 -1 .mod")[0].stack_values == [0]


def test_integer_helpers():
    assert wrap_i32(2**31) == -(2**31)
    assert wrap_i32(-(2**31) - 1) == 2**31 - 1
    assert trunc_div(-9, 4) == -2
    assert trunc_mod(-9, 4) == -1
    assert trunc_mod(9, -4) == 1


def test_loop_to_ten():
    result, out = _run(LOOP)
    assert out == "".join(f"{i}\n" for i in range(1, 11)) + "end\n"
    assert result.stack == (Integer(11),)
    assert result.halt_reason == HaltReason.END
    assert result.steps == 114


def test_sample_scripts(samples_dir: Path):
    out = io.StringIO()
    run_file(samples_dir / "count_to_ten.stk", out=out)
    assert out.getvalue().splitlines() == [str(i) for i in range(1, 11)] + ["end of loop here"]

    out = io.StringIO()
    result = run_file(samples_dir / "fizzbuzz.stk", out=out)
    expected = "1 2 Fizz 4 Buzz Fizz 7 8 Fizz Buzz 11 Fizz 13 14 FizzBuzz".split()
    assert out.getvalue().splitlines() == expected
    assert result.stack_values == [16]


def test_dup_and_swap_work_on_text_and_integers():
    assert _run("~a~ .dup")[0].stack == (Text("a"), Text("a"))
    assert _run("~a~ 1 .swap")[0].stack == (Integer(1), Text("a"))
    assert _run("1 2 .swap")[0].stack_values == [2, 1]


def test_print_has_no_trailing_newline():
    result, out = _run("42 .print ~ and ~ .print -3 .print")
    assert out == "42 and -3"
    assert result.stack == ()


def test_false_condition_falls_through():
    assert _run("0 -2 .cjump 7")[0].stack_values == [7]


def test_jump_to_exact_end_halts_normally():
    # 5 tokens: the jump at pc 2 lands on pc 5 == len(tokens).
    result, out = _run("1 3 .cjump 99 .print")
    assert out == ""
    assert result.halt_reason == HaltReason.END
    assert result.pc == 5
    assert result.steps == 3


def test_forward_jump_past_end_terminates():
    result, _ = _run("1 10 .cjump ~never~ .print")
    assert result.halt_reason == HaltReason.JUMP_OUT_OF_RANGE
    assert result.pc == 12


def test_backward_jump_before_start_terminates_instead_of_wrapping():
    # A negative pc would wrap around as an unsigned index; here the run simply stops.
    result, out = _run("~a~ .print 1 -10 .cjump ~b~ .print")
    assert out == "a"
    assert result.halt_reason == HaltReason.JUMP_OUT_OF_RANGE
    assert result.pc == -6
    assert result.stack == ()


def test_empty_program():
    result, out = _run("(nothing to do)")
    assert result == ExecutionResult(stack=(), steps=0, pc=0, halt_reason=HaltReason.END)
    assert out == ""


def test_comment_tokens_are_noops_if_not_filtered():
    result = execute(tokenize("(c) 1 (d) 2"), out=io.StringIO())
    assert result.stack_values == [1, 2]
    assert result.steps == 4


def test_step_by_step():
    interp = Interpreter(tokenize_executable("1 2 .+"), out=io.StringIO())
    assert interp.halt_reason is None
    assert interp.step() is True
    assert (interp.pc, interp.stack.snapshot()) == (1, (Integer(1),))
    assert interp.step() is True
    assert interp.step() is False
    assert interp.stack.snapshot() == (Integer(3),)
    assert interp.halt_reason == HaltReason.END
    assert interp.step() is False
    assert interp.steps == 3


def test_print_defaults_to_stdout(capsys: pytest.CaptureFixture[str]):
    run_source(src="~hi~ .print .newline")
    assert capsys.readouterr().out == "hi\n"
