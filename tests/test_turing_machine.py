from pathlib import Path

import pytest

from simulator.errors import TapeResourceError, TransitionLookupError
from simulator.tape import Tape
from simulator.transitions import TransitionTable
from simulator.turing_machine import DebugCommand, TuringMachine, resolve

PROGRAMS = Path(__file__).resolve().parents[1] / "programs"


def make_machine(program, tape_text, **kwargs):
    return TuringMachine(TransitionTable.from_text(program), Tape.from_text(tape_text), **kwargs)


def test_resolve_needs_no_tape():
    table = TransitionTable.from_text("a 1 0 r b\na * * l *\n")
    rule, next_state = resolve(table, "a", "1")
    assert str(rule) == "a 1 0 r b"
    assert next_state == "b"

    rule, next_state = resolve(table, "a", "0")
    assert str(rule) == "a * * l *"
    assert next_state == "a"


def test_overwrites_zeros_until_first_one():
    machine = make_machine("0 0 1 r 0\n0 1 1 r halt\n", "01")
    result = machine.run()
    assert result.halted
    assert result.output == "11"
    assert result.steps == 2
    assert result.state == "halt"


def test_running_off_the_input_without_a_blank_rule_fails():
    machine = make_machine("0 0 1 r 0\n0 1 1 r halt\n", "00")
    with pytest.raises(TransitionLookupError) as excinfo:
        machine.run()
    assert (excinfo.value.state, excinfo.value.symbol) == ("0", "_")
    assert machine.output() == "11"


def test_missing_rule_reports_state_and_symbol_before_any_step():
    machine = make_machine("0 0 1 r 0\n", "10")
    with pytest.raises(TransitionLookupError) as excinfo:
        machine.run()
    assert (excinfo.value.state, excinfo.value.symbol) == ("0", "1")
    assert machine.steps == 0
    assert machine.output() == "10"


def test_wildcards_on_blank_tape_with_custom_start_state():
    machine = make_machine("A * 1 r B\nB * * * halt\n", "_", start_state="A")
    first = machine.step()
    assert first.state == "B"
    assert machine.output() == "1"
    assert not machine.halted

    result = machine.run()
    assert result.halted
    assert result.output == "1"
    assert result.steps == 2


def test_wildcard_next_state_keeps_current_state():
    machine = make_machine("0 1 0 r *\n0 _ _ * halt\n", "111")
    record = machine.step()
    assert record.state == "0"
    assert machine.run().output == "000"


def test_halt_state_is_never_looked_up():
    # No rules for "halt" at all; reaching it must still succeed.
    machine = make_machine("0 * x * halt\n", "a")
    assert machine.run().output == "x"
    assert machine.step() is None
    assert machine.steps == 1


def test_starting_in_halt_state_does_nothing():
    machine = make_machine("", "abc", start_state="halt")
    result = machine.run()
    assert result.halted
    assert result.steps == 0
    assert result.output == "abc"


def test_custom_halt_state():
    machine = make_machine("0 * 1 r done\n", "_", halt_state="done")
    assert machine.run().state == "done"


def test_exact_rule_precedence_gives_same_run_for_both_orderings():
    exact_first = "0 _ _ l 1\n0 * * r 0\n1 1 0 l 1\n1 * 1 * halt\n"
    wildcard_first = "0 * * r 0\n0 _ _ l 1\n1 * 1 * halt\n1 1 0 l 1\n"
    assert make_machine(exact_first, "1011").run() == make_machine(wildcard_first, "1011").run()


def test_machine_starts_from_leftmost_cell():
    tape = Tape.from_text("ab")
    tape.move("r")
    machine = TuringMachine(TransitionTable.from_text("0 a A * halt\n"), tape)
    assert machine.symbol == "a"
    assert machine.run().output == "Ab"


def test_max_steps_stops_a_non_halting_machine():
    machine = make_machine("0 * 1 r 0\n", "", max_steps=10)
    result = machine.run()
    assert not result.halted
    assert result.steps == 10
    assert result.output == "1" * 10


def test_runaway_tape_growth_is_a_resource_error():
    table = TransitionTable.from_text("0 * 1 l 0\n")
    machine = TuringMachine(table, Tape.from_text("", max_cells=100))
    with pytest.raises(TapeResourceError):
        machine.run()
    assert machine.steps == 99


@pytest.mark.parametrize("name", ["", "*"])
def test_invalid_start_state_is_rejected(name):
    with pytest.raises(ValueError):
        make_machine("0 * 1 r halt\n", "", start_state=name)


@pytest.mark.parametrize(
    "program, tape_file, expected",
    [
        ("binary_increment.txt", "binary_increment_input.txt", "1100"),
        ("unary_add.txt", "unary_add_input.txt", "11111"),
    ],
)
def test_sample_programs(program, tape_file, expected):
    table = TransitionTable.from_file(PROGRAMS / program)
    tape = Tape.from_text((PROGRAMS / tape_file).read_text(encoding="utf-8"))
    assert TuringMachine(table, tape).run().output == expected


def test_debug_commands_accept_their_letters():
    assert DebugCommand("n") is DebugCommand.NEXT_STEP
    assert DebugCommand("c") is DebugCommand.UNTIL_END
