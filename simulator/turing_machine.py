from dataclasses import dataclass
from enum import Enum

from simulator.tape import WILDCARD
from simulator.transitions import Rule

HALT_STATE = "halt"
START_STATE = "0"


class DebugCommand(Enum):
    NEXT_STEP = "n"
    UNTIL_END = "c"


@dataclass(frozen=True)
class StepRecord:
    step: int
    rule: Rule
    state: str
    symbol: str


@dataclass(frozen=True)
class RunResult:
    output: str
    steps: int
    state: str
    halted: bool


def resolve(table, state, symbol):
    """Pure transition: return (rule, next_state) for the configuration."""
    rule = table.lookup(state, symbol)
    next_state = state if rule.next_state == WILDCARD else rule.next_state
    return rule, next_state


def _check_state_name(name, role):
    if not isinstance(name, str) or not name or name == WILDCARD:
        raise ValueError(f"Invalid {role} state name: {name!r}")


class TuringMachine:
    def __init__(self, table, tape, start_state=START_STATE, halt_state=HALT_STATE, max_steps=None):
        _check_state_name(start_state, "start")
        _check_state_name(halt_state, "halt")
        self.table = table
        self.tape = tape
        self.halt_state = halt_state
        self.max_steps = max_steps

        self.tape.rewind_to_start()
        self.state = start_state
        self.symbol = self.tape.read()
        self.steps = 0
        self.last_rule = None

    @property
    def halted(self):
        return self.state == self.halt_state

    @property
    def limit_reached(self):
        return self.max_steps is not None and self.steps >= self.max_steps

    def step(self):
        if self.halted:
            return None
        rule, next_state = resolve(self.table, self.state, self.symbol)

        self.tape.write(rule.write)
        self.tape.move(rule.direction)

        self.state = next_state
        self.symbol = self.tape.read()
        self.steps += 1
        self.last_rule = rule
        return StepRecord(self.steps, rule, self.state, self.symbol)

    def run(self):
        while not self.halted and not self.limit_reached:
            self.step()
        return self.result()

    def result(self):
        return RunResult(self.output(), self.steps, self.state, self.halted)

    def output(self):
        return self.tape.render()

    def debug(self):
        return DebugSession(self)


class DebugSession:
    """
    Single-step driver. Each advance() call does the work for exactly one
    command and returns; nothing runs between calls.
    """

    def __init__(self, machine):
        self.machine = machine

    @property
    def finished(self):
        return self.machine.halted or self.machine.limit_reached

    def advance(self, command):
        command = DebugCommand(command)
        if command is DebugCommand.UNTIL_END:
            return self.machine.run()
        if self.machine.limit_reached:
            return None
        return self.machine.step()
