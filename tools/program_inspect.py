# tools/program_inspect.py
import argparse
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from simulator.errors import LoadError
from simulator.tape import WILDCARD
from simulator.transitions import TransitionTable
from simulator.turing_machine import HALT_STATE

console = Console()


def dangling_states(table, halt_state=HALT_STATE):
    """Target states that have no rules of their own (the halt state excepted)."""
    known = set(table.states)
    targets = []
    for rule in table:
        target = rule.next_state
        if target in (WILDCARD, halt_state) or target in known or target in targets:
            continue
        targets.append(target)
    return targets


def build_rule_table(table, title="Transition Table"):
    """Lay the sorted rules out one row per rule, in lookup order."""
    rich_table = Table(title=title)
    for column in ("State", "Read", "Write", "Move", "Next"):
        rich_table.add_column(column, justify="center")

    previous_state = None
    for rule in table:
        state_label = rule.state if rule.state != previous_state else ""
        rich_table.add_row(
            escape(state_label),
            escape(rule.read),
            escape(rule.write),
            rule.direction.name.lower(),
            escape(rule.next_state)
        )
        previous_state = rule.state
    return rich_table


def inspect_program(path, halt_state=HALT_STATE):
    table = TransitionTable.from_file(path)

    console.print(f"[INFO] Program {escape(str(path))}")
    console.print(f"  Rules: {len(table)}")
    console.print(f"  States: {len(table.states)}")
    if table.ignored:
        console.print(f"  [yellow]Ignored lines: {table.ignored}[/yellow]")

    console.print(build_rule_table(table))

    missing = dangling_states(table, halt_state)
    if missing:
        console.print(f"[yellow]States without rules: {escape(', '.join(missing))}[/yellow]")
    return table


def main(argv=None):
    parser = argparse.ArgumentParser(description="Turing Machine Program Inspector")
    parser.add_argument("program", help="Program file, e.g., programs/binary_increment.txt")
    parser.add_argument("--halt-state", default=HALT_STATE, help="Halting state (default=halt)")
    args = parser.parse_args(argv)

    try:
        inspect_program(Path(args.program), args.halt_state)
    except (OSError, UnicodeDecodeError, LoadError) as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
