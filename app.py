# app.py

import argparse
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

from config.config_loader import default_config, load_config, validate_config
from logger.logger import JSONLogger
from simulator.errors import LoadError, TapeResourceError, TransitionLookupError
from simulator.tape import Tape
from simulator.transitions import TransitionTable
from simulator.turing_machine import DebugCommand, TuringMachine

console = Console()

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_LOAD_ERROR = 2
EXIT_LOOKUP_ERROR = 3
EXIT_RESOURCE_ERROR = 4
EXIT_STEP_LIMIT = 5


# === Utilities ===
def build_config(args):
    config = load_config(args.config) if args.config else default_config()
    overrides = {
        "mode": args.mode,
        "start_state": args.start_state,
        "halt_state": args.halt_state,
        "max_steps": args.max_steps
    }
    config.update({key: value for key, value in overrides.items() if value is not None})
    validate_config(config)
    return config


def load_tape(path, max_cells=None):
    with open(path, "r", encoding="utf-8") as f:
        return Tape.from_text(f.read(), max_cells=max_cells)


def show_output(output):
    # Tape symbols are printed verbatim: no markup, no :emoji: codes
    console.print(output, markup=False, emoji=False, highlight=False, soft_wrap=True)


def show_step(machine, record):
    cells, carriage = machine.tape.window()
    show_output(machine.output())
    console.print(cells, markup=False, emoji=False, highlight=False)
    console.print(" " * carriage + "^")
    console.print(f"[dim]Last executed rule:[/dim] {escape(str(record.rule))}", emoji=False)


def prompt_command():
    answer = Prompt.ask("Press 'n' for the next step or 'c' to run until the end", choices=["n", "c"])
    return DebugCommand(answer)


# === Drive Modes ===
def run_to_end(machine, trace=None):
    if trace is None:
        return machine.run()
    while not machine.halted and not machine.limit_reached:
        trace.append(JSONLogger.step_entry(machine.step()))
    return machine.result()


def run_debug(machine, trace=None):
    session = machine.debug()
    console.print("[bold cyan]Hello in debug mode![/bold cyan]")
    console.print("Press 'n' to go to the next step")
    console.print("Press 'c' to run the program until the end\n")
    show_output(machine.output())

    # Prompt at least once, even when the machine starts halted
    while True:
        command = prompt_command()
        if command is DebugCommand.UNTIL_END:
            if trace is None:
                return session.advance(command)
            return run_to_end(machine, trace)
        record = session.advance(command)
        if record is not None:
            if trace is not None:
                trace.append(JSONLogger.step_entry(record))
            show_step(machine, record)
        if session.finished:
            break

    return machine.result()


def simulate(config, program_path, input_path):
    """Load, run and report one machine. Returns the process exit code."""
    logger = JSONLogger.from_config(config) if config["log_runs"] else None
    trace = [] if logger and config["trace_steps"] else None
    summary = {"program": str(program_path), "input": str(input_path)}
    machine = None

    try:
        table = TransitionTable.from_file(program_path)
        if table.ignored:
            console.print(f"[yellow][WARNING] Ignored {table.ignored} line(s) after the first malformed rule.[/yellow]")
        tape = load_tape(input_path, max_cells=config["max_tape_cells"])
        machine = TuringMachine(
            table,
            tape,
            start_state=config["start_state"],
            halt_state=config["halt_state"],
            max_steps=config["max_steps"]
        )
        if config["mode"] == "d":
            result = run_debug(machine, trace)
        else:
            result = run_to_end(machine, trace)
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[red]Invalid input file(s): {escape(str(e))}[/red]", emoji=False)
        return EXIT_USAGE
    except LoadError as e:
        code, status, error = EXIT_LOAD_ERROR, "load_error", e
    except TransitionLookupError as e:
        code, status, error = EXIT_LOOKUP_ERROR, "lookup_error", e
    except TapeResourceError as e:
        code, status, error = EXIT_RESOURCE_ERROR, "resource_error", e
    else:
        show_output(result.output)
        if result.halted:
            code, status = EXIT_OK, "halted"
        else:
            code, status = EXIT_STEP_LIMIT, "step_limit"
            console.print(f"[yellow][WARNING] Stopped after {result.steps:,} steps without reaching '{escape(config['halt_state'])}'.[/yellow]")
        summary.update({"steps": result.steps, "state": result.state, "output": result.output})
        error = None

    if error is not None:
        console.print(f"[red]Error! {escape(str(error))}[/red]", emoji=False)
        summary["error"] = str(error)
        if machine is not None:
            summary.update({"steps": machine.steps, "state": machine.state})

    if logger:
        logger.log_run({"status": status, **summary})
        if trace:
            logger.log_trace(trace)
    return code


# === CLI ===
def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Single-tape Turing machine emulator")
    parser.add_argument("program", help="File with the machine code, one 'state read write move next' rule per line")
    parser.add_argument("input", help="File with the initial tape contents")
    parser.add_argument("mode", nargs="?", choices=["r", "d"], help="r - release (default), d - debug")
    parser.add_argument("--config", help="Path to a JSON runtime config")
    parser.add_argument("--start-state", help="Initial state (default=0)")
    parser.add_argument("--halt-state", help="Halting state (default=halt)")
    parser.add_argument("--max-steps", type=int, help="Stop after this many steps")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    try:
        config = build_config(args)
    except (FileNotFoundError, ValueError, TypeError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return EXIT_USAGE
    return simulate(config, Path(args.program), Path(args.input))


if __name__ == "__main__":
    sys.exit(main())
