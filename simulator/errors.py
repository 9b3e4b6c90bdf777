class TuringMachineError(Exception):
    """Base class for every failure raised by the simulator."""


class LoadError(TuringMachineError, ValueError):
    """A transition table could not be loaded."""

    def __init__(self, message, line=None, value=None):
        super().__init__(message)
        self.line = line
        self.value = value


class TransitionLookupError(TuringMachineError, LookupError):
    """No rule matches the current (state, symbol) pair."""

    def __init__(self, state, symbol):
        super().__init__(f"No transition for state '{state}' with symbol '{symbol}'")
        self.state = state
        self.symbol = symbol


class TapeResourceError(TuringMachineError, MemoryError):
    """The tape could not grow. Usually the machine never halts."""

    def __init__(self, cells, reason="allocation failure"):
        super().__init__(
            f"Tape could not grow past {cells:,} cells ({reason}); "
            "most likely the machine went into an infinite loop"
        )
        self.cells = cells
        self.reason = reason
