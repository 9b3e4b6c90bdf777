from dataclasses import dataclass
from pathlib import Path

from simulator.errors import LoadError, TransitionLookupError
from simulator.tape import WILDCARD, Direction


@dataclass(frozen=True)
class Rule:
    state: str
    read: str
    write: str
    direction: Direction
    next_state: str

    @property
    def is_wildcard(self):
        return self.read == WILDCARD

    def matches(self, state, symbol):
        return self.state == state and (self.read == symbol or self.is_wildcard)

    def __str__(self):
        return f"{self.state} {self.read} {self.write} {self.direction.value} {self.next_state}"


def parse_rule(line, line_no=None):
    """
    Parse one "state read write direction next_state" record.

    Returns None when the record is not five fields with single-character
    read/write/direction fields. A bad direction raises LoadError.
    """
    fields = line.split()
    if len(fields) != 5:
        return None
    state, read, write, move, next_state = fields
    if not all(len(field) == 1 for field in (read, write, move)):
        return None

    try:
        direction = Direction(move)
    except ValueError:
        raise LoadError(
            f"Line {line_no}: moving symbols are only 'l', 'r' and '*', got {move!r}",
            line=line_no, value=move,
        ) from None

    if state == WILDCARD:
        raise LoadError(
            f"Line {line_no}: '{WILDCARD}' cannot be used as a state name",
            line=line_no, value=state,
        )

    return Rule(state, read, write, direction, next_state)


def parse_rules(lines):
    """
    Parse rules until the first malformed record.

    Returns (rules, ignored) where ignored counts the non-blank lines left
    unread after the first malformed record.
    """
    rules = []
    lines = list(lines)
    for idx, line in enumerate(lines):
        if not line.strip():
            continue
        rule = parse_rule(line, line_no=idx + 1)
        if rule is None:
            ignored = sum(1 for rest in lines[idx:] if rest.strip())
            return rules, ignored
        rules.append(rule)
    return rules, 0


def sort_rules(rules):
    """Group rules by state with exact-symbol rules ahead of wildcard ones.

    The sort is stable, so among rules of the same kind input order decides.
    """
    return sorted(rules, key=lambda rule: (rule.state, rule.is_wildcard))


class TransitionTable:
    def __init__(self, rules, ignored=0):
        self.rules = tuple(sort_rules(rules))
        self.ignored = ignored

        # state -> ({symbol: first exact rule}, first wildcard rule)
        self._index = {}
        for rule in self.rules:
            exact, wildcard = self._index.setdefault(rule.state, ({}, []))
            if rule.is_wildcard:
                if not wildcard:
                    wildcard.append(rule)
            else:
                exact.setdefault(rule.read, rule)

    @classmethod
    def from_text(cls, text):
        rules, ignored = parse_rules(text.splitlines())
        return cls(rules, ignored=ignored)

    @classmethod
    def from_file(cls, path):
        with open(Path(path), "r", encoding="utf-8") as f:
            return cls.from_text(f.read())

    def __len__(self):
        return len(self.rules)

    def __iter__(self):
        return iter(self.rules)

    def __eq__(self, other):
        if not isinstance(other, TransitionTable):
            return NotImplemented
        return self.rules == other.rules

    def __repr__(self):
        return f"TransitionTable({len(self.rules)} rules, {len(self.states)} states)"

    @property
    def states(self):
        """Source states in table order."""
        return list(self._index)

    def lookup(self, state, symbol):
        """Return the rule for (state, symbol): exact symbol first, then wildcard."""
        exact, wildcard = self._index.get(state, ({}, []))
        rule = exact.get(symbol)
        if rule is None and wildcard:
            rule = wildcard[0]
        if rule is None:
            raise TransitionLookupError(state, symbol)
        return rule
