import numpy as np
import pandas as pd

from PDAErrors import InvalidState, InvalidSymbol, DeterminismViolation
from Transition import EPSILON, BOTTOM, Transition, TransitionKey, TransitionGroup


NON_DETERMINISTIC = "Adding this transition will make the PDA non-deterministic."


class StateTable:
    """
    Outgoing transitions of a single source state.

    entries maps TransitionKey -> (target, Transition) and is the only thing the
    execution engine reads. groups, by_consumed and by_pop are kept alongside it so
    that every determinism check is a dictionary lookup.
    """

    def __init__(self):
        self.entries = {}
        self.groups = {}        # target -> TransitionGroup, in first-insertion order
        self.by_consumed = {}   # consumed -> set of pop symbols used with it
        self.by_pop = {}        # pop -> set of consumed symbols used with it

    def conflict(self, key):
        """
        Check whether a transition with this key would race against one already
        stored.

        Args:
            key: TransitionKey of the candidate

        Returns:
            True if the candidate must be rejected, False otherwise
        """
        if key in self.entries:
            return True

        consumed_with_pop = self.by_pop.get(key.pop, ())
        if key.consumes_input:
            # an epsilon-input transition on the same stack top
            if EPSILON in consumed_with_pop:
                return True
        elif _has_concrete(consumed_with_pop):
            return True

        pops_with_consumed = self.by_consumed.get(key.consumed, ())
        if key.pops_stack:
            # an epsilon-pop transition on the same input
            if EPSILON in pops_with_consumed:
                return True
        elif _has_concrete(pops_with_consumed):
            return True

        return False

    def insert(self, target, transition):
        key = transition.key
        self.entries[key] = (target, transition)
        if target not in self.groups:
            self.groups[target] = TransitionGroup(target)
        self.groups[target].transitions.append(transition)
        self.by_consumed.setdefault(key.consumed, set()).add(key.pop)
        self.by_pop.setdefault(key.pop, set()).add(key.consumed)


def _has_concrete(symbols):
    return len(symbols) - (EPSILON in symbols) > 0


class TransitionStore:
    def __init__(self, size, alphabet, bottom=BOTTOM):
        """
        Per-state transition tables, validated for determinism on insertion.

        Args:
            size: Number of states N; states are 0..N-1
            alphabet: Iterable of input characters
            bottom: Bottom-of-stack marker; a transition popping it must push it back
        """
        self.alphabet = frozenset(alphabet)
        self.bottom = bottom

        # one table per state, fixed at construction
        self.tables = np.empty(size, dtype=object)
        for state in range(size):
            self.tables[state] = StateTable()

    @property
    def size(self):
        return self.tables.shape[0]

    def _check_state(self, state, role):
        if isinstance(state, bool) or not isinstance(state, (int, np.integer)) or not 0 <= state < self.size:
            raise InvalidState(f"Invalid {role} state given.")

    def add(self, source, target, consumed, pop, push=EPSILON):
        """
        Add a transition from source to target.

        Args:
            source: Source state index
            target: Target state index
            consumed: Input character, or epsilon
            pop: Stack symbol to pop, or epsilon
            push: String to push (first character ends on top), or epsilon

        Raises:
            InvalidState: source or target outside [0, size)
            InvalidSymbol: consumed not in the alphabet, or pop not a single character
            DeterminismViolation: the transition conflicts with an existing one
        """
        # never has a triggering configuration, whatever the states
        if consumed == EPSILON and pop == EPSILON:
            raise DeterminismViolation("Lambda transition not allowed in deterministic PDA.")

        self._check_state(source, "source")
        self._check_state(target, "target")
        if not isinstance(consumed, str) or (consumed != EPSILON and consumed not in self.alphabet):
            raise InvalidSymbol("Invalid input character given.")
        if not isinstance(pop, str) or len(pop) != 1:
            raise InvalidSymbol("Invalid pop symbol given.")
        if push is None:
            push = EPSILON
        if not isinstance(push, str):
            raise InvalidSymbol("Invalid push string given.")
        if push != EPSILON and EPSILON in push:
            raise InvalidSymbol(f"'{EPSILON}' cannot be pushed as a stack symbol.")
        if pop == self.bottom and not push.endswith(self.bottom):
            # the stack must never run empty
            raise InvalidSymbol(f"A transition popping '{self.bottom}' must push it back at the bottom.")

        transition = Transition(consumed, pop, push)
        table = self.tables[source]
        if table.conflict(transition.key):
            raise DeterminismViolation(NON_DETERMINISTIC)

        table.insert(target, transition)
        return transition

    def lookup(self, state, consumed, top):
        """
        Find the transition that applies to (state, consumed, top).

        An exact match on the stack top is tried first, then a transition that pops
        nothing. Determinism guarantees at most one of them exists.

        Returns:
            (target, Transition) tuple, or None if no transition applies
        """
        entries = self.tables[state].entries
        found = entries.get(TransitionKey(consumed, top))
        if found is None:
            found = entries.get(TransitionKey(consumed, EPSILON))
        return found

    def groups(self, state):
        self._check_state(state, "source")
        return list(self.tables[state].groups.values())

    def count(self):
        return sum(len(table.entries) for table in self.tables)

    def __len__(self):
        return self.count()

    def __iter__(self):
        """Yield (source, target, Transition) for every stored transition."""
        for source, table in enumerate(self.tables):
            for group in table.groups.values():
                for transition in group.transitions:
                    yield source, group.target, transition

    def snapshot(self):
        """
        Immutable picture of the whole store, group layout included. Two snapshots
        compare equal iff the stores hold the same transitions in the same groups.
        """
        return tuple(
            tuple(
                (group.target, tuple(group.transitions))
                for group in table.groups.values()
            )
            for table in self.tables
        )

    def to_frame(self):
        rows = [
            [source, transition.consumed, transition.pop, transition.push, target]
            for source, target, transition in self
        ]
        return pd.DataFrame(rows, columns=['Source', 'Consumed', 'Pop', 'Push', 'Target'])
