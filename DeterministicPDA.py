import numpy as np
import pandas as pd

from PDAErrors import InvalidState, InvalidSymbol, InternalConsistencyError
from Transition import EPSILON, BOTTOM
from TransitionStore import TransitionStore


ACCEPTED = "String accepted."
REJECTED = "String rejected."
TRAPPED = "trapped"


class DeterministicPDA:
    """
    Deterministic push-down automaton over a fixed alphabet.

    Build phase: add_final_states / add_transition. Every transition is checked
    for determinism when it is added, so the run phase never has to choose.
    Run phase: read_character, one input symbol at a time. When no transition
    applies the machine is trapped until reset().

    State 0 is the initial state. The stack starts with the bottom marker only.
    """

    def __init__(self, size, alphabet, bottom=BOTTOM, verbose=False, record_history=False):
        if not isinstance(size, (int, np.integer)) or isinstance(size, bool) or size <= 0:
            raise InvalidState("Number of states must be positive.")
        if not isinstance(bottom, str) or len(bottom) != 1 or bottom == EPSILON:
            raise InvalidSymbol("Invalid bottom-of-stack symbol given.")

        symbols = list(dict.fromkeys(alphabet))
        for symbol in symbols:
            if not isinstance(symbol, str) or len(symbol) != 1:
                raise InvalidSymbol(f"Alphabet symbols must be single characters, got {symbol!r}.")
            if symbol == EPSILON:
                raise InvalidSymbol(f"'{EPSILON}' is reserved for lambda and cannot be in the alphabet.")

        self._alphabet = tuple(symbols)
        self.bottom = bottom
        self.verbose = verbose
        self.record_history = record_history
        self._transitions = TransitionStore(size, self._alphabet, bottom)
        self._final_mask = np.zeros(size, dtype=bool)

        self._init_run_state()

    def _init_run_state(self):
        self._stack = [self.bottom]
        self._current_state = 0
        self._trapped = False
        self.history = []

    """
    ---------------------        BUILD PHASE:        ---------------------
    """

    def add_final_states(self, state_numbers):
        """
        Mark states as final. Values outside [0, size) and repeats are ignored.

        Args:
            state_numbers: Iterable of state indices
        """
        for state in state_numbers:
            if isinstance(state, bool) or not isinstance(state, (int, np.integer)):
                continue
            if 0 <= state < self.size:
                self._final_mask[state] = True

    def add_transition(self, source, target, consumed, pop, push=EPSILON):
        """
        Add the transition source --consumed, pop / push--> target.

        Args:
            source: Source state index
            target: Target state index
            consumed: Input character, or EPSILON to consume nothing
            pop: Stack symbol to pop, or EPSILON to leave the stack top alone
            push: String to push, first character ending on top; EPSILON pushes nothing

        Raises:
            InvalidState, InvalidSymbol, DeterminismViolation. On any of them the
            automaton is left exactly as it was.
        """
        self._transitions.add(source, target, consumed, pop, push)

    """
    ---------------------        RUN PHASE:        ---------------------
    """

    def read_character(self, consumed):
        """
        Process one input character.

        Raises:
            InvalidSymbol: consumed is not in the alphabet (nothing is changed)
        """
        if consumed not in self._alphabet:
            raise InvalidSymbol(f"'{consumed}' is not in this machine's alphabet.")

        if self._trapped:
            return

        top = self._stack[-1]
        found = self._transitions.lookup(self._current_state, consumed, top)
        if found is None:
            if self.verbose:
                print(f"No transition found for ({self._current_state}, {consumed}, {top}).")
            self._trapped = True
            self._add_history(consumed, 'trap')
            return

        target, transition = found
        source = self._current_state
        self._apply(target, transition)
        if self.verbose:
            print(f"Transition: {source}, {consumed}, {top} --> {target}, Stack: {self.get_stack_string()}")
        self._add_history(consumed, 'move')

    def _apply(self, target, transition):
        if transition.pop != EPSILON:
            if self._stack[-1] != transition.pop:
                raise InternalConsistencyError(
                    f"Stack top '{self._stack[-1]}' does not match pop symbol '{transition.pop}' "
                    f"of transition {transition} from state {self._current_state}."
                )
            self._stack.pop()

        self._current_state = target
        self._stack.extend(transition.push_symbols())

    def _add_history(self, char, action):
        if not self.record_history:
            return
        self.history.append({
            'char': char,
            'state': self._current_state,
            'stack': self.get_stack_string(),
            'action': action
        })

    def reset(self):
        """Back to state 0 with only the bottom marker on the stack. Topology is kept."""
        self._init_run_state()

    def process(self, string):
        """
        Run the machine on a whole string from the initial configuration.

        Stops reading as soon as the machine is trapped. The run state is left as
        the string left it, so get_current_status() can still be inspected.

        Args:
            string: Input characters

        Returns:
            ACCEPTED or REJECTED
        """
        self.reset()
        for char in string:
            self.read_character(char)
            if self._trapped:
                break
        return self.get_final_status()

    def accepts(self, string):
        return self.process(string) == ACCEPTED

    def fork(self):
        """
        New automaton sharing this one's alphabet, transitions and final states,
        with its own fresh run state. The shared topology must not be modified
        while forks are running.
        """
        clone = DeterministicPDA.__new__(DeterministicPDA)
        clone._alphabet = self._alphabet
        clone.bottom = self.bottom
        clone.verbose = self.verbose
        clone.record_history = self.record_history
        clone._transitions = self._transitions
        clone._final_mask = self._final_mask
        clone._init_run_state()
        return clone

    """
    ---------------------        STATUS:        ---------------------
    """

    def get_stack_string(self):
        """Stack contents, top first."""
        return ''.join(reversed(self._stack))

    def get_current_status(self):
        if self._trapped:
            return TRAPPED
        return f"{self._current_state}:{self.get_stack_string()}"

    def get_final_status(self):
        """
        Verdict as if the input ended now. Stack contents play no part in it.
        The machine can keep reading afterwards.
        """
        if not self._trapped and self._final_mask[self._current_state]:
            return ACCEPTED
        return REJECTED

    def in_trapped_state(self):
        return self._trapped

    def history_frame(self):
        return pd.DataFrame(self.history, columns=['char', 'state', 'stack', 'action'])

    def transition_table(self):
        return self._transitions.to_frame()

    @property
    def size(self):
        return self._transitions.size

    @property
    def alphabet(self):
        return self._alphabet

    @property
    def final_states(self):
        return tuple(int(state) for state in np.flatnonzero(self._final_mask))

    @property
    def current_state(self):
        return self._current_state

    @property
    def stack(self):
        return tuple(reversed(self._stack))

    @property
    def transitions(self):
        return self._transitions

    # camelCase names
    addFinalStates = add_final_states
    addTransition = add_transition
    readCharacter = read_character
    getCurrentStatus = get_current_status
    getFinalStatus = get_final_status
    inTrappedState = in_trapped_state
