from dataclasses import dataclass, field
from typing import List

EPSILON = '.'   # consume nothing / pop nothing / push nothing
BOTTOM = '$'    # initial stack symbol


@dataclass(frozen=True)
class TransitionKey:
    """
    The configuration a transition reacts to.

    Two transitions are equivalent iff their keys are equal: the target state and
    the pushed string play no part in it.
    """
    consumed: str
    pop: str

    @property
    def consumes_input(self):
        return self.consumed != EPSILON

    @property
    def pops_stack(self):
        return self.pop != EPSILON


@dataclass(frozen=True)
class Transition:
    consumed: str
    pop: str
    push: str = EPSILON

    @property
    def key(self):
        return TransitionKey(self.consumed, self.pop)

    def push_symbols(self):
        """
        Symbols to push, in push order, so that the first character of the push
        string ends on top of the stack.

        Returns:
            List of single characters (empty for an epsilon push)
        """
        if self.push in (EPSILON, ''):
            return []
        return list(reversed(self.push))


@dataclass
class TransitionGroup:
    """Transitions of one source state that all lead to the same target."""
    target: int
    transitions: List[Transition] = field(default_factory=list)
