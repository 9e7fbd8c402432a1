class PDAError(ValueError):
    """Base class for errors reported back to the caller of the automaton."""


class InvalidState(PDAError):
    """A state index outside [0, size)."""


class InvalidSymbol(PDAError):
    """A character outside the declared alphabet (or a malformed stack symbol)."""


class DeterminismViolation(PDAError):
    """The transition would let two transitions apply to the same configuration."""


class InternalConsistencyError(RuntimeError):
    """
    Raised when the machine finds itself in a configuration the validator should
    have made impossible (e.g. the stack top differs from the pop symbol of the
    transition being applied).

    This is not an input error and is deliberately not a PDAError.
    """
