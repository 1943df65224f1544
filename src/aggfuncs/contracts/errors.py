"""Exception hierarchy for function evaluation and registry lookups.

Malformed intervals are NOT errors - the aggregate drops them silently.
Everything here is raised by scalar bodies, the registry, or the executors.
"""


class AggfuncsError(Exception):
    """Base class for all aggfuncs errors."""

    pass


class InvalidInputError(AggfuncsError):
    """Raised when an argument value cannot be evaluated.

    Non-retryable: the same input will always fail. Surfaced to the caller
    with no partial result.
    """

    pass


class FunctionNotFoundError(AggfuncsError, LookupError):
    """Raised when no registered function matches a name and argument types.

    Attributes:
        name: Function name that was looked up
        candidates: Signatures registered under that name (empty if unknown name)
    """

    def __init__(self, name: str, candidates: list[str] | None = None) -> None:
        self.name = name
        self.candidates = candidates or []
        if self.candidates:
            message = f"No overload of '{name}' matches the given argument types. Candidates: {', '.join(self.candidates)}"
        else:
            message = f"Unknown function: '{name}'"
        super().__init__(message)


class ExecutionInvariantError(AggfuncsError):
    """Raised when a caller breaks the executor contract.

    Examples: argument columns of different lengths, wrong argument count for
    the resolved function. These are bugs in the calling code, not bad data.
    """

    pass
