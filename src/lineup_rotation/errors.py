"""Exceptions raised by the rotation engine.

Infeasible but valid configurations are reported as values, never raised.
The errors here signal a bug in the calling layer.
"""


class InvariantViolationError(ValueError):
    """Input or intermediate state breaks an engine invariant."""

    def __init__(self, message: str, **context):
        super().__init__(message)
        self.context = context

    def __str__(self) -> str:
        base = super().__str__()
        if not self.context:
            return base
        details = ", ".join(f"{k}={v!r}" for k, v in sorted(self.context.items()))
        return f"{base} ({details})"
