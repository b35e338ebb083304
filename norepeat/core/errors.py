from typing import Any


class NoRepeatError(Exception):
    """Base class for no-repeat domain errors."""


class InvalidReference(NoRepeatError):
    """A user or wear event identifier does not resolve to a known entity."""

    def __init__(self, kind: str, ref: Any):
        self.kind = kind
        self.ref = ref
        super().__init__(f"{kind} not found: {ref}")


class InvalidConfiguration(NoRepeatError):
    """A no-repeat preference value falls outside its documented constraints."""

    def __init__(self, field: str, value: Any, detail: str = ""):
        self.field = field
        self.value = value
        msg = f"invalid {field}: {value!r}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)


class InvalidWearEvent(NoRepeatError):
    """A wear log that cannot be recorded, e.g. one naming no items."""
