"""Engine exceptions."""

from __future__ import annotations


class InsufficientData(ValueError):
    """Raised by indicator functions when the input series is too short."""

    def __init__(self, what: str, required: int, available: int):
        self.what = what
        self.required = required
        self.available = available
        super().__init__(f"{what} needs at least {required} samples, got {available}")
