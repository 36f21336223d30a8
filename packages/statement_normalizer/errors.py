"""Exceptions raised by the statement normalizer.

Per-line problems never raise; they are resolved with a default inside the
engine. Only failures to read or write a whole statement surface here.
"""


class StatementError(Exception):
    """Base error for statement normalization."""


class StatementReadError(StatementError):
    """The statement could not be read or decoded."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Could not read statement {source!r}: {reason}")


class StatementWriteError(StatementError):
    """The normalized output could not be written."""

    def __init__(self, target: str, reason: str):
        self.target = target
        self.reason = reason
        super().__init__(f"Could not write normalized statement {target!r}: {reason}")
