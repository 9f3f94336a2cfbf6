"""Exceptions raised by key generators."""

from __future__ import annotations


class LexidError(Exception):
    """Base class for every error raised by this package."""


class ConstructionError(LexidError, ValueError):
    """A generator could not be built from the given configuration."""


class InsufficientSymbolsError(ConstructionError):
    def __init__(self, count: int) -> None:
        super().__init__(f"chars must contain at least two unique characters, got {count}")
        self.count = count


class StepTooLargeError(ConstructionError):
    def __init__(self, step_size: int, radix: int, block_size: int) -> None:
        super().__init__(
            f"step size {step_size} does not fit in one block: "
            f"must be less than {radix}**{block_size}"
        )
        self.step_size = step_size
        self.radix = radix
        self.block_size = block_size


class OrderingError(LexidError, ValueError):
    """``before`` is not strictly greater than ``prev``."""

    def __init__(self, prev: str, before: str) -> None:
        super().__init__(f"incorrect before value: {before!r} less or equal {prev!r}")
        self.prev = prev
        self.before = before


class InsertionImpossibleError(LexidError, RuntimeError):
    """No key strictly between ``prev`` and ``before`` could be produced.

    Well-formed inputs never get here; the attributes are kept for diagnosis.
    """

    def __init__(self, prev: str, before: str, candidate: str) -> None:
        super().__init__(
            f"unable to create id between {prev!r} and {before!r}; result={candidate!r}"
        )
        self.prev = prev
        self.before = before
        self.candidate = candidate


class InvalidSymbolError(LexidError, ValueError):
    def __init__(self, key: str, symbol: str) -> None:
        super().__init__(f"key {key!r} contains {symbol!r} which is not in the alphabet")
        self.key = key
        self.symbol = symbol


class RangeExhaustedError(LexidError, ValueError):
    """There is no representable key below ``key``."""

    def __init__(self, key: str) -> None:
        super().__init__(f"no key lower than {key!r} can be represented")
        self.key = key
