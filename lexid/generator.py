"""Lexicographically sortable key generator.

A key is a big-endian numeral over a sorted alphabet: the leftmost symbol is
the most significant and plain string comparison gives the numeric order.
Keys grow and shrink in blocks of ``block_size`` symbols. Shorter keys
compare as if they were padded on the right with the lowest symbol, so a
generated key never ends in the lowest symbol; otherwise a key and its
padded extension would be indistinguishable.
"""

from __future__ import annotations

import logging
from typing import Iterable, Union

from .errors import (
    ConstructionError,
    InsertionImpossibleError,
    InsufficientSymbolsError,
    InvalidSymbolError,
    OrderingError,
    RangeExhaustedError,
    StepTooLargeError,
)

logger = logging.getLogger("lexid")

INVALID_INDEX = -1
DEFAULT_SPACING_RATIO = 0.3


class Lexid:
    """Generates string keys whose lexicographic order is their numeric order.

    Instances are immutable after construction and safe to share between
    threads. Two generators built from the same symbols (in any order, with
    or without duplicates) and the same settings compare equal.
    """

    def __init__(
        self,
        chars: Union[str, Iterable[str]],
        block_size: int = 1,
        step_size: int = 1,
        *,
        strict: bool = True,
        spacing_ratio: float = DEFAULT_SPACING_RATIO,
    ) -> None:
        block_size = max(block_size, 1)
        step_size = max(step_size, 1)

        symbols = tuple(sorted(set("".join(chars))))
        if len(symbols) < 2:
            raise InsufficientSymbolsError(len(symbols))
        if strict and step_size >= len(symbols) ** block_size:
            raise StepTooLargeError(step_size, len(symbols), block_size)
        if spacing_ratio < 0:
            raise ConstructionError(f"spacing ratio must not be negative, got {spacing_ratio}")

        self._symbols = symbols
        self._block_size = block_size
        self._step_size = step_size
        self._strict = strict
        self._spacing_ratio = spacing_ratio
        self._lowest = symbols[0]
        self._highest = symbols[-1]
        self._index = {c: i for i, c in enumerate(symbols)}
        self._successor = {c: symbols[(i + 1) % len(symbols)] for i, c in enumerate(symbols)}

    # === Alphabet ===

    @property
    def symbols(self) -> tuple[str, ...]:
        return self._symbols

    @property
    def lowest(self) -> str:
        return self._lowest

    @property
    def highest(self) -> str:
        return self._highest

    @property
    def radix(self) -> int:
        return len(self._symbols)

    @property
    def block_size(self) -> int:
        return self._block_size

    @property
    def step_size(self) -> int:
        return self._step_size

    @property
    def strict(self) -> bool:
        return self._strict

    @property
    def spacing_ratio(self) -> float:
        return self._spacing_ratio

    def successor(self, c: str) -> str:
        """Next symbol after ``c``, wrapping to the lowest; non-members map to the lowest."""
        return self._successor.get(c, self._lowest)

    def index_of(self, c: str) -> int:
        return self._index.get(c, INVALID_INDEX)

    def is_valid(self, key: str) -> bool:
        """True for a non-empty, block aligned key over the alphabet not ending in the lowest symbol."""
        return (
            bool(key)
            and len(key) % self._block_size == 0
            and all(c in self._index for c in key)
            and key[-1] != self._lowest
        )

    def _config(self) -> tuple:
        return (self._symbols, self._block_size, self._step_size, self._strict, self._spacing_ratio)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Lexid):
            return NotImplemented
        return self._config() == other._config()

    def __hash__(self) -> int:
        return hash(self._config())

    def __repr__(self) -> str:
        return (
            f"Lexid(chars={''.join(self._symbols)!r}, block_size={self._block_size}, "
            f"step_size={self._step_size}, strict={self._strict}, "
            f"spacing_ratio={self._spacing_ratio})"
        )

    # === Padding ===

    def _padding(self, s: str, pad: int) -> str:
        # Smallest extension that is still greater than s: 0...01
        if pad <= 0:
            return s
        return s + self._lowest * (pad - 1) + self._successor[self._lowest]

    def _align(self, s: str) -> str:
        pad = -len(s) % self._block_size
        return self._padding(s, pad)

    def _first(self) -> str:
        return self._padding("", self._block_size)

    def _middle_symbol(self) -> str:
        return self._symbols[len(self._symbols) // 2]

    # === Increment ===

    def next(self, prev: str) -> str:
        """Return the key ``step_size`` units after ``prev``.

        An empty ``prev`` yields the first key, a key whose length is not a
        multiple of ``block_size`` is padded up to the next block.
        """
        return self._next_step(prev, self._step_size)

    def _next_step(self, prev: str, step: int) -> str:
        if not prev:
            return self._first()
        if len(prev) % self._block_size:
            return self._align(prev)

        key = prev
        for _ in range(step):
            digits = list(key)
            if self._increment(digits):
                key = "".join(digits)
            else:
                key = self._padding(key, self._block_size)
                logger.debug("key %r overflowed, grown to %r", prev, key)
        return key

    def _increment(self, digits: list[str]) -> bool:
        """Add one unit in place. Returns False when the carry runs off the key."""
        last = len(digits) - 1
        for i in range(last, -1, -1):
            digit = self._successor.get(digits[i], self._lowest)
            if digit != self._lowest:
                digits[i] = digit
                return True
            digits[i] = self._successor[self._lowest] if i == last else digit
        return False

    # === Decrement ===

    def prev(self, key: str) -> str:
        """Return the key ``step_size`` units before ``key``.

        Returns an empty string when ``key`` holds a symbol outside the
        alphabet or when nothing lower can be represented; use
        :meth:`checked_prev` to tell those apart. An empty ``key`` yields the
        highest one-block key.
        """
        try:
            return self._prev_step(key, self._step_size)
        except (InvalidSymbolError, RangeExhaustedError) as exc:
            logger.debug("prev(%r) failed: %s", key, exc)
            return ""

    def checked_prev(self, key: str) -> str:
        """Like :meth:`prev` but raises InvalidSymbolError or RangeExhaustedError."""
        return self._prev_step(key, self._step_size)

    def _prev_step(self, key: str, step: int) -> str:
        if not key:
            return self._highest * self._block_size

        for c in key:
            if c not in self._index:
                raise InvalidSymbolError(key, c)

        top = len(self._symbols) - 1
        digits = [self._index[c] for c in key]
        for _ in range(step):
            if self._decrement(digits):
                continue
            if len(digits) <= self._block_size:
                raise RangeExhaustedError(key)
            # Every digit wrapped to the highest symbol; drop one block
            digits = [top] * (len(digits) - self._block_size)

        if digits[-1] == 0:
            # Extend with highest symbols instead of trimming: still lower
            # than the input and can be decremented further.
            digits.extend([top] * self._block_size)

        prev = "".join(self._symbols[i] for i in digits)
        if prev >= key:
            # The step ran below the lowest key of a shorter length
            raise RangeExhaustedError(key)
        return prev

    def _decrement(self, digits: list[int]) -> bool:
        """Subtract one unit in place. Returns False when the borrow runs off the key."""
        for i in range(len(digits) - 1, -1, -1):
            if digits[i] > 0:
                digits[i] -= 1
                return True
            digits[i] = len(self._symbols) - 1
        return False

    # === Interpolation ===

    def next_before(self, prev: str, before: str) -> str:
        """Return a key strictly between ``prev`` and ``before``.

        The step is scaled down to the approximate distance between the keys
        so that repeated insertions into the same gap stay spread out. When
        no step fits, a middle symbol is appended to ``prev`` instead.

        Both keys must be block aligned, as every key returned by this
        generator is. A shorter ``prev`` that pads up to ``before`` leaves no
        room and raises InsertionImpossibleError.

        Raises OrderingError unless ``prev < before``.
        """
        if before <= prev:
            raise OrderingError(prev, before)

        prev_pad = self._align(prev)
        before_pad = self._align(before)

        if not prev or before.startswith(prev):
            tail = before[len(prev):]
            # before sits right on top of prev: make room under it
            if tail == self._padding("", len(tail)):
                width = len(before_pad)
                prev_pad = self._padding(prev_pad, width)
                if prev_pad == before_pad:
                    prev_pad = self._padding("", width + self._block_size)

        diff = len(prev_pad) - len(before_pad)
        if diff > 0:
            before_pad = self._padding(before_pad, diff)
        elif diff < 0:
            prev_pad = self._padding(prev_pad, -diff)

        candidate = None
        distance = self._approx_distance(prev_pad, before_pad)
        if distance > 0:
            step = self._step_size
            while step / distance > self._spacing_ratio:
                step //= 2
            if step > 0:
                candidate = self._next_step(prev_pad, step)
                if not candidate < before:
                    candidate = None

        if candidate is None:
            candidate = self._add_tail(prev_pad)
            logger.debug("no room for a step between %r and %r, using %r", prev, before, candidate)

        if not prev < candidate < before:
            logger.error(
                "unable to create id between %r and %r; result=%r", prev, before, candidate
            )
            raise InsertionImpossibleError(prev, before, candidate)
        return candidate

    def _approx_distance(self, a: str, b: str) -> int:
        # Only the shared length is compared
        size = min(len(a), len(b))
        distance = 0
        multiplier = 1
        for i in range(size - 1, -1, -1):
            distance += (self.index_of(b[i]) - self.index_of(a[i])) * multiplier
            multiplier *= len(self._symbols)
        return distance

    def _add_tail(self, prev: str) -> str:
        return self._padding(prev + self._middle_symbol(), self._block_size - 1)

    # === Anchor ===

    def middle(self) -> str:
        """Key made of the middle symbol, leaving room on both sides."""
        return self._middle_symbol() * self._block_size


def new(
    chars: Union[str, Iterable[str]],
    block_size: int = 1,
    step_size: int = 1,
    **kwargs,
) -> Lexid:
    """Build a generator; raises ConstructionError on a bad configuration."""
    return Lexid(chars, block_size, step_size, **kwargs)


def must(
    chars: Union[str, Iterable[str]],
    block_size: int = 1,
    step_size: int = 1,
    **kwargs,
) -> Lexid:
    """Build a generator or abort the process. Meant for startup configuration."""
    try:
        return Lexid(chars, block_size, step_size, **kwargs)
    except ConstructionError as exc:
        logger.critical("invalid key generator configuration: %s", exc)
        raise SystemExit(str(exc)) from exc
