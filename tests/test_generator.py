import random

import pytest

from lexid.alphabets import (
    CHARS_ALL_NO_ESCAPE,
    CHARS_ALPHANUMERIC_LOWER,
    CHARS_BASE58,
)
from lexid.errors import (
    ConstructionError,
    InsertionImpossibleError,
    InsufficientSymbolsError,
    InvalidSymbolError,
    OrderingError,
    RangeExhaustedError,
    StepTooLargeError,
)
from lexid.generator import INVALID_INDEX, Lexid, must, new


# === Construction ===


def test_symbols_sorted_and_deduplicated():
    lid = Lexid("cbaabc")
    assert lid.symbols == ("a", "b", "c")
    assert lid.lowest == "a"
    assert lid.highest == "c"
    assert lid.radix == 3


def test_construction_ignores_order_and_duplicates():
    a = Lexid(CHARS_ALPHANUMERIC_LOWER, 3, 7)
    shuffled = list(CHARS_ALPHANUMERIC_LOWER * 2)
    random.Random(4).shuffle(shuffled)
    b = Lexid(shuffled, 3, 7)
    assert a == b
    assert hash(a) == hash(b)

    key_a = key_b = ""
    for _ in range(200):
        key_a, key_b = a.next(key_a), b.next(key_b)
        assert key_a == key_b
    assert a.next_before("001", key_a) == b.next_before("001", key_b)
    assert a.prev(key_a) == b.prev(key_b)


@pytest.mark.parametrize("chars", ["", "a", "aaaa"])
def test_insufficient_symbols(chars):
    with pytest.raises(InsufficientSymbolsError):
        Lexid(chars)


def test_step_too_large():
    with pytest.raises(StepTooLargeError):
        Lexid("01", 2, 4)
    with pytest.raises(StepTooLargeError):
        Lexid("01", 2, 5)
    assert Lexid("01", 2, 3).step_size == 3


def test_step_size_unchecked_when_not_strict():
    lid = Lexid("01", 2, 5, strict=False)
    assert lid.next("01") > "01"


def test_sizes_clamped():
    lid = Lexid("ab", 0, -3)
    assert lid.block_size == 1
    assert lid.step_size == 1


def test_negative_spacing_ratio():
    with pytest.raises(ConstructionError):
        Lexid("ab", spacing_ratio=-0.1)


def test_new_and_must():
    assert new(CHARS_ALPHANUMERIC_LOWER, 3, 1) == must(CHARS_ALPHANUMERIC_LOWER, 3, 1)
    with pytest.raises(ConstructionError):
        new("x")
    with pytest.raises(SystemExit):
        must("x")


def test_lookups():
    lid = Lexid(CHARS_ALPHANUMERIC_LOWER)
    assert lid.successor("0") == "1"
    assert lid.successor("9") == "a"
    assert lid.successor("z") == "0"
    assert lid.successor("?") == "0"
    assert lid.index_of("0") == 0
    assert lid.index_of("z") == 35
    assert lid.index_of("?") == INVALID_INDEX


def test_is_valid():
    lid = Lexid(CHARS_ALPHANUMERIC_LOWER, 3)
    assert lid.is_valid("001")
    assert lid.is_valid("zzz001")
    assert not lid.is_valid("")
    assert not lid.is_valid("01")
    assert not lid.is_valid("010")
    assert not lid.is_valid("0A1")


# === Next ===


def test_first_id():
    lid = Lexid(CHARS_ALPHANUMERIC_LOWER, 3, 1)
    assert lid.next("") == "001"


def test_next_increases():
    lid = Lexid(CHARS_ALPHANUMERIC_LOWER, 4, 100)
    prev = ""
    for _ in range(5000):
        nxt = lid.next(prev)
        assert nxt > prev
        assert not nxt.endswith("0"), nxt
        assert len(nxt) % 4 == 0
        prev = nxt


def test_next_pads_misaligned_key():
    lid = Lexid(CHARS_ALPHANUMERIC_LOWER, 3, 1)
    assert lid.next("c") == "c01"
    assert lid.next("c01") == "c02"


def test_next_step():
    lid = Lexid(CHARS_ALPHANUMERIC_LOWER, 3, 2)
    assert lid.next("001") == "003"
    assert lid.next("003") == "005"


def test_next_skips_trailing_lowest():
    lid = Lexid(CHARS_ALPHANUMERIC_LOWER, 2, 1)
    assert lid.next("a9") == "aa"
    assert lid.next("az") == "b1"


def test_next_grows_on_overflow():
    assert Lexid(CHARS_ALPHANUMERIC_LOWER, 3, 1).next("zzz") == "zzz001"
    assert Lexid(CHARS_ALPHANUMERIC_LOWER, 3, 2).next("zzz") == "zzz002"
    assert Lexid(CHARS_ALPHANUMERIC_LOWER, 1, 1).next("z") == "z1"


def test_next_does_not_fall_back_on_overflow():
    lid = Lexid(CHARS_ALPHANUMERIC_LOWER, 1, 3)
    # y -> z, then the carry runs off: z is extended, one unit remains
    assert lid.next("y") == "z2"


# === Prev ===


def test_prev_of_empty_is_highest():
    assert Lexid(CHARS_ALPHANUMERIC_LOWER, 3, 1).prev("") == "zzz"


def test_prev():
    lid = Lexid(CHARS_ALPHANUMERIC_LOWER, 3, 1)
    assert lid.prev("002") == "001"
    assert lid.prev("a00") == "9zz"


def test_prev_never_ends_in_lowest():
    lid = Lexid(CHARS_ALPHANUMERIC_LOWER, 3, 1)
    assert lid.prev("001") == "000zzz"
    assert lid.prev("000zzz") == "000zzy"


def test_prev_decreases():
    lid = Lexid(CHARS_ALPHANUMERIC_LOWER, 2, 1)
    key = lid.prev("")
    for _ in range(3000):
        lower = lid.prev(key)
        assert lower
        assert lower < key
        assert not lower.endswith("0")
        key = lower


def test_prev_invalid_symbol():
    lid = Lexid(CHARS_ALPHANUMERIC_LOWER, 3, 1)
    assert lid.prev("00A") == ""
    with pytest.raises(InvalidSymbolError) as exc:
        lid.checked_prev("00A")
    assert exc.value.symbol == "A"


def test_prev_exhausted():
    lid = Lexid(CHARS_ALPHANUMERIC_LOWER, 3, 1)
    assert lid.prev("000") == ""
    with pytest.raises(RangeExhaustedError):
        lid.checked_prev("000")


def test_prev_step_past_zero():
    lid = Lexid(CHARS_ALPHANUMERIC_LOWER, 3, 100)
    assert lid.prev("01j") == ""
    with pytest.raises(RangeExhaustedError):
        lid.checked_prev("00001a")


def test_prev_then_next_keeps_order():
    lid = Lexid(CHARS_ALPHANUMERIC_LOWER, 3, 5)
    key = lid.middle()
    lower = lid.prev(key)
    assert lower < lid.next(lower)
    assert lower < key


# === NextBefore ===


def test_next_before_empty_before():
    lid = Lexid(CHARS_ALPHANUMERIC_LOWER, 3, 100)
    with pytest.raises(OrderingError):
        lid.next_before("001", "")


def test_next_before_wrong_order():
    lid = Lexid(CHARS_ALPHANUMERIC_LOWER, 3, 100)
    with pytest.raises(OrderingError) as exc:
        lid.next_before("002", "001")
    assert exc.value.prev == "002"
    assert exc.value.before == "001"
    with pytest.raises(OrderingError):
        lid.next_before("001", "001")


def test_next_before_empty_prev():
    lid = Lexid(CHARS_ALPHANUMERIC_LOWER, 3, 10)
    first = lid.next("")
    key = lid.next_before("", first)
    assert key < first
    assert key == "00000b"


def test_next_before_dynamic_steps():
    lid = Lexid(CHARS_ALPHANUMERIC_LOWER, 3, 100)
    prev = lid.next("001")
    before = lid.next(prev)
    for _ in range(10):
        key = lid.next_before(prev, before)
        assert len(key) == 3
        assert prev < key < before
        prev = key


def test_next_before_add_tail():
    lid = Lexid(CHARS_ALPHANUMERIC_LOWER, 3, 100)
    key = lid.next_before("001", "002")
    assert key == "001i01"
    assert "001" < key < "002"


def test_next_before_min_tail():
    lid = Lexid(CHARS_ALPHANUMERIC_LOWER, 3, 1)
    key = lid.next_before("zzz", "zzz001")
    assert "zzz" < key < "zzz001"
    assert len(key) % 3 == 0
    assert key == "zzz000002"


def test_next_before_zero_ratio_always_adds_tail():
    lid = Lexid(CHARS_ALPHANUMERIC_LOWER, 3, 100, spacing_ratio=0)
    assert lid.next_before("001", "zzz") == "001i01"


def test_next_before_requires_aligned_prev():
    lid = Lexid(CHARS_ALPHANUMERIC_LOWER, 3, 1)
    with pytest.raises(InsertionImpossibleError) as exc:
        lid.next_before("a", "a01")
    assert exc.value.prev == "a"
    assert exc.value.before == "a01"


def test_next_before_fuzzy():
    lid = Lexid(CHARS_ALL_NO_ESCAPE, 4, 100)
    rnd = random.Random(20240601)

    ids = [lid.next("")]
    for _ in range(999):
        ids.append(lid.next(ids[-1]))

    for _ in range(1000):
        pos = rnd.randrange(1, len(ids))
        prev, nxt = ids[pos - 1], ids[pos]
        new_ids = []
        for _ in range(rnd.randint(1, 300)):
            key = lid.next_before(prev, nxt)
            assert prev < key < nxt
            new_ids.append(key)
            prev = key
        ids[pos:pos] = new_ids

    assert all(a < b for a, b in zip(ids, ids[1:]))


# === Middle ===


def test_middle():
    assert Lexid(CHARS_ALPHANUMERIC_LOWER, 3).middle() == "iii"
    assert Lexid(CHARS_BASE58, 2).middle() == "WW"
    assert Lexid("ab").middle() == "b"
