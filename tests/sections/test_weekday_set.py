from __future__ import annotations

import pytest

from src.here.here.core.enums import Weekday


def test_indices_round_trip_through_bitset():
    days = Weekday.from_indices([4, 0, 2])

    assert int(days) == 0b10101
    assert days.indices() == [0, 2, 4]


def test_out_of_range_index_is_rejected():
    with pytest.raises(ValueError):
        Weekday.from_index(6)


def test_weekend_indices_never_included():
    everything = Weekday.from_indices(range(5))

    assert everything.includes_index(4) is True
    assert everything.includes_index(5) is False
    assert everything.includes_index(6) is False
