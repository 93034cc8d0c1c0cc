"""Column position placement used when renumbering statuses."""

from __future__ import annotations

import pytest

from recruit_api.logic.order_sequences import place_in_sequence


@pytest.mark.parametrize(
    "ids, item, position, expected",
    [
        ([1, 2, 3], 3, 1, [3, 1, 2]),
        ([1, 2, 3], 1, 3, [2, 3, 1]),
        ([1, 2, 3], 2, None, [1, 2, 3]),
        ([1, 2], 9, None, [1, 2, 9]),
        ([1, 2, 3], 2, 0, [2, 1, 3]),
        ([1, 2, 3], 2, -5, [2, 1, 3]),
        ([1, 2, 3], 1, 99, [2, 3, 1]),
        ([], 4, 3, [4]),
    ],
)
def test_place_in_sequence(ids, item, position, expected):
    assert place_in_sequence(ids, item, position) == expected
