import pytest

from barbellutil.algo import (
    SliceZippingError,
    all_filter,
    append_with_preallocation,
    gen_filter,
    is_error,
    no_filter,
    no_none,
    slices_equal,
    zip_slices,
)
from barbellutil.errors import DimensionsDoNotAgreeError

TEST_VALS = ["one", "two", "three", "four", "five"]


def _apply(f, vals):
    return {v for v in vals if f(v)}


@pytest.mark.parametrize(
    "one,two,expected",
    [
        ([], [], True),
        ([1], [1], True),
        ([1, 2, 3, 4], [1, 2, 3, 4], True),
        ([1], [], False),
        ([1], [2], False),
        ([1, 1, 1, 1], [1, 1, 1, 2], False),
    ],
)
def test_slices_equal(one, two, expected):
    assert slices_equal(one, two) is expected


def test_zip_slices_incorrect_dimensions():
    with pytest.raises(DimensionsDoNotAgreeError):
        zip_slices([1], [])


def test_zip_slices():
    assert zip_slices([], []) == {}
    result = zip_slices([1, 2, 3, 4], ["one", "two", "three", "four"])
    assert result == {1: "one", 2: "two", 3: "three", 4: "four"}


def test_zip_slices_duplicate_keys():
    with pytest.raises(SliceZippingError):
        zip_slices([1, 1, 3, 4], ["one", "two", "three", "four"])


def test_append_with_preallocation():
    assert append_with_preallocation([], []) == []
    assert append_with_preallocation([1]) == [1]
    rv = append_with_preallocation([], [1], [2, 3], [4, 5, 6, 7])
    assert rv == [1, 2, 3, 4, 5, 6, 7]


def test_no_filter():
    assert _apply(no_filter, TEST_VALS) == set(TEST_VALS)


def test_all_filter():
    assert _apply(all_filter, TEST_VALS) == set()


def test_custom_filter():
    assert _apply(gen_filter(False, "one", "three"), TEST_VALS) == {"one", "three"}


def test_custom_filter_inverse():
    assert _apply(gen_filter(True, "one", "three"), TEST_VALS) == {
        "two",
        "four",
        "five",
    }


def test_no_none_and_is_error():
    assert no_none(0) is True
    assert no_none(None) is False
    assert is_error(ValueError("x")) is True
    assert is_error(None) is False