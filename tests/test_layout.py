import pytest

from hogehoge.layout import (
    U16_MAX,
    Alignment,
    ChildAlignment,
    Padding,
    Size,
    SizeAxis,
    SizeKind,
)


def test_padding_all_sets_every_side():
    padding = Padding.all(7)
    assert (padding.left, padding.right, padding.top, padding.bottom) == (7, 7, 7, 7)


def test_padding_defaults_to_zero():
    assert Padding() == Padding.all(0)


@pytest.mark.parametrize("value", [-1, U16_MAX + 1])
def test_padding_rejects_out_of_range(value):
    with pytest.raises(ValueError):
        Padding.all(value)


def test_fixed_axis_has_equal_bounds():
    axis = SizeAxis.fixed(12)
    assert (axis.min, axis.max, axis.kind) == (12, 12, SizeKind.FIT)


def test_default_axis_is_fit():
    assert SizeAxis() == SizeAxis.FIT
    assert SizeAxis.FIT.max == 65535
    assert SizeAxis.FIT.min == 0


def test_fill_grows_on_both_axes():
    assert Size.FILL.width.kind is SizeKind.GROW
    assert Size.FILL.height.kind is SizeKind.GROW
    assert Size.FIT == Size()


def test_naive_size_uses_minimums():
    assert Size.fixed(3, 4).naive_size() == (3.0, 4.0)
    assert Size().naive_size() == (0.0, 0.0)


def test_axis_rejects_out_of_range():
    with pytest.raises(ValueError):
        SizeAxis.fixed(U16_MAX + 1)


def test_child_alignment_defaults_to_start():
    alignment = ChildAlignment()
    assert alignment.horizontal is Alignment.START
    assert alignment.vertical is Alignment.START