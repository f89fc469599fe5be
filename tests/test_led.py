import pytest

from trophysim.led import Led


def test_default_is_black():
    assert Led() == Led(0, 0, 0)


def test_equality_by_components():
    assert Led(1, 2, 3) == Led(1, 2, 3)
    assert not Led(1, 2, 3) == Led(3, 2, 1)


def test_from_values_at_offset():
    values = [9, 10, 20, 30, 40]
    assert Led.from_values(values, 1) == Led(10, 20, 30)
    assert Led.from_values(values) == Led(9, 10, 20)


def test_from_values_too_short_raises():
    with pytest.raises(ValueError):
        Led.from_values([1, 2], 0)
    with pytest.raises(ValueError):
        Led.from_values([1, 2, 3, 4], 2)


def test_set_copies_colour():
    led = Led(1, 1, 1)
    other = Led(7, 8, 9)
    led.set(other)
    assert led == other
    other.r = 100
    assert led.r == 7


def test_set_white():
    led = Led(1, 2, 3)
    led.set_white(42)
    assert led == Led(42, 42, 42)


@pytest.mark.parametrize("led", [Led(0, 0, 0), Led(255, 0, 0), Led(10, 200, 30), Led(5, 5, 5)])
def test_gray_within_component_bounds(led):
    gray = led.gray()
    assert min(led.r, led.g, led.b) - 1 <= gray <= max(led.r, led.g, led.b)


def test_gray_of_black_is_zero():
    assert Led().gray() == 0


def test_str_zero_pads():
    assert str(Led(1, 22, 255)) == "[001,022,255]"